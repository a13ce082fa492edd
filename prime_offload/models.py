"""
Shared data models for PRIME offload selection.

Cards are built fresh on every probe and thrown away once a decision has
been made; nothing here is persisted.
"""

import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional


class Renderer(Enum):
    """Render backends a launcher can ask for."""
    OPENGL = "OpenGL"
    D3D11 = "D3D11"
    D3D11FL10 = "D3D11FL10"
    VULKAN = "Vulkan"


# Directive values with a fixed meaning
INTEGRATED = "integrated"
PRIME_DISCRETE = "prime-discrete"


@dataclass
class Card:
    """A GPU exposed by the kernel under the DRM class directory."""
    path: str           # e.g. /sys/class/drm/card0
    edp: bool = False   # drives the laptop's built-in panel
    id: str = ""        # "vendor:device", lowercase hex
    index: int = 0      # N from cardN

    @property
    def vendor_id(self) -> str:
        return self.id.partition(":")[0]

    @property
    def device_id(self) -> str:
        return self.id.partition(":")[2]

    @property
    def driver(self) -> str:
        """Name of the kernel driver bound to this card.

        Resolves the device/driver symlink; an unbound card resolves to
        the link path itself, so its name is "driver".
        """
        return Path(os.path.realpath(os.path.join(self.path, "device", "driver"))).name

    def to_dict(self) -> Dict[str, object]:
        return {
            "index": self.index,
            "id": self.id,
            "edp": self.edp,
            "driver": self.driver,
            "path": self.path,
        }


@dataclass
class BinaryConfig:
    """Launch configuration handed over by the launcher.

    Only ``env`` is ever mutated here, in place.
    """
    env: Dict[str, str] = field(default_factory=dict)
    renderer: str = Renderer.VULKAN.value
    dxvk: bool = False
    forced_gpu: str = PRIME_DISCRETE

    @property
    def is_vulkan(self) -> bool:
        return self.renderer.lower() == Renderer.VULKAN.value.lower()


@dataclass
class OffloadEvent:
    """A diagnostic produced while deciding; rendered by the caller."""
    level: int
    message: str

    @classmethod
    def info(cls, message: str) -> "OffloadEvent":
        return cls(logging.INFO, message)

    @classmethod
    def warning(cls, message: str) -> "OffloadEvent":
        return cls(logging.WARNING, message)


@dataclass
class PolicyDecision:
    allowed: bool
    reason: str


@dataclass
class OffloadResult:
    """Outcome of resolving the forced GPU directive."""
    config: BinaryConfig
    card: Optional[Card] = None
    events: List[OffloadEvent] = field(default_factory=list)

    @property
    def selected(self) -> bool:
        return self.card is not None
