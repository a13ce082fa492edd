"""
Translate a chosen card into the environment the graphics stack reads.
"""

from typing import Dict, List, Optional

from .models import BinaryConfig, Card, OffloadEvent

FORCE_DEFAULT_DEVICE = "MESA_VK_DEVICE_SELECT_FORCE_DEFAULT_DEVICE"
DRI_PRIME = "DRI_PRIME"
GLX_VENDOR = "__GLX_VENDOR_LIBRARY_NAME"

NVIDIA_DRIVER = "nvidia"
MESA_VENDOR = "mesa"


def card_env(card: Card) -> Dict[str, str]:
    """Environment variables that pin rendering to ``card``."""
    # The proprietary NVIDIA driver needs its own GLX vendor library
    vendor = NVIDIA_DRIVER if card.driver == NVIDIA_DRIVER else MESA_VENDOR
    return {
        FORCE_DEFAULT_DEVICE: "1",
        DRI_PRIME: card.id,
        GLX_VENDOR: vendor,
    }


def set_if_undefined(
    env: Dict[str, str], key: str, value: str, events: Optional[List[OffloadEvent]] = None
) -> bool:
    """Set ``key`` unless the caller already defined it. Returns True if set."""
    if key in env:
        if events is not None:
            events.append(
                OffloadEvent.warning(f"env var {key} is already defined. Will not redefine it.")
            )
        return False
    env[key] = value
    return True


def choose_card(
    config: BinaryConfig, card: Card, events: Optional[List[OffloadEvent]] = None
) -> BinaryConfig:
    """
    Apply ``card`` to ``config.env`` in place, never overwriting existing keys.

    Args:
        config: Launch configuration whose env mapping is updated
        card: The selected card
        events: Optional list collecting conflict and selection diagnostics

    Returns:
        The same configuration object
    """
    for key, value in card_env(card).items():
        set_if_undefined(config.env, key, value, events)

    if events is not None:
        events.append(OffloadEvent.info(f"Chose card {card.path} ({card.id})."))
    return config
