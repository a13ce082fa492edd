"""Pytest configuration for the `tests/` suite.

Puts the repository root on `sys.path` so the suite runs from a plain
checkout, and provides a builder for fake `/sys/class/drm` trees.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest


def _prepend_sys_path(path: Path) -> None:
    path_str = str(path)
    if path_str not in sys.path:
        sys.path.insert(0, path_str)


_REPO_ROOT = Path(__file__).resolve().parents[1]

_prepend_sys_path(_REPO_ROOT)


class FakeDrm:
    """Builds cardN / cardN-eDP-M entries the way sysfs lays them out."""

    def __init__(self, root: Path):
        self.root = root / "drm"
        self.root.mkdir()
        self._drivers = root / "drivers"
        self._drivers.mkdir()

    def add_card(self, number: int, vendor: str, device: str, driver: str | None = "i915") -> Path:
        card = self.root / f"card{number}"
        (card / "device").mkdir(parents=True)
        (card / "device" / "vendor").write_text(f"{vendor}\n")
        (card / "device" / "device").write_text(f"{device}\n")
        if driver:
            target = self._drivers / driver
            target.mkdir(exist_ok=True)
            (card / "device" / "driver").symlink_to(target)
        return card

    def add_edp(self, number: int, connector: int = 1) -> Path:
        edp = self.root / f"card{number}-eDP-{connector}"
        edp.mkdir()
        return edp

    def add_entry(self, name: str) -> Path:
        entry = self.root / name
        entry.mkdir()
        return entry

    @property
    def path(self) -> str:
        return str(self.root)


@pytest.fixture
def fake_drm(tmp_path):
    return FakeDrm(tmp_path)


@pytest.fixture
def laptop_drm(fake_drm):
    """Intel iGPU driving the panel plus an NVIDIA dGPU."""
    fake_drm.add_card(0, "0x8086", "0x9A49", driver="i915")
    fake_drm.add_edp(0)
    fake_drm.add_card(1, "0x10DE", "0x1F9D", driver="nvidia")
    return fake_drm
