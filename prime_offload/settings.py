"""
Settings for the prime-offload tool itself.

Stored as YAML under ~/.config/prime-offload/settings.yaml. The launcher's
own configuration is not read here; it arrives as a BinaryConfig.
"""

import logging
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .sysfs import DRM_PATH

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

ENV_DRM_PATH = "PRIME_OFFLOAD_DRM_PATH"
ENV_LOG_LEVEL = "PRIME_OFFLOAD_LOG_LEVEL"


class SettingsError(Exception):
    """Raised when the settings file cannot be used"""

    pass


@dataclass
class PrimeOffloadSettings:
    drm_path: str = DRM_PATH
    log_level: str = "WARNING"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PrimeOffloadSettings":
        return cls(
            drm_path=str(data.get("drm_path", DRM_PATH)),
            log_level=str(data.get("log_level", "WARNING")).upper(),
        )

    @property
    def log_level_value(self) -> int:
        return getattr(logging, self.log_level)


class SettingsManager:
    """
    Loads and saves PrimeOffloadSettings.

    Environment variables override whatever the file says.
    """

    DEFAULT_CONFIG_DIR = Path.home() / ".config" / "prime-offload"
    DEFAULT_CONFIG_FILE = "settings.yaml"

    def __init__(self, config_path: Optional[Path] = None):
        if config_path:
            self.config_path = Path(config_path)
        else:
            self.config_path = self.DEFAULT_CONFIG_DIR / self.DEFAULT_CONFIG_FILE

    def _read_file(self) -> Dict[str, Any]:
        if not self.config_path.exists():
            return {}
        try:
            with open(self.config_path) as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise SettingsError(f"Invalid YAML in settings file {self.config_path}: {e}")
        except OSError as e:
            raise SettingsError(f"Cannot read settings file {self.config_path}: {e}")

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise SettingsError(f"Settings file {self.config_path} must contain a mapping")
        return data

    def load(self, environ: Optional[Dict[str, str]] = None) -> PrimeOffloadSettings:
        """
        Load settings from disk and apply environment overrides.

        Raises:
            SettingsError: If the file is unreadable or a value is invalid
        """
        environ = os.environ if environ is None else environ
        data = self._read_file()

        if environ.get(ENV_DRM_PATH):
            data["drm_path"] = environ[ENV_DRM_PATH]
        if environ.get(ENV_LOG_LEVEL):
            data["log_level"] = environ[ENV_LOG_LEVEL]

        settings = PrimeOffloadSettings.from_dict(data)
        self._validate(settings)
        return settings

    def _validate(self, settings: PrimeOffloadSettings) -> None:
        if settings.log_level not in LOG_LEVELS:
            raise SettingsError(
                f"Invalid log level '{settings.log_level}'. Use one of: {', '.join(LOG_LEVELS)}"
            )
        if not settings.drm_path:
            raise SettingsError("drm_path cannot be empty")

    def save(self, settings: PrimeOffloadSettings) -> None:
        self._validate(settings)
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            with open(self.config_path, "w") as f:
                yaml.safe_dump(settings.to_dict(), f, default_flow_style=False, sort_keys=False)
        except OSError as e:
            raise SettingsError(f"Failed to save settings: {e}")
