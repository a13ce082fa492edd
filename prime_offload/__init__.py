from importlib import metadata

from .errors import (
    AmbiguousTopologyError,
    ErrorCategory,
    InvalidDeviceIndexError,
    PrimeOffloadError,
    UnknownDeviceIdError,
    UnresolvableDirectiveError,
)
from .models import BinaryConfig, Card, OffloadResult
from .offload import build_launch_env, resolve_offload, setup_prime_offload
from .policy import prime_is_allowed
from .selector import choose_card
from .sysfs import get_system_cards

try:
    __version__ = metadata.version("prime-offload")
except metadata.PackageNotFoundError:
    __version__ = "0.1.0"

__all__ = [
    "__version__",
    "AmbiguousTopologyError",
    "BinaryConfig",
    "Card",
    "ErrorCategory",
    "InvalidDeviceIndexError",
    "OffloadResult",
    "PrimeOffloadError",
    "UnknownDeviceIdError",
    "UnresolvableDirectiveError",
    "build_launch_env",
    "choose_card",
    "get_system_cards",
    "prime_is_allowed",
    "resolve_offload",
    "setup_prime_offload",
]
