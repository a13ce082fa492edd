"""
Fatal conditions raised while resolving PRIME offload.

Each error carries a category so the caller can pick a presentation and an
exit code; nothing in this package terminates the process.
"""

from enum import Enum
from typing import Iterable, Optional


class ErrorCategory(str, Enum):
    AMBIGUOUS_TOPOLOGY = "ambiguous-topology"
    UNKNOWN_DEVICE_ID = "unknown-device-id"
    INVALID_INDEX = "invalid-index"


class PrimeOffloadError(Exception):
    """Base class for errors that must stop a launch"""

    category: Optional[ErrorCategory] = None


class AmbiguousTopologyError(PrimeOffloadError):
    """Raised when 3+ GPUs are present and the renderer cannot pick one"""

    category = ErrorCategory.AMBIGUOUS_TOPOLOGY

    def __init__(self, card_count: int, renderer: str):
        self.card_count = card_count
        self.renderer = renderer
        super().__init__(
            f"System has {card_count} cards and {renderer} is not capable of choosing "
            "the right one. Use the Vulkan renderer instead or choose the GPU explicitly "
            "in the configuration."
        )


class UnresolvableDirectiveError(PrimeOffloadError):
    """Raised when the forced GPU directive names no existing card"""

    def __init__(self, directive: str, message: str):
        self.directive = directive
        super().__init__(message)


class UnknownDeviceIdError(UnresolvableDirectiveError):
    category = ErrorCategory.UNKNOWN_DEVICE_ID

    def __init__(self, device_id: str, available: Iterable[str] = ()):
        self.device_id = device_id
        self.available = sorted(available)
        message = f'No gpu with the vid:nid "{device_id}".'
        if self.available:
            message += f" Available: {', '.join(self.available)}"
        super().__init__(device_id, message)


class InvalidDeviceIndexError(UnresolvableDirectiveError):
    category = ErrorCategory.INVALID_INDEX

    def __init__(self, directive: str, card_count: int):
        self.card_count = card_count
        if directive.isdecimal():
            message = f"Index {directive} of the forced gpu does not exist ({card_count} cards found)."
        else:
            message = f'Forced gpu "{directive}" is neither a known mode, a vid:nid nor an index.'
        super().__init__(directive, message)
