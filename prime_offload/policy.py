"""
Decide whether PRIME offload selection is safe on this machine.
"""

from typing import Sequence

from .errors import AmbiguousTopologyError
from .models import BinaryConfig, Card, PolicyDecision


def evaluate_prime(cards: Sequence[Card], config: BinaryConfig) -> PolicyDecision:
    """
    Check whether the system has PRIME offload with no ambiguity between GPUs.

    Args:
        cards: Probed cards, ordered by card number
        config: Launch configuration (renderer and dxvk are consulted)

    Returns:
        PolicyDecision with the reason for the verdict

    Raises:
        AmbiguousTopologyError: 3+ cards and nothing able to pick the right one
    """
    if len(cards) <= 1:
        return PolicyDecision(False, "Number of cards is equal or below 1. Skipping prime logic.")

    # Laptops with an eGPU attached, or multi-GPU workstations
    if len(cards) > 2:
        # OpenGL cannot choose the right card properly
        if not config.dxvk and not config.is_vulkan:
            raise AmbiguousTopologyError(len(cards), config.renderer)
        return PolicyDecision(
            False,
            f"System has {len(cards)} cards. Skipping prime logic and leaving "
            "card selection up to Vulkan.",
        )

    # card0 is the iGPU when there is one; without an eDP this isn't a laptop
    if not cards[0].edp:
        return PolicyDecision(False, "card0 has no eDP. This machine is not a laptop. Skipping prime logic.")

    return PolicyDecision(True, "Laptop PRIME layout detected.")


def prime_is_allowed(cards: Sequence[Card], config: BinaryConfig) -> bool:
    return evaluate_prime(cards, config).allowed
