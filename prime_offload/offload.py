"""
PRIME offload entry point.

Resolves the launcher's forced GPU directive ("integrated",
"prime-discrete", an explicit "vendor:device" or a card index) to a probed
card and writes the matching environment into the launch configuration.
"""

import logging
import os
from typing import Dict, Mapping, Optional

from .errors import InvalidDeviceIndexError, UnknownDeviceIdError
from .models import INTEGRATED, PRIME_DISCRETE, BinaryConfig, OffloadEvent, OffloadResult
from .policy import evaluate_prime
from .selector import choose_card
from .sysfs import DRM_PATH, get_system_cards

logger = logging.getLogger(__name__)


def resolve_offload(config: BinaryConfig, drm_path: str = DRM_PATH) -> OffloadResult:
    """
    Resolve ``config.forced_gpu`` and apply the chosen card.

    Args:
        config: Launch configuration; only its env mapping may change
        drm_path: DRM class directory to probe

    Returns:
        OffloadResult holding the configuration, the chosen card (or None)
        and the diagnostics collected on the way

    Raises:
        AmbiguousTopologyError: 3+ cards with a non-Vulkan renderer
        UnknownDeviceIdError: explicit vendor:device matches no card
        InvalidDeviceIndexError: index directive is out of range or not a number
    """
    result = OffloadResult(config=config)

    # An empty directive lets the user handle offloading themselves
    if config.forced_gpu == "":
        result.events.append(OffloadEvent.info("ForcedGpu option is empty. Skipping prime logic..."))
        return result

    cards, id_index = get_system_cards(drm_path)
    directive = config.forced_gpu

    if directive in (INTEGRATED, PRIME_DISCRETE):
        decision = evaluate_prime(cards, config)
        result.events.append(OffloadEvent.info(decision.reason))
        if not decision.allowed:
            return result
        card = cards[0] if directive == INTEGRATED else cards[1]
    elif ":" in directive:
        card = id_index.get(directive.strip().lower())
        if card is None:
            raise UnknownDeviceIdError(directive, id_index)
    else:
        if not directive.isdecimal() or int(directive) >= len(cards):
            raise InvalidDeviceIndexError(directive, len(cards))
        card = cards[int(directive)]

    choose_card(config, card, result.events)
    result.card = card
    return result


def setup_prime_offload(config: BinaryConfig, drm_path: str = DRM_PATH) -> BinaryConfig:
    """Resolve the forced GPU and log the diagnostics. Errors propagate."""
    result = resolve_offload(config, drm_path)
    for event in result.events:
        logger.log(event.level, event.message)
    return result.config


def build_launch_env(config: BinaryConfig, base: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """Return ``base`` (default: os.environ) overlaid with ``config.env``."""
    env = dict(os.environ if base is None else base)
    env.update(config.env)
    return env
