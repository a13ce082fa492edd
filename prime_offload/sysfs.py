"""
Probe GPUs through the kernel's DRM class directory.

sysfs lives entirely in memory and does not produce I/O errors, so failed
reads are treated as missing data (empty strings) instead of being raised.
If this is ever pointed at a tree without that guarantee, reads need a
proper result type.
"""

import logging
import os
import re
from typing import Dict, List, Tuple

from .models import Card

logger = logging.getLogger(__name__)

DRM_PATH = "/sys/class/drm"

CARD_PATTERN = re.compile(r"card([0-9]+)")
EDP_PATTERN = re.compile(r"card([0-9]+)-eDP-[0-9]+")


def _read_attr(path: str) -> str:
    try:
        with open(path) as f:
            return f.read()
    except OSError:
        return ""


def _hex_attr(path: str) -> str:
    value = _read_attr(path).strip().lower()
    if value.startswith("0x"):
        value = value[2:]
    return value.replace("\n", "")


def read_card(card_path: str, index: int) -> Card:
    """Build a Card from a cardN directory."""
    vendor = _hex_attr(os.path.join(card_path, "device", "vendor"))
    device = _hex_attr(os.path.join(card_path, "device", "device"))
    return Card(path=card_path, id=f"{vendor}:{device}", index=index)


def get_system_cards(drm_path: str = DRM_PATH) -> Tuple[List[Card], Dict[str, Card]]:
    """
    Enumerate the system's cards.

    Args:
        drm_path: DRM class directory to scan

    Returns:
        The cards ordered by card number, and an index by "vendor:device".
        Two cards sharing an id leave only the last one in the index.
    """
    try:
        names = os.listdir(drm_path)
    except OSError:
        names = []

    by_number: Dict[int, Card] = {}
    edp_numbers = []

    for name in names:
        card_match = CARD_PATTERN.fullmatch(name)
        if card_match:
            number = int(card_match.group(1))
            by_number[number] = read_card(os.path.join(drm_path, name), number)
            continue

        edp_match = EDP_PATTERN.fullmatch(name)
        if edp_match:
            edp_numbers.append(int(edp_match.group(1)))

    for number in edp_numbers:
        card = by_number.get(number)
        if card is not None:
            card.edp = True

    cards = [by_number[number] for number in sorted(by_number)]
    id_index = {card.id: card for card in cards}

    logger.debug("Probed %d card(s) under %s", len(cards), drm_path)
    return cards, id_index
