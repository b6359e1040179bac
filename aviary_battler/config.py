"""Build-time constants for the simulation rules."""
from __future__ import annotations

from typing import Dict, Tuple

STARTING_HEALTH = 30
STARTING_CURRENCY = 1
SHOP_SIZE = 6
MAX_ROSTER_SIZE = 5
REWARD_CHOICES = 3

DEFAULT_COST = 1

# Cost of a non-reward offer, keyed by rarity label.
RARITY_COST: Dict[str, int] = {
    "common": 1,
    "uncommon": 2,
    "rare": 3,
    "extremely rare": 4,
}

# Walked in this order when drawing a shop unit.
RARITY_WEIGHTS: Tuple[Tuple[str, int], ...] = (
    ("common", 6),
    ("uncommon", 3),
    ("rare", 1),
)
