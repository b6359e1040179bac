"""Core enumerations used across the Aviary Battler engine."""
from __future__ import annotations

from enum import Enum, auto
from typing import Optional


class Rarity(Enum):
    """Unit rarities, ordered along the escalation ladder."""

    COMMON = ("common", 1)
    UNCOMMON = ("uncommon", 2)
    RARE = ("rare", 3)
    EXTREMELY_RARE = ("extremely rare", 4)

    def __init__(self, label: str, tier: int) -> None:
        self.label = label
        self.tier = tier

    def next(self) -> "Rarity":
        """Return the next rung of the ladder; the top rung maps to itself."""
        ladder = list(Rarity)
        idx = ladder.index(self)
        return ladder[min(idx + 1, len(ladder) - 1)]

    @classmethod
    def from_label(cls, label: str) -> Optional["Rarity"]:
        normalized = label.strip().lower().replace("-", " ").replace("_", " ")
        for rarity in cls:
            if rarity.label == normalized:
                return rarity
        return None


class Side(Enum):
    """The two actors of a match."""

    PLAYER = "player"
    AI = "ai"

    @property
    def opponent(self) -> "Side":
        return Side.AI if self is Side.PLAYER else Side.PLAYER


class Phase(Enum):
    """Round phase exposed to the presentation layer."""

    SHOP = "shop"
    BATTLE = "battle"


class BattleState(Enum):
    """States of the battle state machine."""

    IDLE = auto()
    ATTACK_LOOP = auto()
    RESOLVED = auto()


class Outcome(Enum):
    """Terminal results of a match."""

    PLAYER_WIN = "player_win"
    AI_WIN = "ai_win"
    DRAW = "draw"
