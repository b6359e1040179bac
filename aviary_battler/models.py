"""Dataclasses that describe unit templates, unit instances and battle events."""
from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field
from typing import List, Optional

from .enums import Rarity, Side


@dataclass(frozen=True)
class UnitTemplate:
    """Immutable catalog entry a unit instance is cloned from."""

    id: str
    name: str
    scientific_name: str
    rarity: Rarity
    attack: int
    health: int

    def __post_init__(self) -> None:
        if self.attack < 0:
            raise ValueError(f"{self.id}: attack must be >= 0")
        if self.health <= 0:
            raise ValueError(f"{self.id}: health must be > 0")

    def create_unit(self) -> "Unit":
        return Unit(
            template_id=self.id,
            name=self.name,
            scientific_name=self.scientific_name,
            rarity=self.rarity,
            attack=self.attack,
            health=self.health,
            max_health=self.health,
        )


@dataclass
class Unit:
    """Runtime unit owned by exactly one roster or shop offer list."""

    template_id: str
    name: str
    scientific_name: str
    rarity: Rarity
    attack: int
    health: int
    max_health: int
    tier: int = 1
    free_reward: bool = False

    @property
    def is_alive(self) -> bool:
        return self.health > 0

    def take_damage(self, damage: int) -> None:
        # Health may drop below zero until the battle engine removes the unit.
        self.health -= damage

    def copy(self) -> "Unit":
        return deepcopy(self)

    def to_dict(self) -> dict:
        return {
            "id": self.template_id,
            "name": self.name,
            "scientific_name": self.scientific_name,
            "rarity": self.rarity.label,
            "attack": self.attack,
            "health": self.health,
            "max_health": self.max_health,
            "tier": self.tier,
            "free_reward": self.free_reward,
        }


@dataclass
class AttackEvent:
    """One exchange of blows between two rosters."""

    attacker_side: Side
    attacker: Unit
    defender: Unit
    defender_index: int
    attacker_killed: bool
    defender_killed: bool

    @property
    def simultaneous_kill(self) -> bool:
        return self.attacker_killed and self.defender_killed

    def to_dict(self) -> dict:
        return {
            "attacker_side": self.attacker_side.value,
            "attacker": self.attacker.to_dict(),
            "defender": self.defender.to_dict(),
            "attacker_index": 0,
            "defender_index": self.defender_index,
            "attacker_killed": self.attacker_killed,
            "defender_killed": self.defender_killed,
            "simultaneous_kill": self.simultaneous_kill,
        }


@dataclass
class PendingReward:
    """Three escalated candidates waiting for one to be chosen."""

    side: Side
    source_id: str
    rarity: Rarity
    candidates: List[Unit] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "side": self.side.value,
            "source_id": self.source_id,
            "rarity": self.rarity.label,
            "candidates": [unit.to_dict() for unit in self.candidates],
        }


@dataclass
class BattleResult:
    """Summary of a resolved battle before terminal checks."""

    winner: Optional[Side]
    overflow_damage: int
    steps: int

    @property
    def mutual_wipe(self) -> bool:
        return self.winner is None

    def to_dict(self) -> dict:
        return {
            "winner": self.winner.value if self.winner else None,
            "overflow_damage": self.overflow_damage,
            "steps": self.steps,
        }
