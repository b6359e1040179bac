"""Per-actor economy state, roster and shop."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

from .config import MAX_ROSTER_SIZE, STARTING_CURRENCY, STARTING_HEALTH
from .enums import Side
from .models import Unit


@dataclass
class ActorState:
    side: Side
    health: int = STARTING_HEALTH
    currency: int = STARTING_CURRENCY
    roster: List[Unit] = field(default_factory=list)
    shop: List[Unit] = field(default_factory=list)

    total_damage_dealt: int = 0
    total_damage_taken: int = 0
    rounds_won: int = 0

    @property
    def is_defeated(self) -> bool:
        return self.health <= 0

    def roster_full(self) -> bool:
        return len(self.roster) >= MAX_ROSTER_SIZE

    def count_copies(self, template_id: str) -> int:
        return sum(1 for unit in self.roster if unit.template_id == template_id)

    def copies(self, template_id: str) -> List[Unit]:
        return [unit for unit in self.roster if unit.template_id == template_id]

    def remove_all(self, template_id: str) -> List[Unit]:
        """Drop every roster unit with ``template_id`` and return them."""

        removed = self.copies(template_id)
        self.roster = [unit for unit in self.roster if unit.template_id != template_id]
        return removed

    def take_damage(self, damage: int) -> None:
        self.health -= damage
        self.total_damage_taken += damage

    def attack_total(self) -> int:
        return sum(unit.attack for unit in self.roster)

    def roster_counts(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for unit in self.roster:
            counts[unit.template_id] = counts.get(unit.template_id, 0) + 1
        return counts

    def to_dict(self) -> dict:
        return {
            "side": self.side.value,
            "health": self.health,
            "currency": self.currency,
            "roster": [unit.to_dict() for unit in self.roster],
            "max_roster_size": MAX_ROSTER_SIZE,
            "rounds_won": self.rounds_won,
            "total_damage_dealt": self.total_damage_dealt,
            "total_damage_taken": self.total_damage_taken,
        }
