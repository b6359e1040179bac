"""Lightweight numeric helpers for evaluation runs and statistical checks."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

import numpy as np

from .enums import Outcome, Rarity
from .models import Unit


def rarity_frequencies(units: Iterable[Unit]) -> Dict[Rarity, float]:
    """Observed share of each rarity among ``units`` (all zero when empty)."""

    tiers = np.asarray([unit.rarity.tier for unit in units], dtype=np.int64)
    if tiers.size == 0:
        return {rarity: 0.0 for rarity in Rarity}
    return {rarity: float(np.mean(tiers == rarity.tier)) for rarity in Rarity}


@dataclass
class EpisodeStats:
    """Per-episode history captured during an evaluation run."""

    returns: List[float] = field(default_factory=list)
    lengths: List[int] = field(default_factory=list)
    rounds: List[int] = field(default_factory=list)
    outcomes: List[Optional[Outcome]] = field(default_factory=list)

    def record(self, episode_return: float, length: int, rounds: int, outcome: Optional[Outcome]) -> None:
        self.returns.append(float(episode_return))
        self.lengths.append(int(length))
        self.rounds.append(int(rounds))
        self.outcomes.append(outcome)

    def rate(self, outcome: Optional[Outcome]) -> float:
        if not self.outcomes:
            return 0.0
        return float(np.mean([result is outcome for result in self.outcomes]))

    def to_dict(self) -> dict[str, float]:
        return {
            "mean_return": float(np.mean(self.returns)) if self.returns else 0.0,
            "mean_length": float(np.mean(self.lengths)) if self.lengths else 0.0,
            "mean_rounds": float(np.mean(self.rounds)) if self.rounds else 0.0,
            "win_rate": self.rate(Outcome.PLAYER_WIN),
            "loss_rate": self.rate(Outcome.AI_WIN),
            "draw_rate": self.rate(Outcome.DRAW),
        }
