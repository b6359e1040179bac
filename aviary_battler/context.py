"""Explicit simulation context shared by every engine component."""
from __future__ import annotations

import random
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Deque, Dict, List, Optional

from .catalog import UnitCatalog
from .enums import BattleState, Outcome, Phase, Side
from .models import AttackEvent, BattleResult, PendingReward, Unit
from .player import ActorState


@dataclass
class SimulationContext:
    """All mutable state of one match.

    Components never hold match state themselves; they receive the context on
    every call so independent simulations can run side by side.
    """

    catalog: UnitCatalog = field(default_factory=UnitCatalog)
    seed: Optional[int] = None
    rng: Any = None

    player: ActorState = field(default_factory=lambda: ActorState(Side.PLAYER))
    ai: ActorState = field(default_factory=lambda: ActorState(Side.AI))
    round: int = 1
    phase: Phase = Phase.SHOP
    outcome: Optional[Outcome] = None

    pending_rewards: Deque[PendingReward] = field(default_factory=deque)
    snapshot: Dict[Side, List[Unit]] = field(default_factory=dict)

    battle_state: BattleState = BattleState.IDLE
    turn: Optional[Side] = None
    battle_log: List[AttackEvent] = field(default_factory=list)
    last_battle: Optional[BattleResult] = None

    def __post_init__(self) -> None:
        if self.rng is None:
            self.rng = random.Random(self.seed)

    def actor(self, side: Side) -> ActorState:
        return self.player if side is Side.PLAYER else self.ai

    def actors(self) -> List[ActorState]:
        return [self.player, self.ai]

    @property
    def last_attack(self) -> Optional[AttackEvent]:
        return self.battle_log[-1] if self.battle_log else None

    @property
    def is_game_over(self) -> bool:
        return self.outcome is not None

    def take_snapshot(self) -> None:
        """Deep copy both rosters as they stand when the shop phase ends."""

        self.snapshot = {
            actor.side: [unit.copy() for unit in actor.roster] for actor in self.actors()
        }

    def restore_snapshot(self) -> None:
        for actor in self.actors():
            saved = self.snapshot.get(actor.side, [])
            actor.roster = [unit.copy() for unit in saved]
