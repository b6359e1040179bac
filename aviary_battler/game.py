"""Round orchestration: shop setup, merges, AI draft, battle and outcome."""
from __future__ import annotations

import logging
from collections import deque
from typing import Any, Callable, Deque, Dict, List, Optional, Sequence, Tuple

from .agent import DraftAgent
from .catalog import UnitCatalog
from .combat import BattleEngine
from .config import MAX_ROSTER_SIZE, SHOP_SIZE
from .context import SimulationContext
from .enums import BattleState, Outcome, Phase, Side
from .merge import MergeResolver
from .models import AttackEvent, PendingReward, Unit
from .player import ActorState
from .shop import offer_cost, purchase, refresh_shop

logger = logging.getLogger(__name__)

OfferPolicy = Callable[[Sequence[Unit], int], Optional[int]]

_SETUP_STEPS = ("merge_player", "merge_ai", "ai_draft", "player_shop")


class GameState:
    """Complete state and command surface for one player-versus-AI match."""

    def __init__(
        self,
        seed: Optional[int] = None,
        *,
        rng: Any = None,
        catalog: Optional[UnitCatalog] = None,
        start: bool = True,
    ) -> None:
        self.ctx = SimulationContext(catalog=catalog or UnitCatalog(), seed=seed, rng=rng)
        self.merge_resolver = MergeResolver()
        self.agent = DraftAgent()
        self.battle_engine = BattleEngine()
        self.message = ""
        self._setup_steps: Deque[str] = deque()
        if start:
            self.start_shop_phase()

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def player(self) -> ActorState:
        return self.ctx.player

    @property
    def ai(self) -> ActorState:
        return self.ctx.ai

    @property
    def round(self) -> int:
        return self.ctx.round

    @property
    def phase(self) -> Phase:
        return self.ctx.phase

    @property
    def shop(self) -> List[Unit]:
        return self.ctx.player.shop

    @property
    def outcome(self) -> Optional[Outcome]:
        return self.ctx.outcome

    @property
    def last_attack(self) -> Optional[AttackEvent]:
        return self.ctx.last_attack

    @property
    def pending_reward(self) -> Optional[PendingReward]:
        if self.merge_resolver.awaiting_pick(self.ctx):
            return self.ctx.pending_rewards[0]
        return None

    def is_game_over(self) -> bool:
        return self.ctx.is_game_over

    # ------------------------------------------------------------------
    # Shop phase
    # ------------------------------------------------------------------

    def start_shop_phase(self) -> bool:
        """Run the round setup pipeline; ``False`` while it waits on a reward pick."""

        self.ctx.phase = Phase.SHOP
        self.ctx.battle_state = BattleState.IDLE
        self._setup_steps = deque(_SETUP_STEPS)
        return self._continue_setup()

    def _continue_setup(self) -> bool:
        while self._setup_steps:
            if not self.merge_resolver.resolve(self.ctx):
                return False
            step = self._setup_steps.popleft()
            if step == "merge_player":
                self.merge_resolver.scan(self.ctx, Side.PLAYER)
            elif step == "merge_ai":
                self.merge_resolver.scan(self.ctx, Side.AI)
            elif step == "ai_draft":
                refresh_shop(self.ctx, Side.AI, SHOP_SIZE)
                self.ai.currency = self.player.currency
                self.agent.run_draft(self.ctx, Side.AI)
            elif step == "player_shop":
                refresh_shop(self.ctx, Side.PLAYER, SHOP_SIZE)
        return self.merge_resolver.resolve(self.ctx)

    def purchase(self, offer_idx: int) -> Tuple[bool, str]:
        blocked = self._shop_command_blocked()
        if blocked:
            return False, blocked
        success, message = purchase(self.ctx, Side.PLAYER, offer_idx)
        if not success:
            return False, message
        self.merge_resolver.scan(self.ctx, Side.PLAYER)
        if not self.merge_resolver.resolve(self.ctx):
            message = f"{message} · Triple! Choose a reward"
        self.message = message
        return True, message

    def pick_reward(self, choice_idx: int) -> Tuple[bool, str]:
        if self.is_game_over():
            return False, "Game over"
        success, message = self.merge_resolver.pick(self.ctx, choice_idx)
        if success:
            self._continue_setup()
            self.message = message
        return success, message

    def end_shop_phase(self) -> Tuple[bool, str]:
        """Snapshot both rosters and hand over to the battle engine."""

        blocked = self._shop_command_blocked()
        if blocked:
            return False, blocked
        self.ctx.take_snapshot()
        self.ctx.phase = Phase.BATTLE
        self.battle_engine.begin(self.ctx)
        self.message = "Battle started"
        return True, self.message

    def _shop_command_blocked(self) -> Optional[str]:
        if self.is_game_over():
            return "Game over"
        if self.ctx.phase is not Phase.SHOP:
            return "Not in shop phase"
        if self.ctx.pending_rewards or self._setup_steps:
            return "Reward pending"
        return None

    # ------------------------------------------------------------------
    # Battle phase
    # ------------------------------------------------------------------

    def advance(self) -> Tuple[bool, str]:
        """Play one battle step; the step that resolves the battle settles the round."""

        if self.is_game_over():
            return False, "Game over"
        if self.ctx.phase is not Phase.BATTLE:
            return False, "Not in battle phase"
        event = self.battle_engine.step(self.ctx)
        if self.ctx.battle_state is BattleState.RESOLVED:
            return True, self._finish_round()
        self.message = (
            f"{event.attacker.name} attacks {event.defender.name}" if event else "Battle continues"
        )
        return True, self.message

    def run_battle(self, max_steps: int = 10_000) -> str:
        steps = 0
        while self.ctx.phase is Phase.BATTLE and not self.is_game_over():
            if steps >= max_steps:
                raise RuntimeError(f"Battle did not resolve within {max_steps} steps")
            self.advance()
            steps += 1
        return self.message

    def _finish_round(self) -> str:
        player_down = self.player.is_defeated
        ai_down = self.ai.is_defeated
        if player_down and ai_down:
            self.ctx.outcome = Outcome.DRAW
            self.message = "Draw! Both players lost all health."
        elif player_down:
            self.ctx.outcome = Outcome.AI_WIN
            self.message = "You lost!"
        elif ai_down:
            self.ctx.outcome = Outcome.PLAYER_WIN
            self.message = "You win!"
        if self.ctx.outcome is not None:
            logger.info("Match over after round %d: %s", self.ctx.round, self.ctx.outcome.value)
            return self.message

        self.ctx.round += 1
        for actor in self.ctx.actors():
            actor.currency = self.ctx.round
        self.ctx.restore_snapshot()
        logger.info(
            "Round %d begins (health: player=%d ai=%d)",
            self.ctx.round,
            self.player.health,
            self.ai.health,
        )
        self.start_shop_phase()
        self.message = "Next round!"
        return self.message

    # ------------------------------------------------------------------
    # Headless play
    # ------------------------------------------------------------------

    def autoplay_round(self, policy: Optional[OfferPolicy] = None) -> str:
        """Let ``policy`` (default: the draft heuristic's pick) play the human seat for a round."""

        choose = policy or self.agent.choose_offer
        while not self.is_game_over() and self.ctx.phase is Phase.SHOP:
            if self.pending_reward is not None:
                self.pick_reward(0)
                continue
            idx = choose(self.shop, self.player.currency)
            if idx is None:
                break
            success, _ = self.purchase(idx)
            if not success:
                break
        if self.is_game_over():
            return self.message
        self.end_shop_phase()
        return self.run_battle()

    # ------------------------------------------------------------------
    # Serialization helpers for API/frontend
    # ------------------------------------------------------------------

    def serialize_offer(self, unit: Unit) -> Dict[str, Any]:
        data = unit.to_dict()
        data["cost"] = offer_cost(unit)
        return data

    def to_public_dict(self) -> Dict[str, Any]:
        reward = self.pending_reward
        last_attack = self.last_attack
        last_battle = self.ctx.last_battle
        return {
            "round": self.ctx.round,
            "phase": self.ctx.phase.value,
            "outcome": self.ctx.outcome.value if self.ctx.outcome else None,
            "is_game_over": self.is_game_over(),
            "message": self.message,
            "max_roster_size": MAX_ROSTER_SIZE,
            "player": self.player.to_dict(),
            "ai": self.ai.to_dict(),
            "shop": [self.serialize_offer(unit) for unit in self.shop],
            "pending_reward": reward.to_dict() if reward else None,
            "last_attack": last_attack.to_dict() if last_attack else None,
            "last_battle": last_battle.to_dict() if last_battle else None,
        }
