"""Triple detection and rarity-escalation rewards."""
from __future__ import annotations

import logging
from typing import List, Tuple

from .config import REWARD_CHOICES
from .context import SimulationContext
from .enums import Rarity, Side
from .models import PendingReward, Unit

logger = logging.getLogger(__name__)


class MergeResolver:
    """Turns triples on a roster into free reward offers.

    Every copy of a tripled id leaves the roster and three candidates of the
    escalated rarity are queued on the context. AI rewards are picked at
    random straight away; the human's reward blocks the queue until
    :meth:`pick` is called.
    """

    def __init__(self, choices: int = REWARD_CHOICES) -> None:
        self.choices = choices

    def scan(self, ctx: SimulationContext, side: Side) -> List[PendingReward]:
        actor = ctx.actor(side)
        counts = actor.roster_counts()

        detected: List[PendingReward] = []
        for template_id, count in counts.items():
            if count < 3:
                continue
            removed = actor.remove_all(template_id)
            rarity = self._escalate(ctx, template_id, removed)
            while count >= 3:
                candidates = [
                    ctx.catalog.random_unit(rarity, ctx.rng) for _ in range(self.choices)
                ]
                reward = PendingReward(side, template_id, rarity, candidates)
                detected.append(reward)
                ctx.pending_rewards.append(reward)
                logger.debug(
                    "%s tripled %s (%d copies) -> %s reward",
                    side.value,
                    template_id,
                    count,
                    rarity.label,
                )
                count -= 3
        return detected

    def resolve(self, ctx: SimulationContext) -> bool:
        """Resolve queued rewards in order; ``False`` while the human must pick."""

        while ctx.pending_rewards:
            reward = ctx.pending_rewards[0]
            if reward.side is Side.PLAYER:
                return False
            chosen = ctx.rng.choice(reward.candidates)
            ctx.pending_rewards.popleft()
            self._grant(ctx, reward, chosen)
        return True

    def pick(self, ctx: SimulationContext, choice_idx: int) -> Tuple[bool, str]:
        if not self.awaiting_pick(ctx):
            return False, "No reward pending"
        reward = ctx.pending_rewards[0]
        if not (0 <= choice_idx < len(reward.candidates)):
            return False, "Invalid reward choice"
        ctx.pending_rewards.popleft()
        chosen = reward.candidates[choice_idx]
        self._grant(ctx, reward, chosen)
        return True, f"Picked {chosen.name} as a free reward"

    def awaiting_pick(self, ctx: SimulationContext) -> bool:
        return bool(ctx.pending_rewards) and ctx.pending_rewards[0].side is Side.PLAYER

    def _escalate(self, ctx: SimulationContext, template_id: str, removed: List[Unit]) -> Rarity:
        if template_id in ctx.catalog.templates:
            base = ctx.catalog.get(template_id).rarity
        else:
            base = removed[0].rarity
        return ctx.catalog.escalation_rarity(base)

    def _grant(self, ctx: SimulationContext, reward: PendingReward, unit: Unit) -> None:
        unit.free_reward = True
        ctx.actor(reward.side).shop.insert(0, unit)
        logger.debug("%s received free reward %s", reward.side.value, unit.name)
