"""Turn based battle between the two rosters."""
from __future__ import annotations

import logging
from typing import Optional

from .context import SimulationContext
from .enums import BattleState, Side
from .models import AttackEvent, BattleResult

logger = logging.getLogger(__name__)


class BattleEngine:
    """State machine ``IDLE -> ATTACK_LOOP -> RESOLVED`` driven by :meth:`step`.

    The front unit of the side whose turn it is attacks a random enemy; both
    units hit each other at once and the turn passes to the other side no
    matter the outcome. Once a roster is empty the survivors' attack spills
    over onto the losing actor's health.
    """

    def begin(self, ctx: SimulationContext) -> Side:
        ctx.battle_log.clear()
        ctx.last_battle = None
        ctx.battle_state = BattleState.ATTACK_LOOP
        ctx.turn = Side.PLAYER if ctx.rng.random() < 0.5 else Side.AI
        logger.debug("Battle begins, %s attacks first", ctx.turn.value)
        return ctx.turn

    def step(self, ctx: SimulationContext) -> Optional[AttackEvent]:
        """Play one attack, or resolve the battle once a roster is empty."""

        if ctx.battle_state is BattleState.IDLE:
            self.begin(ctx)
        if ctx.battle_state is BattleState.RESOLVED:
            return None
        if not ctx.player.roster or not ctx.ai.roster:
            self.resolve(ctx)
            return None

        attacking = ctx.actor(ctx.turn)
        defending = ctx.actor(ctx.turn.opponent)
        attacker = attacking.roster[0]
        defender_idx = ctx.rng.randrange(len(defending.roster))
        defender = defending.roster[defender_idx]

        attack, counter = attacker.attack, defender.attack
        defender.take_damage(attack)
        attacker.take_damage(counter)

        attacker_killed = attacker.health <= 0
        defender_killed = defender.health <= 0
        if attacker_killed and defender_killed:
            if defender_idx > 0:
                del defending.roster[defender_idx]
                del attacking.roster[0]
            else:
                del attacking.roster[0]
                del defending.roster[defender_idx]
        elif defender_killed:
            del defending.roster[defender_idx]
        elif attacker_killed:
            del attacking.roster[0]

        event = AttackEvent(
            attacker_side=ctx.turn,
            attacker=attacker,
            defender=defender,
            defender_index=defender_idx,
            attacker_killed=attacker_killed,
            defender_killed=defender_killed,
        )
        ctx.battle_log.append(event)
        logger.debug(
            "%s %s hits %s #%d (killed: attacker=%s defender=%s)",
            ctx.turn.value,
            attacker.name,
            defender.name,
            defender_idx,
            attacker_killed,
            defender_killed,
        )
        ctx.turn = ctx.turn.opponent
        return event

    def run(self, ctx: SimulationContext, max_steps: Optional[int] = None) -> BattleResult:
        """Step until resolved; ``max_steps`` guards rosters that cannot hurt each other."""

        steps = 0
        while ctx.battle_state is not BattleState.RESOLVED:
            if max_steps is not None and steps >= max_steps:
                raise RuntimeError(f"Battle did not resolve within {max_steps} steps")
            self.step(ctx)
            steps += 1
        return ctx.last_battle

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def resolve(self, ctx: SimulationContext) -> BattleResult:
        player_alive = bool(ctx.player.roster)
        ai_alive = bool(ctx.ai.roster)

        winner: Optional[Side] = None
        overflow = 0
        if player_alive and not ai_alive:
            winner = Side.PLAYER
        elif ai_alive and not player_alive:
            winner = Side.AI

        if winner is not None:
            survivors = ctx.actor(winner)
            overflow = survivors.attack_total()
            ctx.actor(winner.opponent).take_damage(overflow)
            survivors.total_damage_dealt += overflow
            survivors.rounds_won += 1

        result = BattleResult(winner=winner, overflow_damage=overflow, steps=len(ctx.battle_log))
        ctx.last_battle = result
        ctx.battle_state = BattleState.RESOLVED
        logger.debug("Battle resolved: %s", result)
        return result
