"""Shop generation, offer pricing and purchases."""
from __future__ import annotations

import logging
from typing import List, Tuple

from .config import DEFAULT_COST, RARITY_COST, SHOP_SIZE
from .context import SimulationContext
from .enums import Side
from .models import Unit
from .player import ActorState

logger = logging.getLogger(__name__)


def offer_cost(unit: Unit) -> int:
    if unit.free_reward:
        return 0
    return RARITY_COST.get(unit.rarity.label, DEFAULT_COST)


def refresh_shop(ctx: SimulationContext, side: Side, size: int = SHOP_SIZE) -> List[Unit]:
    """Discard the actor's offers and draw ``size`` fresh ones."""

    actor = ctx.actor(side)
    actor.shop.clear()
    for _ in range(size):
        actor.shop.append(ctx.catalog.random_shop_unit(ctx.rng))
    logger.debug(
        "Refreshed %s shop: %s", side.value, [unit.template_id for unit in actor.shop]
    )
    return actor.shop


def completes_triple(actor: ActorState, unit: Unit) -> bool:
    return actor.count_copies(unit.template_id) == 2


def purchase(ctx: SimulationContext, side: Side, offer_idx: int) -> Tuple[bool, str]:
    """Move an offer to the end of the actor's roster.

    Rejections leave the state untouched. A full roster only accepts the
    purchase when it would complete a triple.
    """

    actor = ctx.actor(side)
    if not (0 <= offer_idx < len(actor.shop)):
        return False, "Invalid offer"
    unit = actor.shop[offer_idx]
    cost = offer_cost(unit)
    if actor.currency < cost:
        logger.debug("%s cannot afford %s (%d < %d)", side.value, unit.name, actor.currency, cost)
        return False, "Not enough currency"
    if actor.roster_full() and not completes_triple(actor, unit):
        return False, "Roster full"

    actor.currency -= cost
    actor.roster.append(unit)
    del actor.shop[offer_idx]
    logger.debug("%s bought %s for %d", side.value, unit.name, cost)
    return True, f"Bought {unit.name}"
