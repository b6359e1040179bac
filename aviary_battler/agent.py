"""Draft heuristic used by the AI actor to spend its currency."""
from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from .context import SimulationContext
from .enums import Side
from .models import Unit
from .player import ActorState
from .shop import offer_cost

logger = logging.getLogger(__name__)


class DraftAgent:
    """Deterministic buyer: finish pairs first, then buy the rarest offer.

    A third copy bought by the agent upgrades the pair in place instead of
    going through the merge resolver's rarity escalation.
    """

    def run_draft(self, ctx: SimulationContext, side: Side = Side.AI) -> List[dict]:
        actor = ctx.actor(side)
        actions: List[dict] = []

        while actor.currency > 0 and actor.shop:
            idx = self.find_triple_offer(actor)
            if idx is not None:
                offer = actor.shop.pop(idx)
                actor.currency -= offer_cost(offer)
                upgraded = self.upgrade_in_place(actor, offer)
                actions.append({"type": "upgrade", "id": upgraded.template_id, "tier": upgraded.tier})
                continue

            if actor.roster_full():
                break
            idx = self.choose_offer(actor.shop, actor.currency)
            if idx is None:
                break
            offer = actor.shop.pop(idx)
            actor.currency -= offer_cost(offer)
            if actor.count_copies(offer.template_id) == 2:
                upgraded = self.upgrade_in_place(actor, offer)
                actions.append({"type": "upgrade", "id": upgraded.template_id, "tier": upgraded.tier})
            else:
                actor.roster.append(offer)
                actions.append({"type": "buy", "id": offer.template_id})

        logger.debug("%s draft: %s (currency left %d)", side.value, actions, actor.currency)
        return actions

    def find_triple_offer(self, actor: ActorState) -> Optional[int]:
        for idx, offer in enumerate(actor.shop):
            if actor.count_copies(offer.template_id) == 2 and offer_cost(offer) <= actor.currency:
                return idx
        return None

    def choose_offer(self, shop: Sequence[Unit], currency: int) -> Optional[int]:
        """Index of the rarest affordable offer, ties broken by highest attack."""

        affordable = [idx for idx, offer in enumerate(shop) if offer_cost(offer) <= currency]
        if not affordable:
            return None
        best_tier = max(shop[idx].rarity.tier for idx in affordable)
        candidates = [idx for idx in affordable if shop[idx].rarity.tier == best_tier]
        best_attack = max(shop[idx].attack for idx in candidates)
        return next(idx for idx in candidates if shop[idx].attack == best_attack)

    @staticmethod
    def upgrade_in_place(actor: ActorState, offer: Unit) -> Unit:
        """Replace the existing pair with one unit a tier higher."""

        pair = actor.remove_all(offer.template_id)
        previous_tier = pair[0].tier if pair else 1
        upgraded = offer.copy()
        upgraded.attack = offer.attack + 1
        upgraded.health = offer.health + 2
        upgraded.max_health = offer.max_health + 2
        upgraded.tier = (previous_tier or 1) + 1
        actor.roster.append(upgraded)
        return upgraded
