"""Unit catalog and the weighted generator that draws from it."""
from __future__ import annotations

import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Optional

from .config import RARITY_WEIGHTS
from .enums import Rarity
from .errors import EmptyRarityPool
from .models import Unit, UnitTemplate

logger = logging.getLogger(__name__)


DEFAULT_TEMPLATES: tuple[UnitTemplate, ...] = (
    UnitTemplate("sparrow", "House Sparrow", "Passer domesticus", Rarity.COMMON, 2, 5),
    UnitTemplate("robin", "European Robin", "Erithacus rubecula", Rarity.COMMON, 1, 6),
    UnitTemplate("blackbird", "Common Blackbird", "Turdus merula", Rarity.COMMON, 2, 7),
    UnitTemplate("jay", "Eurasian Jay", "Garrulus glandarius", Rarity.UNCOMMON, 3, 8),
    UnitTemplate("woodpecker", "Great Spotted Woodpecker", "Dendrocopos major", Rarity.UNCOMMON, 4, 7),
    UnitTemplate("owl", "Barn Owl", "Tyto alba", Rarity.RARE, 6, 10),
    UnitTemplate("eagle", "Golden Eagle", "Aquila chrysaetos", Rarity.RARE, 7, 12),
)


class UnitCatalog:
    """Holds every unit template that can appear in the game."""

    def __init__(self, templates: Optional[Iterable[UnitTemplate]] = None) -> None:
        self.templates: Dict[str, UnitTemplate] = {}
        self.templates_by_rarity: Dict[Rarity, List[UnitTemplate]] = defaultdict(list)
        for template in templates if templates is not None else DEFAULT_TEMPLATES:
            if template.id in self.templates:
                raise ValueError(f"Duplicate unit template id '{template.id}'")
            self.templates[template.id] = template
            self.templates_by_rarity[template.rarity].append(template)

    def get(self, template_id: str) -> UnitTemplate:
        return self.templates[template_id]

    def by_rarity(self, rarity: Rarity) -> List[UnitTemplate]:
        return list(self.templates_by_rarity.get(rarity, []))

    def populated_rarities(self) -> List[Rarity]:
        return [rarity for rarity in Rarity if self.templates_by_rarity.get(rarity)]

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    def random_unit(self, rarity: Rarity, rng) -> Unit:
        """Clone a uniformly chosen template of ``rarity``.

        Raises :class:`EmptyRarityPool` when no template has that rarity.
        """

        pool = self.templates_by_rarity.get(rarity)
        if not pool:
            raise EmptyRarityPool(rarity)
        return rng.choice(pool).create_unit()

    def random_shop_unit(self, rng) -> Unit:
        """Draw a unit with rarity picked by the configured shop weights.

        The draw ``r`` is uniform in ``[0, total)``; each tier's weight is
        subtracted in table order until ``r`` lands inside a tier's bucket.
        """

        total_weight = sum(weight for _, weight in RARITY_WEIGHTS)
        roll = rng.random() * total_weight
        for label, weight in RARITY_WEIGHTS:
            if roll < weight:
                return self.random_unit(Rarity.from_label(label), rng)
            roll -= weight
        logger.debug("Weighted draw exhausted the table; falling back to common")
        return self.random_unit(Rarity.COMMON, rng)

    def escalation_rarity(self, rarity: Rarity) -> Rarity:
        """Next ladder rung, clamped to the highest populated rarity below it."""

        target = rarity.next()
        populated = [r for r in self.populated_rarities() if r.tier <= target.tier]
        if not populated:
            raise EmptyRarityPool(target)
        return max(populated, key=lambda r: r.tier)
