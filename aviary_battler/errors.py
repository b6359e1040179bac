"""Engine exceptions."""


class EmptyRarityPool(LookupError):
    """Raised when a unit is requested for a rarity with no templates."""

    def __init__(self, rarity) -> None:
        label = getattr(rarity, "label", rarity)
        super().__init__(f"No unit templates of rarity '{label}'")
        self.rarity = rarity
