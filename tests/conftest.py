from collections import deque

import pytest

from aviary_battler import Rarity, Unit, UnitCatalog


class ScriptedRng:
    """Deterministic stand-in for ``random.Random`` that replays queued draws."""

    def __init__(self, floats=(), ints=()):
        self.floats = deque(floats)
        self.ints = deque(ints)

    def random(self):
        return self.floats.popleft() if self.floats else 0.0

    def randrange(self, stop):
        value = self.ints.popleft() if self.ints else 0
        assert 0 <= value < stop
        return value

    def choice(self, seq):
        return seq[0]


@pytest.fixture
def catalog():
    return UnitCatalog()


@pytest.fixture
def make_unit(catalog):
    def _make(template_id, **overrides):
        unit = catalog.get(template_id).create_unit()
        for key, value in overrides.items():
            setattr(unit, key, value)
        return unit

    return _make


@pytest.fixture
def make_fighter():
    def _make(attack, health, name="fighter"):
        return Unit(name, name.title(), "Avis testus", Rarity.COMMON, attack, health, health)

    return _make


@pytest.fixture
def scripted_rng():
    return ScriptedRng
