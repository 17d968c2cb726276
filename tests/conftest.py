"""
Shared test fixtures.

Fixtures:
    clock          : Deterministic ISO timestamp source (one tick per call)
    store          : Empty RegionStore on that clock
    sample_store   : Store with a square forest and a circular desert
"""

import pytest

from realms_zone import CircleShape, RegionStore, polygon


class FakeClock:
    """Returns a strictly increasing ISO timestamp on every call."""

    def __init__(self):
        self.ticks = 0

    def __call__(self) -> str:
        self.ticks += 1
        minutes, seconds = divmod(self.ticks, 60)
        return f"2026-01-01T00:{minutes:02d}:{seconds:02d}+00:00"


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return RegionStore(scope_id="test_scene", clock=clock)


@pytest.fixture
def forest_square():
    return polygon([(0, 0), (50, 0), (50, 50), (0, 50)])


@pytest.fixture
def desert_circle():
    return CircleShape(x=75, y=75, radius=25)


@pytest.fixture
def sample_store(store, forest_square, desert_circle):
    store.create("Old Wood", forest_square, ["biome:forest"])
    store.create("Dune Sea", desert_circle, ["biome:desert"])
    return store
