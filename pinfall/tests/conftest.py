"""
Pytest fixtures for Pinfall tests.
"""

import random

import pytest

from pinfall.engine_core import ScoreEngine
from pinfall.session import CountingRack, LaneDirector, SessionManager


GUTTER_FRAMES_1_TO_9 = [0] * 18
PERFECT_GAME = [10] * 12


def random_valid_game(seed: int) -> list[int]:
    """A complete game whose frames never exceed the pins standing."""
    rng = random.Random(seed)
    throws = []

    for _ in range(9):
        first = rng.randint(0, 10)
        throws.append(first)
        if first < 10:
            throws.append(rng.randint(0, 10 - first))

    first = rng.randint(0, 10)
    standing = 10 if first == 10 else 10 - first
    second = rng.randint(0, standing)
    throws.extend([first, second])
    if first + second >= 10:
        standing = 10 if (first == 10 and second == 10) or first + second == 10 else 10 - second
        throws.append(rng.randint(0, standing))

    return throws


@pytest.fixture
def engine() -> ScoreEngine:
    """A fresh engine with an empty history."""
    return ScoreEngine()


@pytest.fixture
def strict_engine() -> ScoreEngine:
    """Engine that rejects throws above the standing pin count."""
    return ScoreEngine(strict_pin_count=True)


@pytest.fixture
def rack() -> CountingRack:
    return CountingRack()


@pytest.fixture
def director(engine: ScoreEngine, rack: CountingRack) -> LaneDirector:
    return LaneDirector(engine, rack)


@pytest.fixture
def manager() -> SessionManager:
    return SessionManager()
