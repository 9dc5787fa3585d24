"""Shared fixtures for the tic-tac-toe tests."""

from __future__ import annotations

from typing import Sequence

import pytest


class FakeRandom:
    """Deterministic stand-in for ``random.Random``.

    ``roll`` is returned by every ``random()`` call; ``choice`` always picks
    the lowest index offered and records what it was offered.
    """

    def __init__(self, roll: float) -> None:
        self.roll = roll
        self.offered: list = []

    def random(self) -> float:
        return self.roll

    def choice(self, seq: Sequence[int]) -> int:
        self.offered.append(list(seq))
        return seq[0]


@pytest.fixture
def always_random() -> FakeRandom:
    return FakeRandom(0.0)


@pytest.fixture
def always_optimal() -> FakeRandom:
    return FakeRandom(0.99)
