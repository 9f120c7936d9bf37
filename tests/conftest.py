import os

# Headless pygame for the renderer tests
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pytest

from skyshield.constants import Rules
from skyshield.highscore import MemoryHighScoreStore
from skyshield.simulation import Simulation


@pytest.fixture
def store():
    return MemoryHighScoreStore()


@pytest.fixture
def sim(store):
    return Simulation(800, 600, high_scores=store, seed=1234)


@pytest.fixture
def running_sim(sim):
    sim.start_game()
    return sim


@pytest.fixture
def finite_sim(store):
    s = Simulation(800, 600, rules=Rules(finite_ammo=True), high_scores=store, seed=99)
    s.start_game()
    return s
