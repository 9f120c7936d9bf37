"""
SKY SHIELD, a Missile Command style arcade game.

The simulation core (``skyshield.simulation`` and friends) is display-free;
``skyshield.app`` wraps it in a pygame window.
"""

from .simulation import Simulation, GameState, SimEvent
from .waves import missiles_in_wave, spawn_delay_ms, enemy_speed
from .constants import Rules

__version__ = "1.0.0"

__all__ = [
    "Simulation",
    "GameState",
    "SimEvent",
    "Rules",
    "missiles_in_wave",
    "spawn_delay_ms",
    "enemy_speed",
]
