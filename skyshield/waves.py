"""
Wave formulas and the deferred-event scheduler.

Both the HUD and the spawner read the same three formulas, so what the
player sees is what the simulation does.
"""

import math
from dataclasses import dataclass, field
from typing import Callable, List

from .constants import (
    BASE_WAVE_SIZE, BASE_SPAWN_DELAY_MS, SPAWN_DELAY_STEP_MS,
    MIN_SPAWN_DELAY_MS, BASE_ENEMY_SPEED, ENEMY_SPEED_STEP, FPS,
)


def _check_level(level: int):
    if level < 1:
        raise ValueError(f"level must be >= 1, got {level}")


def missiles_in_wave(level: int) -> int:
    """Enemy missiles released in one wave: 10 at level 1, +1 per level."""
    _check_level(level)
    return BASE_WAVE_SIZE + (level - 1)


def spawn_delay_ms(level: int) -> int:
    """Stagger between releases: 1200ms at level 1, -25ms per level, floor 600ms."""
    _check_level(level)
    return max(MIN_SPAWN_DELAY_MS, BASE_SPAWN_DELAY_MS - (level - 1) * SPAWN_DELAY_STEP_MS)


def enemy_speed(level: int) -> float:
    """Enemy missile speed in px/tick: 0.3 at level 1, +0.05 per level."""
    _check_level(level)
    return BASE_ENEMY_SPEED + (level - 1) * ENEMY_SPEED_STEP


def ms_to_ticks(ms: float, fps: int = FPS) -> int:
    return math.ceil(ms * fps / 1000)


# ─────────────────────────────────────────────────────────────
# SCHEDULER
# ─────────────────────────────────────────────────────────────

@dataclass
class ScheduledEvent:
    due:    int                       # tick at which the event fires
    kind:   str
    action: Callable[[], None]
    guard:  Callable[[], bool] = field(default=lambda: True)


class Scheduler:
    """
    Tick-driven replacement for fire-and-forget timers.

    Events fire once, in due order, when ``run_due`` reaches their tick.
    The guard is evaluated at fire time; a failing guard drops the event
    silently.
    """

    def __init__(self):
        self.events: List[ScheduledEvent] = []

    def schedule(self, due, kind, action, guard=None) -> ScheduledEvent:
        ev = ScheduledEvent(due, kind, action, guard or (lambda: True))
        self.events.append(ev)
        return ev

    def run_due(self, tick: int) -> int:
        """Fire every event due at or before ``tick``. Returns the number fired."""
        due = [e for e in self.events if e.due <= tick]
        if not due:
            return 0
        self.events = [e for e in self.events if e.due > tick]
        fired = 0
        for ev in sorted(due, key=lambda e: e.due):
            if ev.guard():
                ev.action()
                fired += 1
        return fired

    def pending(self, kind: str = None) -> int:
        if kind is None:
            return len(self.events)
        return sum(1 for e in self.events if e.kind == kind)

    def clear(self):
        self.events.clear()
