"""
Entity records and their per-tick update rules.

Entities are plain dataclasses with an ``update()`` that advances them one
tick. None of them know about the stores they live in; the simulation step
decides what to do with the results.
"""

import math
import random
from collections import deque
from dataclasses import dataclass
from typing import Deque, List, Tuple

from .constants import (
    EXPLOSION_GROWTH_RATE, EXPLOSION_DURATION, SHOCKWAVE_SCALE,
    PLAYER_TRAIL_LEN, ENEMY_TRAIL_LEN, PARTICLE_GRAVITY,
    BURST_PLAYER, BURST_IMPACT, PLAYER_BURST_COLORS, IMPACT_BURST_COLORS,
)

Point = Tuple[float, float]


# ─────────────────────────────────────────────────────────────
# UTILITY HELPERS
# ─────────────────────────────────────────────────────────────

def clamp(val, lo, hi):
    return max(lo, min(hi, val))


def lerp(a, b, t):
    return a + (b - a) * t


def distance(ax, ay, bx, by):
    return math.hypot(ax - bx, ay - by)


def heading(sx, sy, tx, ty, speed) -> Tuple[float, float]:
    """Velocity of length ``speed`` pointing from (sx, sy) to (tx, ty)."""
    d = distance(sx, sy, tx, ty)
    if d == 0:
        return 0.0, 0.0
    return (tx - sx) / d * speed, (ty - sy) / d * speed


# ─────────────────────────────────────────────────────────────
# STRUCTURES
# ─────────────────────────────────────────────────────────────

def box_center(s) -> Point:
    return s.x + s.width / 2, s.y - s.height / 2


def box_contains(s, px, py) -> bool:
    """Structures stand on the ground line: the box spans y-height..y."""
    return (s.x <= px <= s.x + s.width
            and s.y - s.height <= py <= s.y)


@dataclass
class City:
    x: float          # left edge
    y: float          # ground line (bottom edge)
    width: float
    height: float
    alive: bool = True

    @property
    def center(self) -> Point:
        return box_center(self)

    def contains(self, px, py) -> bool:
        return box_contains(self, px, py)


@dataclass
class Base:
    x: float
    y: float
    width: float
    height: float
    alive: bool = True
    ammo: int = 0

    @property
    def center(self) -> Point:
        return box_center(self)

    @property
    def muzzle(self) -> Point:
        return self.x + self.width / 2, self.y - self.height

    def contains(self, px, py) -> bool:
        return box_contains(self, px, py)


# ─────────────────────────────────────────────────────────────
# MISSILES
# ─────────────────────────────────────────────────────────────

class PlayerMissile:
    """Interceptor flying a straight line from a base to the click point."""

    def __init__(self, start_x, start_y, target_x, target_y, speed):
        self.start_x, self.start_y = start_x, start_y
        self.target_x, self.target_y = target_x, target_y
        self.x, self.y = start_x, start_y
        self.speed = speed
        self.vx, self.vy = heading(start_x, start_y, target_x, target_y, speed)
        self.trail: Deque[Point] = deque(maxlen=PLAYER_TRAIL_LEN)
        self.reached = False

    def update(self) -> bool:
        """Advance one tick. Returns True on the tick the target is reached."""
        if self.reached:
            return False
        self.trail.append((self.x, self.y))
        self.x += self.vx
        self.y += self.vy
        if distance(self.x, self.y, self.target_x, self.target_y) < self.speed:
            # Snap to avoid overshoot jitter
            self.x, self.y = self.target_x, self.target_y
            self.reached = True
            return True
        return False


class EnemyMissile:
    """Incoming warhead falling from the top edge to a ground point."""

    def __init__(self, x, y, target_x, target_y, speed):
        self.x, self.y = x, y
        self.target_x, self.target_y = target_x, target_y
        self.speed = speed
        self.vx, self.vy = heading(x, y, target_x, target_y, speed)
        self.trail: Deque[Point] = deque(maxlen=ENEMY_TRAIL_LEN)

    @classmethod
    def spawn(cls, rng: random.Random, field_w, ground_y, speed) -> "EnemyMissile":
        return cls(rng.uniform(0, field_w), 0.0, rng.uniform(0, field_w), ground_y, speed)

    def update(self) -> bool:
        """Advance one tick. Returns True once the missile touches the ground."""
        self.trail.append((self.x, self.y))
        self.x += self.vx
        self.y += self.vy
        return self.y >= self.target_y


# ─────────────────────────────────────────────────────────────
# EXPLOSION
# ─────────────────────────────────────────────────────────────

class Explosion:
    """
    Blast that grows to ``max_radius``, then holds for ``EXPLOSION_DURATION``
    ticks while fading out. The kill radius is whatever ``radius`` is right
    now; it is never shrunk during the fade.
    """

    def __init__(self, x, y, max_radius, is_player=False):
        self.x, self.y = x, y
        self.radius = 0.0
        self.max_radius = max_radius
        self.growing = True
        self.life = EXPLOSION_DURATION
        self.is_player = is_player
        self.shockwave_radius = 0.0
        self.shockwave_max_radius = max_radius * SHOCKWAVE_SCALE
        self.burst_pending = False

    def update(self) -> bool:
        """Advance one tick. Returns False once the explosion has burnt out."""
        if self.growing:
            self.radius = min(self.radius + EXPLOSION_GROWTH_RATE, self.max_radius)
            self.shockwave_radius += EXPLOSION_GROWTH_RATE * 0.7
            if self.radius >= self.max_radius:
                self.growing = False
                self.burst_pending = True
        else:
            self.life -= 1
            if self.shockwave_radius < self.shockwave_max_radius:
                self.shockwave_radius += EXPLOSION_GROWTH_RATE * 0.3
        return self.life > 0

    def hits(self, px, py) -> bool:
        return distance(px, py, self.x, self.y) < self.radius

    @property
    def alpha(self) -> float:
        return clamp(self.life / EXPLOSION_DURATION, 0.0, 1.0)


# ─────────────────────────────────────────────────────────────
# PARTICLE SYSTEM
# ─────────────────────────────────────────────────────────────

@dataclass
class Particle:
    x: float
    y: float
    vx: float
    vy: float
    life: float       # remaining life in ticks
    max_life: float   # total life (for alpha fade)
    color: Tuple
    size: float
    gravity: float = PARTICLE_GRAVITY


class ParticleSystem:
    """Debris bursts thrown off by explosions. Purely visual."""

    def __init__(self, rng: random.Random = None):
        self.particles: List[Particle] = []
        self.rng = rng or random.Random()

    def emit_burst(self, x, y, is_player):
        rng = self.rng
        count = BURST_PLAYER if is_player else BURST_IMPACT
        palette = PLAYER_BURST_COLORS if is_player else IMPACT_BURST_COLORS
        for i in range(count):
            angle = math.tau * i / count + rng.random() * 0.5
            speed = 3 + rng.random() * 4
            life  = 70 + rng.random() * 50
            self.particles.append(Particle(
                x=x, y=y,
                vx=math.cos(angle) * speed,
                vy=math.sin(angle) * speed - rng.random() * 3,  # upward bias
                life=life, max_life=life,
                color=rng.choice(palette),
                size=1.5 + rng.random() * 2.5,
            ))

    def update(self):
        alive = []
        for p in self.particles:
            p.x  += p.vx
            p.y  += p.vy
            p.vy += p.gravity
            p.life -= 1
            if p.life > 0:
                alive.append(p)
        self.particles = alive

    def clear(self):
        self.particles.clear()

    def __len__(self):
        return len(self.particles)
