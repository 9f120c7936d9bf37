"""
Playfield geometry: viewport fitting, proportional sizes and structure
placement. Everything scales off the playfield size so a resize only needs
a fresh ``Layout``.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from .constants import (
    ASPECT_RATIO, MAX_FIELD_W, GROUND_FRAC, CITY_W_FRAC, CITY_H_FRAC,
    BASE_W_FRAC, BASE_H_FRAC, PLAYER_BLAST_FRAC, IMPACT_BLAST_FRAC,
    PLAYER_SPEED_FRAC, CITY_SLOTS, BASE_SLOTS,
)
from .entities import City, Base


def fit_playfield(avail_w: float, avail_h: float,
                  max_w: float = MAX_FIELD_W) -> Tuple[int, int]:
    """Largest 4:3 rectangle inside the available area, capped at ``max_w``."""
    if avail_w <= 0 or avail_h <= 0:
        raise ValueError(f"viewport must be positive, got {avail_w}x{avail_h}")
    width  = min(avail_w, max_w)
    height = width / ASPECT_RATIO
    if height > avail_h:
        height = avail_h
        width  = height * ASPECT_RATIO
    return int(width), int(height)


@dataclass(frozen=True)
class Layout:
    width:  float
    height: float

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"playfield must be positive, got {self.width}x{self.height}")

    @property
    def ground_y(self) -> float:
        return self.height - self.height * GROUND_FRAC

    @property
    def city_size(self) -> Tuple[float, float]:
        return self.width * CITY_W_FRAC, self.height * CITY_H_FRAC

    @property
    def base_size(self) -> Tuple[float, float]:
        return self.width * BASE_W_FRAC, self.height * BASE_H_FRAC

    @property
    def player_blast_radius(self) -> float:
        return self.height * PLAYER_BLAST_FRAC

    @property
    def impact_blast_radius(self) -> float:
        return self.height * IMPACT_BLAST_FRAC

    @property
    def player_missile_speed(self) -> float:
        return self.height * PLAYER_SPEED_FRAC

    def build_cities(self) -> List[City]:
        w, h = self.city_size
        spacing = self.width / 8
        return [City(spacing * k - w / 2, self.ground_y, w, h) for k in CITY_SLOTS]

    def build_bases(self, ammo: int) -> List[Base]:
        w, h = self.base_size
        spacing = self.width / 3
        return [Base(spacing * k - w / 2, self.ground_y, w, h, ammo=ammo) for k in BASE_SLOTS]


def carry_over(old: Optional[list], new: list, fields=("alive",)) -> list:
    """Copy per-structure state from ``old`` onto ``new`` by index."""
    if not old:
        return new
    for prev, cur in zip(old, new):
        for name in fields:
            setattr(cur, name, getattr(prev, name))
    return new
