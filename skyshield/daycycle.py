"""Time-of-day sky colours. Cosmetic only; advances one period per level."""

from typing import Tuple

from .constants import DAY_CYCLE_LEVELS

PERIODS = ("morning", "noon", "afternoon", "evening", "night")

# period -> ((top_start, top_end), (bottom_start, bottom_end))
SKY_COLORS = {
    "morning":   (("#87CEEB", "#4169E1"), ("#FFF8DC", "#1E3A8A")),
    "noon":      (("#00BFFF", "#000080"), ("#F0F8FF", "#000033")),
    "afternoon": (("#FF8C00", "#191970"), ("#FFE4B5", "#000033")),
    "evening":   (("#FF4500", "#4B0082"), ("#FFDAB9", "#2F1B14")),
    "night":     (("#2F1B69", "#000000"), ("#1A1A2E", "#000000")),
}

STAR_OPACITY = {"evening": 0.5, "night": 0.8}
DAY_STAR_OPACITY = 0.3


def time_of_day(level: int) -> str:
    return PERIODS[(level - 1) % DAY_CYCLE_LEVELS]


def hex_to_rgb(color: str) -> Tuple[int, int, int]:
    return int(color[1:3], 16), int(color[3:5], 16), int(color[5:7], 16)


def interpolate_color(c1: str, c2: str, t: float) -> Tuple[int, int, int]:
    a, b = hex_to_rgb(c1), hex_to_rgb(c2)
    return tuple(round(x + (y - x) * t) for x, y in zip(a, b))


def sky_gradient(period: str, progress: float):
    """(top, bottom) RGB colours for ``period`` at ``progress`` in 0..1."""
    if period not in SKY_COLORS:
        return (0, 0, 51), (0, 0, 17)
    (top_a, top_b), (bot_a, bot_b) = SKY_COLORS[period]
    return interpolate_color(top_a, top_b, progress), interpolate_color(bot_a, bot_b, progress)


def star_opacity(period: str) -> float:
    return STAR_OPACITY.get(period, DAY_STAR_OPACITY)
