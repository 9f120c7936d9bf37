"""
Optional sound effects. Missing files or an absent mixer make every call a
no-op, so the game runs the same with or without an assets folder.
"""

import logging
import os

import pygame

logger = logging.getLogger(__name__)

# simulation event -> (sound name, volume)
EVENT_SOUNDS = {
    "missile_launched": ("launch",    0.4),
    "enemy_destroyed":  ("explosion", 0.6),
    "ground_impact":    ("impact",    0.5),
    "city_destroyed":   ("impact",    0.9),
    "base_destroyed":   ("impact",    0.9),
    "level_complete":   ("level",     0.8),
    "game_over":        ("gameover",  0.9),
}


class SoundManager:
    SOUNDS = {
        "launch":    "assets/launch.wav",
        "explosion": "assets/explosion.wav",
        "impact":    "assets/impact.wav",
        "level":     "assets/level.wav",
        "gameover":  "assets/gameover.wav",
    }

    def __init__(self, asset_dir="."):
        self._cache = {}
        if not pygame.mixer.get_init():
            return
        for name, rel in self.SOUNDS.items():
            path = os.path.join(asset_dir, rel)
            if not os.path.exists(path):
                continue
            try:
                self._cache[name] = pygame.mixer.Sound(path)
            except pygame.error as e:
                logger.warning("Could not load sound %s: %s", path, e)

    def play(self, name: str, volume: float = 0.7):
        snd = self._cache.get(name)
        if snd:
            snd.set_volume(volume)
            snd.play()

    def play_event(self, event):
        entry = EVENT_SOUNDS.get(event.name)
        if entry:
            self.play(*entry)
