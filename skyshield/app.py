"""
pygame shell around the simulation: window, input, resize, render loop.

STATE MACHINE:
    MENU → PLAYING ⇄ PAUSED → GAME_OVER → PLAYING (restart)
"""

import argparse
import logging
import random
import sys
from enum import Enum, auto

import pygame

from .constants import Rules, FPS, DEFAULT_WIN_W, DEFAULT_WIN_H, C_BLACK
from .highscore import HighScoreStore, DEFAULT_PATH
from .layout import fit_playfield
from .render import Renderer
from .simulation import Simulation
from .sound import SoundManager

logger = logging.getLogger(__name__)


class Screen(Enum):
    MENU      = auto()
    PLAYING   = auto()
    PAUSED    = auto()
    GAME_OVER = auto()


class Game:
    """
    Owns the window and the simulation.
    Translates pygame events into simulation calls and draws each frame.
    """

    def __init__(self, width=DEFAULT_WIN_W, height=DEFAULT_WIN_H,
                 rules: Rules = None, scores_path=DEFAULT_PATH, seed=None):
        pygame.init()
        pygame.display.set_caption("SKY SHIELD")
        self.window = pygame.display.set_mode((width, height), pygame.RESIZABLE)
        self.clock  = pygame.time.Clock()
        self.rules  = rules or Rules()

        fw, fh = fit_playfield(width, height)
        self.sim = Simulation(fw, fh, self.rules, HighScoreStore(scores_path), seed=seed)
        self.field = pygame.Surface((fw, fh))
        self.renderer = Renderer()
        self.sound = SoundManager()
        self.shake_rng = random.Random()

        self.paused  = False
        self.clock_s = 0.0          # wall time for menu blink / twinkle
        self._pending_size = None

    @property
    def screen(self) -> Screen:
        st = self.sim.state
        if not st.game_started:
            return Screen.MENU
        if st.game_over:
            return Screen.GAME_OVER
        return Screen.PAUSED if self.paused else Screen.PLAYING

    # ── Main loop ─────────────────────────────────────────────

    def run(self):
        running = True
        while running:
            dt = self.clock.tick(self.rules.fps) / 1000.0
            self.clock_s += dt

            running = self._handle_events()
            if self._pending_size:
                self._apply_resize(*self._pending_size)
                self._pending_size = None

            if not self.paused:
                self.sim.step()
            for event in self.sim.drain_events():
                self.sound.play_event(event)

            self._draw()
        pygame.quit()

    # ── Event handling ────────────────────────────────────────

    def _handle_events(self) -> bool:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                return False
            if event.type == pygame.VIDEORESIZE:
                # Only the last size in a burst of resize events matters
                self._pending_size = (event.w, event.h)
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    return False
                if event.key == pygame.K_SPACE and not self.sim.state.running:
                    self._start_game()
                elif event.key == pygame.K_r:
                    self._start_game()
                elif event.key == pygame.K_p and self.screen in (Screen.PLAYING, Screen.PAUSED):
                    self.paused = not self.paused
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                if self.screen == Screen.MENU:
                    self._start_game()
                elif self.screen == Screen.PLAYING:
                    x, y = self._to_field(*event.pos)
                    if 0 <= x <= self.sim.layout.width and 0 <= y <= self.sim.layout.height:
                        self.sim.fire_missile(x, y)
        return True

    def _start_game(self):
        self.paused = False
        self.sim.start_game()

    def _apply_resize(self, w, h):
        fw, fh = fit_playfield(w, h)
        self.sim.resize(fw, fh)
        self.field = pygame.Surface((fw, fh))
        logger.debug("Window %dx%d, playfield %dx%d", w, h, fw, fh)

    def _field_offset(self):
        ww, wh = self.window.get_size()
        fw, fh = self.field.get_size()
        return (ww - fw) // 2, (wh - fh) // 2

    def _to_field(self, wx, wy):
        ox, oy = self._field_offset()
        return wx - ox, wy - oy

    # ── Draw ──────────────────────────────────────────────────

    def _draw(self):
        self.renderer.draw(self.field, self.sim, self.clock_s, self.paused)
        shake = self.sim.state.screen_shake
        sx = (self.shake_rng.random() - 0.5) * shake
        sy = (self.shake_rng.random() - 0.5) * shake
        ox, oy = self._field_offset()
        self.window.fill(C_BLACK)
        self.window.blit(self.field, (ox + int(sx), oy + int(sy)))
        pygame.display.flip()


# ─────────────────────────────────────────────────────────────
# ENTRY POINT
# ─────────────────────────────────────────────────────────────

def setup_logging(level="INFO", log_file=None):
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="SKY SHIELD: defend the cities.")
    parser.add_argument("--width", type=int, default=DEFAULT_WIN_W, help="initial window width")
    parser.add_argument("--height", type=int, default=DEFAULT_WIN_H, help="initial window height")
    parser.add_argument("--fps", type=int, default=FPS, help="simulation ticks per second")
    parser.add_argument("--finite-ammo", action="store_true",
                        help="10 rounds per base per level instead of unlimited fire")
    parser.add_argument("--seed", type=int, default=None, help="seed for enemy spawn positions")
    parser.add_argument("--scores", default=str(DEFAULT_PATH), help="high score file")
    parser.add_argument("--log-level", default="INFO", help="DEBUG, INFO, WARNING ...")
    parser.add_argument("--log-file", default=None, help="also log to this file")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level, args.log_file)
    rules = Rules(fps=args.fps, finite_ammo=args.finite_ammo)
    logger.info("Starting SKY SHIELD (%s ammo)", "finite" if rules.finite_ammo else "unlimited")
    Game(args.width, args.height, rules, args.scores, args.seed).run()
