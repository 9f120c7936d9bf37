"""
Simulation core: one ``Simulation.step()`` per animation frame.

Architecture
------------
``Simulation`` owns every entity store plus the ``GameState`` record and is
the only thing that mutates them. A frame runs these phases in order:

  scheduled events -> cosmetics -> player missiles -> enemy missiles
  -> explosions -> particles -> collisions -> game over -> level complete

Deferred work (staggered enemy releases, the pause between levels) goes
through a tick-driven ``Scheduler``. Every scheduled action carries a guard
tied to the session it was scheduled in, so a restart or game over drops
stale releases instead of leaking them into the next game.

Level controller:

  idle --start_game--> wave_active --store empty--> transitioning
       ^                    |                             |
       |                 game over                  2s later spawn
       +----- start_game ---+                             v
                                                    wave_active

Nothing in here touches pygame; the renderer reads the stores directly.
"""

import logging
import random
from dataclasses import dataclass, field
from typing import List, Optional

from .constants import (
    Rules, INITIAL_AMMO, KILL_SCORE, CITY_BONUS_BASE, CITY_BONUS_PER_LEVEL,
    AMMO_BONUS_BASE, LEVEL_BONUS, NEXT_WAVE_DELAY_MS, BANNER_TICKS,
    DAY_TRANSITION_STEP, SHAKE_CITY, SHAKE_GROUND, SHAKE_DECAY, SHAKE_FLOOR,
)
from .daycycle import time_of_day
from .entities import (
    Base, City, EnemyMissile, Explosion, ParticleSystem, PlayerMissile,
)
from .highscore import MemoryHighScoreStore
from .layout import Layout, carry_over
from .waves import (
    Scheduler, enemy_speed, missiles_in_wave, ms_to_ticks, spawn_delay_ms,
)

logger = logging.getLogger(__name__)


@dataclass
class GameState:
    level: int = 1
    running: bool = False
    score: int = 0
    high_score: int = 0
    new_record: bool = False
    wave_active: bool = False
    level_transitioning: bool = False
    game_started: bool = False
    game_over: bool = False
    time_of_day: str = "morning"
    day_transition_progress: float = 0.0
    screen_shake: float = 0.0
    level_up_message: Optional[str] = None
    level_up_timer: int = 0


@dataclass
class SimEvent:
    name: str
    data: dict = field(default_factory=dict)


class Simulation:
    """Entity stores, level state and the per-frame step."""

    def __init__(self, width, height, rules: Rules = None,
                 high_scores=None, seed=None):
        self.rules  = rules or Rules()
        self.rng    = random.Random(seed)
        self.layout = Layout(width, height)
        self.high_scores = high_scores or MemoryHighScoreStore()

        self.state   = GameState(high_score=self.high_scores.load())
        self.tick    = 0
        self.session = 0
        self.scheduler = Scheduler()
        self.events: List[SimEvent] = []

        self.player_missiles: List[PlayerMissile] = []
        self.enemy_missiles:  List[EnemyMissile]  = []
        self.explosions:      List[Explosion]     = []
        self.particles = ParticleSystem(self.rng)
        self.cities: List[City] = []
        self.bases:  List[Base] = []
        self._build_defenses()

    # ── Public interface ──────────────────────────────────────

    def start_game(self):
        """Reset everything and release the first wave of level 1."""
        self.session += 1
        self.scheduler.clear()
        st = self.state
        st.running = True
        st.game_over = False
        st.new_record = False
        st.score = 0
        st.level = 1
        st.level_transitioning = False
        st.wave_active = False
        st.game_started = True
        st.level_up_message = None
        st.level_up_timer = 0
        st.screen_shake = 0.0
        self._update_time_of_day()

        self.player_missiles = []
        self.enemy_missiles = []
        self.explosions = []
        self.particles.clear()
        self._build_defenses()

        logger.info("Game started (session %d)", self.session)
        self.spawn_wave()

    def fire_missile(self, target_x, target_y) -> Optional[PlayerMissile]:
        """Launch from the nearest base able to fire. No base, no shot."""
        if not self.state.running:
            return None
        base = self.nearest_base(target_x)
        if base is None:
            return None
        sx, sy = base.muzzle
        missile = PlayerMissile(sx, sy, target_x, target_y, self.layout.player_missile_speed)
        self.player_missiles.append(missile)
        if self.rules.finite_ammo:
            base.ammo -= 1
        self._emit("missile_launched", x=target_x, y=target_y,
                   base=self.bases.index(base))
        return missile

    def nearest_base(self, x) -> Optional[Base]:
        """Horizontally closest alive base; with finite ammo it must have rounds."""
        best, best_d = None, float("inf")
        for base in self.bases:
            if not base.alive:
                continue
            if self.rules.finite_ammo and base.ammo <= 0:
                continue
            d = abs(x - (base.x + base.width / 2))
            if d < best_d:
                best, best_d = base, d
        return best

    def resize(self, width, height):
        """Re-derive every size from the new playfield, keeping structure state."""
        self.layout = Layout(width, height)
        had_defenses = bool(self.cities or self.bases)
        old_cities, old_bases = self.cities, self.bases
        self._build_defenses()
        if had_defenses:
            carry_over(old_cities, self.cities, ("alive",))
            carry_over(old_bases, self.bases, ("alive", "ammo"))
        logger.debug("Playfield resized to %dx%d", width, height)

    def drain_events(self) -> List[SimEvent]:
        events, self.events = self.events, []
        return events

    def add_explosion(self, x, y, is_player=False) -> Explosion:
        radius = (self.layout.player_blast_radius if is_player
                  else self.layout.impact_blast_radius)
        ex = Explosion(x, y, radius, is_player)
        self.explosions.append(ex)
        return ex

    # ── Frame step ────────────────────────────────────────────

    def step(self):
        self.tick += 1
        self.scheduler.run_due(self.tick)
        self._update_cosmetics()

        self._update_player_missiles()
        if self.state.running:
            self._update_enemy_missiles()
        self._update_explosions()
        self.particles.update()

        if self.state.running:
            self.resolve_collisions()
            self.check_game_over()
            self.check_level_complete()

    def _update_cosmetics(self):
        st = self.state
        if st.day_transition_progress < 1:
            st.day_transition_progress = min(1.0, st.day_transition_progress + DAY_TRANSITION_STEP)
        st.screen_shake *= SHAKE_DECAY
        if st.screen_shake < SHAKE_FLOOR:
            st.screen_shake = 0.0
        if st.level_up_timer > 0:
            st.level_up_timer -= 1

    def _update_player_missiles(self):
        remaining = []
        for m in self.player_missiles:
            if m.update():
                self.add_explosion(m.x, m.y, is_player=True)
            if not m.reached:
                remaining.append(m)
        self.player_missiles = remaining

    def _update_enemy_missiles(self):
        for i in range(len(self.enemy_missiles) - 1, -1, -1):
            m = self.enemy_missiles[i]
            if m.update():
                self._shake(SHAKE_GROUND)
                self.add_explosion(m.target_x, m.target_y, is_player=False)
                del self.enemy_missiles[i]
                self._emit("ground_impact", x=m.target_x, y=m.target_y)

    def _update_explosions(self):
        remaining = []
        for ex in self.explosions:
            alive = ex.update()
            if ex.burst_pending:
                ex.burst_pending = False
                self.particles.emit_burst(ex.x, ex.y, ex.is_player)
            if alive:
                remaining.append(ex)
        self.explosions = remaining

    # ── Collisions ────────────────────────────────────────────

    def resolve_collisions(self):
        # Pass 1: explosions vs enemy missiles, first explosion wins
        for i in range(len(self.enemy_missiles) - 1, -1, -1):
            m = self.enemy_missiles[i]
            for ex in self.explosions:
                if ex.hits(m.x, m.y):
                    del self.enemy_missiles[i]
                    self.state.score += KILL_SCORE
                    self._emit("enemy_destroyed", x=m.x, y=m.y)
                    break

        # Pass 2: survivors vs cities, then bases
        for i in range(len(self.enemy_missiles) - 1, -1, -1):
            m = self.enemy_missiles[i]
            target = next((c for c in self.cities if c.alive and c.contains(m.x, m.y)), None)
            kind = "city"
            if target is None:
                target = next((b for b in self.bases if b.alive and b.contains(m.x, m.y)), None)
                kind = "base"
            if target is None:
                continue
            target.alive = False
            if kind == "city":
                self._shake(SHAKE_CITY)
            cx, cy = target.center
            self.add_explosion(cx, cy, is_player=False)
            del self.enemy_missiles[i]
            logger.debug("%s at x=%.0f destroyed", kind.capitalize(), cx)
            self._emit(f"{kind}_destroyed", x=cx, y=cy)

    # ── Level controller ──────────────────────────────────────

    def spawn_wave(self):
        """Release the first missile now and schedule the rest of the wave."""
        st = self.state
        level = st.level
        count = missiles_in_wave(level)
        delay = ms_to_ticks(spawn_delay_ms(level), self.rules.fps)
        session = self.session

        self._spawn_enemy()
        for i in range(1, count):
            self.scheduler.schedule(
                self.tick + i * delay, "spawn", self._spawn_enemy,
                guard=lambda: st.running and st.wave_active and self.session == session,
            )

        # Only now is the wave live; a completion check can't see an empty wave
        st.wave_active = True
        st.level_transitioning = False
        logger.info("Level %d wave: %d missiles, %d ticks apart, speed %.2f",
                    level, count, delay, enemy_speed(level))
        self._emit("wave_started", level=level, count=count)

    def _spawn_enemy(self):
        self.enemy_missiles.append(EnemyMissile.spawn(
            self.rng, self.layout.width, self.layout.ground_y, enemy_speed(self.state.level)))

    def check_game_over(self) -> bool:
        if all(not c.alive for c in self.cities) or all(not b.alive for b in self.bases):
            self.end_game()
            return True
        return False

    def end_game(self):
        st = self.state
        st.running = False
        st.game_over = True
        st.wave_active = False
        self.scheduler.clear()
        if st.score > st.high_score:
            st.high_score = st.score
            st.new_record = True
            self.high_scores.save(st.score)
        logger.info("Game over at level %d, score %d (high %d)", st.level, st.score, st.high_score)
        self._emit("game_over", score=st.score, level=st.level, new_record=st.new_record)

    def check_level_complete(self) -> bool:
        st = self.state
        if (self.enemy_missiles or not st.wave_active or st.level_transitioning
                or not st.running or self.scheduler.pending("spawn")):
            return False

        st.level_transitioning = True
        st.wave_active = False

        bonus = self.level_bonus()
        st.score += bonus
        previous = st.level
        st.level += 1
        self._update_time_of_day()
        st.level_up_message = (f"LEVEL {previous} COMPLETE! "
                               f"Level {st.level} - {st.time_of_day.capitalize()}")
        st.level_up_timer = BANNER_TICKS

        for base in self.bases:
            if base.alive:
                base.ammo = INITIAL_AMMO

        session = self.session
        self.scheduler.schedule(
            self.tick + ms_to_ticks(NEXT_WAVE_DELAY_MS, self.rules.fps),
            "next_wave", self.spawn_wave,
            guard=lambda: st.running and self.session == session,
        )
        logger.info("Level %d complete, bonus %d, score %d", previous, bonus, st.score)
        self._emit("level_complete", level=previous, bonus=bonus)
        return True

    def level_bonus(self) -> int:
        """End-of-level tally for the current level: cities, ammo, flat bonus."""
        level = self.state.level
        cities = sum(1 for c in self.cities if c.alive)
        bonus = cities * (CITY_BONUS_BASE + level * CITY_BONUS_PER_LEVEL)
        if self.rules.finite_ammo:
            ammo = sum(b.ammo for b in self.bases if b.alive)
            bonus += ammo * (AMMO_BONUS_BASE + level)
        return bonus + level * LEVEL_BONUS

    # ── Helpers ───────────────────────────────────────────────

    def _build_defenses(self):
        self.cities = self.layout.build_cities()
        self.bases  = self.layout.build_bases(INITIAL_AMMO)

    def _update_time_of_day(self):
        self.state.time_of_day = time_of_day(self.state.level)
        self.state.day_transition_progress = 0.0

    def _shake(self, amount):
        self.state.screen_shake = max(self.state.screen_shake, amount)

    def _emit(self, name, **data):
        self.events.append(SimEvent(name, data))
