"""
pygame renderer and HUD.

Reads the simulation's stores and state; never mutates them.
"""

import math

import pygame

from .constants import (
    C_GROUND, C_GROUND_LINE, C_CITY, C_WINDOW, C_BASE, C_TURRET,
    C_PLAYER_MSL, C_ENEMY_MSL, C_TRAIL_P, C_TRAIL_E, C_HUD, C_HUD_ALT,
    C_SCORE, C_WHITE, C_BLACK, C_GOLD, C_RED, GROUND_FRAC, BANNER_FADE_TICKS,
)
from .daycycle import sky_gradient, star_opacity
from .entities import clamp, lerp
from .waves import missiles_in_wave, enemy_speed


def draw_text_centered(surface, text, font, color, cx, cy, shadow=True):
    """Render text centred on (cx, cy) with optional drop shadow."""
    if shadow:
        s = font.render(text, True, C_BLACK)
        surface.blit(s, s.get_rect(center=(cx + 2, cy + 2)))
    img = font.render(text, True, color)
    rect = img.get_rect(center=(cx, cy))
    surface.blit(img, rect)
    return rect


def draw_alpha_circle(surface, color, center, radius, alpha, width=0):
    """Circle with per-pixel alpha, blitted through a scratch surface."""
    radius = int(radius)
    if radius <= 0 or alpha <= 0:
        return
    size = radius * 2 + 4
    s = pygame.Surface((size, size), pygame.SRCALPHA)
    pygame.draw.circle(s, (*color, int(clamp(alpha, 0, 1) * 255)),
                       (radius + 2, radius + 2), radius, width)
    surface.blit(s, (int(center[0]) - radius - 2, int(center[1]) - radius - 2))


def draw_trail(surface, trail, color, width=2):
    """Fading polyline, oldest point darkest."""
    pts = list(trail)
    n = len(pts)
    for i in range(1, n):
        ratio = i / n
        faded = tuple(int(c * ratio) for c in color)
        pygame.draw.line(surface, faded, pts[i - 1], pts[i], width)


class Renderer:
    """Draws one frame of the playfield plus overlays."""

    def __init__(self):
        pygame.font.init()
        self.font_title  = pygame.font.SysFont("consolas,monospace", 48, bold=True)
        self.font_large  = pygame.font.SysFont("consolas,monospace", 28, bold=True)
        self.font_medium = pygame.font.SysFont("consolas,monospace", 20)
        self.font_small  = pygame.font.SysFont("consolas,monospace", 14)
        self.font_tiny   = pygame.font.SysFont("consolas,monospace", 11)

    def draw(self, surface, sim, clock_s=0.0, paused=False):
        st = sim.state
        self.draw_sky(surface, sim, clock_s)
        self.draw_ground(surface, sim)
        self.draw_structures(surface, sim)

        for m in sim.player_missiles:
            draw_trail(surface, m.trail, C_TRAIL_P)
            pygame.draw.rect(surface, C_PLAYER_MSL, (int(m.x) - 3, int(m.y) - 3, 6, 6))
        for m in sim.enemy_missiles:
            draw_trail(surface, m.trail, C_TRAIL_E)
            pygame.draw.rect(surface, C_ENEMY_MSL, (int(m.x) - 2, int(m.y) - 2, 4, 4))
        for ex in sim.explosions:
            self.draw_explosion(surface, ex)
        for p in sim.particles.particles:
            ratio = p.life / p.max_life
            size = max(1, int(p.size))
            color = tuple(int(c * ratio) for c in p.color)
            pygame.draw.rect(surface, color, (int(p.x - size / 2), int(p.y - size / 2), size, size))

        if st.running:
            self.draw_hud(surface, sim)
        self.draw_score(surface, st.score, st.high_score)
        if st.level_up_timer > 0:
            self.draw_banner(surface, sim)

        if not st.game_started:
            self.draw_menu(surface, st.high_score, clock_s)
        elif st.game_over:
            self.draw_game_over(surface, st, clock_s)
        elif paused:
            self.draw_paused(surface)

    # ── World ─────────────────────────────────────────────────

    def draw_sky(self, surface, sim, clock_s):
        st = sim.state
        w, h = surface.get_size()
        top, bottom = sky_gradient(st.time_of_day, st.day_transition_progress)
        for y in range(0, h, 4):
            t = y / h
            color = tuple(int(lerp(a, b, t)) for a, b in zip(top, bottom))
            pygame.draw.rect(surface, color, (0, y, w, 4))

        # Fixed star pattern, brighter after dusk
        sky_h = max(1, int(sim.layout.ground_y - h * GROUND_FRAC))
        opacity = star_opacity(st.time_of_day)
        star = self._blend(C_WHITE, top, opacity)
        for i in range(w // 16):
            surface.set_at(((i * 137) % w, (i * 97) % sky_h), star)
        if st.time_of_day == "night":
            twinkle = self._blend(C_WHITE, top, 0.6 + math.sin(clock_s) * 0.2)
            for i in range(20):
                surface.set_at(((i * 47) % w, (i * 73) % sky_h), twinkle)

    def draw_ground(self, surface, sim):
        w, h = surface.get_size()
        gy = int(sim.layout.ground_y)
        pygame.draw.rect(surface, C_GROUND, (0, gy, w, h - gy))
        pygame.draw.line(surface, C_GROUND_LINE, (0, gy), (w, gy), 2)

    def draw_structures(self, surface, sim):
        for city in sim.cities:
            if not city.alive:
                continue
            top = city.y - city.height
            pygame.draw.rect(surface, C_CITY, (city.x, top, city.width, city.height))
            # Windows
            for i in range(3):
                for j in range(4):
                    wx = city.x + 5 + i * 12
                    wy = top + 5 + j * 6
                    if wx + 6 <= city.x + city.width and wy + 4 <= city.y:
                        pygame.draw.rect(surface, C_WINDOW, (wx, wy, 6, 4))

        finite = sim.rules.finite_ammo
        for base in sim.bases:
            if not base.alive:
                continue
            pygame.draw.rect(surface, C_BASE, (base.x, base.y - base.height, base.width, base.height))
            pygame.draw.circle(surface, C_TURRET, (int(base.x + base.width / 2), int(base.y - base.height)), 8)
            label = str(base.ammo) if finite else "INF"
            img = self.font_tiny.render(label, True, C_HUD)
            surface.blit(img, img.get_rect(midtop=(base.x + base.width / 2, base.y + 4)))

    def draw_explosion(self, surface, ex):
        alpha = ex.alpha
        outer = (255, 200, 0) if ex.is_player else (255, 50, 50)
        main  = (255, 150, 0) if ex.is_player else (255, 100, 100)
        core  = (255, 255, 200) if ex.is_player else (255, 200, 200)
        ring  = C_WHITE if ex.is_player else (255, 100, 100)

        if ex.shockwave_radius > 0 and ex.shockwave_max_radius > 0:
            fade = max(0.0, (ex.shockwave_max_radius - ex.shockwave_radius) / ex.shockwave_max_radius)
            draw_alpha_circle(surface, ring, (ex.x, ex.y), ex.shockwave_radius, fade * 0.4, width=3)
        if ex.radius > 0:
            draw_alpha_circle(surface, outer, (ex.x, ex.y), ex.radius * 1.2, alpha * 0.25)
            draw_alpha_circle(surface, main, (ex.x, ex.y), ex.radius, alpha * 0.8)
            draw_alpha_circle(surface, core, (ex.x, ex.y), ex.radius * 0.3, alpha * 0.8)

    # ── HUD & overlays ────────────────────────────────────────

    def draw_hud(self, surface, sim):
        st = sim.state
        panel = pygame.Surface((200, 80), pygame.SRCALPHA)
        panel.fill((0, 0, 0, 128))
        surface.blit(panel, (10, 10))
        surface.blit(self.font_small.render(f"Level {st.level}", True, C_HUD), (20, 16))
        surface.blit(self.font_small.render(st.time_of_day.capitalize(), True, C_HUD), (20, 34))
        surface.blit(self.font_tiny.render(f"Missiles: {missiles_in_wave(st.level)}", True, C_HUD_ALT), (20, 56))
        surface.blit(self.font_tiny.render(f"Speed: {enemy_speed(st.level):.2f}x", True, C_HUD_ALT), (20, 71))

    def draw_score(self, surface, score, high_score):
        w = surface.get_width()
        img = self.font_large.render(f"{score:08d}", True, C_SCORE)
        surface.blit(img, img.get_rect(topright=(w - 8, 8)))
        if high_score > 0:
            hs = self.font_tiny.render(f"HI {high_score:08d}", True, (160, 140, 100))
            surface.blit(hs, hs.get_rect(topright=(w - 8, 40)))

    def draw_banner(self, surface, sim):
        st = sim.state
        w, h = surface.get_size()
        alpha = min(1.0, st.level_up_timer / BANNER_FADE_TICKS)
        band = pygame.Surface((w, 120), pygame.SRCALPHA)
        band.fill((0, 0, 0, int(alpha * 0.7 * 255)))
        surface.blit(band, (0, h // 2 - 60))

        msg = self.font_large.render(st.level_up_message or "", True, C_HUD)
        msg.set_alpha(int(alpha * 255))
        surface.blit(msg, msg.get_rect(center=(w // 2, h // 2 - 10)))
        sub = self.font_medium.render(
            f"{missiles_in_wave(st.level)} Missiles - Speed {enemy_speed(st.level):.2f}x",
            True, C_HUD_ALT)
        sub.set_alpha(int(alpha * 255))
        surface.blit(sub, sub.get_rect(center=(w // 2, h // 2 + 30)))

    def draw_menu(self, surface, high_score, clock_s):
        w, h = surface.get_size()
        self._dim(surface, (0, 0, 15, 180))
        cy = h // 2
        pulse = abs(math.sin(clock_s * 1.5)) * 30
        draw_text_centered(surface, "SKY SHIELD", self.font_title,
                           (80 + int(pulse), 220, 255), w // 2, cy - 110)
        draw_text_centered(surface, "DEFEND THE CITIES", self.font_small,
                           (120, 180, 200), w // 2, cy - 64)
        controls = [
            ("FIRE",    "CLICK"),
            ("RESTART", "R"),
            ("PAUSE",   "P"),
        ]
        for i, (action, key) in enumerate(controls):
            draw_text_centered(surface, f"{action:<8} {key}", self.font_small,
                               (160, 160, 190), w // 2, cy - 20 + i * 22)
        if int(clock_s * 2) % 2 == 0:
            draw_text_centered(surface, "PRESS SPACE TO START", self.font_medium,
                               C_GOLD, w // 2, cy + 60)
        if high_score > 0:
            draw_text_centered(surface, f"HIGH SCORE  {high_score:08d}", self.font_small,
                               C_SCORE, w // 2, cy + 100)

    def draw_game_over(self, surface, st, clock_s):
        w, h = surface.get_size()
        self._dim(surface, (20, 0, 0, 200))
        cy = h // 2 - 40
        draw_text_centered(surface, "GAME OVER", self.font_title, C_RED, w // 2, cy - 60)
        draw_text_centered(surface, f"SCORE  {st.score:08d}", self.font_large, C_SCORE, w // 2, cy)
        if st.new_record:
            pulse = abs(math.sin(clock_s * 3))
            col = (int(lerp(255, 200, pulse)), int(lerp(200, 255, pulse)), 50)
            draw_text_centered(surface, "NEW HIGH SCORE", self.font_medium, col, w // 2, cy + 40)
        else:
            draw_text_centered(surface, f"BEST   {st.high_score:08d}", self.font_medium,
                               (160, 140, 100), w // 2, cy + 40)
        if int(clock_s * 2) % 2 == 0:
            draw_text_centered(surface, "PRESS SPACE TO RESTART", self.font_medium,
                               C_GOLD, w // 2, cy + 90)

    def draw_paused(self, surface):
        w, h = surface.get_size()
        self._dim(surface, (0, 0, 0, 140))
        draw_text_centered(surface, "PAUSED", self.font_title, C_WHITE, w // 2, h // 2)
        draw_text_centered(surface, "P to resume  |  ESC to quit", self.font_small,
                           (160, 160, 160), w // 2, h // 2 + 50)

    @staticmethod
    def _dim(surface, rgba):
        dim = pygame.Surface(surface.get_size(), pygame.SRCALPHA)
        dim.fill(rgba)
        surface.blit(dim, (0, 0))

    @staticmethod
    def _blend(fg, bg, t):
        t = clamp(t, 0.0, 1.0)
        return tuple(int(lerp(b, f, t)) for f, b in zip(fg, bg))
