"""Tuning constants shared by the simulation core and the pygame shell."""

from dataclasses import dataclass

# ─────────────────────────────────────────────────────────────
# TIMING
# ─────────────────────────────────────────────────────────────

FPS = 60                      # simulation ticks per second

# ─────────────────────────────────────────────────────────────
# PLAYFIELD
# ─────────────────────────────────────────────────────────────

ASPECT_RATIO     = 4 / 3
MAX_FIELD_W      = 1200       # px, playfield never grows wider than this
DEFAULT_WIN_W    = 800
DEFAULT_WIN_H    = 600

# Proportions of the playfield (~values at 800x600 in comments)
GROUND_FRAC          = 0.083   # ground band height, ~50px
CITY_W_FRAC          = 0.05    # ~40px
CITY_H_FRAC          = 0.05    # ~30px
BASE_W_FRAC          = 0.0625  # ~50px
BASE_H_FRAC          = 0.033   # ~20px
PLAYER_BLAST_FRAC    = 0.1     # ~60px
IMPACT_BLAST_FRAC    = 0.0667  # ~40px
PLAYER_SPEED_FRAC    = 0.0083  # ~5px per tick

CITY_SLOTS = (1, 2, 3, 5, 6, 7)   # eighths of the width
BASE_SLOTS = (0.5, 1.5, 2.5)      # thirds of the width

# ─────────────────────────────────────────────────────────────
# ENTITIES
# ─────────────────────────────────────────────────────────────

INITIAL_AMMO          = 10
EXPLOSION_GROWTH_RATE = 2      # px per tick
EXPLOSION_DURATION    = 80     # ticks of hold/fade after full size
SHOCKWAVE_SCALE       = 1.5
PLAYER_TRAIL_LEN      = 20
ENEMY_TRAIL_LEN       = 25
PARTICLE_GRAVITY      = 0.1
BURST_PLAYER          = 20
BURST_IMPACT          = 12

# ─────────────────────────────────────────────────────────────
# WAVES & SCORING
# ─────────────────────────────────────────────────────────────

BASE_WAVE_SIZE        = 10
BASE_SPAWN_DELAY_MS   = 1200
SPAWN_DELAY_STEP_MS   = 25
MIN_SPAWN_DELAY_MS    = 600
BASE_ENEMY_SPEED      = 0.3
ENEMY_SPEED_STEP      = 0.05
NEXT_WAVE_DELAY_MS    = 2000

KILL_SCORE            = 25
CITY_BONUS_BASE       = 50
CITY_BONUS_PER_LEVEL  = 10
AMMO_BONUS_BASE       = 5
LEVEL_BONUS           = 25

BANNER_TICKS          = 120
BANNER_FADE_TICKS     = 30

# ─────────────────────────────────────────────────────────────
# COSMETICS
# ─────────────────────────────────────────────────────────────

DAY_CYCLE_LEVELS      = 5
DAY_TRANSITION_STEP   = 0.005
SHAKE_CITY            = 12
SHAKE_GROUND          = 8
SHAKE_DECAY           = 0.9
SHAKE_FLOOR           = 0.1

# Colour palette
C_GROUND      = (42,  74,  42)
C_GROUND_LINE = (58,  90,  58)
C_CITY        = (0,  170, 255)
C_WINDOW      = (255, 255, 255)
C_BASE        = (255, 170,  0)
C_TURRET      = (255, 136,  0)
C_PLAYER_MSL  = (0,  255,   0)
C_ENEMY_MSL   = (255,  0,   0)
C_TRAIL_P     = (255, 255, 255)
C_TRAIL_E     = (255,  0,   0)
C_HUD         = (0,  255,   0)
C_HUD_ALT     = (255, 170,  0)
C_SCORE       = (255, 240, 180)
C_WHITE       = (255, 255, 255)
C_BLACK       = (0,    0,   0)
C_GOLD        = (255, 200,  50)
C_RED         = (255,  60,  60)

PLAYER_BURST_COLORS = ((255, 255, 0), (255, 200, 0), (255, 100, 0), (255, 255, 100))
IMPACT_BURST_COLORS = ((255, 100, 100), (255, 50, 50), (200, 50, 50), (255, 150, 50))


@dataclass(frozen=True)
class Rules:
    """Per-session rule switches."""
    fps:         int  = FPS
    finite_ammo: bool = False   # unlimited ammo unless switched on
