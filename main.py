"""
╔══════════════════════════════════════════════════════════════╗
║           SKY SHIELD — Missile Command style arcade          ║
║           Built with Python + Pygame                         ║
╚══════════════════════════════════════════════════════════════╝

ARCHITECTURE OVERVIEW:
    skyshield.simulation — Entity stores, collisions, wave/level controller
    skyshield.entities   — Missiles, explosions, structures, particles
    skyshield.waves      — Wave formulas and the tick-driven scheduler
    skyshield.layout     — Playfield fitting and proportional sizes
    skyshield.daycycle   — Time-of-day sky colours
    skyshield.highscore  — High score file
    skyshield.render     — pygame drawing and HUD
    skyshield.app        — Window, input, resize, main loop

DEPENDENCIES:
    pip install pygame
    python main.py [--finite-ammo] [--seed N]
"""

from skyshield.app import main

if __name__ == "__main__":
    main()
