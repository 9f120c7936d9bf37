import pytest

from skyshield.constants import INITIAL_AMMO, KILL_SCORE, Rules
from skyshield.entities import EnemyMissile
from skyshield.highscore import MemoryHighScoreStore
from skyshield.simulation import Simulation
from skyshield.waves import missiles_in_wave, ms_to_ticks, spawn_delay_ms


def _release_whole_wave(sim):
    for _ in range(missiles_in_wave(sim.state.level) * ms_to_ticks(spawn_delay_ms(sim.state.level))):
        if not sim.scheduler.pending("spawn"):
            break
        sim.step()
    assert sim.scheduler.pending("spawn") == 0


def test_idle_until_started(sim):
    assert not sim.state.running
    assert sim.enemy_missiles == []
    assert len(sim.cities) == 6 and len(sim.bases) == 3
    sim.step()
    assert sim.enemy_missiles == []
    assert sim.fire_missile(400, 300) is None


def test_start_releases_first_missile_and_schedules_rest(running_sim):
    sim = running_sim
    st = sim.state
    assert st.running and st.game_started
    assert st.level == 1
    assert st.wave_active
    assert not st.level_transitioning
    assert len(sim.enemy_missiles) == 1
    assert sim.scheduler.pending("spawn") == missiles_in_wave(1) - 1
    assert "wave_started" in [e.name for e in sim.drain_events()]


def test_staggered_release(running_sim):
    sim = running_sim
    delay = ms_to_ticks(spawn_delay_ms(1))
    for _ in range(delay - 1):
        sim.step()
    assert len(sim.enemy_missiles) == 1
    sim.step()
    assert len(sim.enemy_missiles) == 2


def test_wave_is_not_complete_while_releases_pending(running_sim):
    sim = running_sim
    m = sim.enemy_missiles[0]
    sim.add_explosion(m.x, m.y, is_player=True)
    sim.step()
    assert sim.enemy_missiles == []
    assert sim.state.level == 1
    assert sim.state.wave_active


def test_clearing_a_wave_advances_the_level(running_sim):
    sim = running_sim
    _release_whole_wave(sim)
    assert len(sim.enemy_missiles) == missiles_in_wave(1)
    assert sim.state.score == 0

    for m in sim.enemy_missiles:
        sim.add_explosion(m.x, m.y, is_player=True)
    sim.step()

    st = sim.state
    assert sim.enemy_missiles == []
    assert not st.wave_active
    assert st.level_transitioning
    assert st.level == 2
    city_bonus = 6 * (50 + 1 * 10)
    level_bonus = 1 * 25
    assert st.score == missiles_in_wave(1) * KILL_SCORE + city_bonus + level_bonus
    assert st.time_of_day == "noon"
    assert st.level_up_message.startswith("LEVEL 1 COMPLETE! Level 2")
    assert sim.scheduler.pending("next_wave") == 1

    # Completion fires exactly once
    score = st.score
    sim.step()
    assert st.score == score
    assert st.level == 2

    for _ in range(ms_to_ticks(2000) - 1):
        sim.step()
    assert len(sim.enemy_missiles) == 1
    assert st.wave_active
    assert not st.level_transitioning
    assert sim.scheduler.pending("spawn") == missiles_in_wave(2) - 1
    assert sim.enemy_missiles[0].speed == pytest.approx(0.35)


def test_enemy_missile_over_city_destroys_it(running_sim):
    sim = running_sim
    sim.scheduler.clear()
    city = sim.cities[1]
    cx, cy = city.center
    ground = sim.layout.ground_y
    sim.enemy_missiles[:] = [EnemyMissile(cx, ground - 60, cx, ground, 1.0)]

    for _ in range(100):
        sim.step()
        if not sim.enemy_missiles:
            break

    assert not city.alive
    assert sim.enemy_missiles == []
    assert any((ex.x, ex.y) == (cx, cy) and not ex.is_player for ex in sim.explosions)
    assert sum(c.alive for c in sim.cities) == 5


def test_ground_impact_spawns_explosion_and_shake(running_sim):
    sim = running_sim
    sim.scheduler.clear()
    ground = sim.layout.ground_y
    # x=450 is clear of every structure
    sim.enemy_missiles[:] = [EnemyMissile(450, ground - 2, 450, ground, 1.0)]
    for _ in range(5):
        sim.step()
        if not sim.enemy_missiles:
            break
    assert sim.enemy_missiles == []
    assert any((ex.x, ex.y) == (450, ground) for ex in sim.explosions)
    assert sim.state.screen_shake > 0
    assert all(c.alive for c in sim.cities)


def _drop_on_all_bases(sim):
    for base in sim.bases:
        bx, by = base.center
        sim.enemy_missiles.append(EnemyMissile(bx, by, bx, sim.layout.ground_y, 0.3))


def test_losing_all_bases_ends_game_and_saves_record(running_sim, store):
    sim = running_sim
    sim.state.score = 500
    _drop_on_all_bases(sim)
    sim.step()

    st = sim.state
    assert not st.running
    assert st.game_over
    assert st.high_score == 500
    assert st.new_record
    assert store.load() == 500
    assert sim.scheduler.pending() == 0
    assert "game_over" in [e.name for e in sim.drain_events()]


def test_losing_all_cities_ends_game(running_sim):
    sim = running_sim
    for city in sim.cities[1:]:
        city.alive = False
    cx, cy = sim.cities[0].center
    sim.enemy_missiles.append(EnemyMissile(cx, cy, cx, sim.layout.ground_y, 0.3))
    sim.step()
    assert sim.state.game_over


def test_game_over_keeps_existing_high_score():
    store = MemoryHighScoreStore(10_000)
    sim = Simulation(800, 600, high_scores=store, seed=4)
    sim.start_game()
    assert sim.state.high_score == 10_000
    sim.state.score = 500
    _drop_on_all_bases(sim)
    sim.step()
    assert sim.state.game_over
    assert sim.state.high_score == 10_000
    assert not sim.state.new_record
    assert store.load() == 10_000


def test_game_over_freezes_enemies_and_drops_pending_spawns(running_sim):
    sim = running_sim
    _drop_on_all_bases(sim)
    sim.step()
    assert sim.state.game_over
    frozen = [(m.x, m.y) for m in sim.enemy_missiles]
    for _ in range(500):
        sim.step()
    assert [(m.x, m.y) for m in sim.enemy_missiles] == frozen
    assert sim.fire_missile(400, 300) is None


def test_restart_discards_stale_spawns(running_sim):
    sim = running_sim
    for _ in range(10):
        sim.step()
    sim.start_game()
    assert sim.scheduler.pending("spawn") == missiles_in_wave(1) - 1
    assert len(sim.enemy_missiles) == 1
    assert sim.state.score == 0


def test_spawn_guard_checks_wave_state(running_sim):
    sim = running_sim
    sim.state.wave_active = False
    for _ in range(ms_to_ticks(spawn_delay_ms(1)) * 3):
        sim.step()
    assert len(sim.enemy_missiles) == 1


def test_fire_uses_nearest_alive_base(running_sim):
    sim = running_sim
    m = sim.fire_missile(400, 300)
    assert (m.start_x, m.start_y) == sim.bases[1].muzzle
    m = sim.fire_missile(0, 300)
    assert (m.start_x, m.start_y) == sim.bases[0].muzzle

    sim.bases[0].alive = False
    m = sim.fire_missile(0, 300)
    assert (m.start_x, m.start_y) == sim.bases[1].muzzle
    # Unlimited ammo is never spent
    assert all(b.ammo == INITIAL_AMMO for b in sim.bases)

    for b in sim.bases:
        b.alive = False
    assert sim.fire_missile(0, 300) is None


def test_player_missile_detonates_at_target(running_sim):
    sim = running_sim
    sim.fire_missile(400, 300)
    for _ in range(200):
        sim.step()
        if not sim.player_missiles:
            break
    assert sim.player_missiles == []
    blasts = [ex for ex in sim.explosions if ex.is_player]
    assert len(blasts) == 1
    assert (blasts[0].x, blasts[0].y) == (400, 300)
    assert blasts[0].max_radius == pytest.approx(sim.layout.player_blast_radius)


def test_finite_ammo_depletes_and_falls_back(finite_sim):
    sim = finite_sim
    left = sim.bases[0]
    for _ in range(INITIAL_AMMO):
        sim.fire_missile(0, 300)
    assert left.ammo == 0
    m = sim.fire_missile(0, 300)
    assert (m.start_x, m.start_y) == sim.bases[1].muzzle
    assert sim.bases[1].ammo == INITIAL_AMMO - 1

    for b in sim.bases:
        b.ammo = 0
    assert sim.fire_missile(0, 300) is None


def test_finite_ammo_level_bonus(finite_sim):
    sim = finite_sim
    assert sim.level_bonus() == 6 * 60 + 3 * INITIAL_AMMO * (5 + 1) + 25
    sim.bases[2].alive = False
    assert sim.level_bonus() == 6 * 60 + 2 * INITIAL_AMMO * (5 + 1) + 25


def test_unlimited_ammo_level_bonus_ignores_ammo(running_sim):
    assert running_sim.level_bonus() == 6 * 60 + 25


def test_ammo_replenished_on_level_complete(finite_sim):
    sim = finite_sim
    sim.bases[0].ammo = 2
    sim.bases[2].alive = False
    sim.bases[2].ammo = 0
    sim.scheduler.clear()
    sim.enemy_missiles.clear()
    sim.step()
    assert sim.state.level == 2
    assert sim.bases[0].ammo == INITIAL_AMMO
    assert sim.bases[2].ammo == 0


def test_resize_preserves_structure_state(running_sim):
    sim = running_sim
    sim.cities[0].alive = False
    sim.bases[2].alive = False
    sim.bases[1].ammo = 3

    sim.resize(400, 300)

    assert sim.layout.ground_y == pytest.approx(300 - 300 * 0.083)
    assert not sim.cities[0].alive
    assert all(c.alive for c in sim.cities[1:])
    assert not sim.bases[2].alive
    assert sim.bases[1].ammo == 3
    assert sim.cities[1].center[0] == pytest.approx(100)


def test_resize_without_structures_builds_fresh(sim):
    sim.cities, sim.bases = [], []
    sim.resize(1200, 900)
    assert len(sim.cities) == 6
    assert all(c.alive for c in sim.cities)
    assert all(b.ammo == INITIAL_AMMO for b in sim.bases)


def test_screen_shake_decays_to_zero(running_sim):
    sim = running_sim
    sim.state.screen_shake = 8
    for _ in range(60):
        sim.step()
    assert sim.state.screen_shake == 0


def test_banner_and_day_progress_tick_down(running_sim):
    sim = running_sim
    st = sim.state
    st.level_up_timer = 3
    for _ in range(5):
        sim.step()
    assert st.level_up_timer == 0
    assert st.day_transition_progress == pytest.approx(0.025)


def test_same_seed_same_wave():
    a = Simulation(800, 600, seed=42)
    b = Simulation(800, 600, seed=42)
    a.start_game()
    b.start_game()
    for _ in range(200):
        a.step()
        b.step()
    assert [(m.x, m.y) for m in a.enemy_missiles] == [(m.x, m.y) for m in b.enemy_missiles]


def test_custom_fps_rescales_stagger():
    sim = Simulation(800, 600, rules=Rules(fps=30), seed=1)
    sim.start_game()
    for _ in range(36):
        sim.step()
    assert len(sim.enemy_missiles) == 2
