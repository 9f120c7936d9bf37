import pytest

from skyshield.entities import City
from skyshield.layout import Layout, carry_over, fit_playfield


@pytest.mark.parametrize("avail, expected", [
    ((800, 600), (800, 600)),
    ((2000, 1000), (1200, 900)),
    ((1000, 300), (400, 300)),
])
def test_fit_playfield_keeps_four_by_three(avail, expected):
    assert fit_playfield(*avail) == expected


@pytest.mark.parametrize("w, h", [(0, 600), (800, -1)])
def test_non_positive_viewport_rejected(w, h):
    with pytest.raises(ValueError):
        fit_playfield(w, h)
    with pytest.raises(ValueError):
        Layout(w, h)


def test_derived_sizes_at_800x600():
    lay = Layout(800, 600)
    assert lay.ground_y == pytest.approx(550.2)
    assert lay.city_size == pytest.approx((40, 30))
    assert lay.base_size == pytest.approx((50, 19.8))
    assert lay.player_blast_radius == pytest.approx(60)
    assert lay.player_missile_speed == pytest.approx(4.98)


@pytest.mark.parametrize("h", [90, 300, 600, 900])
def test_player_blast_always_larger_than_impact(h):
    lay = Layout(h * 4 / 3, h)
    assert lay.player_blast_radius > lay.impact_blast_radius


def test_structure_placement():
    lay = Layout(800, 600)
    cities = lay.build_cities()
    bases = lay.build_bases(ammo=10)
    assert [c.center[0] for c in cities] == pytest.approx([100, 200, 300, 500, 600, 700])
    assert [b.center[0] for b in bases] == pytest.approx([800 / 6, 400, 800 * 5 / 6])
    assert all(c.alive for c in cities)
    assert all(b.ammo == 10 for b in bases)
    assert all(s.y == lay.ground_y for s in cities + bases)


def test_carry_over_copies_by_index():
    old = [City(0, 0, 1, 1, alive=False), City(0, 0, 1, 1)]
    new = [City(5, 5, 2, 2), City(5, 5, 2, 2), City(5, 5, 2, 2)]
    carry_over(old, new)
    assert [c.alive for c in new] == [False, True, True]
    assert new[0].x == 5


def test_carry_over_without_history_is_noop():
    new = [City(5, 5, 2, 2)]
    assert carry_over([], new) is new
    assert new[0].alive
