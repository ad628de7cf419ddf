import pytest

from faxhunt.client.interpolation import Interpolator


def test_blend_factor_grows_with_elapsed_time():
    interp = Interpolator(window=0.1, now=0.0)
    interp.update(500, 300, now=10.0)
    assert interp.blend_factor(10.0) == 0.0
    assert interp.blend_factor(10.05) == pytest.approx(0.5)
    assert interp.blend_factor(10.5) == 1.0


def test_partial_step_moves_part_of_the_way():
    interp = Interpolator(start=(0.0, 0.0), window=0.1, now=0.0)
    interp.update(100.0, 50.0, now=1.0)
    x, y = interp.step(1.025)
    assert x == pytest.approx(25.0)
    assert y == pytest.approx(12.5)


def test_converges_exactly_once_window_elapsed():
    interp = Interpolator(start=(0.0, 0.0), window=0.1, now=0.0)
    interp.update(123.4, 56.7, now=2.0)
    interp.step(2.01)
    interp.step(2.03)
    assert interp.step(2.2) == (123.4, 56.7)
    # Steady state stays put
    assert interp.step(5.0) == (123.4, 56.7)


def test_rendered_position_lags_authoritative():
    interp = Interpolator(start=(0.0, 0.0), window=0.1, now=0.0)
    now = 0.0
    for i in range(1, 6):
        now += 0.05
        interp.update(i * 10.0, 0.0, now)
        rx, _ = interp.step(now + 0.016)
        assert 0.0 <= rx < i * 10.0


def test_snap_jumps_both_points():
    interp = Interpolator(start=(0.0, 0.0), now=0.0)
    interp.update(900, 500, now=1.0)
    interp.snap(400, 300, now=1.0)
    assert interp.step(1.0) == (400, 300)
