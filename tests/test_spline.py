import pytest

from quadruped_control.spline import two_segment_spline

# p0, v0, a0, t0, p1, t1, p2, v2, a2, t2
SIMPLE = (0.0, 0.0, 0.0, 0.0, 1.0, 1.0, 2.0, 0.0, 0.0, 2.0)
GENERAL = (0.3, 0.5, -0.2, 0.0, 1.2, 0.7, -0.4, 0.1, 0.3, 1.9)


def evaluate(params, t):
    return two_segment_spline(*params, t)


@pytest.mark.parametrize("params", [SIMPLE, GENERAL])
def test_passes_through_knots(params):
    p0, _, _, t0, p1, t1, p2, _, _, t2 = params
    assert evaluate(params, t0) == pytest.approx(p0, abs=1e-9)
    assert evaluate(params, t1) == pytest.approx(p1, abs=1e-9)
    assert evaluate(params, t2) == pytest.approx(p2, abs=1e-9)


@pytest.mark.parametrize("params", [SIMPLE, GENERAL])
def test_holds_final_position_after_end(params):
    p2 = params[6]
    t2 = params[9]
    assert evaluate(params, t2 + 0.5) == p2
    assert evaluate(params, t2 + 100.0) == p2


def test_known_values_on_simple_profile():
    assert evaluate(SIMPLE, 0.5) == pytest.approx(0.1875)
    assert evaluate(SIMPLE, 1.5) == pytest.approx(1.8125)


@pytest.mark.parametrize("params", [SIMPLE, GENERAL])
def test_continuous_at_middle_knot(params):
    t1 = params[5]
    eps = 1e-6
    left = evaluate(params, t1 - eps)
    right = evaluate(params, t1 + eps)
    assert left == pytest.approx(right, abs=1e-4)


@pytest.mark.parametrize("params", [SIMPLE, GENERAL])
def test_boundary_velocities(params):
    _, v0, _, t0, _, _, _, v2, _, t2 = params
    h = 1e-6
    start_velocity = (evaluate(params, t0 + h) - evaluate(params, t0)) / h
    end_velocity = (evaluate(params, t2) - evaluate(params, t2 - h)) / h
    assert start_velocity == pytest.approx(v0, abs=1e-3)
    assert end_velocity == pytest.approx(v2, abs=1e-3)


def test_velocity_matches_across_middle_knot():
    t1 = GENERAL[5]
    h = 1e-5
    left = (evaluate(GENERAL, t1) - evaluate(GENERAL, t1 - h)) / h
    right = (evaluate(GENERAL, t1 + 2 * h) - evaluate(GENERAL, t1 + h)) / h
    assert left == pytest.approx(right, abs=1e-3)


def test_constant_profile_stays_constant():
    params = (0.7, 0.0, 0.0, 0.0, 0.7, 1.0, 0.7, 0.0, 0.0, 2.0)
    for t in (0.0, 0.3, 1.0, 1.4, 2.0):
        assert evaluate(params, t) == pytest.approx(0.7)


def test_equal_knot_times_raise():
    with pytest.raises(ValueError):
        two_segment_spline(0.0, 0.0, 0.0, 1.0, 1.0, 1.0, 2.0, 0.0, 0.0, 2.0, 0.5)