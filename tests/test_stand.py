import pytest

from quadruped_control.stand import StandController

MIDDLE = [0.0, 1.535, -2.486]
FINAL = [0.0, 0.72, -1.44]
INIT = [0.1, 0.4, -0.9]


@pytest.fixture
def controller():
    stand = StandController(MIDDLE, FINAL)
    stand.set_init_position(INIT)
    return stand


@pytest.mark.parametrize("index", [0, 1, 2])
def test_starts_at_initial_position(controller, index):
    assert controller.calc_target_position(index, 0.0, 5.0) == pytest.approx(INIT[index], abs=1e-9)


@pytest.mark.parametrize("index", [0, 1, 2])
def test_exact_halfway_returns_final_position(controller, index):
    assert controller.calc_target_position(index, 2.5, 5.0) == FINAL[index]


@pytest.mark.parametrize("index", [0, 1, 2])
def test_quarter_point_passes_through_midpoint(controller, index):
    expected = (MIDDLE[index] + INIT[index]) / 2.0
    assert controller.calc_target_position(index, 1.25, 5.0) == pytest.approx(expected, abs=1e-9)


@pytest.mark.parametrize("index", [0, 1, 2])
def test_first_half_reaches_middle_position(controller, index):
    value = controller.calc_target_position(index, 2.4999999, 5.0)
    assert value == pytest.approx(MIDDLE[index], abs=1e-4)


@pytest.mark.parametrize("index", [0, 1, 2])
def test_second_half_starts_at_middle_position(controller, index):
    value = controller.calc_target_position(index, 2.5000001, 5.0)
    assert value == pytest.approx(MIDDLE[index], abs=1e-4)


@pytest.mark.parametrize("index", [0, 1, 2])
def test_finish_time_reaches_final_position(controller, index):
    assert controller.calc_target_position(index, 5.0, 5.0) == pytest.approx(FINAL[index], abs=1e-9)


@pytest.mark.parametrize("index", [0, 1, 2])
def test_after_finish_holds_final_position(controller, index):
    assert controller.calc_target_position(index, 20.0, 5.0) == FINAL[index]


def test_requires_initial_position():
    stand = StandController(MIDDLE, FINAL)
    with pytest.raises(RuntimeError):
        stand.calc_target_position(0, 1.0, 5.0)


def test_index_out_of_range(controller):
    with pytest.raises(IndexError):
        controller.calc_target_position(3, 1.0, 5.0)
    with pytest.raises(IndexError):
        controller.calc_target_position(-1, 1.0, 5.0)


def test_zero_finish_time(controller):
    with pytest.raises(ValueError):
        controller.calc_target_position(0, 1.0, 0.0)


def test_set_init_position_replaces_previous(controller):
    controller.set_init_position([0.5, 0.5, 0.5])
    assert controller.calc_target_position(1, 0.0, 5.0) == pytest.approx(0.5, abs=1e-9)