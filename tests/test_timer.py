import pytest

from streetsim.utils.timer import TimeSystem


def test_starts_in_the_morning():
    clock = TimeSystem()
    assert clock.time_string() == 'Day 1 - 08:00'
    assert clock.time_scale == pytest.approx(1.0)


def test_one_real_minute_is_one_game_hour():
    clock = TimeSystem()
    clock.update(60)
    assert clock.time_string() == 'Day 1 - 09:00'


def test_day_rolls_over():
    clock = TimeSystem()
    clock.update(960)
    assert clock.time_string() == 'Day 2 - 00:00'
    assert clock.hour == 0


def test_speed_scales_movement(config):
    clock = TimeSystem(start_hour=22, speed=120)
    assert clock.time_scale == pytest.approx(2.0)
    clock.update(60)
    assert clock.time_string() == 'Day 2 - 00:00'
    assert TimeSystem.from_config(config).speed == 60
