"""Unit tests for field geometry and the video timing helpers."""

import pytest

from match_tagger.geometry import (
    calculate_direction,
    calculate_distance,
    clamp,
    compass_direction,
    coordinates_close,
    format_distance,
    pass_length_band,
)
from match_tagger.models import FieldCoordinates
from match_tagger.timing import ManualClock, format_time, match_minute


def pt(x: float, y: float) -> FieldCoordinates:
    return FieldCoordinates(x=x, y=y)


class TestDistance:
    def test_full_length(self):
        assert calculate_distance(pt(0, 50), pt(100, 50)) == 105.0

    def test_full_width(self):
        assert calculate_distance(pt(50, 0), pt(50, 100)) == 68.0

    def test_same_point(self):
        assert calculate_distance(pt(33, 33), pt(33, 33)) == 0.0

    def test_symmetric(self):
        a, b = pt(12.3, 80.1), pt(71.9, 4.4)
        assert calculate_distance(a, b) == calculate_distance(b, a)

    def test_rounded_to_tenth(self):
        # dx = 10.5 m, dy = 6.8 m -> 12.509...
        assert calculate_distance(pt(0, 0), pt(10, 10)) == 12.5

    @pytest.mark.parametrize(
        "dest, expected",
        [
            ((3, 0), 3.2),  # 3.15 m
            ((5, 0), 5.3),  # 5.25 m
            ((25, 0), 26.3),  # 26.25 m
        ],
    )
    def test_halves_round_up(self, dest, expected):
        assert calculate_distance(pt(0, 0), pt(*dest)) == expected

    def test_custom_pitch(self):
        assert calculate_distance(pt(0, 0), pt(100, 0), pitch_length=100) == 100.0


class TestDirection:
    @pytest.mark.parametrize(
        "dest, expected",
        [
            ((60, 50), 0),  # East
            ((50, 60), 90),  # South (y grows downward)
            ((40, 50), 180),  # West
            ((50, 40), 270),  # North
        ],
    )
    def test_cardinal_directions(self, dest, expected):
        assert calculate_direction(pt(50, 50), pt(*dest)) == expected

    def test_identical_points(self):
        assert calculate_direction(pt(10, 10), pt(10, 10)) == 0

    def test_opposite_directions_differ_by_180(self):
        a, b = pt(20, 30), pt(70, 55)
        assert (calculate_direction(b, a) - calculate_direction(a, b)) % 360 == 180

    def test_never_returns_360(self):
        # Angle of roughly 359.9 degrees rounds to 0, not 360.
        assert calculate_direction(pt(0, 50), pt(100, 49.9)) == 0

    def test_range(self):
        for dest in [(0, 0), (100, 0), (0, 100), (100, 100), (50, 99)]:
            assert 0 <= calculate_direction(pt(50, 50), pt(*dest)) < 360


class TestHelpers:
    @pytest.mark.parametrize(
        "distance, band",
        [(0, "short"), (14.9, "short"), (15, "long"), (29.9, "long"), (30, "through_ball")],
    )
    def test_pass_length_band(self, distance, band):
        assert pass_length_band(distance) == band

    @pytest.mark.parametrize(
        "degrees, label",
        [
            (0, "E"), (90, "S"), (180, "W"), (270, "N"), (45, "SE"), (315, "NE"), (350, "E"),
            (22.5, "SE"), (112.5, "SW"),  # halfway between labels goes clockwise
        ],
    )
    def test_compass_direction(self, degrees, label):
        assert compass_direction(degrees) == label

    def test_format_distance(self):
        assert format_distance(25.46) == "25.5m"

    def test_coordinates_close(self):
        assert coordinates_close(pt(10, 10), pt(11.5, 9)) is True
        assert coordinates_close(pt(10, 10), pt(12, 10)) is False

    def test_clamp(self):
        assert clamp(-3) == 0
        assert clamp(104) == 100
        assert clamp(42.5) == 42.5


class TestTiming:
    def test_match_minute(self):
        assert match_minute(0) == 0
        assert match_minute(59.9) == 0
        assert match_minute(754.2) == 12

    def test_format_time(self):
        assert format_time(754.2) == "12:34"
        assert format_time(5) == "00:05"

    def test_manual_clock(self):
        clock = ManualClock()
        clock.seek(130)
        assert clock.get_current_timestamp() == 130
        assert clock.get_match_minute(clock.get_current_timestamp()) == 2

    def test_manual_clock_rejects_negative(self):
        with pytest.raises(ValueError):
            ManualClock().seek(-1)
