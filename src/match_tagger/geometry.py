"""Field geometry: percentage coordinates to meters and degrees.

Coordinates are percentages of the pitch (x along the length, y across the
width, origin top-left, y growing downward). Functions accept any object
with ``x``/``y`` attributes so they stay usable below the model layer.
"""

import math
from typing import Protocol

from match_tagger.config import FIELD_MAX, FIELD_MIN, PITCH_LENGTH_M, PITCH_WIDTH_M


class Point(Protocol):
    x: float
    y: float


def _round_half_up(value: float) -> int:
    """Nearest integer with halves going up: 2.5 -> 3, -2.5 -> -2."""
    return math.floor(value + 0.5)


def calculate_distance(
    origin: Point,
    destination: Point,
    pitch_length: float = PITCH_LENGTH_M,
    pitch_width: float = PITCH_WIDTH_M,
) -> float:
    """Distance in meters between two points, rounded half-up to 0.1 m.

    Each axis is scaled independently (x by the pitch length, y by the
    width) before taking the Euclidean norm, so the result is only
    meaningful when x/y follow the pitch's length/width axes.
    """
    dx = (destination.x - origin.x) / 100 * pitch_length
    dy = (destination.y - origin.y) / 100 * pitch_width
    return _round_half_up(math.hypot(dx, dy) * 10) / 10


def calculate_direction(origin: Point, destination: Point) -> int:
    """Direction in whole degrees, in [0, 360).

    Screen-space convention: 0 = East (right), 90 = South (down),
    180 = West (left), 270 = North (up). Identical points give 0.
    """
    dx = destination.x - origin.x
    dy = destination.y - origin.y
    angle = math.degrees(math.atan2(dy, dx))
    if angle < 0:
        angle += 360
    # An angle just under 360 rounds up to 360, which is 0.
    return _round_half_up(angle) % 360


def pass_length_band(distance: float) -> str:
    """Classify a pass by its length: short, long or through_ball."""
    if distance < 15:
        return "short"
    if distance < 30:
        return "long"
    return "through_ball"


_COMPASS = ("E", "SE", "S", "SW", "W", "NW", "N", "NE")


def compass_direction(degrees: float) -> str:
    """Eight-point compass label for a screen-space direction."""
    return _COMPASS[_round_half_up(degrees / 45) % 8]


def format_distance(distance: float) -> str:
    """Format a distance for display, e.g. ``"25.5m"``."""
    return f"{distance:.1f}m"


def coordinates_close(a: Point, b: Point, threshold: float = 2.0) -> bool:
    """True when both axes differ by less than ``threshold`` percent."""
    return abs(a.x - b.x) < threshold and abs(a.y - b.y) < threshold


def clamp(value: float) -> float:
    """Clamp a single percentage component to [0, 100]."""
    return min(FIELD_MAX, max(FIELD_MIN, value))
