"""Video timing collaborator contract.

The core never drives playback; it only asks the host for the current video
position and converts it to a match minute. ``ManualClock`` is a settable
implementation for tests, scripts and the CLI.
"""

import math
from typing import Protocol


def match_minute(timestamp: float) -> int:
    """Match minute for a video timestamp, assuming video zero = kick-off."""
    return math.floor(timestamp / 60)


def format_time(seconds: float) -> str:
    """Format seconds as ``MM:SS``."""
    mins = math.floor(seconds / 60)
    secs = math.floor(seconds % 60)
    return f"{mins:02d}:{secs:02d}"


class VideoClock(Protocol):
    """What the capture state machine needs from the video player."""

    def get_current_timestamp(self) -> float: ...

    def get_match_minute(self, timestamp: float) -> int: ...


class ManualClock:
    """A clock whose position is set explicitly.

    Usage::

        clock = ManualClock()
        clock.seek(754.2)
        clock.get_match_minute(clock.get_current_timestamp())  # 12
    """

    def __init__(self, timestamp: float = 0.0) -> None:
        self._timestamp = timestamp

    def seek(self, timestamp: float) -> None:
        if timestamp < 0:
            raise ValueError(f"timestamp must be >= 0, got {timestamp}")
        self._timestamp = timestamp

    def get_current_timestamp(self) -> float:
        return self._timestamp

    def get_match_minute(self, timestamp: float) -> int:
        return match_minute(timestamp)
