"""Tagger configuration with defaults for a standard football pitch."""

from dataclasses import dataclass

# Canonical pitch size used to turn percentage coordinates into meters.
PITCH_LENGTH_M = 105.0
PITCH_WIDTH_M = 68.0

# Field coordinates are percentages of the pitch length/width.
FIELD_MIN = 0.0
FIELD_MAX = 100.0


@dataclass
class TaggerConfig:
    """Configuration for a tagging session.

    Tolerances are in percentage points. Pitch size is not configurable:
    stored event distances are always computed on PITCH_LENGTH_M x
    PITCH_WIDTH_M so exports stay comparable.
    """

    # Allowed drift of home + away possession from 100%
    possession_tolerance: float = 0.1

    # Capture wizard step policy: "data_driven" or "legacy"
    step_policy: str = "data_driven"

    # Heat map grid (columns along the pitch length, rows across it)
    heat_map_columns: int = 6
    heat_map_rows: int = 4

    # Exports, archives and logs
    data_dir: str = "data"
