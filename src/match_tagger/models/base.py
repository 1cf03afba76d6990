"""Shared pydantic base and the field coordinate model.

Python attributes are snake_case; JSON uses camelCase aliases so exports
keep the ``{match, events, exportedAt}`` wire shape. Either name is accepted
on input.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from match_tagger.config import FIELD_MAX, FIELD_MIN
from match_tagger.geometry import clamp


class CamelModel(BaseModel):
    """Base model with camelCase aliases and name-or-alias population."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json_dict(self) -> dict:
        """Dump with camelCase keys and JSON-safe values (ISO datetimes)."""
        return self.model_dump(mode="json", by_alias=True)


class FieldCoordinates(CamelModel):
    """Point on the pitch as percentages of length (x) and width (y).

    Origin is the top-left corner; y grows downward. The [0, 100] range is
    checked by the validation rules rather than enforced here, so
    out-of-range data can still be loaded and reported.
    """

    x: float
    y: float

    @property
    def in_bounds(self) -> bool:
        return FIELD_MIN <= self.x <= FIELD_MAX and FIELD_MIN <= self.y <= FIELD_MAX

    def clamped(self) -> "FieldCoordinates":
        """Return a copy with both components clamped to [0, 100]."""
        return FieldCoordinates(x=clamp(self.x), y=clamp(self.y))
