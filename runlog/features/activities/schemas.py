"""
Activity schemas.

Pydantic models for the public list and the admin CRUD surface.
Admin input uses imperial units (miles, feet); storage is metric.
"""

from datetime import datetime
from typing import Annotated, Any, Optional

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    ValidationError,
    field_serializer,
)

from runlog.shared.timeutils import parse_timestamp, to_iso_utc
from runlog.shared.units import feet_to_meters, miles_to_meters, round_half_away_from_zero


def _validate_start_time(value):
    if value is None:
        return value
    parsed = parse_timestamp(value) if isinstance(value, (str, datetime)) else None
    if parsed is None:
        raise ValueError("Invalid start_time")
    return parsed


StartTime = Annotated[datetime, BeforeValidator(_validate_start_time)]


class ManualActivityCreate(BaseModel):
    """Create a manually entered activity."""

    start_time: StartTime
    miles: float = Field(allow_inf_nan=False)
    moving_time_s: float = Field(allow_inf_nan=False)
    avg_hr: Optional[float] = Field(default=None, allow_inf_nan=False)
    elev_gain_ft: Optional[float] = Field(default=None, allow_inf_nan=False)
    type: Optional[str] = None
    perceived_exertion: Optional[float] = Field(default=None, allow_inf_nan=False)
    shoe: Optional[str] = None
    notes: Optional[str] = None
    is_public: bool = True

    def to_columns(self) -> dict[str, Any]:
        """Activity column values for the insert (unset optionals omitted)."""
        fields = self.model_dump(exclude_none=True)
        return manual_columns(fields)


class ManualActivityUpdate(BaseModel):
    """
    Partial update of a manually entered activity.

    Types are strict: a string is not accepted where a number is expected.
    """

    start_time: Optional[StartTime] = None
    miles: Optional[float] = Field(default=None, allow_inf_nan=False)
    moving_time_s: Optional[float] = Field(default=None, allow_inf_nan=False)
    avg_hr: Optional[float] = Field(default=None, allow_inf_nan=False)
    elev_gain_ft: Optional[float] = Field(default=None, allow_inf_nan=False)
    type: Optional[str] = None
    perceived_exertion: Optional[float] = Field(default=None, allow_inf_nan=False)
    shoe: Optional[str] = None
    notes: Optional[str] = None
    title: Optional[str] = None
    is_public: Optional[bool] = None

    model_config = ConfigDict(strict=True)

    @classmethod
    def valid_fields(cls, payload: dict[str, Any]) -> dict[str, Any]:
        """
        Validate each known field on its own, dropping invalid or null ones.

        Unknown keys are ignored.

        Returns:
            Field name -> validated value for every usable field
        """
        fields = {}
        for name in cls.model_fields:
            if payload.get(name) is None:
                continue
            try:
                validated = cls.model_validate({name: payload[name]})
            except ValidationError:
                continue
            fields[name] = getattr(validated, name)
        return fields


class ActivityResponse(BaseModel):
    """Activity as returned by the API."""

    id: int
    start_time: datetime
    distance_m: int
    moving_time_s: int
    avg_pace_s: Optional[int] = None
    avg_hr: Optional[int] = None
    elev_gain_m: Optional[int] = None
    type: Optional[str] = None
    perceived_exertion: Optional[int] = None
    shoe: Optional[str] = None
    notes: Optional[str] = None
    title: Optional[str] = None
    is_public: bool
    source: str

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("start_time")
    def _serialize_start_time(self, value: datetime) -> str:
        return to_iso_utc(value)


def manual_columns(fields: dict[str, Any]) -> dict[str, Any]:
    """
    Convert admin input fields (imperial units) to Activity column values.

    Only keys present in fields are returned; metrics are rounded.
    """
    columns = {}
    for key, value in fields.items():
        if key == "miles":
            columns["distance_m"] = round_half_away_from_zero(miles_to_meters(value))
        elif key == "elev_gain_ft":
            columns["elev_gain_m"] = round_half_away_from_zero(feet_to_meters(value))
        elif key in ("moving_time_s", "avg_hr", "perceived_exertion"):
            columns[key] = round_half_away_from_zero(value)
        else:
            columns[key] = value
    return columns
