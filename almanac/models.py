"""Value objects shared by the calendar, solar and lunar computations."""

from __future__ import annotations

import numbers
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from pydantic import BaseModel, ConfigDict, Field, StrictInt, field_validator, model_validator

__all__ = [
    "MIN_YEAR",
    "MAX_YEAR",
    "CivilDateTime",
    "SolarTermEvent",
    "SolarTermSolution",
    "LunarConjunctionEvent",
    "is_leap_year",
    "days_in_month",
]

MIN_YEAR = -4712
MAX_YEAR = 9999

_DAYS_IN_MONTH = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)


def is_leap_year(year: int) -> bool:
    """Proleptic Gregorian leap-year rule."""

    return (year % 4 == 0 and year % 100 != 0) or year % 400 == 0


def days_in_month(year: int, month: int) -> int:
    if month == 2 and is_leap_year(year):
        return 29
    return _DAYS_IN_MONTH[month - 1]


class CivilDateTime(BaseModel):
    """A proleptic Gregorian date and time of day (UT unless stated otherwise)."""

    model_config = ConfigDict(frozen=True, strict=True, allow_inf_nan=False)

    year: StrictInt = Field(..., ge=MIN_YEAR, le=MAX_YEAR, description="Astronomical year")
    month: StrictInt = Field(..., ge=1, le=12, description="Month of year")
    day: StrictInt = Field(..., ge=1, le=31, description="Day of month")
    hour: float = Field(0.0, ge=0.0, lt=24.0, description="Hour of day, may be fractional")
    minute: float = Field(0.0, ge=0.0, lt=60.0)
    second: float = Field(0.0, ge=0.0, lt=60.0)

    @field_validator("year", "month", "day", mode="before")
    def coerce_integral(cls, value):
        # NumPy integers are not int subclasses. bool is left for strict mode to reject.
        if isinstance(value, numbers.Integral) and not isinstance(value, bool):
            return int(value)
        return value

    @model_validator(mode="after")
    def validate_day_exists(self) -> "CivilDateTime":
        if self.day > days_in_month(self.year, self.month):
            raise ValueError(
                f"day {self.day} does not exist in {self.year:04d}-{self.month:02d}"
            )
        return self

    @property
    def fraction_of_day(self) -> float:
        return (self.hour + self.minute / 60.0 + self.second / 3600.0) / 24.0

    def to_datetime(self) -> datetime:
        """Return a UTC-aware :class:`datetime`; only years 1..9999 are representable."""

        if self.year < 1:
            raise ValueError(f"year {self.year} is outside the datetime range")
        base = datetime(self.year, self.month, self.day, tzinfo=UTC)
        return base + timedelta(hours=self.hour, minutes=self.minute, seconds=self.second)

    @classmethod
    def from_datetime(cls, dt: datetime) -> "CivilDateTime":
        if dt.tzinfo is None:
            raise ValueError("datetime must be timezone-aware")
        dt_utc = dt.astimezone(UTC)
        return cls(
            year=dt_utc.year,
            month=dt_utc.month,
            day=dt_utc.day,
            hour=float(dt_utc.hour),
            minute=float(dt_utc.minute),
            second=dt_utc.second + dt_utc.microsecond / 1_000_000,
        )

    def isoformat(self) -> str:
        total_us = round((self.hour * 3600.0 + self.minute * 60.0 + self.second) * 1_000_000)
        total_us = min(total_us, 86_400_000_000 - 1)
        seconds, micro = divmod(total_us, 1_000_000)
        hours, seconds = divmod(seconds, 3600)
        minutes, seconds = divmod(seconds, 60)
        return (
            f"{self.year:04d}-{self.month:02d}-{self.day:02d}"
            f"T{hours:02d}:{minutes:02d}:{seconds:02d}.{micro:06d}"
        )


@dataclass(frozen=True)
class SolarTermSolution:
    """Outcome of one solar-term root search."""

    julian_day: float
    residual_deg: float
    iterations: int
    converged: bool


@dataclass(frozen=True)
class SolarTermEvent:
    """A resolved crossing of the Sun through a multiple of 15 degrees."""

    index: int
    code: str
    name: str
    longitude: float
    julian_day: float
    civil: CivilDateTime
    residual_deg: float
    converged: bool


@dataclass(frozen=True)
class LunarConjunctionEvent:
    """An approximate new moon, ``ordinal`` counted from the January 2000 lunation."""

    ordinal: int
    julian_day: float
    civil: CivilDateTime
