"""Conversion between proleptic Gregorian civil time and Julian Day numbers.

The Julian Day is the continuous time axis used by the solar and lunar
evaluators. No Julian/Gregorian calendar switch is modelled: every date,
including those before 1582, is interpreted in the proleptic Gregorian
calendar.
"""

from __future__ import annotations

import math
import numbers

from pydantic import ValidationError

from .models import CivilDateTime, days_in_month, is_leap_year

__all__ = [
    "J2000",
    "DAYS_PER_CENTURY",
    "SECONDS_PER_DAY",
    "CalendarValidationError",
    "civil_to_julian_day",
    "to_julian_day",
    "julian_day_to_civil",
    "delta_t_seconds",
    "is_leap_year",
    "days_in_month",
]

J2000 = 2451545.0  # 2000-01-01T12:00
DAYS_PER_CENTURY = 36525.0
SECONDS_PER_DAY = 86400.0

_MICROSECONDS_PER_DAY = 86_400_000_000


class CalendarValidationError(ValueError):
    """Raised when a civil date/time or Julian Day cannot be converted."""


def _build_civil(**fields: object) -> CivilDateTime:
    try:
        return CivilDateTime(**fields)
    except ValidationError as exc:
        messages = ", ".join(error["msg"] for error in exc.errors())
        raise CalendarValidationError(messages) from exc


def to_julian_day(civil: CivilDateTime) -> float:
    """Return the Julian Day of an already validated civil instant."""

    year, month = civil.year, civil.month
    if month <= 2:
        year -= 1
        month += 12
    century = year // 100
    correction = 2 - century + century // 4
    jd = (
        math.floor(365.25 * (year + 4716))
        + math.floor(30.6001 * (month + 1))
        + civil.day
        + correction
        - 1524.5
    )
    return jd + civil.fraction_of_day


def civil_to_julian_day(
    year: int,
    month: int,
    day: int,
    hour: float = 0,
    minute: float = 0,
    second: float = 0,
    *,
    utc_offset_hours: float = 0.0,
) -> float:
    """Convert a civil date and time to a Julian Day.

    Parameters
    ----------
    year, month, day:
        Integer calendar fields (any integral type, NumPy integers included);
        ``year`` uses astronomical numbering
        (``0`` is 1 BC) and must lie within ``-4712..9999``.
    hour, minute, second:
        Time of day. ``hour`` may carry a fraction.
    utc_offset_hours:
        Offset of the supplied local time from UT; the result is always UT.

    Raises
    ------
    CalendarValidationError
        If any field is non-integral where an integer is required, out of
        range, or names a day that does not exist.
    """

    civil = _build_civil(
        year=year, month=month, day=day, hour=hour, minute=minute, second=second
    )
    if isinstance(utc_offset_hours, bool) or not isinstance(utc_offset_hours, numbers.Real):
        raise CalendarValidationError("utc_offset_hours must be a real number")
    if not math.isfinite(utc_offset_hours) or not -24.0 <= utc_offset_hours <= 24.0:
        raise CalendarValidationError("utc_offset_hours must be within ±24 hours")
    return to_julian_day(civil) - utc_offset_hours / 24.0


def julian_day_to_civil(jd: float) -> CivilDateTime:
    """Convert a Julian Day back to a proleptic Gregorian civil instant.

    The time of day is rounded to the nearest microsecond; a value that
    rounds up to midnight rolls over into the following day.
    """

    if isinstance(jd, bool) or not isinstance(jd, numbers.Real):
        raise CalendarValidationError("julian day must be a real number")
    if not math.isfinite(jd):
        raise CalendarValidationError("julian day must be finite")

    whole = math.floor(jd + 0.5)
    micros = round((jd + 0.5 - whole) * _MICROSECONDS_PER_DAY)
    if micros >= _MICROSECONDS_PER_DAY:
        whole += 1
        micros -= _MICROSECONDS_PER_DAY

    alpha = math.floor((whole - 1867216.25) / 36524.25)
    a = whole + 1 + alpha - alpha // 4
    b = a + 1524
    c = math.floor((b - 122.1) / 365.25)
    d = math.floor(365.25 * c)
    e = math.floor((b - d) / 30.6001)

    day = b - d - math.floor(30.6001 * e)
    month = e - 1 if e < 14 else e - 13
    year = c - 4716 if month > 2 else c - 4715

    seconds, micro = divmod(micros, 1_000_000)
    hour, seconds = divmod(seconds, 3600)
    minute, seconds = divmod(seconds, 60)
    return _build_civil(
        year=int(year),
        month=int(month),
        day=int(day),
        hour=float(hour),
        minute=float(minute),
        second=seconds + micro / 1_000_000,
    )


def delta_t_seconds(year: float) -> float:
    """Approximate TT - UT in seconds (Stephenson & Morrison extrapolation)."""

    t = (year - 1825.0) / 100.0
    return -150.568 + 31.4115 * t * t + 284.8436 * math.cos(2.0 * math.pi * (t + 0.75) / 14.0)
