"""Approximate new-moon instants from a truncated periodic series.

Lunation ``k = 0`` is the new moon of 6 January 2000. For each ``k`` the mean
conjunction is corrected by the leading periodic terms in the Sun's mean
anomaly, the Moon's mean anomaly, the Moon's argument of latitude and the
longitude of the ascending node. Results are good to a few minutes over the
last few centuries and degrade away from 2000.
"""

from __future__ import annotations

import json
import logging
import math
import numbers
from typing import List

import numpy as np

from .julian import (
    J2000,
    SECONDS_PER_DAY,
    civil_to_julian_day,
    delta_t_seconds,
    is_leap_year,
    julian_day_to_civil,
)
from .models import LunarConjunctionEvent

__all__ = [
    "SYNODIC_MONTH",
    "NEW_MOON_EPOCH",
    "CANDIDATES_PER_YEAR",
    "first_lunation_index",
    "new_moon_jde",
    "approximate_new_moons",
    "new_moon_events",
    "lunar_phase",
    "moon_illumination",
]

LOGGER = logging.getLogger(__name__)

SYNODIC_MONTH = 29.530588861
NEW_MOON_EPOCH = 2451550.09766  # JDE of lunation 0
CANDIDATES_PER_YEAR = 13

# The periodic corrections never move a conjunction by more than ~0.7 day
# from its mean instant.
_MAX_CORRECTION_DAYS = 1.0


def _delta_t_days(year: int) -> float:
    return delta_t_seconds(year + 0.5) / SECONDS_PER_DAY


def first_lunation_index(year: int) -> int:
    """Smallest lunation whose mean new moon is not earlier than a day before 1 January.

    Every new moon of *year* then lies within the 13 lunations starting here.
    """

    jan_first = civil_to_julian_day(year, 1, 1) + _delta_t_days(year)
    return math.ceil((jan_first - _MAX_CORRECTION_DAYS - NEW_MOON_EPOCH) / SYNODIC_MONTH)


def new_moon_jde(k):
    """Julian Ephemeris Day (TT) of lunation(s) *k*; accepts scalars or arrays."""

    k = np.asarray(k, dtype=float)
    t = k / 1236.85
    t2 = t * t
    t3 = t2 * t
    t4 = t3 * t

    jde = (
        NEW_MOON_EPOCH
        + SYNODIC_MONTH * k
        + 0.00015437 * t2
        - 0.000000150 * t3
        + 0.00000000073 * t4
    )

    e = 1.0 - 0.002516 * t - 0.0000074 * t2
    sun_anomaly = np.radians(2.5534 + 29.10535670 * k - 0.0000014 * t2 - 0.00000011 * t3)
    moon_anomaly = np.radians(
        201.5643 + 385.81693528 * k + 0.0107582 * t2 + 0.00001238 * t3 - 0.000000058 * t4
    )
    latitude_arg = np.radians(
        160.7108 + 390.67050284 * k - 0.0016118 * t2 - 0.00000227 * t3 + 0.000000011 * t4
    )
    node = np.radians(124.7746 - 1.56375588 * k + 0.0020672 * t2 + 0.00000215 * t3)

    correction = (
        -0.40720 * np.sin(moon_anomaly)
        + 0.17241 * e * np.sin(sun_anomaly)
        + 0.01608 * np.sin(2.0 * moon_anomaly)
        + 0.01039 * np.sin(2.0 * latitude_arg)
        + 0.00739 * e * np.sin(moon_anomaly - sun_anomaly)
        - 0.00514 * e * np.sin(moon_anomaly + sun_anomaly)
        + 0.00208 * e * e * np.sin(2.0 * sun_anomaly)
        - 0.00017 * np.sin(node)
    )
    result = jde + correction
    if result.ndim == 0:
        return float(result)
    return result


def _candidates(year: int):
    first = first_lunation_index(year)
    ordinals = np.arange(first, first + CANDIDATES_PER_YEAR)
    # TT -> UT; one correction for the whole year is well within the series accuracy.
    ut = new_moon_jde(ordinals) - _delta_t_days(year)
    year_start = civil_to_julian_day(year, 1, 1)
    year_end = year_start + (366 if is_leap_year(year) else 365)
    for ordinal, jd in zip(ordinals.tolist(), ut.tolist()):
        # Candidates outside the year may also fall outside the supported calendar range.
        if not year_start <= jd < year_end:
            continue
        civil = julian_day_to_civil(jd)
        if civil.year == year:
            yield ordinal, jd, civil


def new_moon_events(year: int) -> List[LunarConjunctionEvent]:
    """New moons (UT) falling within civil *year*, in chronological order."""

    events = [
        LunarConjunctionEvent(ordinal=ordinal, julian_day=jd, civil=civil)
        for ordinal, jd, civil in _candidates(year)
    ]
    LOGGER.debug(
        json.dumps({"event": "new_moons_computed", "year": year, "count": len(events)})
    )
    return events


def approximate_new_moons(year: int) -> List[float]:
    """Julian Days (UT) of the 12 or 13 new moons within civil *year*."""

    return [event.julian_day for event in new_moon_events(year)]


def lunar_phase(jd: float) -> float:
    """Fraction of the current lunation elapsed at *jd* (UT), in ``[0, 1)``.

    0 is the preceding new moon and 0.5 is close to full moon. The fraction
    is measured against the actual span between the two bracketing
    conjunctions of the series, not the mean synodic month.
    """

    if isinstance(jd, bool) or not isinstance(jd, numbers.Real):
        raise ValueError("julian day must be a real number")
    if not math.isfinite(jd):
        raise ValueError("julian day must be finite")

    delta_t = delta_t_seconds(2000.0 + (jd - J2000) / 365.2425) / SECONDS_PER_DAY
    k = math.floor((jd + delta_t - NEW_MOON_EPOCH) / SYNODIC_MONTH)
    # Mean lunation k starts at or before jd; corrections stay under a day,
    # so conjunctions k - 1 .. k + 2 bracket it.
    conjunctions = new_moon_jde(np.arange(k - 1, k + 3)) - delta_t
    position = int(np.searchsorted(conjunctions, jd, side="right")) - 1
    start = float(conjunctions[position])
    end = float(conjunctions[position + 1])
    return min((jd - start) / (end - start), math.nextafter(1.0, 0.0))


def moon_illumination(jd: float) -> float:
    """Illuminated fraction of the lunar disc at *jd*, from the phase angle."""

    return (1.0 - math.cos(2.0 * math.pi * lunar_phase(jd))) / 2.0
