"""Apparent ecliptic longitude of the Sun from a truncated analytical series.

The series (mean longitude, mean anomaly, a three-term equation of centre and
a combined aberration/nutation term) is good to roughly a hundredth of a
degree near J2000, which is ample for dating solar terms to the day. It is
not an ephemeris and loses accuracy far from the reference epoch.
"""

from __future__ import annotations

import math

from .julian import DAYS_PER_CENTURY, J2000

__all__ = [
    "normalize_degrees",
    "signed_angle_difference",
    "centuries_since_j2000",
    "longitude_of_sun",
    "solar_speed_deg_per_day",
]

_DEG = math.pi / 180.0


def normalize_degrees(angle: float) -> float:
    """Reduce *angle* into ``[0, 360)``."""

    reduced = angle % 360.0
    # Tiny negative inputs round up to exactly 360.0.
    if reduced >= 360.0:
        reduced -= 360.0
    return reduced


def signed_angle_difference(target: float, current: float) -> float:
    """Return ``target - current`` wrapped into ``(-180, 180]``."""

    delta = normalize_degrees(target - current)
    if delta > 180.0:
        delta -= 360.0
    return delta


def centuries_since_j2000(jd: float) -> float:
    return (jd - J2000) / DAYS_PER_CENTURY


def _mean_longitude(t: float) -> float:
    return 280.46646 + 36000.76983 * t + 0.0003032 * t * t


def _mean_anomaly(t: float) -> float:
    return 357.52911 + 35999.05029 * t - 0.0001537 * t * t


def _equation_of_center(t: float, anomaly_deg: float) -> float:
    m = anomaly_deg * _DEG
    return (
        (1.914602 - 0.004817 * t - 0.000014 * t * t) * math.sin(m)
        + (0.019993 - 0.000101 * t) * math.sin(2.0 * m)
        + 0.000289 * math.sin(3.0 * m)
    )


def longitude_of_sun(jd: float) -> float:
    """Apparent geocentric ecliptic longitude of the Sun in degrees, in ``[0, 360)``."""

    t = centuries_since_j2000(jd)
    true_longitude = _mean_longitude(t) + _equation_of_center(t, _mean_anomaly(t))
    omega = (125.04 - 1934.136 * t) * _DEG
    aberration = -0.00569 - 0.00478 * math.sin(omega)
    return normalize_degrees(true_longitude + aberration)


def solar_speed_deg_per_day(jd: float) -> float:
    """Rate of change of :func:`longitude_of_sun` in degrees per day.

    Differentiates the mean longitude and the equation of centre; the small
    aberration term is left out.
    """

    t = centuries_since_j2000(jd)
    m = _mean_anomaly(t) * _DEG
    dm = (35999.05029 - 0.0003074 * t) * _DEG  # rad per century

    dl = 36000.76983 + 0.0006064 * t
    c1 = 1.914602 - 0.004817 * t - 0.000014 * t * t
    c2 = 0.019993 - 0.000101 * t
    dc = (
        (-0.004817 - 0.000028 * t) * math.sin(m)
        + c1 * math.cos(m) * dm
        - 0.000101 * math.sin(2.0 * m)
        + c2 * math.cos(2.0 * m) * 2.0 * dm
        + 0.000289 * math.cos(3.0 * m) * 3.0 * dm
    )
    return (dl + dc) / DAYS_PER_CENTURY
