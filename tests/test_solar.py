from __future__ import annotations

import math

import erfa
import numpy as np
import pytest

from almanac.julian import J2000, civil_to_julian_day
from almanac.solar import (
    centuries_since_j2000,
    longitude_of_sun,
    normalize_degrees,
    signed_angle_difference,
    solar_speed_deg_per_day,
)

# Geometric longitude differs from the apparent one by aberration and nutation,
# both below 0.006 degree; the truncated series adds about 0.01 degree.
ERFA_TOLERANCE_DEG = 0.03


def _erfa_geometric_longitude(jd: float) -> float:
    """Sun's longitude on the mean ecliptic of date from ERFA's Earth ephemeris."""

    pvh, _ = erfa.epv00(jd, 0.0)
    sun = -np.asarray(pvh["p"], dtype=float)
    rotation = np.asarray(erfa.ecm06(jd, 0.0), dtype=float)
    x, y, _ = rotation @ sun
    return math.degrees(math.atan2(y, x)) % 360.0


@pytest.mark.parametrize(
    "angle,expected",
    [(0.0, 0.0), (360.0, 0.0), (720.5, 0.5), (-90.0, 270.0), (-1e-17, 0.0), (359.999, 359.999)],
)
def test_normalize_degrees(angle: float, expected: float) -> None:
    result = normalize_degrees(angle)
    assert 0.0 <= result < 360.0
    assert result == pytest.approx(expected, abs=1e-12)


@pytest.mark.parametrize(
    "target,current,expected",
    [(10.0, 350.0, 20.0), (350.0, 10.0, -20.0), (180.0, 0.0, 180.0), (0.0, 180.0, 180.0), (5.0, 5.0, 0.0)],
)
def test_signed_angle_difference(target: float, current: float, expected: float) -> None:
    result = signed_angle_difference(target, current)
    assert -180.0 < result <= 180.0
    assert result == pytest.approx(expected)


def test_centuries_since_j2000():
    assert centuries_since_j2000(J2000) == 0.0
    assert centuries_since_j2000(J2000 + 36525.0) == pytest.approx(1.0)


def test_longitude_at_reference_epoch():
    assert longitude_of_sun(J2000) == pytest.approx(280.37, abs=0.02)


def test_longitude_is_always_normalized():
    start = civil_to_julian_day(-4712, 1, 1)
    end = civil_to_julian_day(9999, 12, 31)
    for jd in np.linspace(start, end, 5001):
        value = longitude_of_sun(float(jd))
        assert 0.0 <= value < 360.0


@pytest.mark.parametrize(
    "fields,expected",
    [
        ((2024, 3, 20, 3, 6), 0.0),
        ((2024, 6, 20, 20, 51), 90.0),
        ((2024, 9, 22, 12, 44), 180.0),
        ((2024, 12, 21, 9, 21), 270.0),
    ],
)
def test_equinoxes_and_solstices(fields, expected: float) -> None:
    value = longitude_of_sun(civil_to_julian_day(*fields))
    assert abs(signed_angle_difference(expected, value)) < 0.03


@pytest.mark.parametrize("year", [1900, 1950, 2000, 2024, 2050, 2099])
@pytest.mark.parametrize("month", [1, 4, 7, 10])
def test_agrees_with_erfa_ephemeris(year: int, month: int) -> None:
    jd = civil_to_julian_day(year, month, 15)
    delta = signed_angle_difference(_erfa_geometric_longitude(jd), longitude_of_sun(jd))
    assert abs(delta) < ERFA_TOLERANCE_DEG


def test_speed_at_reference_epoch():
    speed = solar_speed_deg_per_day(J2000)
    assert 0.95 < speed < 1.05


def test_speed_is_positive_and_bounded():
    start = civil_to_julian_day(1800, 1, 1)
    for offset in range(0, 400 * 365, 7):
        speed = solar_speed_deg_per_day(start + offset)
        assert 0.94 < speed < 1.03


@pytest.mark.parametrize("month", range(1, 13))
def test_speed_matches_finite_difference(month: int) -> None:
    jd = civil_to_julian_day(2024, month, 10)
    step = 0.01
    numeric = (
        signed_angle_difference(longitude_of_sun(jd + step), longitude_of_sun(jd - step))
        / (2.0 * step)
    )
    assert solar_speed_deg_per_day(jd) == pytest.approx(numeric, abs=1e-4)


def test_speed_is_faster_near_perihelion():
    january = solar_speed_deg_per_day(civil_to_julian_day(2024, 1, 4))
    july = solar_speed_deg_per_day(civil_to_julian_day(2024, 7, 5))
    assert january > july
