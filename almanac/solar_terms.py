"""Newton iteration for the instants the Sun crosses multiples of 15 degrees."""

from __future__ import annotations

import json
import logging
import math
import numbers
import time
from bisect import bisect_right
from typing import List, Tuple

from joblib import Parallel, cpu_count, delayed

from .config import DEFAULT_SETTINGS, SolverSettings
from .julian import civil_to_julian_day, julian_day_to_civil
from .models import MIN_YEAR, SolarTermEvent, SolarTermSolution
from .solar import (
    longitude_of_sun,
    normalize_degrees,
    signed_angle_difference,
    solar_speed_deg_per_day,
)

__all__ = [
    "SOLAR_TERMS",
    "solar_term_longitude",
    "solve_solar_term",
    "find_solar_term_time",
    "compute_solar_terms",
    "solar_term_at",
]

LOGGER = logging.getLogger(__name__)

# Index i sits at (270 + 15 i) mod 360 degrees: the table starts at the
# winter solstice. Codes follow the jie (J) / zhongqi (Z) numbering.
SOLAR_TERMS: Tuple[Tuple[str, str, float], ...] = (
    ("Z11", "Winter Solstice", 270.0),
    ("J12", "Minor Cold", 285.0),
    ("Z12", "Major Cold", 300.0),
    ("J1", "Spring Begins", 315.0),
    ("Z1", "Rain Water", 330.0),
    ("J2", "Insects Awaken", 345.0),
    ("Z2", "Spring Equinox", 0.0),
    ("J3", "Clear and Bright", 15.0),
    ("Z3", "Grain Rains", 30.0),
    ("J4", "Summer Begins", 45.0),
    ("Z4", "Grain Buds", 60.0),
    ("J5", "Grain in Ear", 75.0),
    ("Z5", "Summer Solstice", 90.0),
    ("J6", "Minor Heat", 105.0),
    ("Z6", "Major Heat", 120.0),
    ("J7", "Autumn Begins", 135.0),
    ("Z7", "Stopping the Heat", 150.0),
    ("J8", "White Dews", 165.0),
    ("Z8", "Autumn Equinox", 180.0),
    ("J9", "Cold Dews", 195.0),
    ("Z9", "Frost Descent", 210.0),
    ("J10", "Winter Begins", 225.0),
    ("Z10", "Minor Snow", 240.0),
    ("J11", "Major Snow", 255.0),
)

# Newton steps after the first are clamped and halved while the residual grows.
_MAX_STEP_DAYS = 5.0
_MAX_BACKTRACKS = 8


def solar_term_longitude(index: int) -> float:
    """Target longitude of the solar term with the given table index."""

    if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < 24:
        raise ValueError(f"Solar term index must be an integer in 0..23, got {index!r}")
    return (270.0 + 15.0 * index) % 360.0


def solve_solar_term(
    year: int,
    target_longitude: float,
    *,
    settings: SolverSettings = DEFAULT_SETTINGS,
) -> SolarTermSolution:
    """Find when the Sun reaches *target_longitude*, starting from 1 January of *year*.

    The first step always moves forward by the full angular distance to the
    target, so the crossing returned is the first one on or after the seed.
    Subsequent steps use the signed difference, which keeps Newton updates
    from jumping a whole revolution near the wrap at 0/360 degrees. Those
    steps are limited to five days and halved while the residual grows.

    The iteration is capped at ``settings.max_iterations``; when the cap is hit
    the best estimate is still returned with ``converged=False``.
    """

    if isinstance(target_longitude, bool) or not isinstance(target_longitude, numbers.Real):
        raise ValueError("target_longitude must be a real number")
    if not math.isfinite(target_longitude):
        raise ValueError("target_longitude must be finite")

    target = normalize_degrees(float(target_longitude))
    jd = civil_to_julian_day(year, 1, 1)
    delta = normalize_degrees(target - longitude_of_sun(jd))
    iterations = 0
    while abs(delta) >= settings.tolerance_deg and iterations < settings.max_iterations:
        step = delta / solar_speed_deg_per_day(jd)
        if iterations:
            step = max(-_MAX_STEP_DAYS, min(_MAX_STEP_DAYS, step))
        candidate = jd + step
        candidate_delta = signed_angle_difference(target, longitude_of_sun(candidate))
        backtracks = 0
        while iterations and abs(candidate_delta) > abs(delta) and backtracks < _MAX_BACKTRACKS:
            step *= 0.5
            candidate = jd + step
            candidate_delta = signed_angle_difference(target, longitude_of_sun(candidate))
            backtracks += 1
        jd, delta = candidate, candidate_delta
        iterations += 1

    converged = abs(delta) < settings.tolerance_deg
    if not converged:
        LOGGER.warning(
            json.dumps(
                {
                    "event": "solar_term_not_converged",
                    "year": year,
                    "target": target,
                    "residual_deg": delta,
                    "iterations": iterations,
                }
            )
        )
    return SolarTermSolution(
        julian_day=jd, residual_deg=delta, iterations=iterations, converged=converged
    )


def find_solar_term_time(
    year: int,
    target_longitude: float,
    *,
    settings: SolverSettings = DEFAULT_SETTINGS,
) -> float:
    """Julian Day at which the Sun reaches *target_longitude*.

    Returns the best available estimate even when the iteration did not
    converge; use :func:`solve_solar_term` to inspect the residual.
    """

    return solve_solar_term(year, target_longitude, settings=settings).julian_day


def _job_count(settings: SolverSettings, tasks: int) -> int:
    requested = cpu_count() if settings.n_jobs < 0 else settings.n_jobs
    return max(1, min(requested, tasks))


def compute_solar_terms(
    year: int,
    *,
    settings: SolverSettings = DEFAULT_SETTINGS,
) -> List[SolarTermEvent]:
    """Resolve all 24 solar terms found from 1 January of *year* onwards.

    Each term is solved independently; with ``settings.n_jobs != 1`` the
    solves are distributed with :mod:`joblib`. Events are returned in
    chronological order.
    """

    start_time = time.perf_counter()
    targets = [solar_term_longitude(index) for index in range(len(SOLAR_TERMS))]
    n_jobs = _job_count(settings, len(targets))

    if n_jobs == 1:
        solutions = [solve_solar_term(year, target, settings=settings) for target in targets]
    else:
        solutions = Parallel(n_jobs=n_jobs)(
            delayed(solve_solar_term)(year, target, settings=settings) for target in targets
        )

    events = []
    for index, solution in enumerate(solutions):
        code, name, longitude = SOLAR_TERMS[index]
        events.append(
            SolarTermEvent(
                index=index,
                code=code,
                name=name,
                longitude=longitude,
                julian_day=solution.julian_day,
                civil=julian_day_to_civil(solution.julian_day),
                residual_deg=solution.residual_deg,
                converged=solution.converged,
            )
        )
    events.sort(key=lambda event: event.julian_day)

    duration_ms = (time.perf_counter() - start_time) * 1000.0
    LOGGER.debug(
        json.dumps(
            {
                "event": "solar_terms_computed",
                "year": year,
                "n_jobs": n_jobs,
                "unconverged": sum(1 for event in events if not event.converged),
                "duration_ms": round(duration_ms, 3),
            }
        )
    )
    return events


def solar_term_at(
    jd: float,
    *,
    settings: SolverSettings = DEFAULT_SETTINGS,
) -> SolarTermEvent:
    """Return the solar term in effect at *jd*: the latest one starting at or before it.

    Before the first term of the earliest supported year there is no earlier
    table to search, so the lookup wraps to the last term of that year, its
    winter solstice.
    """

    year = julian_day_to_civil(jd).year
    events: List[SolarTermEvent] = []
    if year > MIN_YEAR:
        events.extend(compute_solar_terms(year - 1, settings=settings))
    events.extend(compute_solar_terms(year, settings=settings))
    events.sort(key=lambda event: event.julian_day)

    position = bisect_right([event.julian_day for event in events], jd)
    if position == 0:
        return events[-1]
    return events[position - 1]
