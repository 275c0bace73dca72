"""Calendrical and astronomical core: Julian Days, solar terms and new moons."""

from .config import ConfigurationError, SolverSettings, load_settings
from .julian import (
    CalendarValidationError,
    civil_to_julian_day,
    julian_day_to_civil,
    to_julian_day,
)
from .lunar import approximate_new_moons, lunar_phase, moon_illumination, new_moon_events
from .models import CivilDateTime, LunarConjunctionEvent, SolarTermEvent, SolarTermSolution
from .solar import longitude_of_sun, solar_speed_deg_per_day
from .solar_terms import (
    SOLAR_TERMS,
    compute_solar_terms,
    find_solar_term_time,
    solar_term_at,
    solve_solar_term,
)

__all__ = [
    "CalendarValidationError",
    "CivilDateTime",
    "ConfigurationError",
    "LunarConjunctionEvent",
    "SOLAR_TERMS",
    "SolarTermEvent",
    "SolarTermSolution",
    "SolverSettings",
    "approximate_new_moons",
    "civil_to_julian_day",
    "compute_solar_terms",
    "find_solar_term_time",
    "julian_day_to_civil",
    "load_settings",
    "longitude_of_sun",
    "lunar_phase",
    "moon_illumination",
    "new_moon_events",
    "solar_speed_deg_per_day",
    "solar_term_at",
    "solve_solar_term",
    "to_julian_day",
]
