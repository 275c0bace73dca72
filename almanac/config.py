"""Solver settings resolved from explicit arguments or the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

__all__ = ["ConfigurationError", "SolverSettings", "DEFAULT_SETTINGS", "load_settings"]

TOLERANCE_ENV = "ALMANAC_TOLERANCE_DEG"
MAX_ITERATIONS_ENV = "ALMANAC_MAX_ITERATIONS"
N_JOBS_ENV = "ALMANAC_N_JOBS"


class ConfigurationError(ValueError):
    """Raised when solver settings are invalid."""


@dataclass(frozen=True)
class SolverSettings:
    """Parameters of the solar-term root-finder.

    ``n_jobs`` follows :mod:`joblib` conventions: ``1`` runs sequentially and
    ``-1`` uses every available CPU.
    """

    tolerance_deg: float = 1e-4
    max_iterations: int = 10
    n_jobs: int = 1

    def __post_init__(self) -> None:
        if not self.tolerance_deg > 0:
            raise ConfigurationError("tolerance_deg must be positive")
        if self.max_iterations < 1:
            raise ConfigurationError("max_iterations must be at least 1")
        if self.n_jobs == 0:
            raise ConfigurationError("n_jobs must be non-zero")


DEFAULT_SETTINGS = SolverSettings()


def _read(environ: Mapping[str, str], key: str, cast, default):
    raw = environ.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        return cast(raw.strip())
    except ValueError as exc:
        raise ConfigurationError(f"Invalid value for {key}: {raw!r}") from exc


def load_settings(environ: Optional[Mapping[str, str]] = None) -> SolverSettings:
    """Build :class:`SolverSettings` from ``ALMANAC_*`` environment variables."""

    env = os.environ if environ is None else environ
    return SolverSettings(
        tolerance_deg=_read(env, TOLERANCE_ENV, float, DEFAULT_SETTINGS.tolerance_deg),
        max_iterations=_read(env, MAX_ITERATIONS_ENV, int, DEFAULT_SETTINGS.max_iterations),
        n_jobs=_read(env, N_JOBS_ENV, int, DEFAULT_SETTINGS.n_jobs),
    )
