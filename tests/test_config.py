from __future__ import annotations

import dataclasses

import pytest

from almanac.config import DEFAULT_SETTINGS, ConfigurationError, SolverSettings, load_settings


def test_defaults():
    assert DEFAULT_SETTINGS == SolverSettings(tolerance_deg=1e-4, max_iterations=10, n_jobs=1)
    assert load_settings({}) == DEFAULT_SETTINGS


def test_environment_overrides():
    settings = load_settings(
        {
            "ALMANAC_TOLERANCE_DEG": "1e-6",
            "ALMANAC_MAX_ITERATIONS": " 25 ",
            "ALMANAC_N_JOBS": "-1",
        }
    )
    assert settings == SolverSettings(tolerance_deg=1e-6, max_iterations=25, n_jobs=-1)


def test_blank_values_fall_back_to_defaults():
    assert load_settings({"ALMANAC_MAX_ITERATIONS": "  "}) == DEFAULT_SETTINGS


def test_reads_process_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ALMANAC_MAX_ITERATIONS", "12")
    assert load_settings().max_iterations == 12


@pytest.mark.parametrize(
    "environ",
    [
        {"ALMANAC_TOLERANCE_DEG": "tight"},
        {"ALMANAC_TOLERANCE_DEG": "0"},
        {"ALMANAC_TOLERANCE_DEG": "nan"},
        {"ALMANAC_MAX_ITERATIONS": "2.5"},
        {"ALMANAC_MAX_ITERATIONS": "0"},
        {"ALMANAC_N_JOBS": "0"},
    ],
)
def test_invalid_values_rejected(environ) -> None:
    with pytest.raises(ConfigurationError):
        load_settings(environ)


def test_settings_are_immutable():
    with pytest.raises(dataclasses.FrozenInstanceError):
        DEFAULT_SETTINGS.max_iterations = 3  # type: ignore[misc]
