"""Tests for run defaults and settings validation."""

import pytest
from pydantic import ValidationError

from salesman import config
from salesman.config import SalesmanSettings, build_settings, get_run_defaults
from salesman.exceptions import ConfigurationError


def test_packaged_defaults_match_fallback():
    defaults = get_run_defaults()
    assert defaults["points_count"] == 30
    assert defaults["population_max"] == 500
    assert defaults["weights"] == pytest.approx([0.40, 0.30, 0.17, 0.08, 0.05])
    assert defaults["seed"] is None


def test_get_run_defaults_returns_copy():
    defaults = get_run_defaults()
    defaults["weights"].append(1.0)
    assert len(get_run_defaults()["weights"]) == 5


def test_normalize_run_defaults_coerces_and_ignores_unknown_keys():
    merged = config._normalize_run_defaults(
        {"points_count": "12", "seed": "none", "weights": [], "frame_delay": 500}
    )
    assert merged["points_count"] == 12
    assert merged["seed"] is None
    assert merged["weights"] == config._RUN_DEFAULTS_FALLBACK["weights"]
    assert "frame_delay" not in merged


def test_normalize_run_defaults_handles_non_dict():
    assert config._normalize_run_defaults(None) == config._normalize_run_defaults({})


def test_settings_defaults():
    settings = SalesmanSettings()
    assert settings.points_count == 30
    assert settings.cross_frequency == pytest.approx(0.30)
    assert settings.mutation_frequency == pytest.approx(0.15)
    assert settings.generations == 60
    assert settings.distance_scale == pytest.approx(60.0)


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("SALESMAN_POPULATION_MAX", "42")
    monkeypatch.setenv("SALESMAN_WEIGHTS", "[0.6, 0.4]")
    monkeypatch.setenv("SALESMAN_SEED", "9")

    settings = SalesmanSettings()
    assert settings.population_max == 42
    assert settings.weights == [0.6, 0.4]
    assert settings.seed == 9


def test_keyword_overrides_beat_environment(monkeypatch):
    monkeypatch.setenv("SALESMAN_POINTS_COUNT", "7")
    assert build_settings(points_count=3).points_count == 3


@pytest.mark.parametrize(
    "overrides",
    [
        {"points_count": 0},
        {"population_max": 0},
        {"population_max": -5},
        {"mutation_frequency": 1.5},
        {"cross_frequency": -0.1},
        {"weights": [0.5, 0.4]},
        {"weights": [1.2, -0.2]},
        {"weights": []},
        {"generations": -1},
        {"distance_scale": 0.0},
    ],
)
def test_invalid_settings_raise_configuration_error(overrides):
    with pytest.raises(ConfigurationError):
        build_settings(**overrides)


def test_configuration_error_is_value_error():
    with pytest.raises(ValueError):
        build_settings(points_count=0)


def test_weights_tolerate_rounding():
    settings = build_settings(weights=[0.1] * 10)
    assert len(settings.weights) == 10


def test_assignment_is_validated():
    settings = build_settings()
    settings.population_max = 80
    assert settings.population_max == 80
    with pytest.raises(ValidationError):
        settings.weights = [0.9]
