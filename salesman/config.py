"""
Configuration management for salesman.
Handles run defaults, environment overrides and settings validation.
"""
from typing import Any, Dict, List, Optional
import json
import math
from copy import deepcopy
from importlib.resources import files

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from salesman.exceptions import ConfigurationError

WEIGHTS_TOLERANCE = 1e-6

_RUN_DEFAULTS_FALLBACK: Dict[str, Any] = {
    "points_count": 30,
    "population_max": 500,
    "mutation_frequency": 0.15,
    "cross_frequency": 0.30,
    "generations": 60,
    "weights": [0.40, 0.30, 0.17, 0.08, 0.05],
    "distance_scale": 60.0,
    "seed": None,
}


def _as_optional_int(value: Any) -> Optional[int]:
    """Coerce JSON-like seed values, mapping null/'none'/'' to None."""
    if value is None:
        return None
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"", "none", "null"}:
            return None
        return int(lowered)
    return int(value)


def _normalize_run_defaults(raw: Any) -> Dict[str, Any]:
    """Merge loaded JSON defaults with fallbacks and type coercion."""
    merged = deepcopy(_RUN_DEFAULTS_FALLBACK)
    if isinstance(raw, dict):
        merged.update({k: v for k, v in raw.items() if k in _RUN_DEFAULTS_FALLBACK})

    merged["points_count"] = int(merged["points_count"])
    merged["population_max"] = int(merged["population_max"])
    merged["mutation_frequency"] = float(merged["mutation_frequency"])
    merged["cross_frequency"] = float(merged["cross_frequency"])
    merged["generations"] = int(merged["generations"])
    merged["distance_scale"] = float(merged["distance_scale"])
    merged["seed"] = _as_optional_int(merged.get("seed"))

    weights = merged.get("weights")
    if not isinstance(weights, list) or not weights:
        weights = _RUN_DEFAULTS_FALLBACK["weights"]
    merged["weights"] = [float(w) for w in weights]

    return merged


def _load_packaged_run_defaults() -> Dict[str, Any]:
    """Load packaged run defaults JSON with fallback behavior."""
    raw_defaults: Any = {}
    try:
        resource = files("salesman.defaults").joinpath("run_defaults.json")
        raw_defaults = json.loads(resource.read_text(encoding="utf-8"))
    except (FileNotFoundError, ModuleNotFoundError, json.JSONDecodeError):
        raw_defaults = {}
    return _normalize_run_defaults(raw_defaults)


_RUN_DEFAULTS = _load_packaged_run_defaults()


def get_run_defaults() -> Dict[str, Any]:
    """Return a copy of the normalized run defaults."""
    return deepcopy(_RUN_DEFAULTS)


class SalesmanSettings(BaseSettings):
    """Run configuration for the genetic engine."""

    model_config = SettingsConfigDict(
        env_prefix="SALESMAN_",
        validate_assignment=True,
        extra="ignore",
    )

    # Problem size
    points_count: int = Field(default=_RUN_DEFAULTS["points_count"], ge=1)
    distance_scale: float = Field(default=_RUN_DEFAULTS["distance_scale"], gt=0.0)

    # Population control
    population_max: int = Field(default=_RUN_DEFAULTS["population_max"], ge=1)
    mutation_frequency: float = Field(default=_RUN_DEFAULTS["mutation_frequency"], ge=0.0, le=1.0)
    cross_frequency: float = Field(default=_RUN_DEFAULTS["cross_frequency"], ge=0.0, le=1.0)
    weights: List[float] = Field(default_factory=lambda: list(_RUN_DEFAULTS["weights"]))

    # Run budget
    generations: int = Field(default=_RUN_DEFAULTS["generations"], ge=0)
    seed: Optional[int] = _RUN_DEFAULTS["seed"]

    @field_validator("weights")
    @classmethod
    def _check_weights(cls, value: List[float]) -> List[float]:
        if not value:
            raise ValueError("weights must contain at least one value")
        if any(w < 0 or not math.isfinite(w) for w in value):
            raise ValueError(f"weights must be finite and non-negative, got {value}")
        total = math.fsum(value)
        if abs(total - 1.0) > WEIGHTS_TOLERANCE:
            raise ValueError(f"weights must sum to 1, got {total:.6f}")
        return value


def build_settings(**overrides: Any) -> SalesmanSettings:
    """
    Build validated settings from defaults, environment and keyword overrides.

    Raises:
        ConfigurationError: if any value fails validation.
    """
    try:
        return SalesmanSettings(**overrides)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid salesman settings: {e}") from e
