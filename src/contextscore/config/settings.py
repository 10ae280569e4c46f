# src/contextscore/config/settings.py
"""
Application settings (Pydantic).

Settings are loaded from `src/contextscore/config/defaults.yaml`, then optionally overridden by:
- environment variables (e.g., `CONTEXTSCORE_LOG_LEVEL`)
- an external YAML file via `CONTEXTSCORE_CONFIG_PATH`

Design rule:
- Tuning knobs live in YAML, not hard-coded in business logic.
- Hour- and condition-dependent multiplier tables stay in the feature modules because
  they are formulas, not constants.
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, model_validator

from contextscore.core.env import load_dotenv_if_present


def _read_package_yaml(filename: str) -> dict[str, Any]:
    """Read a YAML file packaged inside `contextscore.config`."""
    text = resources.files("contextscore.config").joinpath(filename).read_text(encoding="utf-8")
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {filename}; expected a mapping.")
    return data


def _read_yaml_file(path: str | Path) -> dict[str, Any]:
    """Read a YAML file from disk and return its mapping root."""
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {path}; expected a mapping.")
    return data


class AppSettings(BaseModel):
    name: str = "ContextScore"
    timezone: str = "Asia/Seoul"
    log_level: str = "INFO"


class MultiplierBounds(BaseModel):
    min: float = Field(0.5, gt=0)
    max: float = Field(2.0, gt=0)

    @model_validator(mode="after")
    def _validate_order(self) -> "MultiplierBounds":
        if self.max < self.min:
            raise ValueError("multiplier_bounds.max must be >= multiplier_bounds.min")
        return self


class ScoringSettings(BaseModel):
    multiplier_bounds: MultiplierBounds = Field(default_factory=MultiplierBounds)
    boost_threshold: float = 1.05
    reduction_threshold: float = 0.95
    composite_floors: dict[Literal["activity", "location"], float] = Field(
        default_factory=lambda: {"activity": 0.8, "location": 0.8}
    )


class TimeFeatureSettings(BaseModel):
    # Table used for categories without their own time table; null means neutral.
    unknown_category_table: str | None = "restaurant"


class ActivityDecayStep(BaseModel):
    max_minutes: float = Field(..., gt=0)
    factor: float = Field(..., ge=0)


class ActivityFeatureSettings(BaseModel):
    decay_steps: list[ActivityDecayStep] = Field(
        default_factory=lambda: [
            ActivityDecayStep(max_minutes=30, factor=1.0),
            ActivityDecayStep(max_minutes=60, factor=0.9),
            ActivityDecayStep(max_minutes=120, factor=0.7),
            ActivityDecayStep(max_minutes=300, factor=0.5),
        ]
    )
    decay_floor: float = Field(0.3, ge=0)

    @model_validator(mode="after")
    def _sort_steps(self) -> "ActivityFeatureSettings":
        self.decay_steps = sorted(self.decay_steps, key=lambda s: s.max_minutes)
        return self


class DistanceBucket(BaseModel):
    name: str
    # "within": distance <= max_distance * fraction; "beyond": distance > max_distance * fraction.
    direction: Literal["within", "beyond"]
    fraction: float = Field(..., gt=0)
    multiplier: float = Field(..., gt=0)


class RegionMultipliers(BaseModel):
    same_sub_region: float = 1.3
    same_region: float = 1.2
    different_region: float = 0.9


class LocationFeatureSettings(BaseModel):
    default_max_distance_m: float = Field(3000, gt=0)
    max_distance_m: dict[str, float] = Field(
        default_factory=lambda: {"walking": 1500, "bicycle": 5000, "public": 8000, "car": 15000}
    )
    # First matching bucket wins, so order matters.
    distance_buckets: list[DistanceBucket] = Field(
        default_factory=lambda: [
            DistanceBucket(name="very_close", direction="within", fraction=0.2, multiplier=1.3),
            DistanceBucket(name="close", direction="within", fraction=0.5, multiplier=1.2),
            DistanceBucket(name="medium", direction="within", fraction=0.8, multiplier=1.1),
            DistanceBucket(name="very_far", direction="beyond", fraction=1.5, multiplier=0.6),
            DistanceBucket(name="far", direction="beyond", fraction=1.0, multiplier=0.8),
        ]
    )
    region_multipliers: RegionMultipliers = Field(default_factory=RegionMultipliers)


class FeaturesSettings(BaseModel):
    time: TimeFeatureSettings = Field(default_factory=TimeFeatureSettings)
    activity: ActivityFeatureSettings = Field(default_factory=ActivityFeatureSettings)
    location: LocationFeatureSettings = Field(default_factory=LocationFeatureSettings)


class TraitSettings(BaseModel):
    """Tag vocabularies used to build a place's trait set (tags are matched lower-cased)."""

    groups: dict[str, list[str]] = Field(default_factory=dict)
    group_categories: dict[str, list[str]] = Field(default_factory=dict)
    mood_traits: dict[str, list[str]] = Field(default_factory=dict)
    mood_trait_categories: dict[str, list[str]] = Field(default_factory=dict)


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    scoring: ScoringSettings = Field(default_factory=ScoringSettings)
    features: FeaturesSettings = Field(default_factory=FeaturesSettings)
    traits: TraitSettings = Field(default_factory=TraitSettings)


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay selected environment variables onto raw settings payload.

    Note: We intentionally keep this whitelist small to avoid exposing unsafe overrides.
    """
    load_dotenv_if_present()
    data = dict(data)

    log_level = os.getenv("CONTEXTSCORE_LOG_LEVEL")
    if log_level:
        data.setdefault("app", {})["log_level"] = log_level

    timezone = os.getenv("CONTEXTSCORE_TIMEZONE")
    if timezone:
        data.setdefault("app", {})["timezone"] = timezone

    return data


@lru_cache
def get_settings() -> Settings:
    """Load and validate settings (cached)."""
    load_dotenv_if_present()
    config_path = os.getenv("CONTEXTSCORE_CONFIG_PATH")
    raw = _read_yaml_file(config_path) if config_path else _read_package_yaml("defaults.yaml")
    raw = _apply_env_overrides(raw)
    return Settings.model_validate(raw)


@lru_cache
def get_logging_config() -> dict[str, Any]:
    """Load logging configuration (cached)."""
    return _read_package_yaml("logging.yaml")
