"""
Shared scoring utilities.

This module contains small, reusable helpers used across factor scorers:
- `clamp_multiplier`: keep a multiplier within the configured bounds (default 0.5..2.0)
- `FactorAccumulator`: running product of one factor's table entries, tracking boosts/reductions
- `compose_context_score`: blend the five factor multipliers into one composite multiplier
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Mapping

from contextscore.config.settings import Settings, get_settings

FACTOR_NAMES: tuple[str, ...] = ("time", "weather", "mood", "activity_sequence", "location")


def clamp_multiplier(x: float, *, settings: Settings | None = None) -> float:
    """Clamp a multiplier into the configured [min, max] range."""
    bounds = (settings or get_settings()).scoring.multiplier_bounds
    return max(float(bounds.min), min(float(bounds.max), float(x)))


@dataclass(frozen=True)
class FactorResult:
    """One factor's clamped multiplier plus the table entries that moved it."""

    multiplier: float = 1.0
    boosts: tuple[str, ...] = ()
    reductions: tuple[str, ...] = ()


NEUTRAL = FactorResult()


@dataclass
class FactorAccumulator:
    settings: Settings
    score: float = 1.0
    boosts: list[str] = field(default_factory=list)
    reductions: list[str] = field(default_factory=list)

    def apply(self, entry: str, multiplier: float) -> None:
        cfg = self.settings.scoring
        self.score *= float(multiplier)
        if multiplier > cfg.boost_threshold and entry not in self.boosts:
            self.boosts.append(entry)
        elif multiplier < cfg.reduction_threshold and entry not in self.reductions:
            self.reductions.append(entry)

    def result(self) -> FactorResult:
        return FactorResult(
            multiplier=clamp_multiplier(self.score, settings=self.settings),
            boosts=tuple(self.boosts),
            reductions=tuple(self.reductions),
        )


def compose_context_score(
    results: Mapping[str, FactorResult], *, settings: Settings | None = None
) -> float:
    """Multiply the factor multipliers; activity and location are floored first.

    A missing or weak activity/location signal must not sink a place the other
    factors favor, hence the floors on those two terms only.
    """
    settings = settings or get_settings()
    floors = settings.scoring.composite_floors

    def _m(name: str) -> float:
        return float(results.get(name, NEUTRAL).multiplier)

    score = (
        _m("time")
        * _m("weather")
        * _m("mood")
        * max(float(floors.get("activity", 0.0)), _m("activity_sequence"))
        * max(float(floors.get("location", 0.0)), _m("location"))
    )
    return clamp_multiplier(score, settings=settings)


ReasonKind = Literal["boost", "reduction"]


def factor_reasons(results: Mapping[str, FactorResult], kind: ReasonKind) -> list[str]:
    """Factor names (in canonical order) whose scorer recorded at least one boost/reduction."""
    out: list[str] = []
    for name in FACTOR_NAMES:
        result = results.get(name)
        if result is None:
            continue
        entries = result.boosts if kind == "boost" else result.reductions
        if entries and name not in out:
            out.append(name)
    return out
