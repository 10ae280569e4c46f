"""
Mood feature (place-level).

Each canonical mood maps to trait multipliers: traits that suit the mood get a boost, traits
that clash with it get a penalty. Intensity above the neutral midpoint (3 of 5) strengthens
the mood's dominant traits (multiplied by `intensity_factor`) and its opposing traits
(divided by it); intensity at or below 3 leaves the table as-is.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from contextscore.config.settings import Settings, get_settings
from contextscore.domain.models import MoodState
from contextscore.features.traits import PlaceTraitSet
from contextscore.scoring.composite import NEUTRAL, FactorAccumulator, FactorResult

MOODS: tuple[str, ...] = (
    "happy",
    "sad",
    "stressed",
    "excited",
    "relaxed",
    "bored",
    "tired",
    "hungry",
    "romantic",
)

UNKNOWN_MOOD_FACTORS: dict[str, float] = {"neutral": 1.0}


@dataclass(frozen=True)
class MoodFactors:
    mood: str = "neutral"
    intensity: float = 3
    intensity_factor: float = 1.0
    factors: dict[str, float] = field(default_factory=dict)


def _mood_tables(k: float) -> dict[str, dict[str, float]]:
    return {
        "happy": {
            "active": 1.2 * k,
            "social": 1.2 * k,
            "outdoors": 1.1,
            "entertainment": 1.2,
            "quiet": 0.9 / k,
            "serene": 0.8 / k,
        },
        "sad": {
            "quiet": 1.2 * k,
            "comfort": 1.2,
            "natural": 1.1,
            "cozy": 1.2,
            "loud": 0.7 / k,
            "crowded": 0.8 / k,
        },
        "stressed": {
            "relaxing": 1.3 * k,
            "quiet": 1.2,
            "natural": 1.2,
            "serene": 1.2 * k,
            "loud": 0.6 / k,
            "crowded": 0.7 / k,
            "busy": 0.7 / k,
        },
        "excited": {
            "entertainment": 1.3 * k,
            "social": 1.2,
            "active": 1.2 * k,
            "unique": 1.2,
            "quiet": 0.8 / k,
            "serene": 0.7 / k,
        },
        "relaxed": {
            "natural": 1.1,
            "quiet": 1.1,
            "scenic": 1.2,
            "comfort": 1.1,
            "loud": 0.9,
            "crowded": 0.9,
        },
        "bored": {
            "entertainment": 1.3,
            "active": 1.2,
            "unique": 1.3,
            "novel": 1.3,
            "educational": 1.1,
            "quiet": 0.8,
            "routine": 0.7,
        },
        "tired": {
            "relaxing": 1.3,
            "comfort": 1.2,
            "quiet": 1.1,
            "convenience": 1.2,
            "active": 0.7,
            "crowded": 0.8,
            "loud": 0.7,
        },
        "hungry": {
            "restaurant": 1.4,
            "cafe": 1.2,
            "food": 1.3,
            "convenience": 1.2,
            "shopping": 0.9,
        },
        "romantic": {
            "intimate": 1.3,
            "scenic": 1.2,
            "quiet": 1.1,
            "cozy": 1.2,
            "elegant": 1.2,
            "crowded": 0.8,
            "loud": 0.7,
        },
    }


def calculate_mood_compatibility(mood: MoodState | None) -> MoodFactors:
    """Resolve the trait table for `mood`; unknown labels get `{"neutral": 1.0}`."""
    if mood is None or not mood.label:
        return MoodFactors()

    intensity = float(mood.intensity)
    k = max(1.0, intensity / 3)
    table = _mood_tables(k).get(mood.label)
    return MoodFactors(
        mood=mood.label,
        intensity=intensity,
        intensity_factor=k,
        factors=table if table is not None else dict(UNKNOWN_MOOD_FACTORS),
    )


def score_mood(traits: PlaceTraitSet, factors: MoodFactors, *, settings: Settings | None = None) -> FactorResult:
    if not factors.factors:
        return NEUTRAL
    acc = FactorAccumulator(settings or get_settings())
    for trait in sorted(traits.traits):
        value = factors.factors.get(trait)
        if value is not None:
            acc.apply(trait, value)
    return acc.result()
