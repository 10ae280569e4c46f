"""
Activity-sequence feature (place-level).

Scores "what makes sense next" given the place the user just visited:
- a category transition table (restaurant -> cafe is natural, cafe -> cafe is not),
- tag rules on the previous visit (after food, dessert/coffee; after active, relaxing),
- a step decay on the elapsed time since that visit.

The decay multiplies every applied transition entry, so an old visit weighs everything
down rather than fading to neutral; the compositor's activity floor bounds that effect.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

from contextscore.config.settings import ActivityFeatureSettings, Settings, get_settings
from contextscore.domain.models import RecentActivity
from contextscore.features.traits import PlaceTraitSet
from contextscore.scoring.composite import NEUTRAL, FactorAccumulator, FactorResult

logger = logging.getLogger(__name__)

# previous category -> candidate category -> multiplier
SEQUENCE_PATTERNS: dict[str, dict[str, float]] = {
    "cafe": {"restaurant": 1.1, "shopping": 1.1, "cafe": 0.7, "entertainment": 1.0, "culture": 1.1},
    "restaurant": {"cafe": 1.2, "bar": 1.2, "entertainment": 1.1, "restaurant": 0.7, "shopping": 1.0},
    "shopping": {"cafe": 1.2, "restaurant": 1.1, "shopping": 0.8, "entertainment": 1.0, "bar": 0.9},
    "entertainment": {"restaurant": 1.2, "cafe": 1.1, "bar": 1.1, "entertainment": 0.8, "culture": 0.9},
    "culture": {"cafe": 1.2, "restaurant": 1.1, "entertainment": 1.0, "culture": 0.8, "shopping": 1.0},
    "outdoor": {"cafe": 1.3, "restaurant": 1.2, "indoor": 1.1, "outdoor": 0.9},
    "indoor": {"outdoor": 1.1, "cafe": 1.0, "restaurant": 1.0, "indoor": 0.9},
    "bar": {"restaurant": 0.9, "entertainment": 1.0, "bar": 0.7, "cafe": 1.1},
}

# previous-visit tag -> candidate tag fragment -> multiplier
TAG_PATTERNS: dict[str, dict[str, float]] = {
    "food": {"food": 0.8, "dessert": 1.2, "coffee": 1.2},
    "coffee": {"coffee": 0.8, "activity": 1.1},
    "active": {"relaxing": 1.2, "active": 0.9},
    "relaxing": {"active": 1.1, "relaxing": 0.9},
}


@dataclass(frozen=True)
class ActivityFactors:
    has_recent_activity: bool = False
    category: str | None = None
    elapsed_minutes: float | None = None
    time_factor: float = 1.0
    activity_tags: tuple[str, ...] = ()
    category_patterns: dict[str, float] = field(default_factory=dict)
    tag_patterns: dict[str, float] = field(default_factory=dict)


def decay_time_factor(elapsed_minutes: float | None, *, settings: Settings | None = None) -> float:
    """Step decay of a recent visit's influence (unknown, zero or malformed elapsed time -> 1.0)."""
    if not elapsed_minutes:
        return 1.0
    if not math.isfinite(elapsed_minutes) or elapsed_minutes < 0:
        logger.warning("Ignoring malformed elapsed_minutes %r for recent activity", elapsed_minutes)
        return 1.0
    cfg: ActivityFeatureSettings = (settings or get_settings()).features.activity
    for step in cfg.decay_steps:
        if elapsed_minutes <= step.max_minutes:
            return float(step.factor)
    return float(cfg.decay_floor)


def calculate_activity_sequence(
    recent_activity: RecentActivity | None, *, settings: Settings | None = None
) -> ActivityFactors:
    if recent_activity is None:
        return ActivityFactors()

    category = recent_activity.category or recent_activity.place_type
    patterns = SEQUENCE_PATTERNS.get(category or "", {"neutral": 1.0})

    # Later tags win when two rules touch the same fragment.
    tag_patterns: dict[str, float] = {}
    for tag in recent_activity.tags:
        tag_patterns.update(TAG_PATTERNS.get(tag, {}))

    return ActivityFactors(
        has_recent_activity=True,
        category=category,
        elapsed_minutes=recent_activity.elapsed_minutes,
        time_factor=decay_time_factor(recent_activity.elapsed_minutes, settings=settings),
        activity_tags=tuple(recent_activity.tags),
        category_patterns=dict(patterns),
        tag_patterns=tag_patterns,
    )


def score_activity(traits: PlaceTraitSet, factors: ActivityFactors, *, settings: Settings | None = None) -> FactorResult:
    if not factors.has_recent_activity:
        return NEUTRAL
    acc = FactorAccumulator(settings or get_settings())

    transition = factors.category_patterns.get(traits.category or "")
    if transition is not None:
        acc.apply(f"{factors.category}->{traits.category}", transition * factors.time_factor)

    for fragment, value in factors.tag_patterns.items():
        if traits.has_tag_containing(fragment):
            acc.apply(f"tag:{fragment}", value * factors.time_factor)

    return acc.result()
