"""
Place trait set.

Every scorer asks the same questions of a place: is it outdoors, is it a viewpoint, is it
quiet, does it serve food, ... The answers come from the place's tags and category matched
against the vocabularies in `settings.traits`. We compute them once per place and hand the
resulting `PlaceTraitSet` to all factor scorers instead of re-scanning tags per factor.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from contextscore.config.settings import Settings, get_settings
from contextscore.domain.models import Place


@dataclass(frozen=True)
class PlaceTraitSet:
    category: str | None
    sub_category: str | None
    tags: frozenset[str]
    groups: frozenset[str]
    traits: frozenset[str]

    @property
    def is_outdoor(self) -> bool:
        return "outdoor" in self.groups

    @property
    def is_indoor(self) -> bool:
        # Anything not tagged outdoor is treated as indoor.
        return not self.is_outdoor or "indoor" in self.groups

    @property
    def is_viewpoint(self) -> bool:
        return "viewpoint" in self.groups

    def has_category(self, *names: str) -> bool:
        return self.category in names

    def has_tag_containing(self, fragment: str) -> bool:
        return any(fragment in tag for tag in self.tags)


def _match(
    vocabularies: Mapping[str, list[str]],
    category_rules: Mapping[str, list[str]],
    *,
    tags: frozenset[str],
    labels: set[str],
) -> frozenset[str]:
    matched: set[str] = set()
    for name, vocab in vocabularies.items():
        if tags.intersection(v.lower() for v in vocab):
            matched.add(name)
    for name, categories in category_rules.items():
        if labels.intersection(c.lower() for c in categories):
            matched.add(name)
    return frozenset(matched)


def build_trait_set(place: Place, *, settings: Settings | None = None) -> PlaceTraitSet:
    """Compute the trait set of one place."""
    cfg = (settings or get_settings()).traits
    tags = frozenset(place.tags)
    labels = {label for label in (place.category, place.sub_category) if label}
    return PlaceTraitSet(
        category=place.category,
        sub_category=place.sub_category,
        tags=tags,
        groups=_match(cfg.groups, cfg.group_categories, tags=tags, labels=labels),
        traits=_match(cfg.mood_traits, cfg.mood_trait_categories, tags=tags, labels=labels),
    )
