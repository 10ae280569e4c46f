"""
Ranking.

Scored places are ordered by `final_match_score`, highest first. The sort must be stable:
callers often pass candidates already ordered by a tie-break of their own (review count,
recency), and equal scores keep that order.
"""

from __future__ import annotations

from typing import Sequence

from contextscore.domain.models import ScoredPlace


def rank_places(scored: Sequence[ScoredPlace]) -> list[ScoredPlace]:
    """Stable descending sort by final match score."""
    # `sorted` is stable, and `reverse=True` keeps equal elements in input order.
    return sorted(scored, key=lambda p: p.final_match_score, reverse=True)
