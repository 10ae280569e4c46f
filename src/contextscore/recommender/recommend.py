from __future__ import annotations

# This module is the "orchestrator" for one re-scoring request.
# It wires together:
# - request input (RescoreRequest: places + context + options)
# - per-request settings (defaults + safe overrides)
# - the compositor (normalize -> score -> rank)
# - optional explanations per returned place
# - response metadata (signals used, warnings, timings)
#
# The engine itself stays pure; everything request-shaped lives here.

import logging
import time
from datetime import datetime
from typing import Any
from zoneinfo import ZoneInfo

from contextscore.config.overrides import apply_settings_overrides
from contextscore.config.settings import Settings, get_settings
from contextscore.core.time import ensure_tz
from contextscore.domain.models import ContextSnapshot, RescoreItem, RescoreRequest, RescoreResult, ScoredPlace
from contextscore.scoring.compositor import apply_contextual_factors
from contextscore.scoring.explain import generate_context_explanation

logger = logging.getLogger(__name__)

SCORING_RULES_VERSION = "2026-10-19"


def _context_signals(context: ContextSnapshot | None) -> dict[str, bool]:
    if context is None:
        return {name: False for name in ("time", "weather", "mood", "recent_activity", "location")}
    return {
        "time": context.time is not None,
        "weather": context.weather is not None,
        "mood": context.mood is not None and bool(context.mood.label),
        "recent_activity": context.recent_activity is not None,
        "location": context.location is not None,
    }


def _normalize_context(context: ContextSnapshot | None, settings: Settings) -> ContextSnapshot | None:
    # A new snapshot is returned; the caller's object is never mutated.
    if context is None or context.time is None:
        return context
    return context.model_copy(update={"time": ensure_tz(context.time, settings.app.timezone)})


def rescore(request: RescoreRequest, *, settings: Settings | None = None) -> RescoreResult:
    t0 = time.monotonic()
    timings_ms: dict[str, int] = {}

    # ---- Step 1: Resolve settings for THIS run (defaults -> per-request overrides) ----
    settings = settings or get_settings()
    settings = apply_settings_overrides(settings, request.settings_overrides)

    # ---- Step 2: Re-score and rank (identity when there is no context) ----
    context = _normalize_context(request.context, settings)
    ranked = apply_contextual_factors(request.places, context, settings=settings)
    timings_ms["score"] = int((time.monotonic() - t0) * 1000)

    # ---- Step 3: Trim to top-N and attach explanations ----
    top = ranked[: request.max_results] if request.max_results else ranked
    t_explain = time.monotonic()
    items: list[RescoreItem] = []
    for place in top:
        explanation = (
            generate_context_explanation(place, context, settings=settings) if request.include_explanations else None
        )
        items.append(RescoreItem(place=place, explanation=explanation))
    timings_ms["explain"] = int((time.monotonic() - t_explain) * 1000)

    # ---- Step 4: Metadata for clients and logs ----
    scored = [p for p in ranked if isinstance(p, ScoredPlace)]
    signals = _context_signals(context)
    warnings: list[dict[str, Any]] = []
    if context is None:
        warnings.append(
            {
                "code": "CONTEXT_MISSING",
                "message": "No context supplied; places returned in their original order.",
            }
        )
    elif not any(signals.values()):
        warnings.append(
            {
                "code": "CONTEXT_EMPTY",
                "message": "Context has no usable signals; every factor is neutral.",
            }
        )

    timings_ms["total"] = int((time.monotonic() - t0) * 1000)
    logger.info(
        "Rescored %d places (%d returned) signals=%s in %dms",
        len(request.places),
        len(items),
        ",".join(k for k, v in signals.items() if v) or "none",
        timings_ms["total"],
    )

    meta = {
        "candidates": len(request.places),
        "returned": len(items),
        "context_signals": signals,
        "boosted_count": sum(1 for p in scored if p.context_boost),
        "reduced_count": sum(1 for p in scored if p.context_reduction),
        "settings_snapshot": {
            "multiplier_bounds": settings.scoring.multiplier_bounds.model_dump(),
            "composite_floors": dict(settings.scoring.composite_floors),
            "unknown_category_table": settings.features.time.unknown_category_table,
            "overrides_enabled": bool(request.settings_overrides),
            "timezone": settings.app.timezone,
        },
        "warnings": warnings,
        "timings_ms": timings_ms,
        "rules": {"version": SCORING_RULES_VERSION},
    }

    return RescoreResult(
        generated_at=datetime.now(ZoneInfo(settings.app.timezone)),
        results=items,
        meta=meta,
    )
