"""
API routes.

Endpoints:
- POST `/api/rescore`: main entrypoint (places + context -> re-ranked places).
- POST `/api/explain`: score and explain a single place.
- GET  `/api/settings`: public scoring settings.
- GET  `/api/labels`: Korean display names for context codes.
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException

from contextscore.config.settings import get_settings
from contextscore.domain.models import ExplainRequest, RescoreRequest, RescoreResult
from contextscore.recommender.recommend import SCORING_RULES_VERSION, rescore
from contextscore.scoring.compositor import apply_contextual_factors
from contextscore.scoring.explain import generate_context_explanation
from contextscore.scoring.labels import DAY_OF_WEEK_NAMES, MOOD_NAMES, TIME_OF_DAY_NAMES, WEATHER_CONDITION_NAMES

router = APIRouter()


@router.post("/api/rescore", response_model=RescoreResult)
def post_rescore(request: RescoreRequest) -> RescoreResult:
    """Re-score candidate places against the request context and return them ranked."""
    settings = get_settings()
    try:
        return rescore(request, settings=settings)
    except ValueError as e:
        raise HTTPException(
            status_code=400,
            detail={"code": "VALIDATION_ERROR", "message": str(e)},
        ) from e
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail={"code": "INTERNAL_ERROR", "message": str(e)},
        ) from e


@router.post("/api/explain")
def post_explain(request: ExplainRequest) -> dict:
    """Return the scored place together with its context explanation."""
    settings = get_settings()
    try:
        scored = apply_contextual_factors([request.place], request.context, settings=settings)
        explanation = generate_context_explanation(request.place, request.context, settings=settings)
    except ValueError as e:
        raise HTTPException(
            status_code=400,
            detail={"code": "VALIDATION_ERROR", "message": str(e)},
        ) from e
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail={"code": "INTERNAL_ERROR", "message": str(e)},
        ) from e

    return {
        "place": scored[0].model_dump(mode="json"),
        "explanation": explanation.model_dump(mode="json") if explanation is not None else None,
    }


@router.get("/api/settings")
def get_public_settings() -> dict:
    """Return the scoring knobs a client may inspect (and override per request)."""
    data = get_settings().model_dump(mode="json")
    return {
        "app": {"timezone": data["app"]["timezone"]},
        "scoring": data["scoring"],
        "features": data["features"],
        "rules": {"version": SCORING_RULES_VERSION},
    }


@router.get("/api/labels")
def get_labels() -> dict:
    return {
        "day_of_week": list(DAY_OF_WEEK_NAMES),
        "time_of_day": dict(TIME_OF_DAY_NAMES),
        "weather": dict(WEATHER_CONDITION_NAMES),
        "mood": dict(MOOD_NAMES),
    }
