"""
Context explanations.

Short, human-readable sentences telling the user why a place suits the moment. They re-use
the normalizers and the place trait set, so they speak the same vocabulary as the scorers,
but only cover the salient cases (a handful of rules per factor); the scored breakdown
remains the complete record.

Also used by the CLI to print compact summaries of scored places.
"""

from __future__ import annotations

from contextscore.config.settings import Settings, get_settings
from contextscore.domain.models import ContextExplanation, ContextSnapshot, Place, ScoredPlace
from contextscore.features.activity import calculate_activity_sequence
from contextscore.features.location import calculate_location_relevance, place_distance
from contextscore.features.mood import calculate_mood_compatibility
from contextscore.features.time import calculate_time_factors
from contextscore.features.traits import PlaceTraitSet, build_trait_set
from contextscore.features.weather import calculate_weather_factors
from contextscore.scoring.labels import get_day_of_week_name, get_mood_name, get_time_of_day_name

# mood -> traits that make a place "fit" it for explanation purposes
_MOOD_FIT_TRAITS: dict[str, frozenset[str]] = {
    "happy": frozenset({"entertainment", "loud"}),
    "excited": frozenset({"entertainment", "loud"}),
    "stressed": frozenset({"quiet", "comfort"}),
    "tired": frozenset({"quiet", "comfort"}),
    "sad": frozenset({"cozy", "comfort"}),
    "bored": frozenset({"unique", "active"}),
    "romantic": frozenset({"intimate"}),
}


def _time_reasons(place: PlaceTraitSet, context: ContextSnapshot) -> list[str]:
    tf = calculate_time_factors(context.time, context.day_of_week)
    tod = tf.time_of_day
    tod_name = get_time_of_day_name(tod)
    reasons: list[str] = []

    if place.has_category("cafe") and tod == "afternoon":
        reasons.append(f"{tod_name} 시간대에 카페를 방문하기 좋은 시간입니다.")
    elif place.has_category("restaurant") and tod == "lunch":
        reasons.append(f"현재 {tod_name} 시간대로 식사하기 좋은 시간입니다.")
    elif place.has_category("restaurant") and tod == "evening":
        reasons.append(f"{tod_name} 식사에 적합한 시간대입니다.")
    elif place.has_category("bar") and tod in ("evening", "night"):
        reasons.append(f"{tod_name} 시간대에 방문하기 좋은 장소입니다.")

    if tf.is_weekend and tf.day_of_week is not None:
        reasons.append(f"{get_day_of_week_name(tf.day_of_week)}이라 여유롭게 방문하기 좋은 날입니다.")
    elif place.has_category("restaurant") and tod == "lunch":
        reasons.append("평일 점심 시간대에 방문하기 좋은 장소입니다.")
    return reasons


def _weather_reasons(place: PlaceTraitSet, context: ContextSnapshot) -> list[str]:
    wf = calculate_weather_factors(context.weather)
    reasons: list[str] = []

    if wf.is_rainy:
        if place.is_indoor:
            reasons.append("비 오는 날씨에 실내에서 즐기기 좋은 장소입니다.")
        else:
            reasons.append("현재 비가 오고 있어 야외 장소 방문은 권장하지 않습니다.")
    elif wf.is_sunny and place.is_outdoor:
        reasons.append("맑은 날씨에 야외에서 즐기기 좋은 장소입니다.")

    if wf.is_hot and place.is_indoor and place.has_category("cafe"):
        reasons.append("더운 날씨에 시원한 카페에서 휴식하기 좋습니다.")
    elif wf.is_cold and place.is_indoor:
        reasons.append("추운 날씨에 따뜻한 실내에서 머물기 좋은 장소입니다.")
    return reasons


def _mood_reasons(place: PlaceTraitSet, context: ContextSnapshot) -> list[str]:
    mf = calculate_mood_compatibility(context.mood)
    fit = _MOOD_FIT_TRAITS.get(mf.mood)
    if not fit or not (place.traits & fit):
        return []

    name = get_mood_name(mf.mood)
    if mf.mood in ("happy", "excited"):
        return [f"현재 {name} 감정과 잘 어울리는 활기찬 장소입니다."]
    if mf.mood in ("stressed", "tired"):
        return [f"{name} 상태에 편안한 휴식을 취하기 좋은 장소입니다."]
    if mf.mood == "sad":
        return [f"{name} 감정에 위로가 되는 따뜻한 분위기의 장소입니다."]
    if mf.mood == "bored":
        return [f"{name} 감정을 해소할 수 있는 새로운 경험을 제공하는 장소입니다."]
    return [f"{name} 감정에 어울리는 분위기 좋은 장소입니다."]


def _activity_reasons(place: PlaceTraitSet, context: ContextSnapshot, settings: Settings) -> list[str]:
    af = calculate_activity_sequence(context.recent_activity, settings=settings)
    if af.category == "restaurant" and place.has_category("cafe"):
        return ["식사 후 디저트나 커피를 즐기기 좋은 장소입니다."]
    if af.category == "cafe" and place.has_category("shopping"):
        return ["카페에서 휴식 후 쇼핑하기 좋은 장소입니다."]
    if af.category == "outdoor" and "indoor_venue" in place.groups:
        return ["야외 활동 후 실내에서 휴식하기 좋은 장소입니다."]
    return []


def _location_reasons(place: Place, context: ContextSnapshot, settings: Settings) -> list[str]:
    lf = calculate_location_relevance(context.location, settings=settings)
    if not lf.has_location:
        return []
    reasons: list[str] = []

    distance = place_distance(place, lf)
    if distance is not None:
        if distance < lf.max_distance * 0.2:
            reasons.append("현재 위치에서 가까운 거리에 있는 장소입니다.")
        elif distance > lf.max_distance:
            reasons.append("현재 위치에서 다소 먼 거리에 있는 장소입니다.")

    if lf.region and place.region == lf.region:
        if lf.sub_region and place.sub_region == lf.sub_region:
            reasons.append(f"선호하는 {place.sub_region} 지역 내에 있는 장소입니다.")
        else:
            reasons.append(f"선호하는 {place.region} 지역 내에 있는 장소입니다.")
    return reasons


def generate_context_explanation(
    place: Place | None, context: ContextSnapshot | None, *, settings: Settings | None = None
) -> ContextExplanation | None:
    """Explain in a few sentences why `place` fits `context` (None without place or context)."""
    if place is None or context is None:
        return None
    settings = settings or get_settings()
    traits = build_trait_set(place, settings=settings)

    reasons: list[str] = []
    if context.time is not None:
        reasons.extend(_time_reasons(traits, context))
    if context.weather is not None:
        reasons.extend(_weather_reasons(traits, context))
    if context.mood is not None and context.mood.label:
        reasons.extend(_mood_reasons(traits, context))
    if context.recent_activity is not None:
        reasons.extend(_activity_reasons(traits, context, settings))
    if context.location is not None:
        reasons.extend(_location_reasons(place, context, settings))

    return ContextExplanation(context_reasons=reasons, has_context_explanation=bool(reasons))


def one_line_summary(place: ScoredPlace) -> str:
    """Render a compact single-line summary for a scored place."""
    f = place.context_factors
    parts = [
        f"final={place.final_match_score:.3f}",
        f"base={place.base_match_score:.3f}",
        f"context={place.context_score:.3f}",
        f"time={f.time_score:.2f}",
        f"weather={f.weather_score:.2f}",
        f"mood={f.mood_score:.2f}",
        f"activity={f.activity_score:.2f}",
        f"location={f.location_score:.2f}",
    ]
    return " | ".join(parts)
