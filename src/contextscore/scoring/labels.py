"""Korean display names for context codes (shown in explanations and the UI)."""

from __future__ import annotations

DAY_OF_WEEK_NAMES: tuple[str, ...] = ("일요일", "월요일", "화요일", "수요일", "목요일", "금요일", "토요일")

TIME_OF_DAY_NAMES: dict[str, str] = {
    "morning": "아침",
    "lunch": "점심",
    "afternoon": "오후",
    "evening": "저녁",
    "night": "밤",
    "late_night": "심야",
}

WEATHER_CONDITION_NAMES: dict[str, str] = {
    "sunny": "맑음",
    "cloudy": "흐림",
    "rainy": "비",
    "snowy": "눈",
    "foggy": "안개",
}

MOOD_NAMES: dict[str, str] = {
    "happy": "기쁨",
    "sad": "슬픔",
    "stressed": "스트레스",
    "excited": "설렘",
    "relaxed": "평온함",
    "bored": "지루함",
    "tired": "피곤함",
    "hungry": "배고픔",
    "romantic": "로맨틱함",
}


def get_day_of_week_name(day_of_week: int) -> str:
    """Day name for 0 = Sunday ... 6 = Saturday (wraps modulo 7)."""
    return DAY_OF_WEEK_NAMES[day_of_week % 7]


def get_time_of_day_name(time_of_day: str) -> str:
    return TIME_OF_DAY_NAMES.get(time_of_day, time_of_day)


def get_weather_condition_name(condition: str) -> str:
    return WEATHER_CONDITION_NAMES.get(condition, condition)


def get_mood_name(mood: str) -> str:
    return MOOD_NAMES.get(mood, mood)
