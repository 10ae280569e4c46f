from __future__ import annotations

"""
Per-request settings overrides (safe subset).

API and CLI callers can send `settings_overrides` to tune scoring knobs for a single
re-scoring run without touching the server's YAML. The payload is checked against
`ALLOWED_SETTINGS_OVERRIDES_TREE`, merged onto a dump of the current settings and
validated again, so a request can never run with an out-of-range threshold.

Application-level settings (name, timezone, log level) are never overridable per request.
"""

from typing import Any, Mapping

from contextscore.config.settings import Settings

# True: the whole subtree is open. A dict: only the listed keys, recursively.
ALLOWED_SETTINGS_OVERRIDES_TREE: dict[str, Any] = {
    "scoring": True,
    "features": {
        "time": True,
        "activity": True,
        "location": True,
    },
    # Vocabularies only change which tags count as which trait.
    "traits": True,
}


def _dotted(path: tuple[str, ...]) -> str:
    return ".".join(path)


def _check_overrides(
    overrides: Mapping[str, Any], allowed: Mapping[str, Any], path: tuple[str, ...] = ()
) -> None:
    for key, value in overrides.items():
        key_path = (*path, str(key))
        rule = allowed.get(key)
        if rule is None:
            raise ValueError(f"settings_overrides contains a disallowed key: '{_dotted(key_path)}'")
        if rule is True:
            continue
        if not isinstance(value, Mapping):
            raise ValueError(f"settings_overrides key '{_dotted(key_path)}' must be a mapping")
        _check_overrides(value, rule, key_path)


def _merged(base: Any, override: Any) -> Any:
    # Mappings merge key by key; anything else (numbers, lists, null) replaces the base value.
    if isinstance(base, Mapping) and isinstance(override, Mapping):
        out = dict(base)
        for key, value in override.items():
            out[key] = _merged(base.get(key), value)
        return out
    return override


def apply_settings_overrides(settings: Settings, overrides: Mapping[str, Any] | None) -> Settings:
    """Return `settings` with the whitelisted `overrides` merged in (same object when none).

    Raises:
        ValueError: a key outside the allowed subset, a non-mapping where a subtree is
            expected, or merged values that fail validation (`pydantic.ValidationError`).
    """
    if not overrides:
        return settings

    _check_overrides(overrides, ALLOWED_SETTINGS_OVERRIDES_TREE)
    payload = _merged(settings.model_dump(mode="python"), overrides)
    return Settings.model_validate(payload)
