"""
Place and context loaders.

The CLI reads candidate places and the request context from local JSON files. We validate
them into typed Pydantic models so downstream feature/scoring code can assume a consistent
shape. A places file is either a JSON list of places or an object with a `places` list.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter

from contextscore.core.env import resolve_project_path
from contextscore.domain.models import ContextSnapshot, Place


_PLACES_ADAPTER = TypeAdapter(list[Place])


def _read_json(path: str | Path) -> Any:
    resolved = resolve_project_path(path)
    return json.loads(resolved.read_text(encoding="utf-8"))


def load_places(path: str | Path) -> list[Place]:
    """Load and validate a places JSON file."""
    payload = _read_json(path)
    if isinstance(payload, dict):
        payload = payload.get("places", [])
    return _PLACES_ADAPTER.validate_python(payload)


def load_context(path: str | Path) -> ContextSnapshot:
    """Load and validate a context snapshot JSON file."""
    return ContextSnapshot.model_validate(_read_json(path))
