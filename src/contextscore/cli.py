"""
ContextScore CLI entrypoint.

This CLI is intended for quick local demos and debugging without the API server.
It delegates all scoring logic to `contextscore.recommender.recommend.rescore`.
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any

from contextscore.catalog.loader import load_context, load_places
from contextscore.config.settings import get_settings
from contextscore.core.logging import configure_logging
from contextscore.core.time import parse_datetime
from contextscore.domain.models import ContextSnapshot, RescoreRequest, ScoredPlace
from contextscore.recommender.recommend import rescore
from contextscore.scoring.compositor import apply_contextual_factors
from contextscore.scoring.explain import generate_context_explanation, one_line_summary


def _read_context(args: argparse.Namespace) -> ContextSnapshot:
    settings = get_settings()
    context = load_context(args.context)
    if args.time:
        # --time replaces the file's timestamp; the weekday follows the new time.
        context = context.model_copy(
            update={"time": parse_datetime(args.time, settings.app.timezone), "day_of_week": None}
        )
    return context


def _display_name(place: Any) -> str:
    extra = place.model_extra or {}
    return str(extra.get("name") or place.id)


def _cmd_rescore(args: argparse.Namespace) -> int:
    """Handle the `rescore` subcommand."""
    settings = get_settings()
    request = RescoreRequest(
        places=load_places(args.places),
        context=_read_context(args),
        include_explanations=bool(args.explain),
        max_results=int(args.top) if args.top is not None else None,
    )
    result = rescore(request, settings=settings)

    if args.json:
        print(json.dumps(result.model_dump(mode="json"), ensure_ascii=False, indent=2))
        return 0

    print(f"Generated at: {result.generated_at.isoformat()}")
    print("Top results:")
    for i, item in enumerate(result.results, start=1):
        place = item.place
        if isinstance(place, ScoredPlace):
            print(f"{i:>2}. {_display_name(place)} ({place.category or '-'})  {one_line_summary(place)}")
            if place.boost_reasons:
                print(f"    + boosted by: {', '.join(place.boost_reasons)}")
            if place.reduction_reasons:
                print(f"    - reduced by: {', '.join(place.reduction_reasons)}")
        else:
            print(f"{i:>2}. {_display_name(place)} ({place.category or '-'})  base={place.base_match_score:.3f}")
        if item.explanation is not None:
            for reason in item.explanation.context_reasons:
                print(f"    * {reason}")
    return 0


def _cmd_explain(args: argparse.Namespace) -> int:
    """Handle the `explain` subcommand (one place by id)."""
    settings = get_settings()
    places = {p.id: p for p in load_places(args.places)}
    place = places.get(args.place_id)
    if place is None:
        raise SystemExit(f"Unknown place id: {args.place_id}")

    context = _read_context(args)
    scored = apply_contextual_factors([place], context, settings=settings)[0]
    explanation = generate_context_explanation(place, context, settings=settings)

    if args.json:
        payload = {
            "place": scored.model_dump(mode="json"),
            "explanation": explanation.model_dump(mode="json") if explanation is not None else None,
        }
        print(json.dumps(payload, ensure_ascii=False, indent=2))
        return 0

    print(f"{_display_name(scored)} ({scored.category or '-'})")
    if isinstance(scored, ScoredPlace):
        print(f"  {one_line_summary(scored)}")
    if explanation is None or not explanation.has_context_explanation:
        print("  (no context-specific reasons)")
        return 0
    for reason in explanation.context_reasons:
        print(f"  * {reason}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the ContextScore CLI."""
    parser = argparse.ArgumentParser(prog="contextscore")
    sub = parser.add_subparsers(dest="command", required=True)

    res = sub.add_parser("rescore", help="Re-score and rank candidate places for a context.")
    res.add_argument("--places", required=True, help="JSON file: a list of places or {\"places\": [...]}")
    res.add_argument("--context", required=True, help="JSON file with the context snapshot")
    res.add_argument("--time", default=None, help="ISO datetime overriding the context time")
    res.add_argument("--top", type=int, default=None, help="Return only the top N places")
    res.add_argument("--explain", action="store_true", help="Attach context explanations")
    res.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    res.set_defaults(func=_cmd_rescore)

    exp = sub.add_parser("explain", help="Explain how the context affects one place.")
    exp.add_argument("--places", required=True)
    exp.add_argument("--context", required=True)
    exp.add_argument("--place-id", required=True)
    exp.add_argument("--time", default=None, help="ISO datetime overriding the context time")
    exp.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    exp.set_defaults(func=_cmd_explain)
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint callable used by `python -m contextscore.cli`."""
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    func: Any = getattr(args, "func")
    try:
        return int(func(args))
    except (OSError, ValueError) as e:
        # Unreadable files and invalid JSON or place payloads.
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
