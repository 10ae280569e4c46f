"""
Logging configuration.

Only entry points call `configure_logging()`: the API module on import and the CLI's `main`.
Library code just does `logging.getLogger(__name__)`, and the scorers log a warning for
every malformed input they skip (NaN weather values, bad distances, bad elapsed times).

The packaged `config/logging.yaml` supplies formatters and handlers. `app.log_level`
(env `CONTEXTSCORE_LOG_LEVEL`) decides the level of the root logger, the `contextscore`
logger and every handler that declares one.
"""

from __future__ import annotations

import copy
import logging.config

from contextscore.config.settings import get_logging_config, get_settings


def configure_logging() -> None:
    """Apply the packaged logging config with the level from settings."""
    level = get_settings().app.log_level.upper()
    # `get_logging_config` is cached; work on a copy.
    config = copy.deepcopy(get_logging_config())

    config.setdefault("root", {})["level"] = level
    config.setdefault("loggers", {}).setdefault("contextscore", {})["level"] = level
    for handler in config.get("handlers", {}).values():
        if "level" in handler:
            handler["level"] = level

    logging.config.dictConfig(config)
