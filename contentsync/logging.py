"""Logging setup shared by the synchronizer, the CLI and the service."""

from __future__ import annotations

import logging
import os
import sys
from typing import Mapping

_ROOT = "contentsync"
LEVEL_ENV_VAR = "CONTENTSYNC_LOG_LEVEL"
_FORMAT = "[contentsync:%(component)s] %(levelname)s %(message)s"


def get_logger(component: str | None = None) -> logging.Logger:
    """Logger for one component (``sync``, ``transport``...) of the package."""
    return logging.getLogger(f"{_ROOT}.{component}" if component else _ROOT)


class _ComponentFilter(logging.Filter):
    """Exposes the component suffix of the logger name as ``%(component)s``."""

    def filter(self, record: logging.LogRecord) -> bool:
        _, _, component = record.name.partition(".")
        record.component = component or "core"
        return True


def resolve_level(
    *, verbose: bool = False, quiet: bool = False, environ: Mapping[str, str] | None = None
) -> int:
    """Pick the log level from CLI flags, then ``CONTENTSYNC_LOG_LEVEL``, then INFO."""
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.WARNING
    name = (environ if environ is not None else os.environ).get(LEVEL_ENV_VAR, "")
    level = logging.getLevelName(name.strip().upper()) if name.strip() else None
    return level if isinstance(level, int) else logging.INFO


def configure_logging(*, verbose: bool = False, quiet: bool = False) -> logging.Logger:
    """Send package logs to stderr so list output on stdout stays clean."""
    level = resolve_level(verbose=verbose, quiet=quiet)
    logger = logging.getLogger(_ROOT)
    logger.setLevel(level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.addFilter(_ComponentFilter())
    handler.setFormatter(logging.Formatter(_FORMAT))
    logger.addHandler(handler)
    return logger


__all__ = ["LEVEL_ENV_VAR", "configure_logging", "get_logger", "resolve_level"]
