"""
utils.py – shared, low-level utilities for the yaml-schema-validator package.

This module consolidates common helpers for:
- Timestamps (ISO-8601 format, used by the SARIF invocation record)
- Schema reference classification (URL vs. filesystem path)
- Logging setup for the command-line driver
"""

from __future__ import annotations

import datetime as _dt
import logging
import sys
from typing import TextIO

# --------------------------------------------------------------------------- #
# Timestamps                                                                  #
# --------------------------------------------------------------------------- #

def _now_iso() -> str:
    """Current UTC timestamp in ISO-8601 (second precision)."""
    return _dt.datetime.now(_dt.timezone.utc).isoformat(timespec="seconds")


# --------------------------------------------------------------------------- #
# Schema references                                                           #
# --------------------------------------------------------------------------- #

_URL_PREFIXES = ("http://", "https://")


def _is_http_url(reference: str) -> bool:
    """Return True iff *reference* names an ``http(s)://`` resource."""
    return reference.startswith(_URL_PREFIXES)


# --------------------------------------------------------------------------- #
# Logging                                                                     #
# --------------------------------------------------------------------------- #

LOG_FORMAT = "%(name)s - %(levelname)s - %(message)s"


def configure_logging(level: int | str = logging.WARNING, *, stream: TextIO | None = None) -> None:
    """Configure root logging with a single stderr handler.

    Reports are written to stdout, so every log record goes to stderr to keep
    piped report output clean.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)

    handler = logging.StreamHandler(stream=stream or sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
