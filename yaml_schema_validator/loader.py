"""
loader.py - compile schema references into ready-to-use validators, once.

Public API
----------
detect_dialect(schema) : map a schema's ``$schema`` indicator to a dialect id
compile_schema(reference, text) : parse + dialect-tag + build one CompiledSchema
SchemaCache : write-once / read-many cache of CompiledSchema keyed by reference
"""

from __future__ import annotations

import logging
import threading
import warnings
from dataclasses import dataclass
from typing import Any, Callable, Mapping

import jsonschema
from jsonschema.exceptions import SchemaError as MetaSchemaError

from .exceptions import CompileError, ParseError, SchemaVersionUnknown
from .fetcher import SchemaFetcher
from .parser import parse_text

__all__ = [
    "DEFAULT_DIALECT",
    "DIALECTS",
    "CompiledSchema",
    "SchemaCache",
    "compile_schema",
    "detect_dialect",
]

logger = logging.getLogger(__name__)

# --------------------------------------------------------------------------- #
# Dialect table                                                               #
# --------------------------------------------------------------------------- #

# (indicator URI without scheme or trailing '#', dialect id, validator class)
DIALECTS: tuple[tuple[str, str, type], ...] = (
    ("json-schema.org/draft-03/schema", "draft-03", jsonschema.Draft3Validator),
    ("json-schema.org/draft-04/schema", "draft-04", jsonschema.Draft4Validator),
    ("json-schema.org/draft-06/schema", "draft-06", jsonschema.Draft6Validator),
    ("json-schema.org/draft-07/schema", "draft-07", jsonschema.Draft7Validator),
    ("json-schema.org/draft/2019-09/schema", "2019-09", jsonschema.Draft201909Validator),
    ("json-schema.org/draft/2020-12/schema", "2020-12", jsonschema.Draft202012Validator),
)
DEFAULT_DIALECT = "2020-12"

_BY_URI = {uri: dialect for uri, dialect, _ in DIALECTS}
_VALIDATORS = {dialect: cls for _, dialect, cls in DIALECTS}


def _normalise_indicator(indicator: str) -> str:
    return indicator.strip().split("://", 1)[-1].rstrip("#")


def detect_dialect(schema: Any) -> str:
    """Return the dialect id named by *schema*'s ``$schema`` field.

    Never fails: an absent, non-string or unknown indicator logs and issues a
    :class:`SchemaVersionUnknown` warning and yields the newest dialect.
    """
    indicator = schema.get("$schema") if isinstance(schema, Mapping) else None
    if isinstance(indicator, str):
        dialect = _BY_URI.get(_normalise_indicator(indicator))
        if dialect is not None:
            return dialect
    message = f"Unrecognised $schema {indicator!r}, defaulting to {DEFAULT_DIALECT}"
    logger.warning("%s: %s", SchemaVersionUnknown.__name__, message)
    warnings.warn(message, SchemaVersionUnknown, stacklevel=2)
    return DEFAULT_DIALECT


# --------------------------------------------------------------------------- #
# Compilation                                                                 #
# --------------------------------------------------------------------------- #

@dataclass(frozen=True)
class CompiledSchema:
    """A parsed, dialect-tagged schema with its validator built."""
    reference: str
    dialect: str
    schema: Any
    validator: Any

    @property
    def schema_id(self) -> str:
        if isinstance(self.schema, Mapping):
            return str(self.schema.get("$id") or self.schema.get("id") or "")
        return ""


def compile_schema(reference: str, text: str) -> CompiledSchema:
    """Parse *text* (JSON first, then YAML) and build its validator."""
    try:
        node = parse_text(text)
    except ParseError as exc:
        raise CompileError(f"Error parsing schema {reference}: {exc}", reference) from exc

    if not isinstance(node, (Mapping, bool)):
        raise CompileError(
            f"Schema {reference} must be an object or boolean, got {type(node).__name__}",
            reference,
        )

    dialect = detect_dialect(node)
    cls = _VALIDATORS[dialect]
    try:
        cls.check_schema(node)
    except MetaSchemaError as exc:
        raise CompileError(f"Invalid schema {reference}: {exc.message}", reference) from exc

    validator = cls(node, format_checker=cls.FORMAT_CHECKER)
    return CompiledSchema(reference=reference, dialect=dialect, schema=node, validator=validator)


# --------------------------------------------------------------------------- #
# Cache                                                                       #
# --------------------------------------------------------------------------- #

class SchemaCache:
    """Compiled schemas keyed by exact reference string.

    Entries are never evicted; a reference is fetched and compiled at most
    once even when several threads ask for it at the same time.
    """

    def __init__(self, fetcher: SchemaFetcher | None = None):
        self.fetcher = fetcher or SchemaFetcher()
        self._entries: dict[str, CompiledSchema] = {}
        self._lock = threading.Lock()
        self._ref_locks: dict[str, threading.Lock] = {}

    def __contains__(self, reference: str) -> bool:
        return reference in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get_or_compile(self, reference: str, compute: Callable[[str], CompiledSchema]) -> CompiledSchema:
        """Return the cached entry for *reference*, running *compute* on a miss."""
        cached = self._entries.get(reference)
        if cached is not None:
            logger.debug("Schema cache hit: %s", reference)
            return cached

        with self._lock:
            ref_lock = self._ref_locks.setdefault(reference, threading.Lock())

        with ref_lock:
            cached = self._entries.get(reference)
            if cached is not None:
                return cached
            logger.debug("Schema cache miss: %s", reference)
            compiled = compute(reference)
            self._entries[reference] = compiled
            return compiled

    def get_compiled(self, reference: str) -> CompiledSchema:
        """Fetch + compile *reference* on first use, reuse it afterwards."""
        return self.get_or_compile(reference, self._fetch_and_compile)

    def _fetch_and_compile(self, reference: str) -> CompiledSchema:
        text = self.fetcher.fetch(reference)
        compiled = compile_schema(reference, text)
        logger.info("Compiled schema %s (%s)", reference, compiled.dialect)
        return compiled
