"""
validator.py - drive a validation pass for one source, or a batch of them
========================================================================

For each source the content is split into documents; each document is then
resolved to a schema reference, the schema is fetched/compiled through the
shared :class:`~yaml_schema_validator.loader.SchemaCache`, and the schema
engine produces that document's outcome.

Public API
----------
SchemaValidator
    ``validate_source`` / ``validate_path`` / ``validate_stream`` return a
    ``{result_key: Outcome}`` mapping for one source; ``validate_files``
    returns the aggregated :class:`~yaml_schema_validator.outcome.Report`.

Every failure inside a document (no schema, unreachable schema, bad schema,
unexpected exceptions) becomes a failed outcome for that document only; no
exception escapes per-document validation.
"""

from __future__ import annotations

import logging
import sys
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import IO, Any, Iterable, Mapping

from . import engine
from .exceptions import ParseError, ValidatorError
from .fetcher import DEFAULT_HTTP_TIMEOUT, SchemaFetcher
from .loader import SchemaCache
from .outcome import Outcome, Report, aggregate, result_key
from .parser import parse_documents
from .resolver import resolve_schema_reference

__all__ = ["STDIN_NAME", "SchemaValidator"]

logger = logging.getLogger(__name__)

STDIN_NAME = "stdin"
STDIN_ARG = "-"

# --------------------------------------------------------------------------- #
# Orchestrator                                                                #
# --------------------------------------------------------------------------- #

class SchemaValidator:
    """Validate YAML / JSON sources against JSON Schemas.

    Parameters
    ----------
    schema : str, optional
        Schema reference used when *schema_override* is enabled.
    schema_override : bool
        Ignore each document's ``$schema`` pointer and use *schema* instead.
    cache : SchemaCache, optional
        Shared compiled-schema cache; one is created (with a fetcher built
        from *http_timeout* / *ignore_ssl_errors*) when omitted.
    workers : int
        Number of threads used by :meth:`validate_files`.
    """

    def __init__(
        self,
        *,
        schema: str | None = None,
        schema_override: bool = False,
        cache: SchemaCache | None = None,
        http_timeout: float = DEFAULT_HTTP_TIMEOUT,
        ignore_ssl_errors: bool = False,
        workers: int = 1,
    ):
        self.schema = schema
        self.schema_override = schema_override
        self.cache = cache or SchemaCache(
            SchemaFetcher(timeout=http_timeout, ignore_ssl_errors=ignore_ssl_errors)
        )
        self.workers = max(1, workers)

    @classmethod
    def from_config(cls, config) -> "SchemaValidator":
        """Build a validator from a :class:`~yaml_schema_validator.config.ValidatorConfig`."""
        return cls(
            schema=config.schema,
            schema_override=config.schema_override,
            http_timeout=config.http_timeout,
            ignore_ssl_errors=config.ignore_ssl_errors,
            workers=config.workers,
        )

    # -- one document ------------------------------------------------------ #

    def validate_one(self, name: str, document: Any) -> Outcome:
        """Validate a single parsed *document* coming from source *name*."""
        try:
            reference = resolve_schema_reference(
                document,
                name,
                override=self.schema_override,
                override_ref=self.schema,
            )
            compiled = self.cache.get_compiled(reference)
            return engine.evaluate(compiled, document)
        except ValidatorError as exc:
            logger.error("%s: %s", name, exc)
            return Outcome.generic_error(str(exc))
        except Exception as exc:
            logger.exception("Unexpected error while validating %s", name)
            return Outcome.generic_error(f"{type(exc).__name__}: {exc}")

    # -- one source -------------------------------------------------------- #

    def validate_source(self, name: str, content: bytes | str | IO) -> dict[str, Outcome]:
        """Validate every document in *content*, keyed by result key."""
        try:
            documents = parse_documents(content)
        except ParseError as exc:
            logger.error("Error parsing %s: %s", name, exc)
            return {name: Outcome.generic_error(str(exc))}
        except Exception as exc:
            logger.exception("Unexpected error while reading %s", name)
            return {name: Outcome.generic_error(f"{type(exc).__name__}: {exc}")}

        if not documents:
            return {name: Outcome.generic_error("no nodes found")}

        total = len(documents)
        logger.debug("%s: %d document(s)", name, total)
        return {
            result_key(name, idx, total): self.validate_one(name, doc)
            for idx, doc in enumerate(documents)
        }

    def validate_path(self, path: str | Path) -> dict[str, Outcome]:
        """Read *path* (``-`` means standard input) and validate its documents."""
        name = str(path)
        if name == STDIN_ARG:
            return self.validate_stream(sys.stdin)
        try:
            content = Path(name).read_bytes()
        except FileNotFoundError:
            logger.error("Input file not found: %s", name)
            return {name: Outcome.generic_error(f"NoSuchFile: {name}")}
        except OSError as exc:
            logger.error("Error reading %s: %s", name, exc)
            return {name: Outcome.generic_error(f"Error reading {name}: {exc}")}
        return self.validate_source(name, content)

    def validate_stream(self, stream: IO, name: str = STDIN_NAME) -> dict[str, Outcome]:
        """Validate documents read from an open *stream* under source *name*."""
        return self.validate_source(name, stream)

    # -- batch ------------------------------------------------------------- #

    def validate_files(self, paths: Iterable[str | Path]) -> Report:
        """Validate every path and aggregate the results in input order.

        Report keys are source names, so a path given more than once is
        validated once, at its first position.
        """
        paths = self._unique(paths)
        results: Iterable[Mapping[str, Outcome]]
        if self.workers > 1 and len(paths) > 1:
            with ThreadPoolExecutor(max_workers=self.workers) as pool:
                results = list(pool.map(self.validate_path, paths))
        else:
            results = [self.validate_path(p) for p in paths]
        report = aggregate(results)
        logger.info("Validated %d source(s): %s", len(paths), "ok" if report.valid else "invalid")
        return report

    @staticmethod
    def _unique(paths: Iterable[str | Path]) -> list[str]:
        seen: dict[str, None] = {}
        for path in paths:
            name = str(path)
            if name in seen:
                logger.warning("Skipping duplicate input %s", name)
                continue
            seen[name] = None
        return list(seen)

    def close(self) -> None:
        """Release the HTTP session held by the schema fetcher."""
        self.cache.fetcher.close()

    def __enter__(self) -> "SchemaValidator":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
