"""
engine.py - run a compiled schema against one document node.

The result uses the JSON Schema "list" output shape: a failing document
yields one detail per top-level error, each with its instance location
(JSONPath), schema location, evaluation path and ``{keyword: message}``.
"""

from __future__ import annotations

from typing import Any, Iterable

from jsonschema.exceptions import ValidationError

from .loader import CompiledSchema
from .outcome import Outcome

__all__ = ["evaluate"]


def _pointer(parts: Iterable[Any]) -> str:
    escaped = (str(p).replace("~", "~0").replace("/", "~1") for p in parts)
    return "".join(f"/{p}" for p in escaped)


def _detail(error: ValidationError, schema_id: str) -> Outcome:
    pointer = _pointer(error.absolute_schema_path)
    return Outcome(
        valid=False,
        evaluation_path=pointer,
        schema_location=f"{schema_id}#{pointer}",
        instance_location=error.json_path,
        errors={str(error.validator): error.message},
    )


def evaluate(compiled: CompiledSchema, document: Any) -> Outcome:
    """Validate *document* against *compiled*; never raises on a mismatch."""
    errors = sorted(
        compiled.validator.iter_errors(document),
        key=lambda e: (e.json_path, str(e.validator)),
    )
    if not errors:
        return Outcome.ok()
    return Outcome(valid=False, details=tuple(_detail(e, compiled.schema_id) for e in errors))
