"""
outcome.py - per-document validation outcomes and the aggregated report.

An :class:`Outcome` mirrors one unit of the JSON Schema "list" output format:
a leaf outcome carries ``errors`` (label -> message); a composite outcome from
the schema engine carries ``details``, each with its own instance and schema
locations.  A :class:`Report` gathers the outcomes of a whole run under their
result keys.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, Mapping

__all__ = ["Outcome", "Report", "aggregate", "result_key"]


@dataclass(frozen=True)
class Outcome:
    """Validity verdict plus structured error detail for one document.

    Attributes:
        valid: Whether the document conforms
        errors: Label -> message pairs, or None
        details: Nested outcomes produced by the schema engine, or None
        instance_location: JSONPath into the document (details only)
        schema_location: Schema URI + JSON pointer (details only)
        evaluation_path: Keyword path followed during evaluation (details only)
    """
    valid: bool
    errors: Mapping[str, str] | None = None
    details: tuple[Outcome, ...] | None = None
    instance_location: str | None = None
    schema_location: str | None = None
    evaluation_path: str | None = None

    def __post_init__(self):
        if self.valid and (self.errors or self.details):
            raise ValueError("a valid outcome cannot carry errors or details")
        if self.errors is not None:
            object.__setattr__(self, "errors", MappingProxyType(dict(self.errors)))
        if self.details is not None:
            object.__setattr__(self, "details", tuple(self.details))

    @classmethod
    def ok(cls) -> "Outcome":
        return cls(valid=True)

    @classmethod
    def generic_error(cls, message: str) -> "Outcome":
        """Failed outcome with a single ``error`` entry."""
        return cls(valid=False, errors={"error": message})

    def to_dict(self) -> dict[str, Any]:
        """Serialise in output-format key order, dropping absent fields."""
        out: dict[str, Any] = {"valid": self.valid}
        if self.evaluation_path is not None:
            out["evaluationPath"] = self.evaluation_path
        if self.schema_location is not None:
            out["schemaLocation"] = self.schema_location
        if self.instance_location is not None:
            out["instanceLocation"] = self.instance_location
        if self.errors is not None:
            out["errors"] = dict(self.errors)
        if self.details is not None:
            out["details"] = [d.to_dict() for d in self.details]
        return out


@dataclass(frozen=True)
class Report:
    """Aggregated outcomes for an entire run, keyed by result key."""
    files: Mapping[str, Outcome] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "files", MappingProxyType(dict(self.files)))

    @property
    def valid(self) -> bool:
        return all(outcome.valid for outcome in self.files.values())

    def to_dict(self) -> dict[str, Any]:
        return {
            "valid": self.valid,
            "files": {key: outcome.to_dict() for key, outcome in self.files.items()},
        }


def result_key(source_name: str, index: int, total: int) -> str:
    """Key for the *index*-th (zero-based) of *total* documents in a source."""
    if total == 1:
        return source_name
    return f"{source_name}-{index + 1}"


def aggregate(results: Iterable[Mapping[str, Outcome]]) -> Report:
    """Merge per-source result mappings, in order, into one :class:`Report`."""
    merged: dict[str, Outcome] = {}
    for per_source in results:
        merged.update(per_source)
    return Report(files=merged)
