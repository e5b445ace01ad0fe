"""
exceptions.py - error taxonomy shared by every stage of a validation pass.

Each stage raises one of the classes below; the orchestrator catches
:class:`ValidatorError` at the per-document boundary and turns it into a
failed outcome, so none of these abort a batch.  Only :class:`ConfigError`
is fatal, and it is raised before any validation begins.
"""

from __future__ import annotations

__all__ = [
    "ValidatorError",
    "ParseError",
    "NoSchemaError",
    "FetchError",
    "SchemaNotFoundError",
    "CompileError",
    "ConfigError",
    "SchemaVersionUnknown",
]


class ValidatorError(Exception):
    """Base class for recoverable validation-pipeline errors."""


class ParseError(ValidatorError):
    """Raised when a source document (or schema text) cannot be parsed."""


class NoSchemaError(ValidatorError):
    """Raised when neither an override nor a ``$schema`` pointer applies."""

    def __init__(self, message: str = "No schema found in YAML file or provided as parameter"):
        super().__init__(message)


class FetchError(ValidatorError):
    """Raised when a schema reference cannot be retrieved."""

    def __init__(self, message: str, reference: str, status: int | None = None):
        super().__init__(message)
        self.reference = reference
        self.status = status


class SchemaNotFoundError(FetchError):
    """A local schema file does not exist.

    The message always carries the ``NoSuchFile`` token so reports can be
    matched on it.
    """

    def __init__(self, reference: str):
        super().__init__(f"NoSuchFile: {reference}", reference)


class CompileError(ValidatorError):
    """Raised when schema text is neither JSON nor YAML, or is not a valid schema."""

    def __init__(self, message: str, reference: str):
        super().__init__(message)
        self.reference = reference


class ConfigError(ValidatorError):
    """Invalid run configuration; the only error that stops the process."""


class SchemaVersionUnknown(UserWarning):
    """The schema's ``$schema`` indicator is absent or unrecognised."""
