"""
yaml_schema_validator – validate YAML / JSON documents against JSON Schemas.
"""
__version__ = "1.0.0"

from .exceptions import (
    CompileError,
    ConfigError,
    FetchError,
    NoSchemaError,
    ParseError,
    SchemaNotFoundError,
    ValidatorError,
)
from .outcome import Outcome, Report, aggregate
from .output import ReportType, render
from .validator import SchemaValidator

__all__ = [
    "__version__",
    "CompileError",
    "ConfigError",
    "FetchError",
    "NoSchemaError",
    "Outcome",
    "ParseError",
    "Report",
    "ReportType",
    "SchemaNotFoundError",
    "SchemaValidator",
    "ValidatorError",
    "aggregate",
    "render",
]
