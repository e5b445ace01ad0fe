"""
sarif.py - SARIF 2.1.0 rendering of a validation report.

Every non-empty error becomes one result under the single
``schema-validation`` rule.  The artifact URI is the result key; detail
results embed the instance location as a snippet.  Line and column numbers
are not derived from the source.
"""

from __future__ import annotations

import json
from typing import Any, Callable

from . import __version__
from .outcome import Outcome, Report
from .utils import _now_iso

__all__ = ["RULE_ID", "SARIF_SCHEMA", "SARIF_VERSION", "to_sarif", "to_sarif_log"]

SARIF_VERSION = "2.1.0"
SARIF_SCHEMA = "https://json.schemastore.org/sarif-2.1.0.json"
RULE_ID = "schema-validation"
TOOL_NAME = "YAML Schema Validator"
TOOL_URI = "https://github.com/alexmond/yj-schema-validator"


def _rule() -> dict[str, Any]:
    return {
        "id": RULE_ID,
        "shortDescription": {"text": "Schema validation error"},
        "fullDescription": {"text": "The file does not conform to the specified JSON/YAML schema"},
        "help": {"text": "Ensure that the file content matches the schema definition"},
        "defaultConfiguration": {"level": "error"},
    }


def _tool() -> dict[str, Any]:
    return {
        "driver": {
            "name": TOOL_NAME,
            "version": __version__,
            "semanticVersion": __version__,
            "informationUri": TOOL_URI,
            "rules": [_rule()],
        }
    }


def _location(uri: str, instance_location: str | None) -> dict[str, Any]:
    physical: dict[str, Any] = {"artifactLocation": {"uri": uri}}
    if instance_location is not None:
        physical["region"] = {"snippet": {"text": f"Path: {instance_location}"}}
    return {"physicalLocation": physical}


def _result(uri: str, message: str, instance_location: str | None = None) -> dict[str, Any]:
    return {
        "ruleId": RULE_ID,
        "level": "error",
        "message": {"text": message},
        "locations": [_location(uri, instance_location)],
    }


def _top_level_message(outcome: Outcome) -> str:
    errors = outcome.errors or {}
    if errors.get("error") is not None:
        return str(errors["error"])
    return " ".join(str(m) for m in errors.values() if m is not None) or "Validation error"


def _detail_message(detail: Outcome) -> str:
    prefix = f"At path '{detail.instance_location}': " if detail.instance_location is not None else ""
    body = " ".join(str(m) for m in (detail.errors or {}).values() if m is not None)
    return (prefix + (body or "Validation error")).strip()


def _results(report: Report) -> list[dict[str, Any]]:
    results: list[dict[str, Any]] = []
    for key, outcome in report.files.items():
        if outcome.valid:
            continue
        if outcome.errors:
            results.append(_result(key, _top_level_message(outcome)))
        for detail in outcome.details or ():
            if not detail.valid:
                results.append(_result(key, _detail_message(detail), detail.instance_location))
    return results


def to_sarif_log(report: Report, *, now: Callable[[], str] = _now_iso) -> dict[str, Any]:
    """Build the SARIF log as plain data."""
    start = now()
    results = _results(report)
    successful = report.valid
    return {
        "$schema": SARIF_SCHEMA,
        "version": SARIF_VERSION,
        "runs": [
            {
                "tool": _tool(),
                "results": results,
                "invocations": [
                    {
                        "executionSuccessful": successful,
                        "startTimeUtc": start,
                        "endTimeUtc": now(),
                        "exitCode": 0 if successful else 1,
                    }
                ],
            }
        ],
    }


def to_sarif(report: Report) -> str:
    return json.dumps(to_sarif_log(report), indent=2, ensure_ascii=False) + "\n"
