"""
output.py – serialise a :class:`~yaml_schema_validator.outcome.Report`.

Key objects
-----------
ReportType
    Closed set of report formats: text, json, yaml, junit, sarif.

render(report, report_type, *, color=False)
    Dispatch to the renderer for *report_type*.  Every renderer is a plain
    ``Report -> str`` function that leaves the report untouched.
"""

from __future__ import annotations

import enum
import json
from typing import Callable

import yaml

from . import junit, sarif
from .outcome import Outcome, Report

__all__ = ["ReportType", "render", "to_colored_text", "to_json", "to_yaml"]

# --------------------------------------------------------------------------- #
# Report types                                                                #
# --------------------------------------------------------------------------- #

class ReportType(str, enum.Enum):
    TEXT = "text"
    JSON = "json"
    YAML = "yaml"
    JUNIT = "junit"
    SARIF = "sarif"

    @classmethod
    def parse(cls, value: "str | ReportType") -> "ReportType":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            choices = ", ".join(t.value for t in cls)
            raise ValueError(f"Unknown report type {value!r}; expected one of: {choices}") from None


# --------------------------------------------------------------------------- #
# Text                                                                        #
# --------------------------------------------------------------------------- #

ANSI_RESET = "\x1b[0m"
ANSI_RED = "\x1b[31m"
ANSI_GREEN = "\x1b[32m"


def _status(valid: bool, color: bool) -> str:
    word = "ok" if valid else "invalid"
    if not color:
        return word
    return f"{ANSI_GREEN if valid else ANSI_RED}{word}{ANSI_RESET}"


def _outcome_lines(outcome: Outcome) -> list[str]:
    lines: list[str] = []
    if outcome.valid:
        return lines
    for label, message in (outcome.errors or {}).items():
        lines.append(f"  {label}: {message}")
    for detail in outcome.details or ():
        lines.append("  Details:")
        lines.append(f"    Path: {detail.instance_location}")
        lines.append(f"    Schema: {detail.schema_location}")
        for label, message in (detail.errors or {}).items():
            lines.append(f"    {label}: {message}")
    return lines


def to_colored_text(report: Report, *, color: bool = False) -> str:
    """Human-readable summary; ANSI colours touch only the ok/invalid words."""
    lines = [f"Validation Result: {_status(report.valid, color)}"]
    for key, outcome in report.files.items():
        lines.append(f"{key}: {_status(outcome.valid, color)}")
        lines.extend(_outcome_lines(outcome))
    return "\n".join(lines) + "\n"


# --------------------------------------------------------------------------- #
# Structured                                                                  #
# --------------------------------------------------------------------------- #

def to_json(report: Report) -> str:
    return json.dumps(report.to_dict(), indent=2, ensure_ascii=False) + "\n"


def to_yaml(report: Report) -> str:
    return yaml.safe_dump(report.to_dict(), sort_keys=False, allow_unicode=True, default_flow_style=False)


# --------------------------------------------------------------------------- #
# Dispatch                                                                    #
# --------------------------------------------------------------------------- #

_RENDERERS: dict[ReportType, Callable[..., str]] = {
    ReportType.TEXT: to_colored_text,
    ReportType.JSON: to_json,
    ReportType.YAML: to_yaml,
    ReportType.JUNIT: junit.to_junit,
    ReportType.SARIF: sarif.to_sarif,
}


def render(report: Report, report_type: ReportType | str = ReportType.TEXT, *, color: bool = False) -> str:
    """Render *report* in the requested format."""
    report_type = ReportType.parse(report_type)
    if report_type is ReportType.TEXT:
        return to_colored_text(report, color=color)
    return _RENDERERS[report_type](report)
