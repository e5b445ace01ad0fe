"""
junit.py - JUnit XML rendering of a validation report.

One ``testcase`` per result key inside a single ``testsuite``, wrapped in a
``testsuites`` root.  Invalid results get a ``failure`` child whose
``message`` is a short category and whose text holds every error message.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET

from .outcome import Outcome, Report

__all__ = ["SUITE_NAME", "failure_message", "full_error_message", "to_junit"]

SUITE_NAME = "SchemaValidationSuite"
TESTCASE_CLASSNAME = "files"
YAML_ERROR_MARKER = "YAMLError"


def full_error_message(outcome: Outcome) -> str:
    """All top-level and nested error messages, newline-joined."""
    parts: list[str] = []
    for message in (outcome.errors or {}).values():
        if message is not None:
            parts.append(str(message))
    for detail in outcome.details or ():
        for message in (detail.errors or {}).values():
            if message is not None:
                parts.append(str(message))
    return "\n".join(parts).strip()


def failure_message(outcome: Outcome) -> str:
    """Short categorical label for a failed outcome."""
    error = (outcome.errors or {}).get("error")
    if error is not None:
        if error.startswith("No schema"):
            return "No Schema Error"
        if YAML_ERROR_MARKER in error:
            return "YAML Parse Error"
        return "Validation Error"
    if outcome.details:
        first = outcome.details[0]
        if first.instance_location is not None and first.errors:
            return f"Type Mismatch at {first.instance_location}"
    return "Validation Failure"


def _counts(report: Report) -> tuple[str, str]:
    failures = sum(1 for outcome in report.files.values() if not outcome.valid)
    return str(len(report.files)), str(failures)


def to_junit(report: Report) -> str:
    tests, failures = _counts(report)
    root = ET.Element(
        "testsuites",
        {"name": SUITE_NAME, "tests": tests, "failures": failures, "errors": "0", "skipped": "0"},
    )
    suite = ET.SubElement(
        root,
        "testsuite",
        {"name": SUITE_NAME, "time": "0.0", "tests": tests, "failures": failures, "errors": "0", "skipped": "0"},
    )
    for key, outcome in report.files.items():
        case = ET.SubElement(suite, "testcase", {"classname": TESTCASE_CLASSNAME, "name": key, "time": "0.0"})
        if not outcome.valid:
            failure = ET.SubElement(case, "failure", {"message": failure_message(outcome)})
            failure.text = full_error_message(outcome)

    ET.indent(root, space="  ")
    return ET.tostring(root, encoding="unicode") + "\n"
