"""
cli.py - command-line driver: options -> config -> validation -> report.

Exit codes: 0 when every document is valid (and for ``--help`` /
``--version``), 1 when any document is invalid or the configuration is
rejected before validation starts.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Sequence

from . import __version__
from .config import ValidatorConfig, load_config
from .exceptions import ConfigError
from .output import ReportType, render
from .outcome import Report
from .utils import configure_logging
from .validator import SchemaValidator

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INVALID = 1

# --------------------------------------------------------------------------- #
# Parser builder                                                              #
# --------------------------------------------------------------------------- #

def build_arg_parser() -> argparse.ArgumentParser:
    """Return the :pyclass:`argparse.ArgumentParser` for the validator CLI.

    Every option defaults to ``None`` so that only flags the user actually
    passed override the config file.
    """
    p = argparse.ArgumentParser(
        prog="yaml-schema-validator",
        description="Validate YAML/JSON files against JSON Schemas.",
        fromfile_prefix_chars="@",
    )
    p.add_argument("files", nargs="*", metavar="FILE", help="YAML/JSON files to validate ('-' reads stdin).")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument("--config", metavar="FILE", help="YAML file with a 'validator:' section of default settings.")
    p.add_argument("--schema", metavar="PATH_OR_URL", default=None, help="Schema used when --schema-override is set.")
    p.add_argument(
        "--schema-override",
        action="store_true",
        default=None,
        help="Ignore each document's $schema and validate against --schema.",
    )
    p.add_argument(
        "--report-type",
        choices=[t.value for t in ReportType],
        default=None,
        help="Report format (default: text).",
    )
    p.add_argument("--report-file-name", metavar="FILE", default=None, help="Write the report to FILE instead of stdout.")
    p.add_argument("--http-timeout", type=float, metavar="SECONDS", default=None, help="Timeout for remote schemas (default: 10).")
    p.add_argument(
        "--ignore-ssl-errors",
        action="store_true",
        default=None,
        help="Skip TLS certificate verification when downloading schemas.",
    )
    p.add_argument(
        "--color",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Colour ok/invalid in the text report (default: on).",
    )
    p.add_argument("--workers", type=int, default=None, help="Threads used to validate several files (default: 1).")
    p.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        default=None,
        help="Logging level for stderr diagnostics (default: WARNING).",
    )
    return p


# --------------------------------------------------------------------------- #
# Helpers                                                                     #
# --------------------------------------------------------------------------- #

def resolve_config(argv: Sequence[str] | None = None) -> ValidatorConfig:
    """Parse *argv* and layer the flags over the optional config file.

    Raises
    ------
    ConfigError
        Unknown arguments, unreadable config file, or an invalid combination
        of settings.
    """
    parser = build_arg_parser()
    namespace, unknown = parser.parse_known_args(argv)
    if unknown:
        raise ConfigError(f"Unknown argument(s): {unknown}. Use --help.")

    ns_dict: dict[str, Any] = vars(namespace)
    config = load_config(ns_dict.pop("config", None))

    files = ns_dict.pop("files") or None
    config = config.merged({**ns_dict, "files": files})
    config.validate()
    return config


def write_report(text: str, destination: str | None) -> None:
    if destination is None:
        sys.stdout.write(text)
        sys.stdout.flush()
        return
    path = Path(destination)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    logger.info("Report written to %s", path)


def run(config: ValidatorConfig, validator: SchemaValidator | None = None) -> Report:
    """Validate the configured files and emit the report.

    A validator built here is closed afterwards; a passed-in one is left
    to its owner.
    """
    if validator is None:
        with SchemaValidator.from_config(config) as owned:
            report = owned.validate_files(config.files)
    else:
        report = validator.validate_files(config.files)
    write_report(render(report, config.report_type, color=config.color), config.report_file_name)
    return report


# --------------------------------------------------------------------------- #
# Entry point                                                                 #
# --------------------------------------------------------------------------- #

def main(argv: Sequence[str] | None = None) -> int:
    try:
        config = resolve_config(argv)
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_INVALID
    except SystemExit as exc:
        # argparse exits for --help / --version (0) and usage errors (2)
        return EXIT_OK if not exc.code else EXIT_INVALID

    configure_logging(config.log_level)
    report = run(config)
    return EXIT_OK if report.valid else EXIT_INVALID
