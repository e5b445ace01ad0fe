"""
parser.py - turn raw source content into an ordered list of document nodes
==========================================================================

Public API
----------
`parse_documents(content) -> list`
    Convert *content* (``bytes`` / ``str`` / readable stream) into the JSON-like
    trees it contains.  The whole content is tried as a single JSON document
    first; if that fails it is read as a (possibly multi-document) YAML stream.

`parse_text(text) -> Any`
    Parse a single JSON-or-YAML text into one node; used for schema text.

Both functions raise :class:`~yaml_schema_validator.exceptions.ParseError`
when neither form can be read.  YAML failures carry a stable marker at the
start of the message (``MarkedYAMLError`` / ``YAMLError``).
"""

from __future__ import annotations

import json
from typing import IO, Any

import yaml

from .exceptions import ParseError

__all__ = ["parse_documents", "parse_text", "yaml_error_message"]

# --------------------------------------------------------------------------- #
# YAML loader                                                                 #
# --------------------------------------------------------------------------- #

class _DocumentLoader(yaml.SafeLoader):
    """SafeLoader that keeps ISO dates as strings (JSON has no date type)."""


_DocumentLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != "tag:yaml.org,2002:timestamp"]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def yaml_error_message(exc: yaml.YAMLError) -> str:
    """Render a PyYAML error with the marker reports are matched on."""
    marker = "MarkedYAMLError" if isinstance(exc, yaml.MarkedYAMLError) else "YAMLError"
    return f"{marker}: {exc}"


# --------------------------------------------------------------------------- #
# Helpers                                                                     #
# --------------------------------------------------------------------------- #

def _read(content: bytes | str | IO) -> bytes | str:
    if isinstance(content, (bytes, str)):
        return content
    if hasattr(content, "read"):
        return content.read()
    raise TypeError(f"Unsupported type for parse_documents: {type(content)}")


def _try_json(raw: bytes | str) -> tuple[bool, Any]:
    try:
        return True, json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return False, None


# --------------------------------------------------------------------------- #
# Public API                                                                  #
# --------------------------------------------------------------------------- #

def parse_documents(content: bytes | str | IO) -> list[Any]:
    """Return every non-empty document found in *content*, in order.

    Parameters
    ----------
    content
        Raw source.  Streams are read to the end first, since the JSON attempt
        needs the whole text.

    Returns
    -------
    list
        Zero or more nodes.  ``null`` documents are dropped, so a stream made
        only of ``---`` separators yields an empty list.
    """
    raw = _read(content)

    ok, node = _try_json(raw)
    if ok:
        return [] if node is None else [node]

    try:
        documents = list(yaml.load_all(raw, Loader=_DocumentLoader))
    except yaml.YAMLError as exc:
        raise ParseError(yaml_error_message(exc)) from exc
    except UnicodeDecodeError as exc:
        raise ParseError(f"Undecodable source content: {exc}") from exc

    return [doc for doc in documents if doc is not None]


def parse_text(text: bytes | str) -> Any:
    """Parse one JSON document, falling back to a single YAML document."""
    ok, node = _try_json(text)
    if ok:
        return node
    try:
        return yaml.load(text, Loader=_DocumentLoader)
    except yaml.YAMLError as exc:
        raise ParseError(yaml_error_message(exc)) from exc
    except UnicodeDecodeError as exc:
        raise ParseError(f"Undecodable schema content: {exc}") from exc
