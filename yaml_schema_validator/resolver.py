"""
resolver.py - decide which schema reference applies to a document.

Resolution is pure string / path logic; nothing here touches the network or
the filesystem.
"""

from __future__ import annotations

import logging
import os
from typing import Any

from .exceptions import NoSchemaError
from .utils import _is_http_url

__all__ = ["SCHEMA_POINTER", "resolve_schema_reference"]

logger = logging.getLogger(__name__)

SCHEMA_POINTER = "$schema"


def resolve_schema_reference(
    document: Any,
    source_name: str,
    *,
    override: bool = False,
    override_ref: str | None = None,
) -> str:
    """Return the schema reference for *document*.

    With *override* enabled *override_ref* wins unconditionally; callers are
    expected to have rejected an enabled override without a value during
    configuration.  Otherwise the document's ``$schema`` field is used: URLs
    are returned verbatim and anything else is joined onto the directory that
    holds *source_name*.

    Raises
    ------
    NoSchemaError
        When no override applies and the document has no usable pointer.
    """
    if override:
        logger.info("Using schema override: %s", override_ref)
        return override_ref

    pointer = document.get(SCHEMA_POINTER) if isinstance(document, dict) else None
    if not isinstance(pointer, str) or not pointer.strip():
        raise NoSchemaError()

    logger.info("Using schema from %s: %s", source_name, pointer)
    if _is_http_url(pointer):
        return pointer
    return os.path.join(os.path.dirname(source_name), pointer)
