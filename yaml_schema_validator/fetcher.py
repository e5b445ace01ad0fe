"""
fetcher.py - retrieve raw schema text from a local path or an http(s) URL.
"""

from __future__ import annotations

import logging
from pathlib import Path

import requests

from .exceptions import FetchError, SchemaNotFoundError
from .utils import _is_http_url

__all__ = ["DEFAULT_HTTP_TIMEOUT", "SchemaFetcher"]

logger = logging.getLogger(__name__)

DEFAULT_HTTP_TIMEOUT = 10.0
HTTP_SUCCESS_STATUS = 200


def _build_session() -> requests.Session:
    session = requests.Session()
    session.headers["Accept"] = "application/schema+json, application/json, application/yaml, */*"
    return session


class SchemaFetcher:
    """Fetch schema text; URLs over HTTP GET, everything else from disk.

    Failures are never retried.  TLS verification stays on unless
    *ignore_ssl_errors* is passed explicitly.
    """

    def __init__(
        self,
        *,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
        ignore_ssl_errors: bool = False,
        session: requests.Session | None = None,
    ):
        self.timeout = timeout
        self.ignore_ssl_errors = ignore_ssl_errors
        self._owns_session = session is None
        self._session = session or _build_session()
        if ignore_ssl_errors:
            logger.warning("TLS certificate verification is disabled for schema downloads")

    def close(self) -> None:
        """Close the HTTP session if this fetcher created it."""
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> "SchemaFetcher":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def fetch(self, reference: str) -> str:
        """Return the raw text behind *reference*.

        Raises
        ------
        FetchError
            Non-200 response or any network failure (including timeouts).
        SchemaNotFoundError
            *reference* is a local path that does not exist.
        """
        if _is_http_url(reference):
            return self._fetch_url(reference)
        return self._read_file(reference)

    def _fetch_url(self, url: str) -> str:
        logger.debug("Fetching schema from %s (timeout=%ss)", url, self.timeout)
        try:
            response = self._session.get(
                url,
                timeout=self.timeout,
                verify=not self.ignore_ssl_errors,
                allow_redirects=True,
            )
        except requests.RequestException as exc:
            logger.error("Error fetching schema from URL %s: %s", url, exc)
            raise FetchError(f"Error fetching schema from URL {url}: {exc}", url) from exc

        if response.status_code != HTTP_SUCCESS_STATUS:
            logger.error("Fetching %s failed with status code %s", url, response.status_code)
            raise FetchError(
                f"HTTP request failed with status code {response.status_code} for {url}",
                url,
                status=response.status_code,
            )
        return response.text

    def _read_file(self, reference: str) -> str:
        logger.debug("Reading schema file %s", reference)
        try:
            return Path(reference).read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise SchemaNotFoundError(reference) from exc
        except (OSError, UnicodeDecodeError) as exc:
            raise FetchError(f"Error reading schema file {reference}: {exc}", reference) from exc
