"""Postcode resolver backed by Postcodes.io (free, no auth).

Sends one GET per query; never retries. The JSON body's ``status`` field
decides between found and not found, so the HTTP status line is not checked.
"""

import logging
import re
from typing import Callable, Optional
from urllib.parse import quote

import httpx

from . import config
from .connectivity import is_online
from .exceptions import ConnectionFailed, EmptyPostcode, Offline, PostcodeNotFound
from .models import LookupResult

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")


def normalise_postcode(query: str) -> str:
    """Strip all whitespace, e.g. ' SW1A 1AA ' -> 'SW1A1AA'.

    Case is left alone; the service is case-insensitive.
    """
    return _WHITESPACE_RE.sub("", query or "")


class PostcodeResolver:
    """Resolve UK postcodes to OS easting/northing via Postcodes.io.

    *connectivity_check* is an optional callable returning False when the
    host has no network; it is consulted only after a transport failure.
    """

    def __init__(
        self,
        base_url: str = config.POSTCODES_API_URL,
        timeout: float = config.LOOKUP_TIMEOUT,
        client: Optional[httpx.Client] = None,
        connectivity_check: Optional[Callable[[], bool]] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self._http = client or httpx.Client(timeout=timeout)
        self._connectivity_check = connectivity_check

    def close(self) -> None:
        if self._owns_client:
            self._http.close()

    def __enter__(self) -> "PostcodeResolver":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def url_for(self, postcode: str) -> str:
        return f"{self.base_url}/postcodes/{quote(postcode, safe='')}"

    def resolve(self, query: str) -> LookupResult:
        """Look up *query* and return the service's result record.

        Raises EmptyPostcode (no request sent), PostcodeNotFound,
        ConnectionFailed or Offline.
        """
        postcode = normalise_postcode(query)
        if not postcode:
            raise EmptyPostcode(query)

        try:
            resp = self._http.get(self.url_for(postcode))
        except httpx.RequestError as e:
            raise self._transport_failure(postcode, e) from e

        try:
            data = resp.json()
        except ValueError as e:
            logger.warning("Unreadable response for %s (HTTP %s)", postcode, resp.status_code)
            raise ConnectionFailed(postcode, "response was not JSON") from e

        status = data.get("status") if isinstance(data, dict) else None
        result = data.get("result") if isinstance(data, dict) else None
        if status != 200 or not isinstance(result, dict):
            logger.info("Postcode %s not found (service status %s)", postcode, status)
            raise PostcodeNotFound(postcode, status)

        logger.debug("Resolved %s -> E%s N%s", postcode, result.get("eastings"), result.get("northings"))
        return LookupResult.from_service(postcode, result)

    def _transport_failure(self, postcode: str, error: httpx.RequestError) -> ConnectionFailed:
        logger.warning("Postcode lookup failed for %s: %s", postcode, error)
        reason = str(error) or type(error).__name__
        if self._connectivity_check is not None and not self._connectivity_check():
            return Offline(postcode, reason)
        return ConnectionFailed(postcode, reason)


def resolve(query: str, resolver: Optional[PostcodeResolver] = None) -> LookupResult:
    """One-shot lookup with a temporary resolver unless one is given.

    The temporary resolver probes connectivity, so it can raise Offline.
    """
    if resolver is not None:
        return resolver.resolve(query)
    with PostcodeResolver(connectivity_check=is_online) as r:
        return r.resolve(query)


def get_resolver():
    """FastAPI dependency: a resolver that can report the host offline."""
    resolver = PostcodeResolver(connectivity_check=is_online)
    try:
        yield resolver
    finally:
        resolver.close()
