"""
Graph Document Loader

Fetches a static {nodes, edges} JSON description and validates its shape.

PRINCIPLES:
===========
1. Failed fetches are first-class results
2. Parse errors keep the raw body for diagnostics
3. No automatic retry; every failure is terminal for its attempt
"""

from __future__ import annotations
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional
import logging

import httpx

from .contracts import FetchStatus, LoadResult, ParseError, parse_document

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def is_remote(location: str) -> bool:
    return location.startswith(("http://", "https://"))


class GraphDocumentLoader:
    """
    Loads graph documents from URLs or local files.

    GUARANTEES:
    ===========
    1. `load`/`load_sync` always return a LoadResult
    2. Fetch failures and parse failures have distinct statuses
    3. An injected transport is used for every request (tests, proxies)
    """

    def __init__(
        self,
        timeout: float = 30.0,
        user_agent: str = "GraphLayout/1.0",
        transport: Optional[httpx.BaseTransport] = None,
        async_transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self._timeout = timeout
        self._user_agent = user_agent
        self._transport = transport
        self._async_transport = async_transport

    async def load(self, location: str) -> LoadResult:
        """Fetch and parse a document (the only suspension point)."""
        if not is_remote(location):
            return self._load_file(location)

        attempted_at = _now()
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._async_transport
            ) as client:
                response = await client.get(
                    location,
                    headers={'User-Agent': self._user_agent},
                    follow_redirects=True
                )
        except httpx.TimeoutException as e:
            return self._failure(location, attempted_at, FetchStatus.TIMEOUT, f"Timed out: {e}")
        except httpx.HTTPError as e:
            return self._failure(location, attempted_at, FetchStatus.NETWORK_ERROR, str(e))

        return self._from_response(location, attempted_at, response)

    def load_sync(self, location: str) -> LoadResult:
        """Synchronous version of load."""
        if not is_remote(location):
            return self._load_file(location)

        attempted_at = _now()
        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
                response = client.get(
                    location,
                    headers={'User-Agent': self._user_agent},
                    follow_redirects=True
                )
        except httpx.TimeoutException as e:
            return self._failure(location, attempted_at, FetchStatus.TIMEOUT, f"Timed out: {e}")
        except httpx.HTTPError as e:
            return self._failure(location, attempted_at, FetchStatus.NETWORK_ERROR, str(e))

        return self._from_response(location, attempted_at, response)

    def parse(self, location: str, body: bytes, attempted_at: Optional[datetime] = None) -> LoadResult:
        """Turn a received body into a LoadResult."""
        attempted_at = attempted_at or _now()
        try:
            document = parse_document(body, location)
        except ParseError as e:
            logger.warning("parse failure for %s: %s", location, e)
            return LoadResult(
                location=location,
                status=FetchStatus.PARSE_ERROR,
                attempted_at=attempted_at,
                completed_at=_now(),
                body=body,
                error_message=str(e),
            )

        logger.info(
            "loaded %s: %d nodes, %d edges",
            location, len(document.nodes), len(document.edges)
        )
        return LoadResult(
            location=location,
            status=FetchStatus.SUCCESS,
            attempted_at=attempted_at,
            completed_at=_now(),
            document=document,
            body=body,
        )

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _from_response(
        self,
        location: str,
        attempted_at: datetime,
        response: httpx.Response
    ) -> LoadResult:
        if response.status_code != 200:
            logger.warning("fetch failure for %s: HTTP %d", location, response.status_code)
            return LoadResult(
                location=location,
                status=FetchStatus.HTTP_ERROR,
                attempted_at=attempted_at,
                completed_at=_now(),
                http_status=response.status_code,
                body=response.content,
                error_message=f"HTTP {response.status_code}",
            )

        result = self.parse(location, response.content, attempted_at)
        return LoadResult(
            location=result.location,
            status=result.status,
            attempted_at=result.attempted_at,
            completed_at=result.completed_at,
            document=result.document,
            http_status=response.status_code,
            body=result.body,
            error_message=result.error_message,
        )

    def _load_file(self, location: str) -> LoadResult:
        attempted_at = _now()
        path = Path(location)
        try:
            body = path.read_bytes()
        except FileNotFoundError:
            return self._failure(location, attempted_at, FetchStatus.NOT_FOUND, f"No such file: {location}")
        except OSError as e:
            return self._failure(location, attempted_at, FetchStatus.NETWORK_ERROR, str(e))
        return self.parse(location, body, attempted_at)

    def _failure(
        self,
        location: str,
        attempted_at: datetime,
        status: FetchStatus,
        message: str
    ) -> LoadResult:
        logger.warning("fetch failure for %s: %s", location, message)
        return LoadResult(
            location=location,
            status=status,
            attempted_at=attempted_at,
            completed_at=_now(),
            error_message=message,
        )
