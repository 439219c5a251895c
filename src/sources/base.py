"""Shared plumbing for data sources.

The goal of this module is to centralize request/response handling and the
lightweight result structures every provider uses. Individual sources only
build URLs; this client performs the single GET, times it, and tags any
failure so orchestrators can decide what to do next. There are no retries
here: falling back to another endpoint (or to mock data) is the orchestrator's
job.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Union
import logging
import time

import httpx

from src.config import config

logger = logging.getLogger(__name__)


class FailureKind(str, Enum):
    TRANSPORT_ERROR = "transport-error"
    HTTP_ERROR = "http-error"
    EMPTY_RESULT = "empty-result"


@dataclass
class RawFetchResult:
    """A successful provider response.

    Fields are intentionally verbose to simplify debugging: every result keeps
    the URL, query parameters, and timing next to the parsed payload.
    """

    source: str
    url: str
    params: Dict[str, Any]
    status_code: int
    duration_ms: int
    payload_json: Any
    fetched_at_utc: str
    ok: bool = True


@dataclass
class FetchFailure:
    """A request that produced no usable payload, tagged with why."""

    source: str
    url: str
    kind: FailureKind
    error: str
    params: Dict[str, Any] = field(default_factory=dict)
    status_code: Optional[int] = None
    duration_ms: int = 0
    ok: bool = False

    def describe(self) -> str:
        return f"{self.source}: {self.kind.value} ({self.error})"


FetchOutcome = Union[RawFetchResult, FetchFailure]


def build_auth_headers(header_name: Optional[str], api_key: Optional[str]) -> Dict[str, str]:
    """Return ``{header_name: api_key}`` only when both are configured."""

    if header_name and api_key:
        return {header_name: api_key}
    return {}


class ProviderClient:
    """Async GET client shared by every source.

    One ``httpx.AsyncClient`` is reused for all providers. Pass ``transport``
    to route requests somewhere other than the network (tests use
    ``httpx.MockTransport``).
    """

    def __init__(
        self,
        settings: Optional[config.Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.settings = settings or config.Settings()
        self._client = httpx.AsyncClient(
            headers={"User-Agent": self.settings.user_agent},
            timeout=self.settings.request_timeout,
            transport=transport,
            follow_redirects=True,
        )

    async def __aenter__(self) -> "ProviderClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def fetch(
        self,
        source: str,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> FetchOutcome:
        """Perform one GET and return the parsed JSON or a tagged failure."""

        params = dict(params or {})
        start = time.monotonic()
        logger.debug("GET %s params=%s", url, params)
        try:
            resp = await self._client.get(url, params=params, headers=headers or None)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            duration_ms = int((time.monotonic() - start) * 1000)
            logger.warning("Request to %s failed after %sms: %s", source, duration_ms, exc)
            return FetchFailure(
                source=source,
                url=url,
                params=params,
                kind=FailureKind.TRANSPORT_ERROR,
                error=str(exc) or type(exc).__name__,
                duration_ms=duration_ms,
            )
        duration_ms = int((time.monotonic() - start) * 1000)
        logger.debug("Response %s from %s in %sms", resp.status_code, source, duration_ms)

        if not resp.is_success:
            logger.warning("%s answered HTTP %s", source, resp.status_code)
            return FetchFailure(
                source=source,
                url=url,
                params=params,
                kind=FailureKind.HTTP_ERROR,
                error=f"HTTP {resp.status_code}",
                status_code=resp.status_code,
                duration_ms=duration_ms,
            )

        try:
            payload = resp.json()
        except (ValueError, RecursionError) as exc:
            logger.warning("%s returned a body that is not JSON: %s", source, exc)
            return FetchFailure(
                source=source,
                url=url,
                params=params,
                kind=FailureKind.TRANSPORT_ERROR,
                error=f"invalid JSON: {exc}",
                status_code=resp.status_code,
                duration_ms=duration_ms,
            )

        return RawFetchResult(
            source=source,
            url=url,
            params=params,
            status_code=resp.status_code,
            duration_ms=duration_ms,
            payload_json=payload,
            fetched_at_utc=datetime.now(timezone.utc).isoformat(),
        )


class DataSource:
    """Base class for providers: knows its URLs and auth headers, not how to GET."""

    name: str

    def __init__(self, client: ProviderClient, settings: Optional[config.Settings] = None) -> None:
        self.client = client
        self.settings = settings or client.settings

    def auth_headers(self) -> Dict[str, str]:
        return {}

    async def _get(self, label: str, url: str, params: Optional[Dict[str, Any]] = None) -> FetchOutcome:
        return await self.client.fetch(f"{self.name}-{label}", url, params, self.auth_headers())
