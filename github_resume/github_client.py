"""HTTP client for GitHub's REST API."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Mapping

import httpx

from .config import GitHubSettings, RateLimitInfo

LOGGER = logging.getLogger(__name__)


class GitHubClientError(RuntimeError):
    """Raised when the client is used incorrectly."""


@dataclass(slots=True)
class ApiResponse:
    """Uniform result of a JSON GET; ``status`` is 0 when no response arrived."""

    ok: bool
    status: int
    body: Any = None


class GitHubClient:
    """Authenticated JSON GETs that never raise on transport or HTTP failure.

    No retries and no explicit timeout are applied; the transport defaults
    decide how long a call may take.
    """

    def __init__(
        self,
        settings: GitHubSettings,
        client: httpx.AsyncClient | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._base_url = settings.api_url.rstrip("/")
        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": settings.user_agent,
        }
        if settings.token:
            headers["Authorization"] = f"token {settings.token}"
        self._headers = headers
        self._client = client or httpx.AsyncClient(transport=transport)
        self._owns_client = client is None
        self._rate_limit: RateLimitInfo | None = None

    async def __aenter__(self) -> "GitHubClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:  # type: ignore[override]
        await self.close()

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    @property
    def settings(self) -> GitHubSettings:
        return self._settings

    @property
    def rate_limit(self) -> RateLimitInfo | None:
        """Rate limit headers of the most recent response, if GitHub sent any."""

        return self._rate_limit

    async def get_json(self, path: str, params: Mapping[str, Any] | None = None) -> ApiResponse:
        """GET ``path`` relative to the API base and decode the JSON body."""

        if not path.startswith("/"):
            raise GitHubClientError(f"API path must start with '/': {path!r}")

        try:
            response = await self._client.get(
                self._base_url + path,
                params=dict(params) if params else None,
                headers=self._headers,
            )
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            LOGGER.warning("GitHub request to %s failed: %s", path, exc)
            return ApiResponse(ok=False, status=0, body=None)

        self._record_rate_limit(response)

        try:
            body = response.json()
        except ValueError:
            LOGGER.debug("GitHub %s returned a non-JSON body (HTTP %s)", path, response.status_code)
            body = None

        ok = response.is_success
        if not ok:
            LOGGER.debug("GitHub %s returned HTTP %s", path, response.status_code)
        return ApiResponse(ok=ok, status=response.status_code, body=body)

    def _record_rate_limit(self, response: httpx.Response) -> None:
        info = _rate_limit_from_headers(response.headers)
        if info is None:
            return
        self._rate_limit = info
        if info.remaining <= 0:
            LOGGER.warning(
                "GitHub rate limit exhausted (limit %s); resets at %s",
                info.limit,
                info.reset_at.isoformat(),
            )


def _rate_limit_from_headers(headers: httpx.Headers) -> RateLimitInfo | None:
    remaining = headers.get("X-RateLimit-Remaining")
    if remaining is None:
        return None
    try:
        return RateLimitInfo(
            limit=int(headers.get("X-RateLimit-Limit", 0)),
            remaining=int(remaining),
            reset_at=datetime.fromtimestamp(int(headers.get("X-RateLimit-Reset", 0)), tz=timezone.utc),
        )
    except (TypeError, ValueError, OverflowError, OSError):
        return None


__all__ = ["ApiResponse", "GitHubClient", "GitHubClientError"]
