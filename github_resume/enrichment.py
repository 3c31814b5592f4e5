"""Expand a selected candidate into a record with live GitHub metadata."""

from __future__ import annotations

import asyncio
import base64
import binascii
import logging
import math
import re
from datetime import datetime, timedelta
from typing import Any, Awaitable, Callable, Sequence, TypeVar
from urllib.parse import quote

from .config import UTC, AnalyzerSettings, parse_timestamp
from .github_client import ApiResponse, GitHubClient
from .models import (
    Activity,
    CandidateEntity,
    EnrichedRecord,
    EntityKind,
    FetchStatus,
    RepoDetails,
    RepoSummary,
)

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

_NEWLINE = re.compile(r"\r?\n")


async def call_or_default(operation: Callable[[], Awaitable[T]], default: T, *, label: str = "operation") -> T:
    """Await ``operation()`` and return ``default`` if it raises."""

    try:
        return await operation()
    except Exception as exc:
        LOGGER.warning("%s failed, using default: %s", label, exc)
        return default


async def map_bounded(
    items: Sequence[T],
    func: Callable[[T], Awaitable[R]],
    concurrency: int,
    on_error: Callable[[T, Exception], R],
) -> list[R]:
    """Apply ``func`` to every item with at most ``concurrency`` calls in flight.

    Workers pull the next index from a shared cursor and write into a slot of
    a pre-sized list, so the output order matches ``items``. A failing item
    gets ``on_error(item, exc)`` in its slot; the pool itself never fails.
    """

    results: list[Any] = [None] * len(items)
    cursor = 0

    async def worker() -> None:
        nonlocal cursor
        while cursor < len(items):
            index = cursor
            cursor += 1
            item = items[index]
            try:
                results[index] = await func(item)
            except Exception as exc:
                LOGGER.warning("Item %s failed in worker pool: %s", index, exc)
                results[index] = on_error(item, exc)

    width = max(1, min(concurrency, len(items)))
    await asyncio.gather(*(worker() for _ in range(width)))
    return results


def compute_activity(events: Any, now: datetime, window_days: int = 30) -> Activity:
    """Count distinct UTC dates with at least one event inside the trailing window."""

    if not isinstance(events, list):
        return Activity()
    window = timedelta(days=window_days)
    days: set[str] = set()
    for event in events:
        if not isinstance(event, dict):
            continue
        created = parse_timestamp(event.get("created_at"))
        if created is None:
            continue
        if now - created <= window:
            days.add(created.date().isoformat())
    active = min(len(days), window_days)
    return Activity(days_active_in_window=active, percent_active=_round_half_up(active / window_days * 100))


def lifespan_days(created_at: Any, pushed_at: Any) -> int | None:
    created = parse_timestamp(created_at)
    pushed = parse_timestamp(pushed_at)
    if created is None or pushed is None:
        return None
    return max(0, _round_half_up((pushed - created).total_seconds() / 86400))


def readme_snippet(content: str, max_lines: int = 5, max_chars: int = 800) -> str:
    """First ``max_lines`` non-blank lines of a README, capped at ``max_chars``."""

    lines = [line.strip() for line in _NEWLINE.split(content)]
    return "\n".join([line for line in lines if line][:max_lines])[:max_chars]


def decode_readme(body: Any) -> str | None:
    if not isinstance(body, dict) or not body.get("content"):
        return None
    try:
        raw = base64.b64decode(body["content"])
    except (binascii.Error, TypeError, ValueError):
        return None
    if not raw:
        return None
    return raw.decode("utf-8", errors="replace")


def tech_stack(languages: Any) -> list[str] | None:
    """Language names ordered by byte count, largest first."""

    if not isinstance(languages, dict):
        return None
    ordered = sorted(languages.items(), key=lambda item: item[1], reverse=True)
    return [name for name, _ in ordered]


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _segment(value: str) -> str:
    return quote(value, safe="")


class Enricher:
    """Issues the remote calls for one selected candidate.

    Every call is wrapped in :func:`call_or_default`, so a failure only blanks
    the field it was meant to fill.
    """

    def __init__(
        self,
        client: GitHubClient,
        settings: AnalyzerSettings | None = None,
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._client = client
        self._settings = settings or AnalyzerSettings()
        self._clock = clock or (lambda: datetime.now(tz=UTC))
        self._page_size = client.settings.page_size

    async def enrich(self, entity: CandidateEntity) -> EnrichedRecord:
        if entity.kind is EntityKind.REPO and entity.repo_name:
            return await self._enrich_repo(entity, entity.repo_name)
        return await self._enrich_user(entity)

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> ApiResponse:
        return await call_or_default(
            lambda: self._client.get_json(path, params),
            ApiResponse(ok=False, status=0, body=None),
            label=f"GET {path}",
        )

    async def _enrich_user(self, entity: CandidateEntity) -> EnrichedRecord:
        owner = _segment(entity.owner)
        LOGGER.info("Enriching GitHub user %s", entity.owner)

        response = await self._get(f"/users/{owner}")
        profile = response.body if response.ok and isinstance(response.body, dict) else None

        activity = await call_or_default(
            lambda: self._fetch_activity(owner), Activity(), label=f"activity for {entity.owner}"
        )
        repositories = await call_or_default(
            lambda: self._fetch_repositories(owner), [], label=f"repositories for {entity.owner}"
        )
        LOGGER.info(
            "User %s: profile %s, %s active days, %s repositories",
            entity.owner,
            "found" if profile is not None else "missing",
            activity.days_active_in_window,
            len(repositories),
        )
        return EnrichedRecord(
            entity=entity,
            fetch_status=FetchStatus(ok=response.ok, status=response.status),
            profile=profile,
            activity=activity,
            repositories=repositories,
        )

    async def _fetch_activity(self, owner: str) -> Activity:
        response = await self._get(f"/users/{owner}/events/public", {"per_page": self._page_size})
        events = response.body if response.ok else None
        return compute_activity(events, self._clock(), self._settings.activity_window_days)

    async def _fetch_repositories(self, owner: str) -> list[RepoSummary]:
        response = await self._get(
            f"/users/{owner}/repos",
            {"per_page": self._page_size, "type": "owner", "sort": "updated"},
        )
        listing = response.body if response.ok and isinstance(response.body, list) else []
        return await map_bounded(
            listing,
            lambda payload: self._summarize_repository(owner, payload),
            self._settings.repo_concurrency,
            _failed_summary,
        )

    async def _summarize_repository(self, owner: str, payload: dict[str, Any]) -> RepoSummary:
        summary = RepoSummary.from_api(payload)
        summary.details = await self._fetch_details(owner, _segment(summary.name))
        summary.details.first_seen_at = payload.get("created_at") or None
        summary.details.last_activity_at = payload.get("pushed_at") or None
        summary.details.lifespan_days = lifespan_days(payload.get("created_at"), payload.get("pushed_at"))
        return summary

    async def _fetch_details(self, owner: str, repo: str) -> RepoDetails:
        """README then languages, one after the other."""

        details = RepoDetails()
        readme = await call_or_default(lambda: self._fetch_readme(owner, repo), None, label=f"README of {owner}/{repo}")
        if readme:
            details.readme = readme
            details.readme_snippet = readme_snippet(
                readme, self._settings.readme_snippet_lines, self._settings.readme_snippet_chars
            )
        details.tech_stack = await call_or_default(
            lambda: self._fetch_languages(owner, repo), None, label=f"languages of {owner}/{repo}"
        )
        return details

    async def _fetch_readme(self, owner: str, repo: str) -> str | None:
        response = await self._get(f"/repos/{owner}/{repo}/readme")
        return decode_readme(response.body) if response.ok else None

    async def _fetch_languages(self, owner: str, repo: str) -> list[str] | None:
        response = await self._get(f"/repos/{owner}/{repo}/languages")
        return tech_stack(response.body) if response.ok else None

    async def _enrich_repo(self, entity: CandidateEntity, repo_name: str) -> EnrichedRecord:
        owner, repo = _segment(entity.owner), _segment(repo_name)
        LOGGER.info("Enriching GitHub repository %s", entity.identity_key)

        response = await self._get(f"/repos/{owner}/{repo}")
        repo_info = response.body if response.ok and isinstance(response.body, dict) else None
        details = await self._fetch_details(owner, repo)
        if repo_info is not None:
            details.first_seen_at = repo_info.get("created_at") or None
            details.last_activity_at = repo_info.get("pushed_at") or None
            details.lifespan_days = lifespan_days(repo_info.get("created_at"), repo_info.get("pushed_at"))
        return EnrichedRecord(
            entity=entity,
            fetch_status=FetchStatus(ok=response.ok, status=response.status),
            repo_info=repo_info,
            details=details,
        )


def _failed_summary(payload: Any, exc: Exception) -> RepoSummary:
    summary = RepoSummary.from_api(payload) if isinstance(payload, dict) else RepoSummary.failed(str(exc))
    summary.error = str(exc)
    return summary


__all__ = [
    "Enricher",
    "call_or_default",
    "compute_activity",
    "decode_readme",
    "lifespan_days",
    "map_bounded",
    "readme_snippet",
    "tech_stack",
]
