"""Domain models produced by extraction and enrichment."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

GITHUB_WEB_URL = "https://github.com"


class EntityKind(str, Enum):
    USER = "user"
    REPO = "repo"


@dataclass(slots=True, frozen=True)
class CandidateEntity:
    """A GitHub identity found in resume text, before any remote lookup."""

    kind: EntityKind
    owner: str
    confidence: float
    repo_name: str | None = None

    def __post_init__(self) -> None:
        if (self.kind is EntityKind.REPO) != bool(self.repo_name):
            raise ValueError(f"repo_name must be set exactly for repo candidates: {self!r}")

    @classmethod
    def user(cls, owner: str, confidence: float) -> "CandidateEntity":
        return cls(kind=EntityKind.USER, owner=owner, confidence=confidence)

    @classmethod
    def repo(cls, owner: str, repo_name: str, confidence: float) -> "CandidateEntity":
        return cls(kind=EntityKind.REPO, owner=owner, confidence=confidence, repo_name=repo_name)

    @property
    def identity_key(self) -> str:
        if self.repo_name:
            return f"{self.owner}/{self.repo_name}"
        return self.owner

    @property
    def url(self) -> str:
        return f"{GITHUB_WEB_URL}/{self.identity_key}"

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"type": self.kind.value, "owner": self.owner}
        if self.repo_name:
            payload["repo"] = self.repo_name
        payload["url"] = self.url
        payload["confidence"] = self.confidence
        return payload


@dataclass(slots=True)
class Activity:
    """Distinct active days inside the trailing activity window."""

    days_active_in_window: int = 0
    percent_active: int = 0

    def to_dict(self) -> dict[str, int]:
        return {"daysActive": self.days_active_in_window, "percentActive": self.percent_active}


@dataclass(slots=True)
class RepoDetails:
    """README, language and lifespan fields shared by repo summaries and repo records."""

    readme: str | None = None
    readme_snippet: str | None = None
    tech_stack: list[str] | None = None
    first_seen_at: str | None = None
    last_activity_at: str | None = None
    lifespan_days: int | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {}
        if self.readme is not None:
            payload["readme"] = self.readme
        if self.readme_snippet is not None:
            payload["readmeSnippet"] = self.readme_snippet
        if self.tech_stack is not None:
            payload["techStack"] = list(self.tech_stack)
        return payload

    def timeline_dict(self) -> dict[str, Any]:
        return {
            "firstCommitDate": self.first_seen_at,
            "lastCommitDate": self.last_activity_at,
            "durationDays": self.lifespan_days,
        }


@dataclass(slots=True)
class RepoSummary:
    """One owned repository listed under a user record."""

    name: str
    full_name: str
    url: str
    description: str = ""
    star_count: int = 0
    fork_count: int = 0
    details: RepoDetails = field(default_factory=RepoDetails)
    error: str | None = None

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> "RepoSummary":
        """Convert a REST repository listing item into a :class:`RepoSummary`."""

        return cls(
            name=payload.get("name") or "",
            full_name=payload.get("full_name") or "",
            url=payload.get("html_url") or "",
            description=payload.get("description") or "",
            star_count=payload.get("stargazers_count") or 0,
            fork_count=payload.get("forks_count") or 0,
        )

    @classmethod
    def failed(cls, error: str) -> "RepoSummary":
        return cls(name="", full_name="", url="", error=error)

    def to_dict(self) -> dict[str, Any]:
        if self.error is not None and not self.name:
            return {"error": self.error}
        payload: dict[str, Any] = {
            "name": self.name,
            "full_name": self.full_name,
            "html_url": self.url,
            "description": self.description,
            "stargazers_count": self.star_count,
            "forks_count": self.fork_count,
        }
        payload.update(self.details.timeline_dict())
        payload.update(self.details.to_dict())
        if self.error is not None:
            payload["error"] = self.error
        return payload


@dataclass(slots=True)
class FetchStatus:
    ok: bool
    status: int

    def to_dict(self) -> dict[str, Any]:
        return {"ok": self.ok, "status": self.status}


@dataclass(slots=True)
class EnrichedRecord:
    """A selected candidate plus whatever remote metadata could be fetched."""

    entity: CandidateEntity
    fetch_status: FetchStatus | None = None
    profile: dict[str, Any] | None = None
    activity: Activity | None = None
    repositories: list[RepoSummary] | None = None
    repo_info: dict[str, Any] | None = None
    details: RepoDetails | None = None

    def to_dict(self) -> dict[str, Any]:
        payload = self.entity.to_dict()
        if self.entity.kind is EntityKind.USER:
            payload["profile"] = self.profile
            if self.fetch_status is not None:
                payload["_fetch"] = self.fetch_status.to_dict()
            payload["activity"] = (self.activity or Activity()).to_dict()
            payload["repos"] = [repo.to_dict() for repo in self.repositories or []]
            return payload

        payload["repoInfo"] = self.repo_info
        if self.fetch_status is not None:
            payload["_fetch"] = self.fetch_status.to_dict()
        if self.details is not None:
            payload.update(self.details.to_dict())
            if self.repo_info is not None:
                payload.update(self.details.timeline_dict())
        return payload


@dataclass(slots=True)
class AnalysisResult:
    """Outcome of one analysis request."""

    success: bool
    github: list[EnrichedRecord] = field(default_factory=list)
    error: str | None = None

    @classmethod
    def failure(cls, message: str) -> "AnalysisResult":
        return cls(success=False, error=message)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"success": self.success, "github": [record.to_dict() for record in self.github]}
        if self.error is not None:
            payload["error"] = self.error
        return payload

    def to_json(self, indent: int | None = None) -> str:
        return json.dumps(
            self.to_dict(), indent=indent, ensure_ascii=False, allow_nan=False, default=_json_default
        )


def _json_default(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


__all__ = [
    "Activity",
    "AnalysisResult",
    "CandidateEntity",
    "EnrichedRecord",
    "EntityKind",
    "FetchStatus",
    "RepoDetails",
    "RepoSummary",
]
