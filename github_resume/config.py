"""Application configuration helpers."""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field, PositiveInt


UTC = timezone.utc

GITHUB_API_URL = "https://api.github.com"
USER_AGENT = "github-resume-analyzer"


class GitHubSettings(BaseModel):
    """Configuration options for the GitHub REST API."""

    token: str | None = Field(default=None, description="Personal access token sent as a static auth header.")
    api_url: str = Field(default=GITHUB_API_URL, description="Base URL for all REST calls.")
    user_agent: str = Field(default=USER_AGENT, description="Identifying User-Agent header.")
    page_size: PositiveInt = Field(default=100, le=100, description="Items requested from list endpoints.")


class AnalyzerSettings(BaseModel):
    """Tunable constants of the extraction and enrichment pipeline."""

    confidence_threshold: float = Field(
        default=0.9, ge=0.0, le=1.0, description="Minimum confidence for a candidate to be enriched."
    )
    repo_concurrency: PositiveInt = Field(default=3, description="Concurrent per-repository detail fetches.")
    activity_window_days: PositiveInt = Field(default=30, description="Trailing window for activity counting.")
    readme_snippet_chars: PositiveInt = Field(default=800, description="Maximum README snippet length.")
    readme_snippet_lines: PositiveInt = Field(default=5, description="Non-blank README lines kept in a snippet.")


class AppConfig(BaseModel):
    """Root configuration container."""

    github: GitHubSettings = Field(default_factory=GitHubSettings)
    analyzer: AnalyzerSettings = Field(default_factory=AnalyzerSettings)

    @classmethod
    def from_env(cls, env: dict[str, str] | None = None, overrides: dict[str, Any] | None = None) -> "AppConfig":
        """Construct a configuration object from environment variables.

        Only the token is read from the environment; everything else is a
        fixed constant that callers may override explicitly.
        """

        env = env if env is not None else os.environ
        overrides = overrides or {}

        github = GitHubSettings(
            token=overrides.get("github_token") or env.get("GITHUB_TOKEN") or env.get("GH_TOKEN") or None,
        )
        analyzer = AnalyzerSettings(
            **{key: value for key, value in overrides.items() if key in AnalyzerSettings.model_fields}
        )
        return cls(github=github, analyzer=analyzer)


def parse_timestamp(value: Any) -> datetime | None:
    """Parse a GitHub ISO-8601 timestamp, returning ``None`` when unusable."""

    if not value or not isinstance(value, str):
        return None
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


@dataclass(slots=True)
class RateLimitInfo:
    """Snapshot of GitHub's REST rate limit headers."""

    limit: int
    remaining: int
    reset_at: datetime


__all__ = [
    "AppConfig",
    "GitHubSettings",
    "AnalyzerSettings",
    "RateLimitInfo",
    "GITHUB_API_URL",
    "USER_AGENT",
    "UTC",
    "parse_timestamp",
]
