from __future__ import annotations

import json
import math

import pytest

from github_resume.models import (
    Activity,
    AnalysisResult,
    CandidateEntity,
    EnrichedRecord,
    EntityKind,
    FetchStatus,
    RepoDetails,
    RepoSummary,
)


def test_candidate_identity_and_url():
    user = CandidateEntity.user("octocat", 0.99)
    repo = CandidateEntity.repo("octocat", "Hello-World", 0.95)

    assert user.identity_key == "octocat"
    assert user.url == "https://github.com/octocat"
    assert repo.identity_key == "octocat/Hello-World"
    assert repo.url == "https://github.com/octocat/Hello-World"
    assert repo.to_dict() == {
        "type": "repo",
        "owner": "octocat",
        "repo": "Hello-World",
        "url": "https://github.com/octocat/Hello-World",
        "confidence": 0.95,
    }


def test_repo_name_must_match_kind():
    with pytest.raises(ValueError):
        CandidateEntity(kind=EntityKind.REPO, owner="octocat", confidence=0.95)
    with pytest.raises(ValueError):
        CandidateEntity(kind=EntityKind.USER, owner="octocat", confidence=0.99, repo_name="x")


def test_repo_summary_from_listing_item():
    payload = {
        "name": "demo",
        "full_name": "acme/demo",
        "html_url": "https://github.com/acme/demo",
        "description": None,
        "stargazers_count": 42,
        "forks_count": 3,
    }

    summary = RepoSummary.from_api(payload)
    summary.details = RepoDetails(tech_stack=["Python"], first_seen_at="2020-01-01T00:00:00Z")

    assert summary.to_dict() == {
        "name": "demo",
        "full_name": "acme/demo",
        "html_url": "https://github.com/acme/demo",
        "description": "",
        "stargazers_count": 42,
        "forks_count": 3,
        "firstCommitDate": "2020-01-01T00:00:00Z",
        "lastCommitDate": None,
        "durationDays": None,
        "techStack": ["Python"],
    }


def test_user_record_serializes_additively():
    entity = CandidateEntity.user("octocat", 0.99)
    record = EnrichedRecord(
        entity=entity,
        fetch_status=FetchStatus(ok=True, status=200),
        profile={"login": "octocat"},
        activity=Activity(days_active_in_window=3, percent_active=10),
        repositories=[RepoSummary.failed("boom")],
    )

    payload = record.to_dict()

    assert payload["owner"] == "octocat"
    assert payload["confidence"] == 0.99
    assert payload["activity"] == {"daysActive": 3, "percentActive": 10}
    assert payload["_fetch"] == {"ok": True, "status": 200}
    assert payload["repos"] == [{"error": "boom"}]


def test_repo_record_without_metadata_omits_timeline():
    entity = CandidateEntity.repo("octocat", "gone", 0.95)
    record = EnrichedRecord(entity=entity, details=RepoDetails(readme="# hi", readme_snippet="# hi"))

    payload = record.to_dict()

    assert payload["repoInfo"] is None
    assert payload["readme"] == "# hi"
    assert "firstCommitDate" not in payload


def test_analysis_result_json():
    assert json.loads(AnalysisResult(success=True).to_json()) == {"success": True, "github": []}
    assert json.loads(AnalysisResult.failure("bad").to_json()) == {"success": False, "github": [], "error": "bad"}


def test_analysis_result_rejects_non_finite_numbers():
    record = EnrichedRecord(entity=CandidateEntity.user("octocat", 0.99), profile={"score": math.nan})

    with pytest.raises(ValueError):
        AnalysisResult(success=True, github=[record]).to_json()
