from __future__ import annotations

import json

import httpx
from typer.testing import CliRunner

from github_resume import cli
from github_resume.cli import app
from github_resume.github_client import GitHubClient

runner = CliRunner()


def _mock_github(monkeypatch, handler):
    """Route the command's GitHub client through ``handler``; returns the seen requests."""

    seen: list[httpx.Request] = []

    def recording(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return handler(request)

    def factory(settings):
        return GitHubClient(settings, transport=httpx.MockTransport(recording))

    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    monkeypatch.delenv("GH_TOKEN", raising=False)
    monkeypatch.setattr(cli, "GitHubClient", factory)
    return seen


def test_extract_lists_selected_candidates():
    result = runner.invoke(app, ["extract", "--text", "GitHub (jdoe)\nhttps://github.com/octocat"])

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert [candidate["owner"] for candidate in payload["candidates"]] == ["octocat"]
    assert payload["selected"]["url"] == "https://github.com/octocat"


def test_extract_all_includes_low_confidence(tmp_path):
    resume = tmp_path / "resume.txt"
    resume.write_text("GitHub (jdoe)", encoding="utf-8")

    result = runner.invoke(app, ["extract", str(resume), "--all"])

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["candidates"][0]["confidence"] == 0.6
    assert payload["selected"] is None


def test_extract_reads_stdin():
    result = runner.invoke(app, ["extract"], input="github.com/octocat/Hello-World\n")

    assert result.exit_code == 0
    assert json.loads(result.stdout)["selected"]["repo"] == "Hello-World"


def test_analyze_prints_the_enriched_record(monkeypatch):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/users/octocat":
            return httpx.Response(200, json={"login": "octocat", "name": "The Octocat"})
        return httpx.Response(200, json=[])

    seen = _mock_github(monkeypatch, handler)

    result = runner.invoke(
        app, ["analyze", "--text", "https://github.com/octocat", "--github-token", "s3cret", "--indent", "0"]
    )

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["success"] is True
    assert payload["github"][0]["owner"] == "octocat"
    assert payload["github"][0]["profile"]["name"] == "The Octocat"
    assert seen[0].url.path == "/users/octocat"
    assert all(request.headers["Authorization"] == "token s3cret" for request in seen)


def test_analyze_without_candidates_makes_no_calls(monkeypatch):
    seen = _mock_github(monkeypatch, lambda request: httpx.Response(500))

    result = runner.invoke(app, ["analyze"], input="Python, Go and Kubernetes\n")

    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"success": True, "github": []}
    assert seen == []


def test_analyze_exits_with_one_when_the_result_cannot_be_serialized(monkeypatch):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/users/octocat":
            return httpx.Response(200, content=b'{"login": "octocat", "score": NaN}')
        return httpx.Response(200, json=[])

    _mock_github(monkeypatch, handler)

    result = runner.invoke(app, ["analyze", "--text", "github.com/octocat", "--log-level", "CRITICAL"])

    assert result.exit_code == 1
    payload = json.loads(result.stdout)
    assert payload["success"] is False
    assert payload["github"] == []
    assert "serialization" in payload["error"]
