"""Command line interface for the resume analyzer."""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Optional

import typer

from .analyzer import analyze_text, find_candidates
from .config import AppConfig
from .documents import ResumeDocumentExtractor, media_type_for
from .github_client import GitHubClient
from .selector import select_candidate

LOGGER = logging.getLogger(__name__)

app = typer.Typer(add_completion=False)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _read_input(path: Optional[Path], text: Optional[str], media_type: Optional[str]) -> str:
    if text is not None:
        return text
    if path is None:
        return sys.stdin.read()
    payload = path.read_bytes()
    return ResumeDocumentExtractor().extract(payload, media_type or media_type_for(path.name))


@app.command("analyze")
def analyze(
    path: Optional[Path] = typer.Argument(None, exists=True, dir_okay=False, help="Resume file; stdin when omitted"),
    text: Optional[str] = typer.Option(None, help="Resume text given inline"),
    media_type: Optional[str] = typer.Option(None, help="Media type of PATH; guessed from the extension"),
    github_token: Optional[str] = typer.Option(None, envvar="GITHUB_TOKEN", help="GitHub token"),
    indent: Optional[int] = typer.Option(2, help="JSON indentation"),
    log_level: str = typer.Option("WARNING", help="Logging level"),
) -> None:
    """Find the most likely GitHub identity in a resume and fetch its details."""

    configure_logging(log_level)
    overrides = {"github_token": github_token} if github_token else {}
    config = AppConfig.from_env(overrides=overrides)
    raw_text = _read_input(path, text, media_type)

    async def runner() -> bool:
        async with GitHubClient(config.github) as client:
            result = await analyze_text(raw_text, client, config.analyzer)
            if client.rate_limit is not None:
                LOGGER.info("Remaining rate limit: %s", client.rate_limit.remaining)
        typer.echo(result.to_json(indent=indent))
        return result.success

    if not asyncio.run(runner()):
        raise typer.Exit(code=1)


@app.command("extract")
def extract(
    path: Optional[Path] = typer.Argument(None, exists=True, dir_okay=False, help="Resume file; stdin when omitted"),
    text: Optional[str] = typer.Option(None, help="Resume text given inline"),
    media_type: Optional[str] = typer.Option(None, help="Media type of PATH; guessed from the extension"),
    show_all: bool = typer.Option(False, "--all", help="Include candidates below the confidence threshold"),
    log_level: str = typer.Option("WARNING", help="Logging level"),
) -> None:
    """List GitHub candidates without calling the API."""

    configure_logging(log_level)
    config = AppConfig.from_env()
    candidates = find_candidates(_read_input(path, text, media_type))
    threshold = config.analyzer.confidence_threshold
    if not show_all:
        candidates = [candidate for candidate in candidates if candidate.confidence >= threshold]
    selected = select_candidate(candidates, threshold)
    payload = {
        "candidates": [candidate.to_dict() for candidate in candidates],
        "selected": selected.to_dict() if selected else None,
    }
    typer.echo(json.dumps(payload, indent=2))


__all__ = ["app"]
