"""Resume text in, at most one enriched GitHub record out."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from .config import AnalyzerSettings
from .documents import DocumentTextExtractor, ResumeDocumentExtractor
from .enrichment import Enricher
from .extractor import extract_entities
from .github_client import GitHubClient
from .models import AnalysisResult, CandidateEntity
from .normalizer import normalize_text
from .selector import select_candidate

LOGGER = logging.getLogger(__name__)


class AnalysisError(RuntimeError):
    """Raised when an analysis result cannot be turned into a response."""


def find_candidates(raw_text: str | None) -> list[CandidateEntity]:
    """Normalize ``raw_text`` and extract every GitHub candidate from it."""

    return extract_entities(normalize_text(raw_text))


def ensure_serializable(result: AnalysisResult) -> str:
    try:
        return result.to_json()
    except (TypeError, ValueError) as exc:
        raise AnalysisError(f"JSON serialization failed: {exc}") from exc


async def analyze_text(
    raw_text: str | None,
    client: GitHubClient,
    settings: AnalyzerSettings | None = None,
    *,
    clock: Callable[[], datetime] | None = None,
) -> AnalysisResult:
    """Run extraction, selection and enrichment for one resume.

    Remote failures only leave fields empty. The result is a failure only
    when it cannot be serialized.
    """

    settings = settings or AnalyzerSettings()
    candidates = find_candidates(raw_text)
    LOGGER.info("Extracted %s GitHub candidates", len(candidates))

    selected = select_candidate(candidates, settings.confidence_threshold)
    if selected is None:
        return AnalysisResult(success=True)

    record = await Enricher(client, settings, clock=clock).enrich(selected)
    result = AnalysisResult(success=True, github=[record])
    try:
        ensure_serializable(result)
    except AnalysisError as exc:
        LOGGER.error("Discarding analysis of %s: %s", selected.identity_key, exc)
        return AnalysisResult.failure(str(exc))
    return result


async def analyze_document(
    payload: bytes,
    media_type: str,
    client: GitHubClient,
    settings: AnalyzerSettings | None = None,
    *,
    extractor: DocumentTextExtractor | None = None,
    clock: Callable[[], datetime] | None = None,
) -> AnalysisResult:
    """Convert an uploaded document to text and analyze it."""

    extractor = extractor or ResumeDocumentExtractor()
    text = extractor.extract(payload, media_type)
    if not text:
        LOGGER.info("Document of type %s produced no text", media_type or "unknown")
    return await analyze_text(text, client, settings, clock=clock)


__all__ = ["AnalysisError", "analyze_document", "analyze_text", "ensure_serializable", "find_candidates"]
