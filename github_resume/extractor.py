"""Heuristics that pull GitHub users and repositories out of resume text."""

from __future__ import annotations

import logging
import re
from typing import Callable, Iterable, Iterator

from .models import CandidateEntity

LOGGER = logging.getLogger(__name__)

URL_USER_CONFIDENCE = 0.99
URL_REPO_CONFIDENCE = 0.95
LABELED_CONFIDENCE = 0.9
MENTION_CONFIDENCE = 0.85
PROXIMITY_CONFIDENCE = 0.6

RESERVED_ROUTES = ("issues", "pulls", "pull", "blob", "tree", "releases", "actions")

_LOGIN = r"[A-Za-z0-9](?:[A-Za-z0-9-]{0,37}[A-Za-z0-9])?"
_LOGIN_END = r"(?![A-Za-z0-9_-])"
_URL_PATH = (
    r"github\.com/(?P<owner>[A-Za-z0-9-]{1,39})" + _LOGIN_END
    + r"(?:/(?!(?:" + "|".join(RESERVED_ROUTES) + r")(?![A-Za-z0-9_.-]))(?P<repo>[A-Za-z0-9_.-]+))?"
)

_PROTOCOL_URL = re.compile(r"https?://(?:www\.)?" + _URL_PATH, re.IGNORECASE)
_BARE_DOMAIN = re.compile(r"(?<![A-Za-z0-9.-])(?:www\.)?" + _URL_PATH, re.IGNORECASE)
_LABELED = re.compile(r"\bgithub\s*[:\-–]?\s*@?(" + _LOGIN + ")" + _LOGIN_END, re.IGNORECASE)
_GITHUB_WORD = re.compile(r"github", re.IGNORECASE)
_AT_MENTION = re.compile(r"(?<![A-Za-z0-9._%+-])@(" + _LOGIN + ")" + _LOGIN_END)
_PROXIMITY = re.compile(
    r"\bgithub\b(?!\.com)[^\n]{0,30}?\(?[ \t]*(?<![A-Za-z0-9-])(" + _LOGIN + ")" + _LOGIN_END + r"[ \t]*\)?",
    re.IGNORECASE,
)
_TRAILING_PUNCTUATION = re.compile(r"[/)\].,;]+$")

Matcher = Callable[[str], Iterable[CandidateEntity]]


def _url_candidates(pattern: re.Pattern[str], text: str) -> Iterator[CandidateEntity]:
    for match in pattern.finditer(text):
        owner = match.group("owner")
        repo = _clean_repo_name(match.group("repo"))
        if repo:
            yield CandidateEntity.repo(owner, repo, URL_REPO_CONFIDENCE)
        else:
            yield CandidateEntity.user(owner, URL_USER_CONFIDENCE)


def _clean_repo_name(raw: str | None) -> str | None:
    if not raw:
        return None
    name = _TRAILING_PUNCTUATION.sub("", raw)
    if name.lower().endswith(".git"):
        name = name[: -len(".git")]
    return name or None


def match_protocol_urls(text: str) -> Iterator[CandidateEntity]:
    """``https://github.com/owner[/repo]`` links."""

    return _url_candidates(_PROTOCOL_URL, text)


def match_bare_domains(text: str) -> Iterator[CandidateEntity]:
    """``github.com/owner[/repo]`` without a scheme."""

    return _url_candidates(_BARE_DOMAIN, text)


def match_labeled_mentions(text: str) -> Iterator[CandidateEntity]:
    """``GitHub: jdoe``, ``github - @jdoe`` and similar labels."""

    for match in _LABELED.finditer(text):
        yield CandidateEntity.user(match.group(1), LABELED_CONFIDENCE)


def match_line_mentions(text: str) -> Iterator[CandidateEntity]:
    """``@jdoe`` handles on lines that mention GitHub."""

    for line in text.split("\n"):
        if not _GITHUB_WORD.search(line):
            continue
        for match in _AT_MENTION.finditer(line):
            yield CandidateEntity.user(match.group(1), MENTION_CONFIDENCE)


def match_nearby_tokens(text: str) -> Iterator[CandidateEntity]:
    """Last resort: the first login-shaped token shortly after the word GitHub."""

    for match in _PROXIMITY.finditer(text):
        yield CandidateEntity.user(match.group(1), PROXIMITY_CONFIDENCE)


# Ordered from most to least precise. Earlier passes win identity-key collisions.
PASSES: tuple[Matcher, ...] = (
    match_protocol_urls,
    match_bare_domains,
    match_labeled_mentions,
    match_line_mentions,
    match_nearby_tokens,
)


def extract_entities(text: str, passes: Iterable[Matcher] = PASSES) -> list[CandidateEntity]:
    """Run every pass over ``text`` and return the de-duplicated candidates in discovery order."""

    if not text:
        return []

    seen: dict[str, CandidateEntity] = {}
    for matcher in passes:
        for candidate in matcher(text):
            if candidate.identity_key in seen:
                continue
            seen[candidate.identity_key] = candidate
            LOGGER.debug(
                "Candidate %s (%s) from %s with confidence %.2f",
                candidate.identity_key,
                candidate.kind.value,
                matcher.__name__,
                candidate.confidence,
            )
    return list(seen.values())


__all__ = [
    "PASSES",
    "RESERVED_ROUTES",
    "extract_entities",
    "match_bare_domains",
    "match_labeled_mentions",
    "match_line_mentions",
    "match_nearby_tokens",
    "match_protocol_urls",
]
