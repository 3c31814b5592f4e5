"""Clean-up of resume text before GitHub mentions are matched."""

from __future__ import annotations

import re

_LINE_BREAKS = re.compile(r"\r\n?")
_INVISIBLE = re.compile("[\u200b\u200c\u200d\u2060\ufeff\u00ad]")
_GITHUB_DOMAIN_WITH_SLASH = re.compile(r"github[ \t\n]*\.?[ \t\n]*com[ \t\n]*/[ \t\n]*", re.IGNORECASE)
_GITHUB_DOMAIN = re.compile(r"github[ \t\n]*\.?[ \t\n]*com", re.IGNORECASE)
_SPACE_AFTER_SEPARATOR = re.compile(r"([/.])[ \t]+")
_SPACE_BEFORE_SEPARATOR = re.compile(r"[ \t]+([/.])")
_HORIZONTAL_SPACE = re.compile(r"[ \t]+")


def normalize_text(text: str | None) -> str:
    """Return ``text`` with line-wrapped and spaced-out GitHub URLs rejoined.

    Layout engines that export resumes to text often break URLs across lines
    or pad the separators ("github . com / jdoe"). Every step here is a global
    substitution, so matches may span line breaks.
    """

    if not text:
        return ""

    cleaned = _LINE_BREAKS.sub("\n", text).strip()
    cleaned = _INVISIBLE.sub("", cleaned)
    cleaned = _GITHUB_DOMAIN_WITH_SLASH.sub("github.com/", cleaned)
    cleaned = _GITHUB_DOMAIN.sub("github.com", cleaned)
    cleaned = _SPACE_AFTER_SEPARATOR.sub(r"\1", cleaned)
    cleaned = _SPACE_BEFORE_SEPARATOR.sub(r"\1", cleaned)
    cleaned = _HORIZONTAL_SPACE.sub(" ", cleaned)
    return cleaned.strip()


__all__ = ["normalize_text"]
