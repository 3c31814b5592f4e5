from __future__ import annotations

import io

import docx
import fitz

from github_resume.analyzer import find_candidates
from github_resume.documents import (
    DOCX_MEDIA_TYPE,
    ResumeDocumentExtractor,
    extract_docx_text,
    extract_pdf_text,
    media_type_for,
)


def _pdf_with_link(text: str, uri: str) -> bytes:
    document = fitz.open()
    page = document.new_page()
    page.insert_text((72, 72), text)
    page.insert_link({"kind": fitz.LINK_URI, "from": fitz.Rect(72, 60, 220, 80), "uri": uri})
    payload = document.tobytes()
    document.close()
    return payload


def _docx(*paragraphs: str) -> bytes:
    document = docx.Document()
    for paragraph in paragraphs:
        document.add_paragraph(paragraph)
    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()


def test_pdf_link_targets_come_before_page_text():
    payload = _pdf_with_link("Jane Doe, backend engineer", "https://github.com/octocat")

    text = extract_pdf_text(payload)

    assert text.startswith("https://github.com/octocat\n")
    assert "Jane Doe, backend engineer" in text
    assert [candidate.identity_key for candidate in find_candidates(text)] == ["octocat"]


def test_docx_paragraphs_are_extracted():
    payload = _docx("Jane Doe", "", "GitHub: @jdoe93")

    assert extract_docx_text(payload) == "Jane Doe\nGitHub: @jdoe93"
    assert ResumeDocumentExtractor().extract(payload, DOCX_MEDIA_TYPE) == "Jane Doe\nGitHub: @jdoe93"


def test_text_payloads_are_decoded():
    extractor = ResumeDocumentExtractor()

    assert extractor.extract("GitHub: jdoe".encode("utf-8"), "text/plain; charset=utf-8") == "GitHub: jdoe"
    assert extractor.extract(b"\xff\xfegithub", "text/plain").endswith("github")


def test_unknown_types_fall_back_to_pdf_then_docx_then_utf8():
    extractor = ResumeDocumentExtractor()
    pdf = _pdf_with_link("Resume", "https://github.com/octocat")
    word = _docx("github.com/jdoe93")

    assert extractor.extract(b"github.com/jdoe", "application/octet-stream") == "github.com/jdoe"
    assert extractor.extract(b"github.com/jdoe", "") == "github.com/jdoe"
    assert extractor.extract(pdf, "application/octet-stream").startswith("https://github.com/octocat")
    assert extractor.extract(word, "") == "github.com/jdoe93"


def test_unreadable_and_empty_payloads_yield_empty_text():
    extractor = ResumeDocumentExtractor()

    assert extractor.extract(b"not a pdf at all", "application/pdf") == ""
    assert extractor.extract(b"not a docx", DOCX_MEDIA_TYPE) == ""
    assert extractor.extract(b"", "text/plain") == ""


def test_media_type_guessing():
    assert media_type_for("CV.PDF") == "application/pdf"
    assert media_type_for("resume.docx") == DOCX_MEDIA_TYPE
    assert media_type_for("resume.txt") == "text/plain"
    assert media_type_for("resume") == ""
