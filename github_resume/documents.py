"""Document-to-text collaborators that feed the analyzer."""

from __future__ import annotations

import io
import logging
from typing import Protocol

import docx
import fitz  # PyMuPDF

LOGGER = logging.getLogger(__name__)

PDF_MEDIA_TYPE = "application/pdf"
DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
TEXT_MEDIA_TYPES = {"application/json", "application/xml", "application/x-empty"}


class DocumentTextExtractor(Protocol):
    """Best-effort conversion of an uploaded document into plain text.

    Implementations return an empty string when nothing can be extracted and
    never raise.
    """

    def extract(self, payload: bytes, media_type: str) -> str:  # pragma: no cover - protocol
        ...


def extract_pdf_text(payload: bytes) -> str:
    """Text of every page, each preceded by the URIs of that page's link annotations.

    Resumes usually carry their GitHub profile as a hyperlink, so the link
    targets are put next to the text they sit on.
    """

    try:
        document = fitz.open(stream=payload, filetype="pdf")
    except Exception as exc:  # noqa: BLE001 - any unreadable payload means "no text"
        LOGGER.debug("Payload is not a readable PDF: %s", exc)
        return ""

    chunks: list[str] = []
    with document:
        for page in document:
            try:
                uris = [link["uri"] for link in page.get_links() if link.get("uri")]
                text = page.get_text()
            except Exception as exc:  # noqa: BLE001
                LOGGER.debug("Skipping unreadable PDF page %s: %s", page.number, exc)
                continue
            chunks.extend(uris)
            chunks.append(text)
    return "\n".join(chunks).strip()


def extract_docx_text(payload: bytes) -> str:
    """Paragraph and table text of a Word document."""

    try:
        document = docx.Document(io.BytesIO(payload))
    except Exception as exc:  # noqa: BLE001
        LOGGER.debug("Payload is not a readable DOCX: %s", exc)
        return ""

    lines = [paragraph.text for paragraph in document.paragraphs if paragraph.text.strip()]
    for table in document.tables:
        for row in table.rows:
            cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
            if cells:
                lines.append(" | ".join(cells))
    return "\n".join(lines)


def decode_text(payload: bytes) -> str:
    return payload.decode("utf-8", errors="replace")


class ResumeDocumentExtractor:
    """Routes uploads to the PDF, DOCX or plain-text reader by media type.

    Unknown types are tried as PDF, then DOCX, then decoded as UTF-8.
    """

    def extract(self, payload: bytes, media_type: str) -> str:
        if not payload:
            return ""
        media_type = (media_type or "").split(";", 1)[0].strip().lower()
        if media_type == PDF_MEDIA_TYPE:
            return extract_pdf_text(payload)
        if media_type == DOCX_MEDIA_TYPE:
            return extract_docx_text(payload)
        if media_type.startswith("text/") or media_type in TEXT_MEDIA_TYPES:
            return decode_text(payload)
        LOGGER.info("Guessing the format of a %s upload", media_type or "untyped")
        return extract_pdf_text(payload) or extract_docx_text(payload) or decode_text(payload)


def media_type_for(filename: str) -> str:
    """Guess the media type of an upload from its file name."""

    lowered = filename.lower()
    if lowered.endswith(".pdf"):
        return PDF_MEDIA_TYPE
    if lowered.endswith(".docx"):
        return DOCX_MEDIA_TYPE
    if lowered.endswith((".txt", ".md", ".text")):
        return "text/plain"
    return ""


__all__ = [
    "DocumentTextExtractor",
    "ResumeDocumentExtractor",
    "decode_text",
    "extract_docx_text",
    "extract_pdf_text",
    "media_type_for",
]
