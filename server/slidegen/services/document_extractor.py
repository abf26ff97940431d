"""Plain-text extraction for uploaded PDF and DOCX documents."""

import io
import logging
from typing import Optional

from slidegen.services.errors import InputError

logger = logging.getLogger(__name__)

PDF_MIME = "application/pdf"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


def document_kind(filename: Optional[str], mime_type: Optional[str]) -> Optional[str]:
    """Return "pdf", "docx", or None for anything we don't extract."""
    name = (filename or "").lower()
    mime = (mime_type or "").lower()
    if mime == PDF_MIME or name.endswith(".pdf"):
        return "pdf"
    if mime == DOCX_MIME or name.endswith(".docx"):
        return "docx"
    return None


def is_extractable(filename: Optional[str], mime_type: Optional[str]) -> bool:
    return document_kind(filename, mime_type) is not None


def extract_text(filename: Optional[str], mime_type: Optional[str], data: bytes) -> Optional[str]:
    """Extract text from a PDF or DOCX upload; None for other types."""
    kind = document_kind(filename, mime_type)
    if kind is None:
        return None

    try:
        if kind == "pdf":
            text = _extract_pdf(data)
        else:
            text = _extract_docx(data)
    except Exception as e:
        logger.warning(f"Text extraction failed for {filename or mime_type}: {e}")
        raise InputError(f"Could not read {filename or 'document'}: {e}")

    logger.debug(f"Extracted {len(text)} chars from {filename or kind}")
    return text


def _extract_pdf(data: bytes) -> str:
    import fitz  # PyMuPDF

    doc = fitz.open(stream=data, filetype="pdf")
    try:
        pages = [page.get_text("text").strip() for page in doc]
    finally:
        doc.close()
    return "\n\n".join(p for p in pages if p).strip()


def _extract_docx(data: bytes) -> str:
    from docx import Document

    doc = Document(io.BytesIO(data))
    paragraphs = [p.text.strip() for p in doc.paragraphs if p.text.strip()]
    return "\n\n".join(paragraphs)
