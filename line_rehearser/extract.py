"""Pull raw text out of uploaded documents.

The document kind is resolved once, from a MIME type or file extension,
into a DocumentKind; everything downstream works from that value.
"""

import io
import logging
import os

import docx
import pdfplumber

from line_rehearser.errors import ExtractionFailed, UnsupportedFormat
from line_rehearser.models import DocumentKind, SourceKind

logger = logging.getLogger(__name__)

_KIND_ALIASES = {
    "application/pdf": DocumentKind.PDF,
    "pdf": DocumentKind.PDF,
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": DocumentKind.DOCX,
    "docx": DocumentKind.DOCX,
    "text/plain": DocumentKind.PLAIN,
    "plain": DocumentKind.PLAIN,
    "txt": DocumentKind.PLAIN,
    "text": DocumentKind.PLAIN,
}


def resolve_kind(kind: str) -> DocumentKind:
    """Map a MIME type, extension or short name to a DocumentKind."""
    key = (kind or "").strip().lower().lstrip(".")
    try:
        return _KIND_ALIASES[key]
    except KeyError:
        raise UnsupportedFormat(kind) from None


def kind_from_path(path: str) -> DocumentKind:
    ext = os.path.splitext(path)[1]
    if not ext:
        raise UnsupportedFormat(os.path.basename(path))
    return resolve_kind(ext)


def source_kind_for(kind: DocumentKind) -> SourceKind:
    """Plain text may already be formatted; page layouts never are."""
    if kind is DocumentKind.PLAIN:
        return SourceKind.PLAIN_FORMATTED
    return SourceKind.UNSTRUCTURED


def _extract_pdf(data: bytes) -> str:
    pages = []
    with pdfplumber.open(io.BytesIO(data)) as pdf:
        for page in pdf.pages:
            pages.append(page.extract_text() or "")
    return "\n".join(pages) + "\n"


def _extract_docx(data: bytes) -> str:
    document = docx.Document(io.BytesIO(data))
    return "\n".join(p.text for p in document.paragraphs)


def _extract_plain(data: bytes) -> str:
    return data.decode("utf-8-sig")


_EXTRACTORS = {
    DocumentKind.PDF: _extract_pdf,
    DocumentKind.DOCX: _extract_docx,
    DocumentKind.PLAIN: _extract_plain,
}


def extract_text(data: bytes, kind: DocumentKind) -> str:
    """Extract raw text from document bytes.

    Raises ExtractionFailed if the container can't be read.
    """
    try:
        return _EXTRACTORS[kind](data)
    except Exception as e:
        logger.warning("Could not extract %s text: %s", kind.value, e)
        raise ExtractionFailed(f"Error parsing {kind.value.upper()}: {e}") from e


def extract_file(path: str) -> tuple[str, DocumentKind]:
    """Read a document from disk and return its text and kind."""
    kind = kind_from_path(path)
    with open(path, "rb") as f:
        data = f.read()
    return extract_text(data, kind), kind
