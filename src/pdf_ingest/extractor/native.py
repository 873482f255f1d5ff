"""Native (text-layer) PDF parsing and page rendering.

Two interchangeable parsers implement ``NativeParser``:

- ``PyMuPDFParser`` -- default; fast, handles most machine-generated PDFs.
- ``PdfPlumberParser`` -- pdfminer-based alternative, sometimes better on
  PDFs whose fonts PyMuPDF maps poorly.

Both read from an in-memory byte buffer and never touch the filesystem.
``render_page_images`` turns pages into PNG bytes for the OCR fallback.
"""

from __future__ import annotations

import io
import logging
from collections.abc import Iterator
from typing import Protocol

import pdfplumber
import pymupdf

from pdf_ingest.config.settings import NativeBackend
from pdf_ingest.extractor.errors import OcrError, ParseError
from pdf_ingest.extractor.types import NativeText

logger = logging.getLogger(__name__)

PDF_MAGIC_BYTES = b"%PDF"

# Readers tolerate junk before the header as long as it appears this early
_HEADER_SEARCH_BYTES = 1024

# Pages are joined the way pdf text dumps usually separate them
_PAGE_SEPARATOR = "\n\n"


class NativeParser(Protocol):
    def parse(self, pdf_bytes: bytes) -> NativeText: ...


def _validate_pdf_bytes(pdf_bytes: bytes) -> None:
    """Reject buffers that cannot be a PDF before handing them to a parser.

    Raises:
        ParseError: If the buffer is empty or has no PDF header in its first
            kilobyte.
    """
    if not pdf_bytes:
        raise ParseError("Empty file provided")

    if PDF_MAGIC_BYTES not in pdf_bytes[:_HEADER_SEARCH_BYTES]:
        raise ParseError("Invalid PDF: no PDF header in the first 1024 bytes")


def _open_document(pdf_bytes: bytes) -> pymupdf.Document:
    _validate_pdf_bytes(pdf_bytes)
    try:
        doc = pymupdf.open(stream=pdf_bytes, filetype="pdf")
    except Exception as e:
        raise ParseError(f"cannot_open: {e}") from e

    if doc.needs_pass:
        doc.close()
        raise ParseError("encrypted")

    return doc


class PyMuPDFParser:
    """Extract the text layer page by page with PyMuPDF."""

    def parse(self, pdf_bytes: bytes) -> NativeText:
        doc = _open_document(pdf_bytes)
        try:
            page_count = len(doc)
            if page_count == 0:
                raise ParseError("PDF contains no pages")

            page_texts: list[str] = []
            for page in doc:
                page_texts.append(page.get_text("text"))
        except ParseError:
            raise
        except Exception as e:
            raise ParseError(f"Failed to read PDF: {e}") from e
        finally:
            doc.close()

        text = _PAGE_SEPARATOR.join(page_texts)
        logger.info("PyMuPDF extracted %d chars from %d pages", len(text), page_count)
        return NativeText(text=text, page_count=page_count)


class PdfPlumberParser:
    """Extract the text layer page by page with pdfplumber."""

    def parse(self, pdf_bytes: bytes) -> NativeText:
        _validate_pdf_bytes(pdf_bytes)
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                page_count = len(pdf.pages)
                if page_count == 0:
                    raise ParseError("PDF contains no pages")

                page_texts: list[str] = []
                for page_num, page in enumerate(pdf.pages, start=1):
                    try:
                        page_texts.append(page.extract_text() or "")
                    except Exception as e:
                        # One unreadable page should not lose the others
                        logger.warning(
                            "pdfplumber failed on page %d/%d: %s",
                            page_num,
                            page_count,
                            e,
                        )
        except ParseError:
            raise
        except Exception as e:
            raise ParseError(f"Corrupt or invalid PDF: {e}") from e

        text = _PAGE_SEPARATOR.join(page_texts)
        logger.info(
            "pdfplumber extracted %d chars from %d pages", len(text), page_count
        )
        return NativeText(text=text, page_count=page_count)


def build_native_parser(backend: NativeBackend) -> NativeParser:
    """Return the parser implementation for *backend*."""
    if backend is NativeBackend.PYMUPDF:
        return PyMuPDFParser()
    if backend is NativeBackend.PDFPLUMBER:
        return PdfPlumberParser()
    raise ValueError(f"Unsupported native backend: {backend!r}")


def render_page_images(
    pdf_bytes: bytes,
    dpi: int,
    max_pages: int,
) -> Iterator[bytes]:
    """Render each page of the PDF to PNG bytes for OCR.

    Pages are rendered lazily, one at a time, so only a single page image is
    held in memory.

    Args:
        pdf_bytes: Raw PDF content.
        dpi: Render resolution; 300 suits Tesseract.
        max_pages: Refuse documents longer than this.

    Yields:
        PNG-encoded page images in page order.

    Raises:
        OcrError: If the document cannot be opened or exceeds *max_pages*.
    """
    try:
        doc = _open_document(pdf_bytes)
    except ParseError as e:
        raise OcrError(f"cannot render pages: {e}") from e

    try:
        page_count = len(doc)
        if page_count > max_pages:
            raise OcrError(f"too_many_pages ({page_count} > {max_pages})")

        for page in doc:
            pix = page.get_pixmap(dpi=dpi)
            yield pix.tobytes("png")
    finally:
        doc.close()
