"""Shared types for the extraction pipeline.

Defines ExtractionResult and NativeText used across the parser adapters,
the orchestration service, and the CLI.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class NativeText:
    """Raw text layer of a PDF as returned by a native parser.

    Attributes:
        text: Concatenated page text, unnormalized.
        page_count: Number of pages in the document.
    """

    text: str
    page_count: int


@dataclass(frozen=True)
class ExtractionResult:
    """Final outcome of extracting one PDF.

    Attributes:
        full_text: Normalized best available text ("" on failure).
        chunks: Ordered, non-empty, overlapping windows over ``full_text``.
        pages_processed: Page count of the source PDF (0 only on failure).
        ocr_used: Whether ``full_text`` came from the OCR path.
    """

    full_text: str = ""
    chunks: tuple[str, ...] = field(default_factory=tuple)
    pages_processed: int = 0
    ocr_used: bool = False

    @classmethod
    def empty(cls, ocr_used: bool = False) -> ExtractionResult:
        """Failure sentinel: no text, no chunks, zero pages."""
        return cls(ocr_used=ocr_used)

    @property
    def char_count(self) -> int:
        return len(self.full_text)

    @property
    def chunk_count(self) -> int:
        return len(self.chunks)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the camelCase shape used in JSON responses."""
        return {
            "fullText": self.full_text,
            "chunks": list(self.chunks),
            "pagesProcessed": self.pages_processed,
            "ocrUsed": self.ocr_used,
        }
