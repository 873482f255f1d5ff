"""PDF text extraction: quality-gated OCR fallback, normalization, chunking.

Public API:
    PdfExtractor(settings).extract(pdf_bytes, high_precision)
        -> ExtractionResult
    PdfExtractor(settings).extract_with_ocr(pdf_bytes, high_precision)
        -> ExtractionResult
    normalize_text(text) -> str
    is_text_quality_good(text, settings) -> bool
    chunk_text(text, settings) -> list[str]
"""

from pdf_ingest.extractor.chunker import chunk_text
from pdf_ingest.extractor.errors import (
    EngineUnavailable,
    ExtractionError,
    OcrError,
    ParseError,
)
from pdf_ingest.extractor.native import (
    PdfPlumberParser,
    PyMuPDFParser,
    build_native_parser,
)
from pdf_ingest.extractor.normalize import normalize_text
from pdf_ingest.extractor.ocr import OcrEngineProvider, TesseractEngine, create_engine
from pdf_ingest.extractor.preprocess import prepare_image
from pdf_ingest.extractor.quality import (
    QualityReport,
    assess_text_quality,
    is_text_quality_good,
)
from pdf_ingest.extractor.service import PdfExtractor
from pdf_ingest.extractor.types import ExtractionResult, NativeText

__all__ = [
    "EngineUnavailable",
    "ExtractionError",
    "ExtractionResult",
    "NativeText",
    "OcrEngineProvider",
    "OcrError",
    "ParseError",
    "PdfExtractor",
    "PdfPlumberParser",
    "PyMuPDFParser",
    "QualityReport",
    "TesseractEngine",
    "assess_text_quality",
    "build_native_parser",
    "chunk_text",
    "create_engine",
    "is_text_quality_good",
    "normalize_text",
    "prepare_image",
]
