"""Per-document PDF text extraction with OCR fallback.

Orchestrates the pipeline for one PDF held in memory:

1. **Native parse** -- text layer via PyMuPDF (or pdfplumber).
2. **Quality check** -- prose-vs-noise heuristic on the raw text.
3. **OCR fallback** -- only when the check fails: pages rendered with
   PyMuPDF, pre-processed with Pillow, recognized by Tesseract. OCR text
   replaces native text only when it is strictly longer.
4. **Normalize and chunk** the chosen text.

``extract_with_ocr`` skips steps 1-3 and always uses OCR, parsing natively
only to learn the page count.

Both entry points are total: parse and OCR failures degrade to an empty
result instead of raising. The one exception is ``EngineUnavailable``
(Tesseract cannot be started), which has no fallback and propagates.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterator
from pathlib import Path

from pdf_ingest.config.settings import ExtractionSettings
from pdf_ingest.extractor.chunker import chunk_text
from pdf_ingest.extractor.errors import EngineUnavailable, ParseError
from pdf_ingest.extractor.native import (
    NativeParser,
    build_native_parser,
    render_page_images,
)
from pdf_ingest.extractor.normalize import normalize_text
from pdf_ingest.extractor.ocr import OcrEngineProvider
from pdf_ingest.extractor.preprocess import prepare_image
from pdf_ingest.extractor.quality import is_text_quality_good
from pdf_ingest.extractor.types import ExtractionResult

logger = logging.getLogger(__name__)

__all__ = ["PdfExtractor"]

PageRenderer = Callable[[bytes, int, int], Iterator[bytes]]
ImagePreparer = Callable[[bytes, bool], bytes]

# Reported page count when the forced-OCR path cannot parse the document
FALLBACK_PAGE_COUNT = 1


class PdfExtractor:
    """Turns PDF bytes into an ExtractionResult.

    Collaborators are injectable; by default they are built from *settings*.
    The extractor owns the OCR provider it creates and releases it in
    ``close()``. A provider passed in stays owned by the caller.

    Args:
        settings: Extraction configuration; loaded from config when omitted.
        parser: Native text parser.
        ocr_provider: Owner of the shared OCR engine.
        page_renderer: Yields page images as ``(pdf_bytes, dpi, max_pages)``.
        image_preparer: Pre-processes a page image as ``(image, high_precision)``.
    """

    def __init__(
        self,
        settings: ExtractionSettings | None = None,
        parser: NativeParser | None = None,
        ocr_provider: OcrEngineProvider | None = None,
        page_renderer: PageRenderer = render_page_images,
        image_preparer: ImagePreparer = prepare_image,
    ) -> None:
        self.settings = settings or ExtractionSettings()
        self.parser = parser or build_native_parser(self.settings.native_backend)
        self._owns_provider = ocr_provider is None
        self.ocr_provider = ocr_provider or OcrEngineProvider.from_settings(
            self.settings
        )
        self._render_pages = page_renderer
        self._prepare_image = image_preparer

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def extract(self, pdf_bytes: bytes, high_precision: bool = False) -> ExtractionResult:
        """Extract text natively, falling back to OCR for poor-quality text.

        Args:
            pdf_bytes: Raw PDF content.
            high_precision: Skip image pre-processing on the OCR path.

        Returns:
            ExtractionResult; the empty sentinel if the PDF cannot be parsed.

        Raises:
            EngineUnavailable: If OCR was needed and Tesseract cannot start.
        """
        try:
            native = self.parser.parse(pdf_bytes)
            text = native.text
            ocr_used = False
            logger.info(
                "Native text: %d chars, %d pages", len(text), native.page_count
            )

            if not is_text_quality_good(text, self.settings.quality):
                logger.info("Native text quality is poor, running OCR fallback")
                ocr_text = self.ocr_pdf(pdf_bytes, high_precision)

                if len(ocr_text) > len(text):
                    text = ocr_text
                    ocr_used = True
                else:
                    logger.info(
                        "Keeping native text: OCR produced %d chars vs %d native",
                        len(ocr_text),
                        len(text),
                    )

            return self._build_result(text, native.page_count, ocr_used)

        except ParseError as e:
            logger.warning("Native parse failed: %s", e)
            return ExtractionResult.empty()
        except EngineUnavailable:
            raise
        except Exception:
            logger.exception("Unexpected error during extraction")
            return ExtractionResult.empty()

    def extract_with_ocr(
        self, pdf_bytes: bytes, high_precision: bool = False
    ) -> ExtractionResult:
        """Extract text with OCR regardless of the native text layer.

        The native parser is consulted only for the page count. If it fails
        for any reason, the OCR text is still returned with a page count of 1.

        Raises:
            EngineUnavailable: If Tesseract cannot start.
        """
        logger.info("Forced OCR extraction")
        try:
            text = self.ocr_pdf(pdf_bytes, high_precision)

            try:
                page_count = self.parser.parse(pdf_bytes).page_count
            except Exception as e:
                logger.warning(
                    "Native parse failed on forced-OCR path, reporting %d page: %s",
                    FALLBACK_PAGE_COUNT,
                    e,
                )
                page_count = FALLBACK_PAGE_COUNT

            return self._build_result(text, page_count, ocr_used=True)

        except EngineUnavailable:
            raise
        except Exception:
            logger.exception("Unexpected error during forced OCR extraction")
            return ExtractionResult.empty(ocr_used=True)

    def extract_file(
        self,
        pdf_path: Path | str,
        force_ocr: bool = False,
        high_precision: bool = False,
    ) -> ExtractionResult:
        """Read a PDF from disk and extract it."""
        pdf_bytes = Path(pdf_path).read_bytes()
        if force_ocr:
            return self.extract_with_ocr(pdf_bytes, high_precision)
        return self.extract(pdf_bytes, high_precision)

    async def aextract(
        self, pdf_bytes: bytes, high_precision: bool = False
    ) -> ExtractionResult:
        """``extract`` run in a worker thread for asyncio callers."""
        return await asyncio.to_thread(self.extract, pdf_bytes, high_precision)

    async def aextract_with_ocr(
        self, pdf_bytes: bytes, high_precision: bool = False
    ) -> ExtractionResult:
        """``extract_with_ocr`` run in a worker thread for asyncio callers."""
        return await asyncio.to_thread(self.extract_with_ocr, pdf_bytes, high_precision)

    def ocr_pdf(self, pdf_bytes: bytes, high_precision: bool = False) -> str:
        """OCR every page and join the non-empty page texts.

        Any rendering or recognition failure yields "", so the caller's
        length comparison keeps whatever native text it has.

        Raises:
            EngineUnavailable: If Tesseract cannot start.
        """
        page_texts: list[str] = []
        try:
            pages = self._render_pages(
                pdf_bytes, self.settings.ocr_dpi, self.settings.max_pages_for_ocr
            )
            with self.ocr_provider.session() as engine:
                for page_num, image_bytes in enumerate(pages, start=1):
                    prepared = self._prepare_image(image_bytes, high_precision)
                    page_text = engine.recognize(prepared, self.settings.ocr_languages)
                    if page_text and page_text.strip():
                        page_texts.append(page_text.strip())
                    logger.debug(
                        "OCR page %d: %d chars", page_num, len(page_text or "")
                    )
        except EngineUnavailable:
            raise
        except Exception as e:
            logger.warning("OCR failed: %s", e)
            return ""

        text = "\n\n".join(page_texts)
        logger.info(
            "OCR extracted %d chars from %d non-empty pages", len(text), len(page_texts)
        )
        return text

    def close(self) -> None:
        """Release the OCR engine if this extractor created its provider."""
        if self._owns_provider:
            self.ocr_provider.shutdown()

    def __enter__(self) -> PdfExtractor:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _build_result(
        self, text: str, page_count: int, ocr_used: bool
    ) -> ExtractionResult:
        full_text = normalize_text(text)
        chunks = chunk_text(full_text, self.settings.chunker)

        logger.info(
            "Result: %d chars, %d chunks, %d pages, ocr_used=%s",
            len(full_text),
            len(chunks),
            page_count,
            ocr_used,
        )
        return ExtractionResult(
            full_text=full_text,
            chunks=tuple(chunks),
            pages_processed=max(page_count, FALLBACK_PAGE_COUNT),
            ocr_used=ocr_used,
        )
