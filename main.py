"""PDF ingestion -- command-line entry point.

Startup sequence:
    1. Parse arguments
    2. Load pipeline configuration (needed for log_dir and rotation)
    3. Setup logging (must happen before any code that logs)
    4. Load extraction configuration
    5. Extract the PDF and write the JSON result
    6. Release the OCR engine, even on failure

Usage:
    python main.py document.pdf [--force-ocr] [--high-precision] [--output out.json]
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from pdf_ingest.config import ExtractionSettings, PipelineSettings
from pdf_ingest.extractor import EngineUnavailable, PdfExtractor
from pdf_ingest.logging import setup_logging

logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Extract clean text and LLM-sized chunks from a PDF."
    )
    parser.add_argument("pdf", type=Path, help="Path to the PDF file")
    parser.add_argument(
        "--force-ocr",
        action="store_true",
        help="Always OCR, ignoring the native text layer",
    )
    parser.add_argument(
        "--high-precision",
        action="store_true",
        help="Skip image pre-processing before OCR",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write the JSON result here instead of stdout",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Extract one PDF and emit the result as JSON."""
    args = _parse_args(argv)

    # 2. Load pipeline config first -- needed for logging paths
    pipeline = PipelineSettings()

    # 3. Setup logging BEFORE anything else logs
    setup_logging(
        log_dir=pipeline.log_dir,
        max_bytes=pipeline.log_max_bytes,
        backup_count=pipeline.log_backup_count,
    )

    # 4. Load extraction config
    settings = ExtractionSettings()
    logger.info(
        "Config loaded -- extraction: backend=%s, ocr_languages=%s, dpi=%s, "
        "chunk_size=%s, overlap=%s",
        settings.native_backend.value,
        "+".join(language.value for language in settings.ocr_languages),
        settings.ocr_dpi,
        settings.chunker.chunk_size,
        settings.chunker.overlap,
    )

    if not args.pdf.is_file():
        logger.error("PDF not found: %s", args.pdf)
        return 2

    # 5-6. Extract; the extractor owns the OCR engine and releases it on exit
    with PdfExtractor(settings) as extractor:
        logger.info(
            "Extracting %s (%d bytes), force_ocr=%s, high_precision=%s",
            args.pdf.name,
            args.pdf.stat().st_size,
            args.force_ocr,
            args.high_precision,
        )
        try:
            result = extractor.extract_file(
                args.pdf,
                force_ocr=args.force_ocr,
                high_precision=args.high_precision,
            )
        except EngineUnavailable as e:
            logger.error("OCR engine unavailable: %s", e)
            return 1

    payload = json.dumps(result.to_dict(), ensure_ascii=False, indent=2)
    if args.output:
        args.output.write_text(payload, encoding="utf-8")
        logger.info("Wrote result to %s", args.output)
    else:
        sys.stdout.write(payload + "\n")

    logger.info(
        "Run complete -- %d chars, %d chunks, %d pages, ocr_used=%s",
        result.char_count,
        result.chunk_count,
        result.pages_processed,
        result.ocr_used,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
