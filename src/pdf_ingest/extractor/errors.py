"""Exception hierarchy for the extraction pipeline.

``ParseError`` and ``OcrError`` are recovered inside the orchestrator and
never reach callers of ``PdfExtractor.extract``. ``EngineUnavailable`` has no
fallback and propagates.
"""


class ExtractionError(Exception):
    """Base class for extraction pipeline errors."""


class ParseError(ExtractionError):
    """Raised when the native parser cannot read a document."""


class OcrError(ExtractionError):
    """Raised when OCR rendering or recognition fails."""


class EngineUnavailable(ExtractionError):
    """Raised when the OCR engine cannot be constructed."""
