"""Quality validation for natively extracted PDF text.

Decides whether a text sample is usable prose or extraction noise (binary
garbage, glyphs mis-encoded as digits or symbols). A failing verdict sends
the document to the OCR fallback.

Quality heuristics, applied in order:
1. Minimum content: the stripped sample must reach ``min_text_length``.
2. Numeric garbage: mostly digits and almost no letters.
3. Letter floor: letters (Arabic or Latin script) below ``min_letter_ratio``.
4. Word density: letters must cluster into word-like runs of at least
   ``min_word_length``; roughly one word per ``chars_per_word`` characters
   is expected and at least ``min_word_density`` of that is required.

Ratio floors use strict ``<``, so a sample sitting exactly on a threshold
passes.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from pdf_ingest.config.settings import QualitySettings

logger = logging.getLogger(__name__)

# Arabic, Arabic Supplement, Arabic Extended-A
_ARABIC_RANGES = "\u0600-\u06ff\u0750-\u077f\u08a0-\u08ff"
# ASCII letters plus the Latin-1 Supplement letter block
_LATIN_RANGES = "a-zA-Z\u00c0-\u00ff"

_ARABIC_LETTER = re.compile(f"[{_ARABIC_RANGES}]")
_LATIN_LETTER = re.compile(f"[{_LATIN_RANGES}]")
_DIGIT = re.compile(r"[0-9]")


@dataclass(frozen=True)
class QualityReport:
    """Signals computed for a sample and the resulting verdict.

    ``reason`` names the first failing check, or is None when the sample
    passed.
    """

    passed: bool
    reason: str | None
    length: int
    letter_ratio: float = 0.0
    digit_ratio: float = 0.0
    total_words: int = 0
    expected_words: float = 0.0


def _count_words(text: str, min_word_length: int) -> int:
    arabic_words = re.findall(f"[{_ARABIC_RANGES}]{{{min_word_length},}}", text)
    latin_words = re.findall(f"[{_LATIN_RANGES}]{{{min_word_length},}}", text)
    return len(arabic_words) + len(latin_words)


def assess_text_quality(
    text: str | None,
    settings: QualitySettings | None = None,
) -> QualityReport:
    """Score *text* against the quality heuristics.

    Args:
        text: Candidate text, typically the raw native extraction output.
        settings: Threshold configuration; loaded from config when omitted.

    Returns:
        QualityReport with the computed signals and the verdict.
    """
    settings = settings or QualitySettings()
    text = text or ""
    length = len(text)

    if len(text.strip()) < settings.min_text_length:
        logger.warning(
            "Quality check failed (minimum content): %d chars < %d minimum",
            len(text.strip()),
            settings.min_text_length,
        )
        return QualityReport(passed=False, reason="too_short", length=length)

    total_letters = len(_ARABIC_LETTER.findall(text)) + len(
        _LATIN_LETTER.findall(text)
    )
    digits = len(_DIGIT.findall(text))
    letter_ratio = total_letters / length
    digit_ratio = digits / length

    if digit_ratio > settings.max_digit_ratio and letter_ratio < settings.min_letter_ratio:
        logger.warning(
            "Quality check failed (numeric garbage): digit ratio %.3f > %.3f, "
            "letter ratio %.3f < %.3f",
            digit_ratio,
            settings.max_digit_ratio,
            letter_ratio,
            settings.min_letter_ratio,
        )
        return QualityReport(
            passed=False,
            reason="numeric_garbage",
            length=length,
            letter_ratio=letter_ratio,
            digit_ratio=digit_ratio,
        )

    if letter_ratio < settings.min_letter_ratio:
        logger.warning(
            "Quality check failed (letter ratio): %.3f < %.3f threshold "
            "(%d letters in %d chars)",
            letter_ratio,
            settings.min_letter_ratio,
            total_letters,
            length,
        )
        return QualityReport(
            passed=False,
            reason="too_few_letters",
            length=length,
            letter_ratio=letter_ratio,
            digit_ratio=digit_ratio,
        )

    total_words = _count_words(text, settings.min_word_length)
    expected_words = length / settings.chars_per_word

    if total_words < expected_words * settings.min_word_density:
        logger.warning(
            "Quality check failed (word density): %d words < %.1f required "
            "(%.1f expected in %d chars)",
            total_words,
            expected_words * settings.min_word_density,
            expected_words,
            length,
        )
        return QualityReport(
            passed=False,
            reason="sparse_words",
            length=length,
            letter_ratio=letter_ratio,
            digit_ratio=digit_ratio,
            total_words=total_words,
            expected_words=expected_words,
        )

    return QualityReport(
        passed=True,
        reason=None,
        length=length,
        letter_ratio=letter_ratio,
        digit_ratio=digit_ratio,
        total_words=total_words,
        expected_words=expected_words,
    )


def is_text_quality_good(
    text: str | None,
    settings: QualitySettings | None = None,
) -> bool:
    """Return True when *text* reads as prose rather than extraction noise."""
    return assess_text_quality(text, settings).passed
