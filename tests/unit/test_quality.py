"""Unit tests for the text quality heuristic."""

import pytest_check as check

from pdf_ingest.config.settings import QualitySettings
from pdf_ingest.extractor.quality import assess_text_quality, is_text_quality_good

ARABIC_SENTENCE = (
    "تلتزم الأطراف المتعاقدة بتنفيذ جميع الالتزامات الواردة في هذا العقد "
    "وفقا للقانون المعمول به في المملكة. "
)


class TestQualityGood:
    """Samples that should be accepted as prose."""

    def test_french_paragraph_is_good(self, french_paragraph, quality_settings) -> None:
        """1000 chars of well-formed French prose passes."""
        check.equal(len(french_paragraph), 1000)
        check.is_true(is_text_quality_good(french_paragraph, quality_settings))

    def test_arabic_paragraph_is_good(self, quality_settings) -> None:
        """Arabic-script prose passes on Arabic letter and word counts."""
        report = assess_text_quality(ARABIC_SENTENCE * 5, quality_settings)

        check.is_true(report.passed)
        check.is_none(report.reason)
        check.greater(report.total_words, 50)

    def test_mixed_script_legal_text_is_good(self, quality_settings) -> None:
        """Arabic and Latin words both count toward density."""
        text = (ARABIC_SENTENCE + "Article 12 du code civil, alinéa 3. ") * 4
        check.is_true(is_text_quality_good(text, quality_settings))

    def test_letter_ratio_exactly_at_floor_passes(self, quality_settings) -> None:
        """15 letters in 100 chars sits on the 0.15 floor and passes."""
        text = "abcdefghijklmno" + "#" * 85
        report = assess_text_quality(text, quality_settings)

        check.equal(report.letter_ratio, 0.15)
        check.is_true(report.passed)

    def test_word_count_exactly_at_density_floor_passes(self, quality_settings) -> None:
        """One word in 100 chars meets 100 / 10 * 0.1 exactly."""
        report = assess_text_quality("abcdefghijklmno" + "#" * 85, quality_settings)

        check.equal(report.total_words, 1)
        check.is_true(report.passed)


class TestQualityBad:
    """Samples that should be rejected as noise."""

    def test_short_text_is_bad_regardless_of_content(self, quality_settings) -> None:
        """A 10-char sample is below the minimum length."""
        report = assess_text_quality("Bonjour!!!", quality_settings)

        check.is_false(report.passed)
        check.equal(report.reason, "too_short")

    def test_empty_and_whitespace_are_bad(self, quality_settings) -> None:
        """Nothing to judge means bad."""
        check.is_false(is_text_quality_good("", quality_settings))
        check.is_false(is_text_quality_good(None, quality_settings))
        check.is_false(is_text_quality_good(" \n" * 100, quality_settings))

    def test_digits_only_is_bad(self, quality_settings) -> None:
        """1000 digits is numeric garbage."""
        report = assess_text_quality("0123456789" * 100, quality_settings)

        check.is_false(report.passed)
        check.equal(report.reason, "numeric_garbage")
        check.equal(report.digit_ratio, 1.0)

    def test_symbol_soup_is_bad(self, quality_settings) -> None:
        """Few letters among symbols fails the letter floor."""
        text = "abcdefghijklmn" + "#" * 86
        report = assess_text_quality(text, quality_settings)

        check.is_false(report.passed)
        check.equal(report.reason, "too_few_letters")

    def test_isolated_letters_are_bad(self, quality_settings) -> None:
        """Letters that never form 3-letter runs fail word density."""
        report = assess_text_quality("a b " * 50, quality_settings)

        check.is_false(report.passed)
        check.equal(report.reason, "sparse_words")
        check.equal(report.total_words, 0)


class TestQualitySettings:
    """Thresholds come from settings, not constants."""

    def test_lower_minimum_length_accepts_short_prose(self) -> None:
        """A 30-char sentence passes once the floor is lowered."""
        settings = QualitySettings(min_text_length=20)
        check.is_true(is_text_quality_good("The parties agree as follows.", settings))

    def test_raised_letter_floor_rejects_borderline_text(self) -> None:
        """Raising the floor turns a passing sample into a failing one."""
        text = "abcdefghijklmno" + "#" * 85
        check.is_false(is_text_quality_good(text, QualitySettings(min_letter_ratio=0.2)))
