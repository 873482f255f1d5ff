"""Pytest fixtures and shared test doubles.

Fixtures:
    - make_pdf: Build a real PDF in memory with PyMuPDF
    - sample_pdf_bytes: Two-page PDF with a readable text layer
    - french_paragraph: Well-formed French prose, ~1000 chars
    - quality_settings / chunker_settings: Defaults, independent of YAML/env
    - restore_root_logger: Put back root logger handlers after setup_logging

Test doubles:
    - FakeParser: NativeParser returning canned text or raising ParseError
    - FakeEngine: OcrEngine returning canned text and recording calls
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Sequence

import pymupdf
import pytest

from pdf_ingest.config.settings import (
    ChunkerSettings,
    ExtractionSettings,
    OcrLanguage,
    QualitySettings,
)
from pdf_ingest.extractor.errors import ParseError
from pdf_ingest.extractor.types import NativeText

FRENCH_SENTENCES = (
    "Le présent contrat est conclu entre les parties soussignées pour une durée "
    "déterminée de trois années à compter de la date de signature. "
    "Chaque partie s'engage à respecter les obligations prévues aux articles "
    "suivants et à informer l'autre partie de toute difficulté rencontrée. "
    "En cas de litige, les parties rechercheront d'abord une solution amiable "
    "avant de saisir la juridiction compétente du ressort du siège social. "
)


class FakeParser:
    """NativeParser double."""

    def __init__(self, text: str = "", page_count: int = 1, error: Exception | None = None):
        self.text = text
        self.page_count = page_count
        self.error = error
        self.calls = 0

    def parse(self, pdf_bytes: bytes) -> NativeText:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return NativeText(text=self.text, page_count=self.page_count)


class FakeEngine:
    """OcrEngine double; returns *text* for every page."""

    def __init__(self, text: str = "", error: Exception | None = None):
        self.text = text
        self.error = error
        self.recognize_calls: list[tuple[bytes, tuple[OcrLanguage, ...]]] = []
        self.release_calls = 0

    def recognize(
        self,
        image_bytes: bytes,
        languages: Sequence[OcrLanguage] | None = None,
    ) -> str:
        self.recognize_calls.append((image_bytes, tuple(languages or ())))
        if self.error is not None:
            raise self.error
        return self.text

    def release(self) -> None:
        self.release_calls += 1


def single_page_renderer(pdf_bytes: bytes, dpi: int, max_pages: int) -> Iterator[bytes]:
    """Page renderer double yielding one placeholder image."""
    yield b"page-1-image"


@pytest.fixture
def make_pdf() -> Callable[..., bytes]:
    """Return a builder producing PDF bytes with one text block per page."""

    def _make(*pages: str) -> bytes:
        doc = pymupdf.open()
        for page_text in pages or ("",):
            page = doc.new_page()
            if page_text:
                page.insert_textbox(pymupdf.Rect(72, 72, 540, 770), page_text)
        data = doc.tobytes()
        doc.close()
        return data

    return _make


@pytest.fixture
def sample_pdf_bytes(make_pdf) -> bytes:
    return make_pdf(
        "Information security policy. Access is granted on a need to know basis.",
        "Second page of the policy. Incidents are reported within one day.",
    )


@pytest.fixture
def french_paragraph() -> str:
    text = FRENCH_SENTENCES * 3
    return text[:1000]


@pytest.fixture
def quality_settings() -> QualitySettings:
    return QualitySettings(
        min_text_length=50,
        min_letter_ratio=0.15,
        max_digit_ratio=0.5,
        chars_per_word=10,
        min_word_density=0.1,
        min_word_length=3,
    )


@pytest.fixture
def chunker_settings() -> ChunkerSettings:
    return ChunkerSettings(chunk_size=6000, overlap=500, search_radius=200, min_tail=100)


@pytest.fixture
def extraction_settings(quality_settings, chunker_settings) -> ExtractionSettings:
    return ExtractionSettings(
        ocr_languages=[OcrLanguage.ARABIC, OcrLanguage.FRENCH],
        ocr_dpi=300,
        max_pages_for_ocr=100,
        quality=quality_settings,
        chunker=chunker_settings,
    )


@pytest.fixture
def parse_error() -> ParseError:
    return ParseError("Invalid PDF: no PDF header in the first 1024 bytes")


@pytest.fixture
def restore_root_logger():
    """Undo setup_logging's changes to the root logger after a test."""
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    yield
    for handler in root.handlers:
        if handler not in saved_handlers:
            handler.close()
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)
