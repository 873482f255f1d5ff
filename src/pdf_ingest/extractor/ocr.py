"""Tesseract OCR engine and its process-wide lifecycle owner.

``TesseractEngine`` wraps pytesseract for a fixed set of language packs.
Building one checks the Tesseract binary and its installed languages, which
is slow, so a process holds exactly one, owned by an ``OcrEngineProvider``:

- created lazily, under a lock, on the first OCR request;
- shared by concurrent requests through ``session()``;
- released by ``shutdown()``, which waits for in-flight sessions and may be
  called any number of times.

There is no module-level engine; whoever builds the provider owns it.
"""

from __future__ import annotations

import io
import logging
import threading
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from typing import Protocol

import pytesseract
from PIL import Image

from pdf_ingest.config.settings import ExtractionSettings, OcrLanguage
from pdf_ingest.extractor.errors import EngineUnavailable, OcrError

logger = logging.getLogger(__name__)


def tesseract_lang(languages: Sequence[OcrLanguage]) -> str:
    """Join languages into Tesseract's ``ara+fra`` form."""
    return "+".join(OcrLanguage(language).value for language in languages)


class OcrEngine(Protocol):
    def recognize(
        self,
        image_bytes: bytes,
        languages: Sequence[OcrLanguage] | None = None,
    ) -> str: ...

    def release(self) -> None: ...


class TesseractEngine:
    """Recognizes text in page images with Tesseract.

    Use ``create_engine`` rather than instantiating directly; it checks that
    the binary and language packs are present.
    """

    def __init__(
        self,
        languages: Sequence[OcrLanguage],
        tessdata_dir: str | None = None,
    ) -> None:
        self.languages = tuple(OcrLanguage(language) for language in languages)
        self._config = f'--tessdata-dir "{tessdata_dir}"' if tessdata_dir else ""
        self._released = False

    @property
    def released(self) -> bool:
        return self._released

    def recognize(
        self,
        image_bytes: bytes,
        languages: Sequence[OcrLanguage] | None = None,
    ) -> str:
        """Return the text Tesseract reads in *image_bytes*.

        Args:
            image_bytes: Encoded image (PNG from the page renderer).
            languages: Subset of the engine's languages to use; all of them
                when omitted.

        Raises:
            OcrError: If the engine was released, a language was not loaded,
                or Tesseract fails.
        """
        if self._released:
            raise OcrError("OCR engine has been released")

        hint = tuple(OcrLanguage(language) for language in languages or self.languages)
        unloaded = [language.value for language in hint if language not in self.languages]
        if unloaded:
            raise OcrError(f"languages not loaded by this engine: {unloaded}")

        try:
            with Image.open(io.BytesIO(image_bytes)) as image:
                return pytesseract.image_to_string(
                    image, lang=tesseract_lang(hint), config=self._config
                )
        except (pytesseract.TesseractError, OSError, RuntimeError) as e:
            raise OcrError(f"recognition failed: {e}") from e

    def release(self) -> None:
        if self._released:
            return
        self._released = True
        logger.info("OCR engine released (%s)", tesseract_lang(self.languages))


def create_engine(
    languages: Sequence[OcrLanguage],
    model_source: str | None = None,
    tesseract_cmd: str = "tesseract",
) -> TesseractEngine:
    """Build a TesseractEngine after checking the binary and language packs.

    Args:
        languages: Language packs the engine must be able to use.
        model_source: tessdata directory; Tesseract's default when None.
        tesseract_cmd: Path to the tesseract executable.

    Raises:
        EngineUnavailable: If Tesseract is missing or a pack is not installed.
    """
    if tesseract_cmd != "tesseract":
        pytesseract.pytesseract.tesseract_cmd = tesseract_cmd

    config = f'--tessdata-dir "{model_source}"' if model_source else ""
    try:
        version = pytesseract.get_tesseract_version()
        installed = set(pytesseract.get_languages(config=config))
    except (pytesseract.TesseractNotFoundError, pytesseract.TesseractError, OSError) as e:
        raise EngineUnavailable(f"Tesseract is not usable: {e}") from e

    missing = [
        OcrLanguage(language).value
        for language in languages
        if OcrLanguage(language).value not in installed
    ]
    if missing:
        raise EngineUnavailable(f"Tesseract language packs not installed: {missing}")

    logger.info(
        "Tesseract %s ready (languages=%s)", version, tesseract_lang(languages)
    )
    return TesseractEngine(languages, tessdata_dir=model_source)


EngineFactory = Callable[[Sequence[OcrLanguage], str | None, str], OcrEngine]


class OcrEngineProvider:
    """Owns the single OCR engine of a process.

    Args:
        languages: Language packs to load.
        model_source: tessdata directory passed to the engine factory.
        tesseract_cmd: Tesseract executable.
        factory: Engine constructor; ``create_engine`` by default.
    """

    def __init__(
        self,
        languages: Sequence[OcrLanguage],
        model_source: str | None = None,
        tesseract_cmd: str = "tesseract",
        factory: EngineFactory = create_engine,
    ) -> None:
        if not languages:
            raise ValueError("at least one OCR language is required")
        self.languages = tuple(OcrLanguage(language) for language in languages)
        self._model_source = model_source
        self._tesseract_cmd = tesseract_cmd
        self._factory = factory

        self._lock = threading.Lock()
        self._idle = threading.Condition(self._lock)
        self._engine: OcrEngine | None = None
        self._in_use = 0
        self._closing = False

    @classmethod
    def from_settings(cls, settings: ExtractionSettings) -> OcrEngineProvider:
        return cls(
            settings.ocr_languages,
            model_source=settings.tessdata_dir,
            tesseract_cmd=settings.tesseract_cmd,
        )

    @property
    def is_initialized(self) -> bool:
        return self._engine is not None

    def _ensure_engine(self) -> OcrEngine:
        # Caller holds self._lock
        if self._engine is None:
            logger.info(
                "Initializing OCR engine (%s)", tesseract_lang(self.languages)
            )
            self._engine = self._factory(
                self.languages, self._model_source, self._tesseract_cmd
            )
        return self._engine

    def get(self) -> OcrEngine:
        """Return the engine, creating it on first use.

        The engine is not counted as in use, so ``shutdown`` will not wait
        for it. Use ``session()`` when other threads may shut down.

        Raises:
            EngineUnavailable: If the engine cannot be constructed.
        """
        with self._lock:
            return self._ensure_engine()

    @contextmanager
    def session(self) -> Iterator[OcrEngine]:
        """Borrow the engine; ``shutdown`` waits until every session ends.

        New sessions block while a shutdown is in progress, then run on a
        freshly built engine.
        """
        with self._lock:
            while self._closing:
                self._idle.wait()
            engine = self._ensure_engine()
            self._in_use += 1
        try:
            yield engine
        finally:
            with self._lock:
                self._in_use -= 1
                if self._in_use == 0:
                    self._idle.notify_all()

    def shutdown(self) -> None:
        """Release the engine once no session is using it. Idempotent."""
        with self._lock:
            self._closing = True
            try:
                while self._in_use:
                    self._idle.wait()
                engine, self._engine = self._engine, None
            finally:
                self._closing = False
                self._idle.notify_all()

        if engine is not None:
            engine.release()
            logger.info("OCR engine shut down")

    def __enter__(self) -> OcrEngineProvider:
        return self

    def __exit__(self, *exc_info) -> None:
        self.shutdown()
