"""Pydantic settings models for PDF ingestion configuration.

Each settings class loads from its own YAML config file with environment
variable override support. Source priority (highest to lowest):

    1. Init arguments (explicit overrides, e.g. from tests or the CLI)
    2. Environment variables (with prefix, e.g., CHUNKER_CHUNK_SIZE)
    3. .env file
    4. YAML config file (e.g., config/chunker.yaml)
    5. Default values defined here

Config paths are resolved relative to PROJECT_ROOT so the application works
regardless of the current working directory.
"""

from enum import Enum
from pathlib import Path

from pydantic import Field, field_validator, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

# Resolve project root: settings.py -> config/ -> pdf_ingest/ -> src/ -> repo root
PROJECT_ROOT = Path(__file__).resolve().parents[3]

_CONFIG_DIR = PROJECT_ROOT / "config"
_ENV_FILE = PROJECT_ROOT / ".env"


class OcrLanguage(str, Enum):
    """Tesseract language packs the OCR engine may be asked to load."""

    ARABIC = "ara"
    FRENCH = "fra"
    ENGLISH = "eng"


class NativeBackend(str, Enum):
    """Library used for native (non-OCR) text extraction."""

    PYMUPDF = "pymupdf"
    PDFPLUMBER = "pdfplumber"


class _YamlSettings(BaseSettings):
    """Base class wiring the YAML file in below env vars and .env."""

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )


class QualitySettings(_YamlSettings):
    """Thresholds for the prose-vs-noise text quality heuristic.

    The defaults are empirically tuned; they are exposed here so they can be
    adjusted per deployment without code changes.
    """

    min_text_length: int = Field(default=50, ge=0)
    min_letter_ratio: float = Field(default=0.15, ge=0.0, le=1.0)
    max_digit_ratio: float = Field(default=0.5, ge=0.0, le=1.0)
    chars_per_word: float = Field(default=10.0, gt=0.0)  # ~1 word per 10 chars
    min_word_density: float = Field(default=0.1, ge=0.0)
    min_word_length: int = Field(default=3, ge=1)

    model_config = SettingsConfigDict(
        yaml_file=str(_CONFIG_DIR / "quality.yaml"),
        env_file=str(_ENV_FILE),
        env_prefix="QUALITY_",
        extra="ignore",
    )


class ChunkerSettings(_YamlSettings):
    """Chunk sizing: window length, overlap, and boundary search radius."""

    chunk_size: int = Field(default=6000, gt=0)
    overlap: int = Field(default=500, ge=0)
    search_radius: int = Field(default=200, ge=0)
    min_tail: int = Field(default=100, ge=0)

    model_config = SettingsConfigDict(
        yaml_file=str(_CONFIG_DIR / "chunker.yaml"),
        env_file=str(_ENV_FILE),
        env_prefix="CHUNKER_",
        extra="ignore",
    )

    @model_validator(mode="after")
    def _overlap_below_chunk_size(self) -> "ChunkerSettings":
        if self.overlap >= self.chunk_size:
            raise ValueError(
                f"overlap ({self.overlap}) must be smaller than "
                f"chunk_size ({self.chunk_size})"
            )
        return self


class ExtractionSettings(_YamlSettings):
    """Extraction pipeline: native backend, OCR engine, and nested tuning."""

    native_backend: NativeBackend = NativeBackend.PYMUPDF

    # OCR engine
    ocr_languages: list[OcrLanguage] = [OcrLanguage.ARABIC, OcrLanguage.FRENCH]
    ocr_dpi: int = Field(default=300, gt=0)
    max_pages_for_ocr: int = Field(default=100, gt=0)
    tesseract_cmd: str = "tesseract"
    tessdata_dir: str | None = None  # None = Tesseract's bundled tessdata

    quality: QualitySettings = Field(default_factory=QualitySettings)
    chunker: ChunkerSettings = Field(default_factory=ChunkerSettings)

    model_config = SettingsConfigDict(
        yaml_file=str(_CONFIG_DIR / "extraction.yaml"),
        env_file=str(_ENV_FILE),
        env_prefix="EXTRACTION_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    @field_validator("ocr_languages")
    @classmethod
    def _at_least_one_language(cls, value: list[OcrLanguage]) -> list[OcrLanguage]:
        if not value:
            raise ValueError("ocr_languages must name at least one language")
        return value


class PipelineSettings(_YamlSettings):
    """Process operations: log location and rotation."""

    log_dir: str = "logs"
    log_max_bytes: int = 10_485_760  # 10MB
    log_backup_count: int = 5

    model_config = SettingsConfigDict(
        yaml_file=str(_CONFIG_DIR / "pipeline.yaml"),
        env_file=str(_ENV_FILE),
        env_prefix="PIPELINE_",
        extra="ignore",
    )
