"""Overlapping, size-bounded chunking of normalized text.

Windows of ``chunk_size`` characters are carved left to right. Each cut is
moved to the latest sentence or paragraph delimiter within ``search_radius``
characters of the raw cut point, so a chunk can run up to
``chunk_size + search_radius`` characters. Consecutive chunks share up to
``overlap`` characters.

Public API:
    chunk_text(text, settings) -> list[str]
"""

from __future__ import annotations

import logging

from pdf_ingest.config.settings import ChunkerSettings

logger = logging.getLogger(__name__)

# Period-space, period-newline, blank line
BREAK_DELIMITERS = (". ", ".\n", "\n\n")


def _find_break(text: str, start: int, end: int, search_radius: int) -> int:
    """Return the cut position for a window ending near *end*.

    The latest delimiter wins, whichever kind it is. The cut lands one
    character into the delimiter, on the period or the first newline; the
    rest is whitespace that trimming drops. Returns *end* unchanged when the
    zone holds no delimiter.
    """
    zone_start = max(end - search_radius, start)
    zone_end = min(end + search_radius, len(text))
    zone = text[zone_start:zone_end]

    best = max(zone.rfind(delimiter) for delimiter in BREAK_DELIMITERS)
    if best == -1:
        return end
    return zone_start + best + 1


def chunk_text(text: str, settings: ChunkerSettings | None = None) -> list[str]:
    """Split *text* into ordered, overlapping, non-empty chunks.

    Args:
        text: Normalized document text.
        settings: Chunk sizing; loaded from config when omitted.

    Returns:
        List of trimmed chunks. Empty when *text* is empty or blank.
    """
    if not text:
        return []

    settings = settings or ChunkerSettings()
    chunk_size = settings.chunk_size
    text_length = len(text)

    if text_length <= chunk_size:
        stripped = text.strip()
        return [stripped] if stripped else []

    chunks: list[str] = []
    start = 0

    while start < text_length:
        end = start + chunk_size

        if end < text_length:
            end = _find_break(text, start, end, settings.search_radius)

        chunk = text[start:end].strip()
        if chunk:
            chunks.append(chunk)

        next_start = end - settings.overlap
        # Drop the overlap when it would stall or leave only a sliver
        if (
            next_start <= start
            or next_start <= 0
            or next_start >= text_length - settings.min_tail
        ):
            next_start = end
        start = next_start

    logger.debug(
        "Chunked %d chars into %d chunks (size=%d, overlap=%d)",
        text_length,
        len(chunks),
        chunk_size,
        settings.overlap,
    )
    return chunks
