"""Whitespace and control-character cleanup for extracted text."""

from __future__ import annotations

import re

# ASCII control chars except \n (0x0A) and \r (0x0D); tab is removed too
_CONTROL_PATTERN = re.compile(r"[\x00-\x09\x0b\x0c\x0e-\x1f\x7f]")
_HORIZONTAL_WS_PATTERN = re.compile(r"[ \t]+")
_BLANK_LINES_PATTERN = re.compile(r"\n{3,}")


def normalize_text(text: str | None) -> str:
    """Return *text* with control characters and excess whitespace removed.

    Lines are trimmed before blank-line runs are collapsed, so whitespace-only
    lines cannot reintroduce runs of three or more newlines. This keeps the
    function idempotent.
    """
    if not text:
        return ""

    text = _CONTROL_PATTERN.sub("", text)
    text = _HORIZONTAL_WS_PATTERN.sub(" ", text)
    text = "\n".join(line.strip() for line in text.split("\n"))
    text = _BLANK_LINES_PATTERN.sub("\n\n", text)
    return text.strip()
