"""Transcript cleanup before it goes into a prompt."""

import re

TRUNCATION_MARKER = "... [transcript truncated]"

_WHITESPACE_RE = re.compile(r"\s+")
# Non-greedy: "[Music] hi [Applause]" keeps "hi". Also removes substantive
# parentheticals such as "(see chapter 2)"; callers accept that tradeoff.
_BRACKETED_RE = re.compile(r"\[.*?\]")
_PARENTHESIZED_RE = re.compile(r"\(.*?\)")


def normalize(text: str | None, max_chars: int = 0) -> str:
    """Collapse whitespace, strip annotations and apply the length cap.

    Args:
        text: Raw flattened caption text.
        max_chars: Maximum characters to keep; ``0`` or negative is unlimited.

    Returns:
        The cleaned text, with ``TRUNCATION_MARKER`` appended if it was cut.
    """
    if not text:
        return ""

    cleaned = _WHITESPACE_RE.sub(" ", text)
    cleaned = _BRACKETED_RE.sub("", cleaned)
    cleaned = _PARENTHESIZED_RE.sub("", cleaned)
    cleaned = _WHITESPACE_RE.sub(" ", cleaned).strip()

    if max_chars > 0 and len(cleaned) > max_chars:
        cleaned = cleaned[:max_chars] + TRUNCATION_MARKER

    return cleaned.strip()
