"""Plain-text beautification for on-screen summaries."""

import re

DIVIDER = "────────────────"

_BULLET_RE = re.compile(r"^-\s+", re.MULTILINE)
_RULE_RE = re.compile(r"^---$", re.MULTILINE)
_SECTION_RES = (
    re.compile(r"^💬 Comments Summary", re.MULTILINE),
    re.compile(r"^🔍 Fact Check", re.MULTILINE),
    re.compile(
        r"(?<!🔍 Fact Check\n)^\*\*Fact Check Results:\*\*", re.MULTILINE
    ),
)
_BLANK_LINES_RE = re.compile(r"\n{3,}")


def beautify(text: str | None) -> str:
    """Tidy model output for display.

    Hyphen bullets become ``•``, bare ``---`` rules become a divider, a
    divider is placed before the first comments and fact-check headings, and
    runs of blank lines are compacted.
    """
    if not text:
        return ""
    out = _BULLET_RE.sub("• ", text)
    out = _RULE_RE.sub(f"\n{DIVIDER}\n", out)
    for pattern in _SECTION_RES:
        out = pattern.sub(lambda m: f"{DIVIDER}\n{m.group(0)}", out, count=1)
    out = _BLANK_LINES_RE.sub("\n\n", out)
    return out.strip()
