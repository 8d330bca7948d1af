"""Prompt templates for summaries, comment digests and fact checks."""

import re
from collections.abc import Sequence

from tubedigest.models import DetailLevel, TranscriptSource

DEFAULT_COMMENT_CHAR_CAP = 220
FOOTER_DIVIDER = "---"

_PREAMBLE = (
    "You are an assistant that summarizes YouTube videos for reading on a "
    "TV screen."
)

_FOOTER_INSTRUCTION = """IMPORTANT: End your response with technical details at \
the bottom, exactly in this format:
{divider}
Detail Level: {level} | Source: {source} | Official CC Available: {official}
Start directly with the summary content (no header at the top)."""

DETAIL_INSTRUCTIONS: dict[DetailLevel, str] = {
    DetailLevel.CONCISE: (
        "Keep it VERY brief - maximum 2-3 bullet points. Focus only on the "
        "main topic and key takeaway."
    ),
    DetailLevel.MODERATE: (
        "Use bullet points and short paragraphs.\n"
        "Include: topic, key takeaways, punchline (if it's a review or list "
        "or clickbait type video)."
    ),
    DetailLevel.DETAILED: (
        "Provide a comprehensive summary organized into multiple sections "
        "with bullet points.\n"
        "Include: detailed topic overview, main points covered, key "
        "takeaways, and any important conclusions."
    ),
}

URL_INSTRUCTIONS: dict[DetailLevel, str] = {
    DetailLevel.CONCISE: "Provide a short summary of this video.",
    DetailLevel.MODERATE: (
        "Provide a detailed summary of this video with key topics and "
        "timestamps."
    ),
    DetailLevel.DETAILED: (
        "Provide the most detailed summary of this video, including visual "
        "and auditory information."
    ),
}

NO_TRANSCRIPT_NOTE = (
    "Note: No transcript available. Summarize based on title and channel."
)

_COMBINE_PROMPT = """Summarize the following partial summaries into a single \
cohesive summary with the same format and footer requirements.

{partials}"""

_COMMENTS_PROMPT = """You are summarizing viewer comments for a TV overlay.
Provide a concise 'Comments Summary' with: common themes, consensus, notable \
insights, disagreements, sentiment, and useful viewer tips.
Avoid quoting long texts; no personal data; be neutral.
Keep it brief and skimmable (bullet points preferred).

{video_info}
Sample of top comments (truncated):
{comments}

Now produce the Comments Summary.
End with a footer line: '--- Comments analyzed: {analyzed}'."""

_FACT_CHECK_PROMPT = """Fact-check the following video summary {method}. \
Identify key claims, statistics, dates, and factual assertions. Return \
results as '**Fact Check Results:**' followed by bullet points indicating \
which claims were verified, corrections, and any uncertainties.

Video: {video}

Summary to fact-check:
{summary}"""

_FOOTER_RE = re.compile(
    r"^\s*Detail Level:\s*(?P<level>[^|\n]+?)\s*\|\s*Source:\s*(?P<source>[^|\n]+?)"
    r"\s*\|\s*Official CC Available:\s*(?P<official>\w+)\s*$",
    re.MULTILINE,
)


def _video_info(title: str, author: str, video_id: str) -> str:
    lines: list[str] = []
    if title:
        lines.append(f"Title: {title}")
    if author:
        lines.append(f"Channel: {author}")
    if video_id:
        lines.append(f"VideoID: {video_id}")
    return "\n".join(lines)


def build_transcript_prompt(
    title: str,
    author: str,
    video_id: str,
    detail_level: DetailLevel,
    transcript: str | None,
    source: TranscriptSource,
    official_available: bool,
) -> str:
    """Build the transcript-mode summary prompt.

    The model is asked for a trailing footer line rather than a leading
    header so :func:`split_footer` can find it later.
    """
    footer = _FOOTER_INSTRUCTION.format(
        divider=FOOTER_DIVIDER,
        level=detail_level.value.capitalize(),
        source=source.label if transcript else TranscriptSource.NONE.label,
        official="Yes" if official_available else "No",
    )
    sections = [
        _PREAMBLE,
        footer,
        DETAIL_INSTRUCTIONS[detail_level],
        _video_info(title, author, video_id),
    ]
    if transcript:
        sections.append(f"Video Transcript:\n{transcript}")
    else:
        sections.append(NO_TRANSCRIPT_NOTE)
    return "\n\n".join(s for s in sections if s) + "\n"


def build_url_prompt(detail_level: DetailLevel) -> str:
    """Build the URL-mode instruction; the video itself is sent separately."""
    return URL_INSTRUCTIONS[detail_level]


def build_combine_prompt(partials: Sequence[str]) -> str:
    """Build the final prompt merging per-chunk summaries."""
    blocks = "\n".join(
        f"[Chunk {i + 1}]\n{part}\n" for i, part in enumerate(partials)
    )
    return _COMBINE_PROMPT.format(partials=blocks)


def cap_comment(comment: str, cap: int = DEFAULT_COMMENT_CHAR_CAP) -> str:
    """Flatten a comment to one line of at most ``cap`` characters.

    A cut comment ends with an ellipsis, which counts toward the cap.
    """
    text = " ".join(comment.split())
    if cap > 0 and len(text) > cap:
        text = text[: cap - 1] + "…"
    return text


def build_comments_prompt(
    title: str,
    author: str,
    video_id: str,
    comments: Sequence[str],
    analyzed_count: int,
    per_comment_cap: int = DEFAULT_COMMENT_CHAR_CAP,
) -> str | None:
    """Build the comments digest prompt, or ``None`` when there is nothing to send."""
    lines = [
        f"- {cap_comment(c, per_comment_cap)}"
        for c in comments
        if c and c.strip()
    ]
    if not lines:
        return None
    video_info = _video_info(title, author, video_id).replace(
        "Title:", "Video:", 1
    )
    return _COMMENTS_PROMPT.format(
        video_info=video_info + "\n" if video_info else "",
        comments="\n".join(lines),
        analyzed=analyzed_count,
    )


def build_fact_check_prompt(
    summary: str,
    title: str,
    author: str,
    web_search: bool = False,
) -> str:
    """Build the fact-check prompt; ``web_search`` selects the method wording."""
    method = (
        "using web search to verify current information"
        if web_search
        else "using your general knowledge base"
    )
    video = title or ""
    if author:
        video += f" by {author}"
    return _FACT_CHECK_PROMPT.format(
        method=method, video=video.strip(), summary=summary or ""
    )


def split_footer(text: str) -> tuple[str, dict[str, str] | None]:
    """Separate the technical footer from a summary.

    Returns:
        Tuple of (body, footer fields) where footer fields has ``level``,
        ``source`` and ``official`` keys, or ``None`` if no footer was found.
    """
    matches = list(_FOOTER_RE.finditer(text))
    if not matches:
        return text.strip(), None
    match = matches[-1]
    body = text[: match.start()].rstrip()
    if body.endswith(FOOTER_DIVIDER):
        body = body[: -len(FOOTER_DIVIDER)].rstrip()
    return body, match.groupdict()
