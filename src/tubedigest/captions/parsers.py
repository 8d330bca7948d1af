"""Caption wire-format parsers: timed-text XML, WebVTT, JSON3 and get_transcript.

Every parser takes the raw response body and returns flat text, or ``None``
when the payload is not in its format or carries no text. None of them raise;
malformed fragments are skipped.
"""

import json
import re
from typing import Any

_XML_TEXT_RE = re.compile(r"<text\b[^>]*>(.*?)</text>", re.DOTALL)
_XML_TAG_RE = re.compile(r"<[^>]+>")
_CUE_INDEX_RE = re.compile(r"^\d+$")

_HTML_ENTITIES = (
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&#39;", "'"),
    # Last, so "&amp;lt;" decodes to "&lt;" and not "<".
    ("&amp;", "&"),
)


def _decode_entities(text: str) -> str:
    for entity, char in _HTML_ENTITIES:
        text = text.replace(entity, char)
    return text


def _load_json(raw: str) -> Any:
    try:
        return json.loads(raw)
    except (TypeError, ValueError):
        return None


def parse_json3(raw: str) -> str | None:
    """Flatten a JSON3 event stream (``{"events": [{"segs": [...]}]}``)."""
    data = _load_json(raw)
    if not isinstance(data, dict) or not isinstance(data.get("events"), list):
        return None

    parts: list[str] = []
    for event in data["events"]:
        if not isinstance(event, dict):
            continue
        segs = event.get("segs")
        if not isinstance(segs, list):
            continue
        for seg in segs:
            if isinstance(seg, dict) and isinstance(seg.get("utf8"), str):
                parts.append(seg["utf8"])
        parts.append(" ")

    text = "".join(parts).strip()
    return text or None


def parse_vtt(raw: str) -> str | None:
    """Flatten a WebVTT document to cue text joined by single spaces."""
    if not raw:
        return None
    body = raw.lstrip("\ufeff \t\r\n")
    if not body.startswith("WEBVTT"):
        return None

    kept: list[str] = []
    in_header = True
    for line in body.splitlines()[1:]:
        line = line.strip()
        if not line:
            in_header = False
            continue
        if "-->" in line:
            in_header = False
            continue
        # Header block metadata such as "Kind: captions" / "Language: en".
        if in_header:
            continue
        if _CUE_INDEX_RE.match(line) or line.startswith("X-TIMESTAMP-MAP"):
            continue
        line = _XML_TAG_RE.sub("", line).strip()
        if line:
            kept.append(line)

    text = " ".join(kept).strip()
    return text or None


def parse_timedtext_xml(raw: str) -> str | None:
    """Flatten legacy timed-text XML by extracting every ``<text>`` element."""
    if not raw or "<text" not in raw:
        return None

    parts: list[str] = []
    for match in _XML_TEXT_RE.finditer(raw):
        inner = _XML_TAG_RE.sub("", match.group(1))
        inner = _decode_entities(inner).strip()
        if inner:
            parts.append(inner)

    text = " ".join(parts).strip()
    return text or None


def parse_captions(raw: str | None) -> str | None:
    """Sniff the wire format of ``raw`` and dispatch to the matching parser."""
    if not raw:
        return None
    stripped = raw.lstrip("\ufeff \t\r\n")

    if stripped.startswith("{"):
        data = _load_json(stripped)
        if isinstance(data, dict) and isinstance(data.get("events"), list):
            return parse_json3(stripped)
        return None
    if stripped.startswith("WEBVTT"):
        return parse_vtt(stripped)
    if "<text" in stripped:
        return parse_timedtext_xml(stripped)
    return None


def parse_get_transcript(raw: str | None) -> str | None:
    """Collect cue text from an InnerTube ``get_transcript`` JSON response."""
    data = _load_json(raw) if raw else None
    if data is None:
        return None

    parts: list[str] = []
    _collect_cues(data, parts)
    text = "".join(parts).strip()
    return text or None


def _collect_cues(node: Any, out: list[str]) -> None:
    if isinstance(node, list):
        for item in node:
            _collect_cues(item, out)
        return
    if not isinstance(node, dict):
        return

    cue_renderer = node.get("transcriptCueRenderer")
    if isinstance(cue_renderer, dict):
        _append_runs(cue_renderer.get("cue"), out)

    segment_renderer = node.get("transcriptSegmentRenderer")
    if isinstance(segment_renderer, dict):
        _append_runs(segment_renderer.get("snippet"), out)

    for value in node.values():
        _collect_cues(value, out)


def _append_runs(container: Any, out: list[str]) -> None:
    """Append ``simpleText`` or concatenated ``runs[].text`` plus one space."""
    if not isinstance(container, dict):
        return
    simple = container.get("simpleText")
    if isinstance(simple, str) and simple:
        out.append(simple + " ")
        return
    runs = container.get("runs")
    if isinstance(runs, list):
        text = "".join(
            run["text"]
            for run in runs
            if isinstance(run, dict) and isinstance(run.get("text"), str)
        )
        if text:
            out.append(text + " ")
