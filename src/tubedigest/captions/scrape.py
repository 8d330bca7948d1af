"""Pattern-match extraction of values embedded in the YouTube watch page.

The watch page is undocumented HTML with inline JSON blobs, so each helper
looks for exactly one value and returns ``None`` when the shape has changed.
"""

import re

_TRANSCRIPT_PARAMS_RE = re.compile(
    r'"getTranscriptEndpoint"\s*:\s*\{[^}]*?"params"\s*:\s*"([^"]+)"'
)
_CAPTION_TRACKS_RE = re.compile(r'"captionTracks"\s*:\s*\[(.*?)\]', re.DOTALL)
_BASE_URL_RE = re.compile(r'"baseUrl"\s*:\s*"([^"]+)"')
_API_KEY_RE = re.compile(r'"INNERTUBE_API_KEY"\s*:\s*"([^"]+)"')
_VISITOR_DATA_RE = re.compile(r'"VISITOR_DATA"\s*:\s*"([^"]+)"')

_JSON_ESCAPES = (
    ("\\u0026", "&"),
    ("\\u003d", "="),
    ("\\/", "/"),
)


def _unescape(value: str) -> str:
    for escaped, char in _JSON_ESCAPES:
        value = value.replace(escaped, char)
    return value


def _first_group(pattern: re.Pattern[str], html: str | None) -> str | None:
    if not html:
        return None
    match = pattern.search(html)
    return match.group(1) if match else None


def extract_transcript_params(html: str | None) -> str | None:
    """Return the opaque ``getTranscriptEndpoint.params`` token."""
    params = _first_group(_TRANSCRIPT_PARAMS_RE, html)
    return _unescape(params) if params else None


def extract_caption_base_url(html: str | None) -> str | None:
    """Return the first caption ``baseUrl`` from the embedded track list."""
    tracks = _first_group(_CAPTION_TRACKS_RE, html)
    if not tracks:
        return None
    base_url = _first_group(_BASE_URL_RE, tracks)
    return _unescape(base_url) if base_url else None


def extract_innertube_api_key(html: str | None) -> str | None:
    return _first_group(_API_KEY_RE, html)


def extract_visitor_data(html: str | None) -> str | None:
    value = _first_group(_VISITOR_DATA_RE, html)
    return _unescape(value) if value else None
