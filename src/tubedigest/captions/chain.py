"""Ordered fallback chain of transcript acquisition strategies."""

import logging
from collections.abc import Callable, Sequence

from tubedigest.captions import scrape
from tubedigest.captions.innertube import (
    TRANSCRIPT_CLIENTS,
    InnerTubeClient,
)
from tubedigest.captions.normalize import normalize
from tubedigest.captions.parsers import parse_captions, parse_get_transcript
from tubedigest.models import CaptionTrack, TranscriptResult, TranscriptSource

logger = logging.getLogger(__name__)

TIMEDTEXT_URL = "https://www.youtube.com/api/timedtext"
# Bare (legacy XML), then WebVTT, then JSON3.
FORMAT_VARIANTS: tuple[str | None, ...] = (None, "vtt", "json3")
_MAX_LANGUAGE_VARIANTS = 3

Strategy = Callable[[str, str], TranscriptResult | None]


def select_track(tracks: Sequence[CaptionTrack]) -> CaptionTrack | None:
    """Pick official English, then any English, then the first track."""
    if not tracks:
        return None
    for track in tracks:
        if track.is_english and not track.is_auto_generated:
            return track
    for track in tracks:
        if track.is_english:
            return track
    return tracks[0]


def language_variants(preferred: str) -> list[str]:
    """Language codes to probe on the public timed-text endpoint."""
    variants: list[str] = []
    for code in (preferred, "en", "en-US", "en-GB"):
        if code and code not in variants:
            variants.append(code)
    return variants[:_MAX_LANGUAGE_VARIANTS]


def _with_format(params: dict[str, str], fmt: str | None) -> dict[str, str]:
    if fmt is None:
        return params
    return {**params, "fmt": fmt}


class TranscriptChain:
    """Runs transcript strategies in fixed priority order.

    Strategies never run concurrently. Any exception or unparseable payload
    inside a strategy counts as "no result" and the next one is tried; the
    first non-empty normalized text wins.
    """

    def __init__(
        self,
        innertube: InnerTubeClient,
        max_chars: int = 0,
        language: str = "en",
        debug: bool = False,
    ) -> None:
        self._innertube = innertube
        self.max_chars = max_chars
        self.language = language or "en"
        self.debug = debug
        self.strategies: list[tuple[str, Strategy]] = [
            ("innertube get_transcript", self._via_get_transcript),
            ("player API caption tracks", self._via_player_api),
            ("public timedtext", self._via_timedtext),
            ("watch page caption tracks", self._via_watch_page_tracks),
        ]

    def fetch(
        self, video_id: str, preferred_language: str | None = None
    ) -> TranscriptResult:
        """Return the first transcript any strategy produces, or an empty result."""
        language = preferred_language or self.language
        logger.info("Fetching transcript for %s", video_id)

        for name, strategy in self.strategies:
            try:
                result = strategy(video_id, language)
            except Exception as e:
                logger.warning(
                    "Transcript strategy '%s' failed for %s: %s", name, video_id, e
                )
                self._trace("Strategy '%s' traceback", name, exc_info=True)
                continue
            if result is not None and result.found:
                logger.info(
                    "Transcript for %s via %s (%s), %d chars",
                    video_id,
                    name,
                    result.source.label,
                    len(result.text or ""),
                )
                return result
            self._trace("Transcript strategy '%s' found nothing for %s", name, video_id)

        logger.warning("No transcript found for %s", video_id)
        return TranscriptResult.empty()

    def _trace(self, msg: str, *args: object, exc_info: bool = False) -> None:
        """Per-strategy detail, logged only when the chain runs in debug mode."""
        if self.debug:
            logger.debug(msg, *args, exc_info=exc_info)

    def has_official_track(self, video_id: str) -> bool:
        """Whether the player API lists at least one non-auto-generated track."""
        try:
            tracks = self._innertube.caption_tracks(video_id)
        except Exception as e:
            logger.warning("Caption track probe failed for %s: %s", video_id, e)
            return False
        return any(not track.is_auto_generated for track in tracks)

    def _result(
        self, raw_text: str | None, source: TranscriptSource
    ) -> TranscriptResult | None:
        text = normalize(raw_text, self.max_chars)
        if not text:
            return None
        return TranscriptResult(text=text, source=source)

    def _probe_formats(
        self, url: str, params: dict[str, str] | None = None
    ) -> str | None:
        """Request ``url`` in each response format until one parses."""
        for fmt in FORMAT_VARIANTS:
            try:
                body = self._innertube.get_text(url, _with_format(params or {}, fmt))
            except Exception as e:
                self._trace("Caption request %s (fmt=%s) failed: %s", url, fmt, e)
                continue
            text = parse_captions(body)
            if text:
                return text
        return None

    def _via_get_transcript(
        self, video_id: str, language: str
    ) -> TranscriptResult | None:
        page = self._innertube.fetch_watch_page(video_id, language)
        params = scrape.extract_transcript_params(page)
        if not params:
            self._trace("getTranscriptEndpoint params not found for %s", video_id)
            return None

        api_key = scrape.extract_innertube_api_key(page)
        visitor_data = scrape.extract_visitor_data(page)
        # Primary identity, then one retry with the alternate on an empty body.
        for client in TRANSCRIPT_CLIENTS:
            body = self._innertube.get_transcript(
                params, client=client, api_key=api_key, visitor_data=visitor_data
            )
            text = parse_get_transcript(body)
            result = self._result(text, TranscriptSource.INNERTUBE)
            if result is not None:
                return result
            self._trace(
                "get_transcript via %s was empty for %s", client.name, video_id
            )
        return None

    def _via_player_api(
        self, video_id: str, language: str
    ) -> TranscriptResult | None:
        track = select_track(self._innertube.caption_tracks(video_id))
        if track is None:
            return None

        params = {"fmt": "vtt"}
        if not track.is_english and track.is_translatable:
            params["tlang"] = language
        body = self._innertube.get_text(track.base_url, params)
        source = (
            TranscriptSource.AUTO_CC
            if track.is_auto_generated
            else TranscriptSource.OFFICIAL_CC
        )
        return self._result(parse_captions(body), source)

    def _via_timedtext(
        self, video_id: str, language: str
    ) -> TranscriptResult | None:
        for lang in language_variants(language):
            text = self._probe_formats(TIMEDTEXT_URL, {"v": video_id, "lang": lang})
            result = self._result(text, TranscriptSource.OFFICIAL_CC)
            if result is not None:
                return result
        return None

    def _via_watch_page_tracks(
        self, video_id: str, language: str
    ) -> TranscriptResult | None:
        page = self._innertube.fetch_watch_page(video_id, language)
        base_url = scrape.extract_caption_base_url(page)
        if not base_url:
            return None
        return self._result(self._probe_formats(base_url), TranscriptSource.AUTO_CC)
