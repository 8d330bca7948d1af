"""Summary orchestration: mode selection, model call and chunk-and-combine."""

import logging

from tubedigest.captions.chain import TranscriptChain
from tubedigest.config import TubedigestConfig
from tubedigest.errors import TransportError
from tubedigest.llm.base import ModelClient
from tubedigest.models import (
    DetailLevel,
    ModelCallOutcome,
    SummaryMode,
    SummaryRequest,
    TranscriptResult,
)
from tubedigest.summary.prompts import (
    build_combine_prompt,
    build_transcript_prompt,
    build_url_prompt,
)

logger = logging.getLogger(__name__)

WATCH_URL = "https://www.youtube.com/watch?v={video_id}"
DEFAULT_CHUNK_CHARS = 12_000
NO_VIDEO_ID_MESSAGE = "Error: No video ID provided"


def build_watch_url(video_id: str, start_time_seconds: int = 0) -> str:
    """Watch URL for ``video_id``, starting at ``start_time_seconds`` if positive."""
    url = WATCH_URL.format(video_id=video_id)
    if start_time_seconds > 0:
        url += f"&t={start_time_seconds}s"
    return url


def split_transcript(text: str, chunk_chars: int = DEFAULT_CHUNK_CHARS) -> list[str]:
    """Split text into consecutive fixed-size character chunks."""
    if chunk_chars <= 0:
        return [text] if text else []
    return [text[i : i + chunk_chars] for i in range(0, len(text), chunk_chars)]


def _parse_mode(value: str | SummaryMode | None) -> SummaryMode | None:
    if value is None or isinstance(value, SummaryMode):
        return value
    try:
        return SummaryMode(value.strip().lower())
    except ValueError:
        logger.warning("Unknown summary mode '%s', using transcript", value)
        return SummaryMode.TRANSCRIPT


class Summarizer:
    """Produces the base summary for one video per call.

    Transcript mode runs the transcript chain and embeds the text in the
    prompt. URL mode hands the watch URL to a backend that can watch it.
    When a transcript-mode call hits a ``TransportError`` and a transcript
    is available, the transcript is summarized chunk by chunk and the
    partial summaries are combined by one more call.
    """

    def __init__(
        self,
        client: ModelClient,
        chain: TranscriptChain,
        config: TubedigestConfig | None = None,
    ) -> None:
        config = config or TubedigestConfig()
        self.client = client
        self.chain = chain
        self.default_mode = _parse_mode(config.general.mode) or SummaryMode.URL
        self.chunk_chars = config.ai.chunk_chars or DEFAULT_CHUNK_CHARS
        self.preferred_language = config.general.preferred_language or None

    def not_configured_message(self) -> str:
        return (
            f"{self.client.name} API key not set. Add it to the tubedigest "
            "config file or the environment."
        )

    def summarize(
        self,
        title: str,
        author: str,
        video_id: str,
        detail_level: str | DetailLevel | None = None,
        start_time_seconds: int = 0,
        forced_mode: str | SummaryMode | None = None,
    ) -> str:
        """Summarize a video and return the raw model text (footer included).

        Returns a placeholder message instead of raising when the client has
        no API key.

        Raises:
            TransportError: When the model call fails and cannot be recovered.
        """
        if not self.client.is_configured():
            return self.not_configured_message()

        request = SummaryRequest(
            title=title or "",
            author=author or "",
            video_id=video_id or "",
            detail_level=DetailLevel.parse(detail_level),
            start_time_seconds=start_time_seconds,
            mode=self.default_mode,
            forced_mode=_parse_mode(forced_mode),
        )
        if request.effective_mode is SummaryMode.URL and not request.video_id:
            logger.warning("URL mode requested without a video id")
            return NO_VIDEO_ID_MESSAGE
        return self.run(request).text

    def run(self, request: SummaryRequest) -> ModelCallOutcome:
        """Execute one summary request and return the model outcome."""
        mode = request.effective_mode
        if mode is SummaryMode.URL and not self.client.supports_url_mode:
            logger.info(
                "%s cannot watch videos by URL, using transcript mode",
                self.client.name,
            )
            mode = SummaryMode.TRANSCRIPT
        logger.info(
            "Summarizing %s (mode=%s, detail=%s%s)",
            request.video_id,
            mode.value,
            request.detail_level.value,
            ", forced" if request.forced_mode else "",
        )

        if mode is SummaryMode.URL:
            outcome = self._summarize_url(request)
        else:
            outcome = self._summarize_transcript(request)

        logger.info(
            "Summary from %s: prompt=%s completion=%s total=%s tokens",
            outcome.model_used,
            outcome.prompt_tokens,
            outcome.completion_tokens,
            outcome.total_tokens,
        )
        return outcome

    def _summarize_url(self, request: SummaryRequest) -> ModelCallOutcome:
        if not request.video_id:
            raise ValueError(NO_VIDEO_ID_MESSAGE)
        url = build_watch_url(request.video_id, request.start_time_seconds)
        logger.debug("URL mode for %s", url)
        return self.client.summarize(
            build_url_prompt(request.detail_level), video_url=url
        )

    def _summarize_transcript(self, request: SummaryRequest) -> ModelCallOutcome:
        transcript = TranscriptResult.empty()
        official = False
        if request.video_id:
            transcript = self.chain.fetch(request.video_id, self.preferred_language)
            official = self.chain.has_official_track(request.video_id)

        prompt = build_transcript_prompt(
            request.title,
            request.author,
            request.video_id,
            request.detail_level,
            transcript.text,
            transcript.source,
            official,
        )
        try:
            return self.client.summarize(prompt)
        except TransportError as e:
            if not transcript.found:
                raise
            logger.warning(
                "Single-pass summary failed (%s), falling back to chunks", e.reason
            )
        return self._summarize_chunked(request, transcript, official)

    def _summarize_chunked(
        self,
        request: SummaryRequest,
        transcript: TranscriptResult,
        official: bool,
    ) -> ModelCallOutcome:
        chunks = split_transcript(transcript.text or "", self.chunk_chars)
        total = len(chunks)
        logger.info("Summarizing %s in %d chunks", request.video_id, total)

        partials: list[str] = []
        for i, chunk in enumerate(chunks, start=1):
            prompt = build_transcript_prompt(
                f"{request.title} (chunk {i}/{total})",
                request.author,
                request.video_id,
                request.detail_level,
                chunk,
                transcript.source,
                official,
            )
            partials.append(self.client.summarize(prompt, patient=True).text)
            logger.info("Summarized chunk %d/%d", i, total)

        return self.client.summarize(build_combine_prompt(partials), patient=True)
