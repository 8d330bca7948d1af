"""Data models for tubedigest."""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, field_validator


class TranscriptSource(StrEnum):
    """Which strategy or caption track type produced a transcript."""

    INNERTUBE = "innertube"
    PLAYER_API = "player_api"
    OFFICIAL_CC = "official_cc"
    AUTO_CC = "auto_cc"
    NONE = "none"

    @property
    def label(self) -> str:
        return _SOURCE_LABELS[self]


_SOURCE_LABELS: dict[TranscriptSource, str] = {
    TranscriptSource.INNERTUBE: "InnerTube Transcript",
    TranscriptSource.PLAYER_API: "Player API Captions",
    TranscriptSource.OFFICIAL_CC: "Official Closed Captions",
    TranscriptSource.AUTO_CC: "Auto-Generated Captions",
    TranscriptSource.NONE: "Title/Metadata Only",
}


class DetailLevel(StrEnum):
    """Verbosity tier controlling prompt instructions."""

    CONCISE = "concise"
    MODERATE = "moderate"
    DETAILED = "detailed"

    @classmethod
    def parse(cls, value: "str | DetailLevel | None") -> "DetailLevel":
        """Parse a user-supplied level; unknown or empty values mean moderate."""
        if isinstance(value, DetailLevel):
            return value
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            return cls.MODERATE


class SummaryMode(StrEnum):
    """Whether the model watches the video URL or reads a transcript."""

    URL = "url"
    TRANSCRIPT = "transcript"


class TranscriptResult(BaseModel):
    """Outcome of the transcript strategy chain."""

    model_config = ConfigDict(frozen=True)

    text: str | None
    source: TranscriptSource

    @classmethod
    def empty(cls) -> "TranscriptResult":
        return cls(text=None, source=TranscriptSource.NONE)

    @property
    def found(self) -> bool:
        return bool(self.text)


class CaptionTrack(BaseModel):
    """A caption track advertised by the player API."""

    model_config = ConfigDict(frozen=True)

    language_code: str
    is_auto_generated: bool = False
    is_translatable: bool = False
    base_url: str

    @property
    def is_english(self) -> bool:
        return self.language_code.lower().startswith("en")


class SummaryRequest(BaseModel):
    """A single summarization invocation."""

    model_config = ConfigDict(frozen=True)

    title: str = ""
    author: str = ""
    video_id: str
    detail_level: DetailLevel = DetailLevel.MODERATE
    start_time_seconds: int = 0
    mode: SummaryMode = SummaryMode.URL
    forced_mode: SummaryMode | None = None

    @field_validator("detail_level", mode="before")
    @classmethod
    def _parse_detail_level(cls, value: object) -> DetailLevel:
        return DetailLevel.parse(value if isinstance(value, str) else None)

    @field_validator("start_time_seconds")
    @classmethod
    def _clamp_start(cls, value: int) -> int:
        return max(0, value)

    @property
    def effective_mode(self) -> SummaryMode:
        return self.forced_mode or self.mode


class ModelCallOutcome(BaseModel):
    """Text returned by one model call plus best-effort usage telemetry."""

    model_config = ConfigDict(frozen=True)

    text: str
    model_used: str
    prompt_tokens: int | None = None
    completion_tokens: int | None = None
    total_tokens: int | None = None
