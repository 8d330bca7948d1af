"""Shared test fixtures."""

from collections.abc import Callable, Sequence
from pathlib import Path
from unittest.mock import MagicMock

import httpx
import pytest

from tubedigest.captions.chain import TranscriptChain
from tubedigest.config import TubedigestConfig
from tubedigest.llm.base import AUTO, FAST_TIMEOUT, ModelClient
from tubedigest.models import ModelCallOutcome, TranscriptResult, TranscriptSource


class ScriptedClient(ModelClient):
    """Model client that replays scripted responses and records each call.

    A ``str`` response becomes a successful outcome; an exception is raised.
    """

    name = "Scripted"
    fast_model = "fast-model"
    fallback_model = "slow-model"

    def __init__(
        self,
        responses: Sequence[str | Exception] = (),
        api_key: str = "test-key",
        model: str = AUTO,
        url_mode: bool = True,
        web_search: bool = True,
    ) -> None:
        super().__init__(api_key, model)
        self.responses = list(responses)
        self.supports_url_mode = url_mode
        self.supports_web_search = web_search
        self.calls: list[dict[str, object]] = []

    def generate(
        self,
        prompt: str,
        *,
        model: str,
        video_url: str | None = None,
        web_search: bool = False,
        timeout: httpx.Timeout = FAST_TIMEOUT,
    ) -> ModelCallOutcome:
        self.calls.append(
            {
                "prompt": prompt,
                "model": model,
                "video_url": video_url,
                "web_search": web_search,
                "timeout": timeout,
            }
        )
        response = self.responses.pop(0) if self.responses else "ok"
        if isinstance(response, Exception):
            raise response
        return ModelCallOutcome(text=response, model_used=model, total_tokens=42)


@pytest.fixture
def tmp_config_path(tmp_path: Path) -> Path:
    """Return a temporary config file path."""
    return tmp_path / "config.toml"


@pytest.fixture
def default_config() -> TubedigestConfig:
    """Return a default config instance."""
    return TubedigestConfig()


@pytest.fixture
def scripted_client() -> Callable[..., ScriptedClient]:
    """Factory for scripted model clients."""
    return ScriptedClient


@pytest.fixture
def make_chain() -> Callable[..., MagicMock]:
    """Factory for a mocked transcript chain returning a fixed transcript."""

    def _make(
        text: str | None = "hello world transcript",
        source: TranscriptSource = TranscriptSource.OFFICIAL_CC,
        official: bool = True,
    ) -> MagicMock:
        chain = MagicMock(spec=TranscriptChain)
        if text:
            chain.fetch.return_value = TranscriptResult(text=text, source=source)
        else:
            chain.fetch.return_value = TranscriptResult.empty()
        chain.has_official_track.return_value = official
        return chain

    return _make
