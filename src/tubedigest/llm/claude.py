"""Anthropic Claude backend (transcript mode only)."""

import logging
import os

import anthropic
import httpx

from tubedigest.errors import TransportError, UnsupportedModeError
from tubedigest.llm.base import AUTO, FAST_TIMEOUT, ModelClient, require_text
from tubedigest.models import ModelCallOutcome

logger = logging.getLogger(__name__)

_SYSTEM_PROMPT = "You write clear, concise, skimmable summaries for TV screens."
_MAX_TOKENS = 4096


class ClaudeClient(ModelClient):
    """Summaries via the Anthropic Messages API.

    SDK-level retries are disabled; the fast/fallback policy in
    :class:`ModelClient` decides whether a second call is made.
    """

    name = "Claude"
    fast_model = "claude-haiku-4-5"
    fallback_model = "claude-sonnet-4-6"

    def __init__(
        self,
        api_key: str | None = None,
        model: str = AUTO,
        client: anthropic.Anthropic | None = None,
    ) -> None:
        super().__init__(api_key or os.environ.get("ANTHROPIC_API_KEY", ""), model)
        self._client = client

    def _get_client(self) -> anthropic.Anthropic:
        if self._client is None:
            self._client = anthropic.Anthropic(api_key=self._api_key, max_retries=0)
        return self._client

    def generate(
        self,
        prompt: str,
        *,
        model: str,
        video_url: str | None = None,
        web_search: bool = False,
        timeout: httpx.Timeout = FAST_TIMEOUT,
    ) -> ModelCallOutcome:
        if video_url:
            msg = "Claude backend cannot summarize a video URL"
            raise UnsupportedModeError(msg)
        if web_search:
            msg = "Claude backend does not support web search here"
            raise UnsupportedModeError(msg)

        try:
            message = self._get_client().messages.create(
                model=model,
                max_tokens=_MAX_TOKENS,
                system=_SYSTEM_PROMPT,
                messages=[{"role": "user", "content": prompt}],
                timeout=timeout,
            )
        except anthropic.APIStatusError as e:
            msg = f"Claude HTTP {e.status_code} from {model}"
            raise TransportError(msg, e.status_code, e.response.text, model) from e
        except anthropic.APIConnectionError as e:
            msg = f"Claude request to {model} failed: {e}"
            raise TransportError(msg, model=model) from e

        text = "".join(
            block.text for block in message.content if block.type == "text"
        )
        usage = message.usage
        prompt_tokens = getattr(usage, "input_tokens", None)
        completion_tokens = getattr(usage, "output_tokens", None)
        total = (
            prompt_tokens + completion_tokens
            if prompt_tokens is not None and completion_tokens is not None
            else None
        )
        return ModelCallOutcome(
            text=require_text(text, model),
            model_used=model,
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            total_tokens=total,
        )
