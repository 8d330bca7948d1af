"""OpenAI Chat Completions backend (transcript mode only)."""

import logging
import os
from typing import Any

import httpx

from tubedigest.errors import TransportError, UnsupportedModeError
from tubedigest.llm.base import (
    AUTO,
    FAST_TIMEOUT,
    ModelClient,
    as_dict,
    first_item,
    optional_int,
    read_json,
    require_text,
)
from tubedigest.models import ModelCallOutcome

logger = logging.getLogger(__name__)

_API_URL = "https://api.openai.com/v1/chat/completions"
_SYSTEM_PROMPT = "You write clear, concise, skimmable summaries for TV screens."

# Friendly aliases accepted in the config file.
_MODEL_ALIASES = {
    "gpt5-mini": "gpt-5-mini",
    "gpt5": "gpt-5",
    "gpt5-nano": "gpt-5-nano",
}


class OpenAIClient(ModelClient):
    """Summaries via the OpenAI Chat Completions API.

    Cannot watch a video URL, so the orchestrator always feeds it a
    transcript. Fact checks rely on the model's own knowledge.
    """

    name = "OpenAI"
    fast_model = "gpt-5-mini"
    fallback_model = "gpt-5"

    def __init__(self, api_key: str | None = None, model: str = AUTO) -> None:
        super().__init__(api_key or os.environ.get("OPENAI_API_KEY", ""), model)

    def resolve_model(self, model: str) -> str:
        configured = model.strip()
        return _MODEL_ALIASES.get(configured.lower(), configured)

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
            msg = "OpenAI backend cannot summarize a video URL"
            raise UnsupportedModeError(msg)
        if web_search:
            msg = "OpenAI backend does not support web search"
            raise UnsupportedModeError(msg)

        payload = {
            "model": model,
            "messages": [
                {"role": "system", "content": _SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
        }
        headers = {"Authorization": f"Bearer {self._api_key}"}
        try:
            with httpx.Client(timeout=timeout) as client:
                response = client.post(_API_URL, json=payload, headers=headers)
        except httpx.TransportError as e:
            msg = f"OpenAI request to {model} failed: {e}"
            raise TransportError(msg, model=model) from e

        if not response.is_success:
            msg = f"OpenAI HTTP {response.status_code} from {model}"
            raise TransportError(msg, response.status_code, response.text, model)

        return self._parse_response(read_json(response, self.name, model), model)

    @staticmethod
    def _parse_response(data: dict[str, Any], model: str) -> ModelCallOutcome:
        message = as_dict(first_item(data.get("choices")).get("message"))
        content = message.get("content")

        usage = as_dict(data.get("usage"))
        return ModelCallOutcome(
            text=require_text(content if isinstance(content, str) else None, model),
            model_used=model,
            prompt_tokens=optional_int(usage.get("prompt_tokens")),
            completion_tokens=optional_int(usage.get("completion_tokens")),
            total_tokens=optional_int(usage.get("total_tokens")),
        )
