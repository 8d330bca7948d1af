"""Google Gemini backend using the ``generateContent`` REST API."""

import logging
import os
from typing import Any

import httpx

from tubedigest.errors import TransportError
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

API_URL_TEMPLATE = (
    "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"
)


class GeminiClient(ModelClient):
    """Gemini client; the only backend that can watch a video by URL.

    In URL mode the video reference is sent as a ``fileData`` part ahead of
    the text instruction. Fact checks enable the ``google_search`` tool.
    """

    name = "Gemini"
    supports_url_mode = True
    supports_web_search = True
    fast_model = "gemini-2.0-flash"
    fallback_model = "gemini-2.5-flash"

    def __init__(self, api_key: str | None = None, model: str = AUTO) -> None:
        super().__init__(api_key or os.environ.get("GEMINI_API_KEY", ""), model)

    def generate(
        self,
        prompt: str,
        *,
        model: str,
        video_url: str | None = None,
        web_search: bool = False,
        timeout: httpx.Timeout = FAST_TIMEOUT,
    ) -> ModelCallOutcome:
        parts: list[dict[str, Any]] = []
        if video_url:
            parts.append({"fileData": {"fileUri": video_url}})
        parts.append({"text": prompt})

        payload: dict[str, Any] = {"contents": [{"parts": parts}]}
        if web_search:
            payload["tools"] = [{"google_search": {}}]

        headers = {
            "x-goog-api-key": self._api_key,
            "Content-Type": "application/json",
        }
        url = API_URL_TEMPLATE.format(model=model)
        logger.debug(
            "Gemini request: model=%s url_mode=%s web_search=%s prompt=%d chars",
            model,
            bool(video_url),
            web_search,
            len(prompt),
        )
        try:
            with httpx.Client(timeout=timeout) as client:
                response = client.post(url, json=payload, headers=headers)
        except httpx.TransportError as e:
            msg = f"Gemini request to {model} failed: {e}"
            raise TransportError(msg, model=model) from e

        if not response.is_success:
            msg = f"Gemini HTTP {response.status_code} from {model}"
            raise TransportError(msg, response.status_code, response.text, model)

        return self._parse_response(read_json(response, self.name, model), model)

    @staticmethod
    def _parse_response(data: dict[str, Any], model: str) -> ModelCallOutcome:
        """Join the text parts of the first candidate and read usage metadata."""
        content = as_dict(first_item(data.get("candidates")).get("content"))
        texts = [
            part["text"]
            for part in content.get("parts") or []
            if isinstance(part, dict) and isinstance(part.get("text"), str)
        ]

        usage = as_dict(data.get("usageMetadata"))
        return ModelCallOutcome(
            text=require_text("".join(texts), model),
            model_used=model,
            prompt_tokens=optional_int(usage.get("promptTokenCount")),
            completion_tokens=optional_int(usage.get("candidatesTokenCount")),
            total_tokens=optional_int(usage.get("totalTokenCount")),
        )
