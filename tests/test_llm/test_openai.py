"""Tests for the OpenAI backend."""

import json

import httpx
import pytest
import respx

from tubedigest.errors import (
    EmptyResponseError,
    TransportError,
    UnsupportedModeError,
)
from tubedigest.llm.openai import OpenAIClient

_API_URL = "https://api.openai.com/v1/chat/completions"


def _completion(text: str | None) -> httpx.Response:
    return httpx.Response(
        200,
        json={
            "choices": [{"message": {"role": "assistant", "content": text}}],
            "usage": {
                "prompt_tokens": 900,
                "completion_tokens": 100,
                "total_tokens": 1000,
            },
        },
    )


class TestOpenAIClient:
    def test_capabilities(self) -> None:
        client = OpenAIClient(api_key="k")
        assert not client.supports_url_mode
        assert not client.supports_web_search
        assert client.active_model == "gpt-5-mini"

    @pytest.mark.parametrize(
        ("configured", "expected"),
        [("gpt5-mini", "gpt-5-mini"), ("gpt5", "gpt-5"), ("gpt-4o", "gpt-4o")],
    )
    def test_model_aliases(self, configured: str, expected: str) -> None:
        assert OpenAIClient(api_key="k", model=configured).active_model == expected

    @respx.mock
    def test_summarize(self) -> None:
        route = respx.post(_API_URL).mock(return_value=_completion("Summary text"))

        outcome = OpenAIClient(api_key="sk-test").summarize("prompt")

        assert outcome.text == "Summary text"
        assert outcome.model_used == "gpt-5-mini"
        assert outcome.prompt_tokens == 900
        assert outcome.total_tokens == 1000

        request = route.calls[0].request
        assert request.headers["Authorization"] == "Bearer sk-test"
        body = json.loads(request.content)
        assert body["model"] == "gpt-5-mini"
        assert body["messages"][0]["role"] == "system"
        assert body["messages"][1] == {"role": "user", "content": "prompt"}

    @respx.mock
    def test_falls_back_to_gpt5(self) -> None:
        route = respx.post(_API_URL).mock(
            side_effect=[
                httpx.Response(500, text="server error"),
                _completion("From gpt-5"),
            ]
        )
        outcome = OpenAIClient(api_key="k").summarize("prompt")

        assert outcome.model_used == "gpt-5"
        models = [json.loads(c.request.content)["model"] for c in route.calls]
        assert models == ["gpt-5-mini", "gpt-5"]

    @respx.mock
    def test_http_error(self) -> None:
        respx.post(_API_URL).mock(
            return_value=httpx.Response(401, text='{"error": "bad key"}')
        )
        with pytest.raises(TransportError) as exc_info:
            OpenAIClient(api_key="k", model="gpt-5").summarize("prompt")
        assert exc_info.value.status == 401

    def test_url_mode_unsupported(self) -> None:
        with pytest.raises(UnsupportedModeError):
            OpenAIClient(api_key="k").summarize(
                "prompt", video_url="https://www.youtube.com/watch?v=abc"
            )

    @respx.mock
    def test_fact_check_uses_knowledge_base(self) -> None:
        route = respx.post(_API_URL).mock(
            return_value=_completion("**Fact Check Results:**")
        )
        OpenAIClient(api_key="k").fact_check("Summary", "Title", "Author", "abc")

        prompt = json.loads(route.calls[0].request.content)["messages"][1]["content"]
        assert "general knowledge base" in prompt
        assert "Title by Author" in prompt


class TestMalformedResponses:
    @respx.mock
    def test_non_json_body_is_transport_error(self) -> None:
        route = respx.post(_API_URL).mock(
            return_value=httpx.Response(200, text="<html>upstream proxy</html>")
        )

        with pytest.raises(TransportError) as exc_info:
            OpenAIClient(api_key="k").summarize("prompt")

        assert exc_info.value.reason == "HTTP 200: <html>upstream proxy</html>"
        assert exc_info.value.model == "gpt-5"
        assert route.call_count == 2

    @respx.mock
    def test_unexpected_choice_shape_is_empty(self) -> None:
        respx.post(_API_URL).mock(
            return_value=httpx.Response(200, json={"choices": ["oops"]})
        )
        with pytest.raises(EmptyResponseError):
            OpenAIClient(api_key="k", model="gpt-5").summarize("prompt")
