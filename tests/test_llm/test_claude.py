"""Tests for the Claude backend."""

from unittest.mock import MagicMock

import anthropic
import httpx
import pytest

from tubedigest.errors import EmptyResponseError, TransportError, UnsupportedModeError
from tubedigest.llm.claude import ClaudeClient


def _message(text: str) -> MagicMock:
    block = MagicMock()
    block.type = "text"
    block.text = text
    message = MagicMock()
    message.content = [block]
    message.usage.input_tokens = 200
    message.usage.output_tokens = 50
    return message


def _status_error(status: int, body: str) -> anthropic.APIStatusError:
    request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
    response = httpx.Response(status, text=body, request=request)
    return anthropic.APIStatusError(body, response=response, body=None)


class TestClaudeClient:
    def test_summarize(self) -> None:
        sdk = MagicMock()
        sdk.messages.create.return_value = _message("Claude summary")
        client = ClaudeClient(api_key="k", client=sdk)

        outcome = client.summarize("prompt")

        assert outcome.text == "Claude summary"
        assert outcome.model_used == "claude-haiku-4-5"
        assert outcome.prompt_tokens == 200
        assert outcome.completion_tokens == 50
        assert outcome.total_tokens == 250
        kwargs = sdk.messages.create.call_args.kwargs
        assert kwargs["model"] == "claude-haiku-4-5"
        assert kwargs["messages"] == [{"role": "user", "content": "prompt"}]

    def test_status_error_falls_back(self) -> None:
        sdk = MagicMock()
        sdk.messages.create.side_effect = [
            _status_error(529, "overloaded"),
            _message("From sonnet"),
        ]
        client = ClaudeClient(api_key="k", client=sdk)

        outcome = client.summarize("prompt")

        assert outcome.model_used == "claude-sonnet-4-6"
        models = [c.kwargs["model"] for c in sdk.messages.create.call_args_list]
        assert models == ["claude-haiku-4-5", "claude-sonnet-4-6"]

    def test_status_error_maps_to_transport_error(self) -> None:
        sdk = MagicMock()
        sdk.messages.create.side_effect = _status_error(400, "bad request")
        client = ClaudeClient(api_key="k", model="claude-sonnet-4-6", client=sdk)

        with pytest.raises(TransportError) as exc_info:
            client.summarize("prompt")
        assert exc_info.value.reason == "HTTP 400: bad request"

    def test_empty_text(self) -> None:
        sdk = MagicMock()
        sdk.messages.create.return_value = _message("   ")
        client = ClaudeClient(api_key="k", model="claude-haiku-4-5", client=sdk)

        with pytest.raises(EmptyResponseError):
            client.summarize("prompt")

    def test_web_search_unsupported(self) -> None:
        client = ClaudeClient(api_key="k", client=MagicMock())
        with pytest.raises(UnsupportedModeError):
            client.generate("prompt", model="claude-haiku-4-5", web_search=True)

    def test_not_configured(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
        assert not ClaudeClient().is_configured()
