"""Tests for the shared model selection policy and capability helpers."""

from collections.abc import Callable
from typing import Any

import pytest

from tubedigest.errors import EmptyResponseError, TransportError
from tubedigest.llm.base import FAST_TIMEOUT, SLOW_TIMEOUT, ModelSelection


class TestModelSelection:
    def test_auto(self) -> None:
        selection = ModelSelection("auto", "fast", "slow")
        assert selection.is_auto
        assert selection.active_model == "fast"

    def test_blank_is_auto(self) -> None:
        assert ModelSelection("", "fast", "slow").is_auto

    def test_explicit(self) -> None:
        selection = ModelSelection("custom", "fast", "slow")
        assert not selection.is_auto
        assert selection.active_model == "custom"


class TestCallPolicy:
    def test_auto_success_single_call(
        self, scripted_client: Callable[..., Any]
    ) -> None:
        client = scripted_client(["done"])
        outcome = client.summarize("prompt")
        assert outcome.text == "done"
        assert [c["model"] for c in client.calls] == ["fast-model"]
        assert client.calls[0]["timeout"] == FAST_TIMEOUT

    def test_auto_fallback_once(self, scripted_client: Callable[..., Any]) -> None:
        client = scripted_client([TransportError("busy", 503), "recovered"])
        outcome = client.summarize("prompt")
        assert outcome.model_used == "slow-model"
        assert [c["model"] for c in client.calls] == ["fast-model", "slow-model"]
        assert client.calls[1]["timeout"] == SLOW_TIMEOUT

    def test_auto_second_failure_propagates(
        self, scripted_client: Callable[..., Any]
    ) -> None:
        client = scripted_client(
            [TransportError("busy", 503), TransportError("still busy", 503)]
        )
        with pytest.raises(TransportError):
            client.summarize("prompt")
        assert len(client.calls) == 2

    def test_explicit_model_no_fallback(
        self, scripted_client: Callable[..., Any]
    ) -> None:
        client = scripted_client([TransportError("busy", 503)], model="pinned")
        with pytest.raises(TransportError):
            client.summarize("prompt")
        assert [c["model"] for c in client.calls] == ["pinned"]

    def test_empty_response_no_fallback(
        self, scripted_client: Callable[..., Any]
    ) -> None:
        client = scripted_client([EmptyResponseError("fast-model")])
        with pytest.raises(EmptyResponseError):
            client.summarize("prompt")
        assert len(client.calls) == 1

    def test_patient_uses_slow_timeout(
        self, scripted_client: Callable[..., Any]
    ) -> None:
        client = scripted_client(["ok"])
        client.summarize("prompt", patient=True)
        assert client.calls[0]["timeout"] == SLOW_TIMEOUT

    def test_url_passed_through(self, scripted_client: Callable[..., Any]) -> None:
        client = scripted_client(["ok"])
        client.summarize("prompt", video_url="https://www.youtube.com/watch?v=abc")
        assert client.calls[0]["video_url"] == "https://www.youtube.com/watch?v=abc"


class TestSummarizeComments:
    def test_no_comments_skips_call(self, scripted_client: Callable[..., Any]) -> None:
        client = scripted_client()
        assert client.summarize_comments("T", "A", "abc", ["", "  "], 0) is None
        assert client.calls == []

    def test_digest(self, scripted_client: Callable[..., Any]) -> None:
        client = scripted_client(["- people liked it"])
        digest = client.summarize_comments("T", "A", "abc", ["great", "nice"], 2)
        assert digest == "- people liked it"
        prompt = client.calls[0]["prompt"]
        assert "- great" in prompt
        assert "Comments analyzed: 2" in prompt


class TestFactCheck:
    def test_web_search_when_supported(
        self, scripted_client: Callable[..., Any]
    ) -> None:
        client = scripted_client(["checked"], web_search=True)
        client.fact_check("Summary", "T", "A", "abc")
        assert client.calls[0]["web_search"] is True
        assert "using web search" in client.calls[0]["prompt"]

    def test_knowledge_base_otherwise(
        self, scripted_client: Callable[..., Any]
    ) -> None:
        client = scripted_client(["checked"], web_search=False)
        client.fact_check("Summary", "T", "A", "abc")
        assert client.calls[0]["web_search"] is False
        assert "general knowledge base" in client.calls[0]["prompt"]
