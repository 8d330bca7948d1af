"""Tests for viewer comment providers."""

import httpx
import pytest
import respx

from tubedigest.enrichment.comments import (
    COMMENT_THREADS_URL,
    StaticCommentsProvider,
    YouTubeDataCommentsProvider,
)


def _thread(text: str) -> dict[str, object]:
    return {"snippet": {"topLevelComment": {"snippet": {"textOriginal": text}}}}


class TestYouTubeDataCommentsProvider:
    @respx.mock
    def test_fetch_comments(self) -> None:
        route = respx.get(url__startswith=COMMENT_THREADS_URL).mock(
            return_value=httpx.Response(
                200, json={"items": [_thread("Great video"), _thread("  ")]}
            )
        )
        provider = YouTubeDataCommentsProvider(api_key="yt-key")

        assert provider.fetch_comments("abc", 50) == ["Great video"]

        params = route.calls[0].request.url.params
        assert params["videoId"] == "abc"
        assert params["part"] == "snippet"
        assert params["order"] == "relevance"
        assert params["textFormat"] == "plainText"
        assert params["maxResults"] == "50"
        assert params["key"] == "yt-key"

    @respx.mock
    def test_paginates_up_to_limit(self) -> None:
        route = respx.get(url__startswith=COMMENT_THREADS_URL).mock(
            side_effect=[
                httpx.Response(
                    200,
                    json={
                        "items": [_thread(f"c{i}") for i in range(100)],
                        "nextPageToken": "page2",
                    },
                ),
                httpx.Response(
                    200, json={"items": [_thread(f"d{i}") for i in range(20)]}
                ),
            ]
        )
        provider = YouTubeDataCommentsProvider(api_key="k")

        comments = provider.fetch_comments("abc", 120)

        assert len(comments) == 120
        assert route.calls[0].request.url.params["maxResults"] == "100"
        second = route.calls[1].request.url.params
        assert second["pageToken"] == "page2"
        assert second["maxResults"] == "20"

    def test_missing_key(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("YOUTUBE_API_KEY", raising=False)
        assert YouTubeDataCommentsProvider().fetch_comments("abc", 10) == []

    @respx.mock
    def test_http_error_returns_empty(self) -> None:
        respx.get(url__startswith=COMMENT_THREADS_URL).mock(
            return_value=httpx.Response(403, json={"error": "commentsDisabled"})
        )
        assert YouTubeDataCommentsProvider(api_key="k").fetch_comments("abc", 10) == []


class TestStaticCommentsProvider:
    def test_limit_and_calls(self) -> None:
        provider = StaticCommentsProvider(["a", "b", "c"])
        assert provider.fetch_comments("abc", 2) == ["a", "b"]
        assert provider.calls == [("abc", 2)]
