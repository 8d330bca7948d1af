"""Tests for watch-page value extraction."""

from tubedigest.captions.scrape import (
    extract_caption_base_url,
    extract_innertube_api_key,
    extract_transcript_params,
    extract_visitor_data,
)

WATCH_PAGE = (
    '<html><script>var ytcfg = {"INNERTUBE_API_KEY":"AIzaTestKey",'
    '"VISITOR_DATA":"CgtWaXNpdG9y%3D%3D"};</script>'
    '<script>var ytInitialPlayerResponse = {"captions":'
    '{"playerCaptionsTracklistRenderer":{"captionTracks":['
    '{"baseUrl":"https://www.youtube.com/api/timedtext'
    '?v\\u003dabc\\u0026lang\\u003den","languageCode":"en"},'
    '{"baseUrl":"https://www.youtube.com/api/timedtext?v=abc&lang=de",'
    '"languageCode":"de"}'
    "]}}};</script>"
    '<script>{"engagementPanels":[{"continuation":{"getTranscriptEndpoint":'
    '{"params":"CgtkUVc0dzlXZ1hjUQ%3D%3D"}}}]}</script></html>'
)


class TestExtractTranscriptParams:
    def test_found(self) -> None:
        assert extract_transcript_params(WATCH_PAGE) == "CgtkUVc0dzlXZ1hjUQ%3D%3D"

    def test_missing(self) -> None:
        assert extract_transcript_params("<html></html>") is None
        assert extract_transcript_params(None) is None


class TestExtractCaptionBaseUrl:
    def test_first_track_unescaped(self) -> None:
        assert (
            extract_caption_base_url(WATCH_PAGE)
            == "https://www.youtube.com/api/timedtext?v=abc&lang=en"
        )

    def test_base_url_outside_caption_tracks_ignored(self) -> None:
        page = '{"baseUrl":"https://example.com/other"}'
        assert extract_caption_base_url(page) is None

    def test_empty_track_list(self) -> None:
        assert extract_caption_base_url('{"captionTracks":[]}') is None


class TestExtractConfigValues:
    def test_api_key(self) -> None:
        assert extract_innertube_api_key(WATCH_PAGE) == "AIzaTestKey"

    def test_visitor_data(self) -> None:
        assert extract_visitor_data(WATCH_PAGE) == "CgtWaXNpdG9y%3D%3D"

    def test_missing(self) -> None:
        assert extract_innertube_api_key("<html>") is None
        assert extract_visitor_data("") is None
