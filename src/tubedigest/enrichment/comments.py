"""Top-level viewer comments for the comments digest."""

import logging
import os
from collections.abc import Sequence
from typing import Protocol

import httpx

logger = logging.getLogger(__name__)

COMMENT_THREADS_URL = "https://www.googleapis.com/youtube/v3/commentThreads"
_PAGE_LIMIT = 100
_TIMEOUT = httpx.Timeout(12.0, connect=10.0)


class CommentsProvider(Protocol):
    def fetch_comments(self, video_id: str, limit: int) -> list[str]: ...


class YouTubeDataCommentsProvider:
    """Fetch comments through the YouTube Data API v3 ``commentThreads`` list.

    Comments are requested in relevance order as plain text. A missing API
    key or any request failure yields an empty list.
    """

    def __init__(
        self, api_key: str | None = None, http: httpx.Client | None = None
    ) -> None:
        self._api_key = (api_key or os.environ.get("YOUTUBE_API_KEY", "")).strip()
        self._http = http

    def fetch_comments(self, video_id: str, limit: int) -> list[str]:
        if not self._api_key:
            logger.info("YOUTUBE_API_KEY not set, skipping comments")
            return []
        if not video_id or limit <= 0:
            return []

        try:
            if self._http is not None:
                return self._collect(self._http, video_id, limit)
            with httpx.Client(timeout=_TIMEOUT) as client:
                return self._collect(client, video_id, limit)
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Could not fetch comments for %s: %s", video_id, e)
            return []

    def _collect(self, client: httpx.Client, video_id: str, limit: int) -> list[str]:
        comments: list[str] = []
        page_token: str | None = None
        while len(comments) < limit:
            params = {
                "part": "snippet",
                "videoId": video_id,
                "order": "relevance",
                "textFormat": "plainText",
                "maxResults": str(min(_PAGE_LIMIT, limit - len(comments))),
                "key": self._api_key,
            }
            if page_token:
                params["pageToken"] = page_token
            response = client.get(COMMENT_THREADS_URL, params=params)
            response.raise_for_status()
            data = response.json()

            for item in data.get("items") or []:
                text = (
                    item.get("snippet", {})
                    .get("topLevelComment", {})
                    .get("snippet", {})
                    .get("textOriginal")
                )
                if text and text.strip():
                    comments.append(text.strip())

            page_token = data.get("nextPageToken")
            if not page_token:
                break

        logger.debug("Fetched %d comments for %s", len(comments), video_id)
        return comments[:limit]


class StaticCommentsProvider:
    """Serves a fixed list of comments."""

    def __init__(self, comments: Sequence[str] = ()) -> None:
        self.comments = list(comments)
        self.calls: list[tuple[str, int]] = []

    def fetch_comments(self, video_id: str, limit: int) -> list[str]:
        self.calls.append((video_id, limit))
        return self.comments[:limit]
