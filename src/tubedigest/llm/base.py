"""Abstract base class for model client backends and the model fallback policy."""

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import httpx

from tubedigest.errors import EmptyResponseError, TransportError
from tubedigest.models import ModelCallOutcome
from tubedigest.summary.prompts import (
    DEFAULT_COMMENT_CHAR_CAP,
    build_comments_prompt,
    build_fact_check_prompt,
)

logger = logging.getLogger(__name__)

AUTO = "auto"
# Fast model path vs. fallback model and chunked summarization.
FAST_TIMEOUT = httpx.Timeout(30.0, connect=10.0)
SLOW_TIMEOUT = httpx.Timeout(90.0, connect=30.0)


@dataclass(frozen=True)
class ModelSelection:
    """A user model preference: ``"auto"`` or an explicit model id."""

    preference: str
    fast_model: str
    fallback_model: str

    @property
    def is_auto(self) -> bool:
        return not self.preference or self.preference.lower() == AUTO

    @property
    def active_model(self) -> str:
        return self.fast_model if self.is_auto else self.preference


class ModelClient(ABC):
    """Capability interface shared by all provider backends.

    ``generate`` is the raw transport call. Everything else goes through
    :meth:`_call`, which applies the model selection policy: ``"auto"`` tries
    the fast model and retries once on the fallback model after a
    ``TransportError``; an explicit model is called once and its failure
    propagates.
    """

    name: str = ""
    supports_url_mode: bool = False
    supports_web_search: bool = False
    fast_model: str = ""
    fallback_model: str = ""

    def __init__(self, api_key: str | None, model: str = AUTO) -> None:
        self._api_key = (api_key or "").strip()
        self.selection = ModelSelection(
            preference=self.resolve_model(model or AUTO),
            fast_model=self.fast_model,
            fallback_model=self.fallback_model,
        )

    def is_configured(self) -> bool:
        return bool(self._api_key)

    @property
    def active_model(self) -> str:
        return self.selection.active_model

    def resolve_model(self, model: str) -> str:
        """Map a configured model name to a provider model id."""
        return model.strip()

    @abstractmethod
    def generate(
        self,
        prompt: str,
        *,
        model: str,
        video_url: str | None = None,
        web_search: bool = False,
        timeout: httpx.Timeout = FAST_TIMEOUT,
    ) -> ModelCallOutcome:
        """Make one model call.

        Raises:
            TransportError: On a non-2xx response or a network failure.
            EmptyResponseError: When the response carries no text.
            UnsupportedModeError: When ``video_url`` or ``web_search`` is
                requested from a backend without that capability.
        """
        ...

    def _call(
        self,
        prompt: str,
        *,
        video_url: str | None = None,
        web_search: bool = False,
        patient: bool = False,
    ) -> ModelCallOutcome:
        selection = self.selection
        if not selection.is_auto:
            return self.generate(
                prompt,
                model=selection.preference,
                video_url=video_url,
                web_search=web_search,
                timeout=SLOW_TIMEOUT if patient else FAST_TIMEOUT,
            )

        try:
            return self.generate(
                prompt,
                model=selection.fast_model,
                video_url=video_url,
                web_search=web_search,
                timeout=SLOW_TIMEOUT if patient else FAST_TIMEOUT,
            )
        except TransportError as e:
            logger.warning(
                "%s call to %s failed (%s), retrying with %s",
                self.name,
                selection.fast_model,
                e.reason,
                selection.fallback_model,
            )
        return self.generate(
            prompt,
            model=selection.fallback_model,
            video_url=video_url,
            web_search=web_search,
            timeout=SLOW_TIMEOUT,
        )

    def summarize(
        self,
        prompt: str,
        video_url: str | None = None,
        patient: bool = False,
    ) -> ModelCallOutcome:
        """Summarize ``prompt``; with ``video_url`` the model watches the video."""
        return self._call(prompt, video_url=video_url, patient=patient)

    def summarize_comments(
        self,
        title: str,
        author: str,
        video_id: str,
        comments: Sequence[str],
        analyzed_count: int,
        per_comment_cap: int = DEFAULT_COMMENT_CHAR_CAP,
    ) -> str | None:
        """Digest viewer comments; ``None`` when there are no usable comments."""
        prompt = build_comments_prompt(
            title, author, video_id, comments, analyzed_count, per_comment_cap
        )
        if prompt is None:
            return None
        outcome = self._call(prompt)
        return outcome.text or None

    def fact_check(
        self, summary: str, title: str, author: str, video_id: str
    ) -> ModelCallOutcome:
        """Fact-check a summary; web-search backed where the backend supports it."""
        prompt = build_fact_check_prompt(
            summary, title, author, web_search=self.supports_web_search
        )
        logger.info("Fact-checking summary of %s with %s", video_id, self.name)
        return self._call(prompt, web_search=self.supports_web_search)


def require_text(text: str | None, model: str) -> str:
    """Return ``text`` stripped, raising ``EmptyResponseError`` when blank."""
    if not text or not text.strip():
        raise EmptyResponseError(model)
    return text.strip()


def optional_int(value: object) -> int | None:
    return value if isinstance(value, int) and not isinstance(value, bool) else None


def as_dict(value: object) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def first_item(value: object) -> dict[str, Any]:
    """First element of a JSON array when it is an object, else ``{}``."""
    if isinstance(value, list) and value:
        return as_dict(value[0])
    return {}


def read_json(response: httpx.Response, backend: str, model: str) -> dict[str, Any]:
    """Decode a 2xx response body, raising ``TransportError`` on non-JSON."""
    try:
        data = response.json()
    except ValueError as e:
        msg = f"{backend} returned a non-JSON body from {model}"
        raise TransportError(
            msg, response.status_code, response.text, model
        ) from e
    if not isinstance(data, dict):
        msg = f"{backend} returned unexpected JSON from {model}"
        raise TransportError(msg, response.status_code, response.text, model)
    return data
