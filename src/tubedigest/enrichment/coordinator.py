"""Background enrichment of a pushed summary with comments and a fact check."""

import logging
import threading
import time
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor, wait

from tubedigest.config import EnrichmentConfig
from tubedigest.enrichment.comments import CommentsProvider
from tubedigest.enrichment.document import SummaryDocument
from tubedigest.errors import EmptyResponseError, TransportError, TubedigestError
from tubedigest.llm.base import ModelClient
from tubedigest.models import SummaryRequest
from tubedigest.output.formatting import beautify

logger = logging.getLogger(__name__)

SUMMARY_TITLE = "🧠 AI Summary"

Sink = Callable[[str, str], None]


def fact_check_placeholder(model: str, reason: str) -> str:
    return f"Fact check unavailable (model: {model}): {reason}"


class EnrichmentCoordinator:
    """Runs the comments digest and the fact check after the main summary.

    The main summary is pushed to the sink immediately. Each stage then
    writes its own slot of the document and pushes the recomposed whole,
    so the sink always receives the full text in the fixed section order.
    Pushes are serialized and render the slots at publish time, so the
    last push the sink sees is never older than an earlier one.
    """

    def __init__(
        self,
        client: ModelClient,
        comments_provider: CommentsProvider | None,
        config: EnrichmentConfig | None = None,
        executor: ThreadPoolExecutor | None = None,
        sleep: Callable[[float], None] = time.sleep,
        format_output: bool = True,
    ) -> None:
        self.client = client
        self.comments_provider = comments_provider
        self.config = config or EnrichmentConfig()
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=max(1, self.config.max_workers),
            thread_name_prefix="enrichment",
        )
        self._sleep = sleep
        self._format_output = format_output
        self._publish_lock = threading.Lock()

    def start(
        self,
        document: SummaryDocument,
        request: SummaryRequest,
        sink: Sink,
    ) -> list[Future[None]]:
        """Push the main summary and submit the enabled stages."""
        self._push(document, sink)

        futures: list[Future[None]] = []
        provider = self.comments_provider
        if self.config.comments_enabled and provider is not None:
            futures.append(
                self._executor.submit(
                    self._comments_stage, provider, document, request, sink
                )
            )
        if self.config.fact_check_enabled:
            futures.append(
                self._executor.submit(self._fact_check_stage, document, request, sink)
            )
        logger.debug(
            "Started %d enrichment stages for %s", len(futures), request.video_id
        )
        return futures

    def run(
        self,
        document: SummaryDocument,
        request: SummaryRequest,
        sink: Sink,
    ) -> str:
        """Run all stages to completion and return the final rendering.

        An exception escaping a stage, such as a failing sink, is re-raised
        once every stage has finished.
        """
        futures = self.start(document, request, sink)
        wait(futures)
        for future in futures:
            future.result()
        return self._render(document)

    def shutdown(self) -> None:
        if self._owns_executor:
            self._executor.shutdown(wait=True)

    def _render(self, document: SummaryDocument) -> str:
        text = document.render()
        return beautify(text) if self._format_output else text

    def _push(self, document: SummaryDocument, sink: Sink) -> None:
        with self._publish_lock:
            sink(SUMMARY_TITLE, self._render(document))

    def _comments_stage(
        self,
        provider: CommentsProvider,
        document: SummaryDocument,
        request: SummaryRequest,
        sink: Sink,
    ) -> None:
        try:
            comments = provider.fetch_comments(
                request.video_id, self.config.comments_max
            )
            if not comments:
                logger.debug("No comments for %s", request.video_id)
                return
            digest = self.client.summarize_comments(
                request.title,
                request.author,
                request.video_id,
                comments,
                len(comments),
                self.config.comment_char_cap,
            )
        except Exception:
            logger.exception("Comments digest failed for %s", request.video_id)
            return

        if not digest:
            return
        document.update(document.comments, digest)
        self._push(document, sink)
        logger.info("Comments digest added for %s", request.video_id)

    def _fact_check_stage(
        self, document: SummaryDocument, request: SummaryRequest, sink: Sink
    ) -> None:
        delay = self.config.fact_check_delay_seconds
        if delay > 0:
            self._sleep(delay)

        summary = document.main.get() or ""
        try:
            outcome = self.client.fact_check(
                summary, request.title, request.author, request.video_id
            )
            result = outcome.text
            logger.info(
                "Fact check for %s by %s (%s tokens)",
                request.video_id,
                outcome.model_used,
                outcome.total_tokens,
            )
        except EmptyResponseError as e:
            logger.warning("Fact check returned no text from %s", e.model)
            result = fact_check_placeholder(e.model, e.reason)
        except TransportError as e:
            model = e.model or self.client.active_model
            logger.warning("Fact check by %s failed: %s", model, e.reason)
            result = fact_check_placeholder(model, e.reason)
        except TubedigestError as e:
            logger.warning("Fact check failed for %s: %s", request.video_id, e.reason)
            result = fact_check_placeholder(self.client.active_model, e.reason)
        except Exception as e:
            logger.exception("Fact check crashed for %s", request.video_id)
            result = fact_check_placeholder(self.client.active_model, str(e))

        document.update(document.fact_check, result)
        self._push(document, sink)
