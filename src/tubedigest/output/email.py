"""Summary delivery by email via the Resend API."""

import logging
import os
import time

import httpx

from tubedigest.output import html as html_out

logger = logging.getLogger(__name__)

_RESEND_URL = "https://api.resend.com/emails"
# Waits between delivery attempts; one more attempt follows the last wait.
_BACKOFF_SECONDS = (2.0, 4.0)


def send_summary_email(
    title: str,
    body: str,
    to: str,
    from_addr: str,
    video_url: str | None = None,
) -> None:
    """Send a rendered summary as an HTML email via the Resend API.

    Args:
        title: Video title, used as the subject.
        body: Summary text (Markdown).
        to: Recipient email address.
        from_addr: Sender address (e.g. ``tubedigest <tubedigest@resend.dev>``).
        video_url: Optional watch URL linked at the top of the email.

    Raises:
        ValueError: If ``to`` is empty or ``RESEND_API_KEY`` is not set.
        httpx.HTTPStatusError: On non-retryable API errors.
    """
    api_key = os.environ.get("RESEND_API_KEY", "")
    if not api_key:
        msg = "RESEND_API_KEY environment variable is not set"
        raise ValueError(msg)
    if not to:
        msg = "Recipient email address is required"
        raise ValueError(msg)

    subject = f"Summary: {title}" if title else "Video summary"
    payload: dict[str, object] = {
        "from": from_addr,
        "to": [to],
        "subject": subject,
        "html": html_out.render(title, body, video_url),
        "text": f"{body}\n\n{video_url}" if video_url else body,
    }
    headers = {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
    }

    _deliver(payload, headers, to)
    logger.info("Summary email sent to %s: %s", to, subject)


def _deliver(
    payload: dict[str, object],
    headers: dict[str, str],
    recipient: str,
) -> None:
    """POST the summary to Resend, backing off while it answers 5xx."""
    for delay in (*_BACKOFF_SECONDS, None):
        response = httpx.post(_RESEND_URL, json=payload, headers=headers, timeout=30.0)
        if response.status_code < 500 or delay is None:
            response.raise_for_status()
            return
        logger.warning(
            "Summary email to %s not accepted (HTTP %d), retrying in %.0fs",
            recipient,
            response.status_code,
            delay,
        )
        time.sleep(delay)
