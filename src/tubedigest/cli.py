"""CLI commands for tubedigest."""

from __future__ import annotations

import logging
import re
from typing import Annotated
from urllib.parse import parse_qs, urlparse

import typer
from rich.console import Console
from rich.logging import RichHandler

from tubedigest.config import TubedigestConfig, load_config, set_config_value
from tubedigest.errors import TubedigestError

app = typer.Typer(
    name="tubedigest",
    help="Summarize YouTube videos with transcripts, comments and fact checks.",
    no_args_is_help=True,
)
config_app = typer.Typer(help="Manage configuration.")
app.add_typer(config_app, name="config")

console = Console()
logger = logging.getLogger(__name__)

_VIDEO_ID_PATTERNS = [
    re.compile(r"(?:youtube\.com/watch\?.*v=|youtu\.be/)([a-zA-Z0-9_-]{11})"),
    re.compile(r"youtube\.com/(?:embed|shorts|live)/([a-zA-Z0-9_-]{11})"),
]
_BARE_ID_RE = re.compile(r"^[a-zA-Z0-9_-]{11}$")
_TIME_RE = re.compile(r"^(?:(\d+)h)?(?:(\d+)m)?(?:(\d+)s?)?$")


def extract_video_id(value: str) -> str | None:
    """Extract the video ID from a YouTube URL or a bare 11-character ID.

    Supports watch, shorts, embed, live, and youtu.be URLs.
    """
    value = value.strip()
    if _BARE_ID_RE.match(value):
        return value
    for pattern in _VIDEO_ID_PATTERNS:
        match = pattern.search(value)
        if match:
            return match.group(1)
    return None


def parse_start_time(value: str) -> int:
    """Seconds from a ``t=``/``start=`` URL parameter (``90``, ``1m30s``, ``1h2m``)."""
    query = parse_qs(urlparse(value).query)
    raw = (query.get("t") or query.get("start") or [""])[0].strip().lower()
    if not raw:
        return 0
    match = _TIME_RE.match(raw)
    if not match:
        return 0
    hours, minutes, seconds = (int(g) if g else 0 for g in match.groups())
    return hours * 3600 + minutes * 60 + seconds


def _get_config() -> TubedigestConfig:
    return load_config()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
    )


@app.callback()
def main(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Enable debug logging")
    ] = False,
) -> None:
    """Summarize YouTube videos with transcripts, comments and fact checks."""
    _setup_logging(verbose or _get_config().general.debug_logging)


def _print_summary(title: str, body: str) -> None:
    console.rule(f"[bold]{title}[/bold]")
    console.print(body, markup=False, highlight=False)


@app.command()
def summarize(
    video: Annotated[str, typer.Argument(help="YouTube video URL or ID")],
    detail: Annotated[
        str | None,
        typer.Option(
            "--detail", "-d", help="Detail level: concise, moderate, detailed"
        ),
    ] = None,
    mode: Annotated[
        str | None,
        typer.Option("--mode", "-m", help="Summary mode: url, transcript"),
    ] = None,
    start: Annotated[
        int | None,
        typer.Option("--start", help="Start offset in seconds (URL mode)"),
    ] = None,
    title: Annotated[str, typer.Option("--title", "-t", help="Video title")] = "",
    author: Annotated[str, typer.Option("--author", "-a", help="Channel name")] = "",
    no_enrich: Annotated[
        bool,
        typer.Option("--no-enrich", help="Skip comments digest and fact check"),
    ] = False,
    email: Annotated[
        bool, typer.Option("--email", help="Email the final summary")
    ] = False,
) -> None:
    """Summarize a YouTube video."""
    from tubedigest.captions.chain import TranscriptChain
    from tubedigest.captions.innertube import InnerTubeClient
    from tubedigest.enrichment.comments import YouTubeDataCommentsProvider
    from tubedigest.enrichment.coordinator import SUMMARY_TITLE, EnrichmentCoordinator
    from tubedigest.enrichment.document import SummaryDocument
    from tubedigest.llm.factory import create_client
    from tubedigest.models import DetailLevel, SummaryRequest
    from tubedigest.output.formatting import beautify
    from tubedigest.summary.orchestrator import Summarizer, build_watch_url

    config = _get_config()

    video_id = extract_video_id(video)
    if not video_id:
        console.print("[red]Invalid YouTube URL or video ID.[/red]")
        raise typer.Exit(1)
    start_seconds = start if start is not None else parse_start_time(video)

    client = create_client(config.ai)
    innertube = InnerTubeClient(language=config.general.preferred_language)
    chain = TranscriptChain(
        innertube,
        max_chars=config.general.max_transcript_chars,
        language=config.general.preferred_language,
        debug=logging.getLogger().isEnabledFor(logging.DEBUG),
    )
    summarizer = Summarizer(client, chain, config)

    console.print(f"[bold]Summarizing {video_id} with {client.name}...[/bold]")
    try:
        text = summarizer.summarize(
            title,
            author,
            video_id,
            detail_level=detail or config.general.detail_level,
            start_time_seconds=start_seconds,
            forced_mode=mode,
        )
    except TubedigestError as e:
        console.print(f"[red]Summary failed: {e.reason}[/red]")
        raise typer.Exit(1) from e
    finally:
        innertube.close()

    final = beautify(text)
    if no_enrich or not client.is_configured():
        _print_summary(SUMMARY_TITLE, final)
    else:
        request = SummaryRequest(
            title=title,
            author=author,
            video_id=video_id,
            detail_level=DetailLevel.parse(detail or config.general.detail_level),
            start_time_seconds=start_seconds,
        )
        coordinator = EnrichmentCoordinator(
            client,
            YouTubeDataCommentsProvider(config.enrichment.youtube_api_key),
            config.enrichment,
        )
        try:
            final = coordinator.run(SummaryDocument(text), request, _print_summary)
        finally:
            coordinator.shutdown()

    if email or config.email.enabled:
        from tubedigest.output.email import send_summary_email

        try:
            send_summary_email(
                title or video_id,
                final,
                to=config.email.to,
                from_addr=config.email.from_addr,
                video_url=build_watch_url(video_id, start_seconds),
            )
        except Exception as e:
            console.print(f"[red]Failed to send email: {e}[/red]")
            raise typer.Exit(1) from e
        console.print(f"[green]Summary emailed to {config.email.to}[/green]")


@app.command()
def transcript(
    video: Annotated[str, typer.Argument(help="YouTube video URL or ID")],
    language: Annotated[
        str | None,
        typer.Option("--language", "-l", help="Preferred caption language"),
    ] = None,
    max_chars: Annotated[
        int | None,
        typer.Option("--max-chars", help="Truncate the transcript (0 = unlimited)"),
    ] = None,
) -> None:
    """Fetch and print a video's transcript."""
    from tubedigest.captions.chain import TranscriptChain
    from tubedigest.captions.innertube import InnerTubeClient

    config = _get_config()

    video_id = extract_video_id(video)
    if not video_id:
        console.print("[red]Invalid YouTube URL or video ID.[/red]")
        raise typer.Exit(1)

    preferred = language or config.general.preferred_language
    innertube = InnerTubeClient(language=preferred)
    chain = TranscriptChain(
        innertube,
        max_chars=(
            max_chars if max_chars is not None else config.general.max_transcript_chars
        ),
        language=preferred,
        debug=logging.getLogger().isEnabledFor(logging.DEBUG),
    )
    try:
        result = chain.fetch(video_id, preferred)
    finally:
        innertube.close()

    if not result.found:
        console.print("[yellow]No transcript available for this video.[/yellow]")
        raise typer.Exit(1)

    console.print(f"[bold cyan]{result.source.label}[/bold cyan]")
    console.print(result.text, markup=False, highlight=False)


@config_app.command("show")
def config_show() -> None:
    """Show current configuration."""
    config = _get_config()
    console.print("[bold]Current Configuration[/bold]\n")

    sections = {
        "general": config.general,
        "ai": config.ai,
        "enrichment": config.enrichment,
        "email": config.email,
    }

    for name, section in sections.items():
        console.print(f"[bold cyan]\\[{name}][/bold cyan]")
        for key, value in section.__dict__.items():
            if key.endswith("api_key") and value:
                value = "****"
            console.print(f"  {key} = {value}", markup=False)
        console.print()


@config_app.command("set")
def config_set(
    key: Annotated[str, typer.Argument(help="Config key (e.g., ai.provider)")],
    value: Annotated[str, typer.Argument(help="Value to set")],
) -> None:
    """Set a configuration value."""
    try:
        set_config_value(key, value)
        console.print(f"[green]Set {key} = {value}[/green]")
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1) from e
