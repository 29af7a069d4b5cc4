"""spoder CLI — fetch a page and print its visible text.

Usage:
    spoder fetch --help
    python spoder_cli/main.py fetch https://example.com/
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from spoder.xxx import ...`
# works when the CLI is invoked as `python spoder_cli/main.py`.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from typing import Dict, List, Optional

import typer

from spoder.config import Settings
from spoder.logging_utils import setup_logging
from spoder.output import CollectingSink, FileSink, PrintSink, categorize, drain
from spoder.scraper import FetchError, fetch_segments, parse_url

app = typer.Typer(
    name="spoder",
    help="Fetch a web page over HTTP(S) and print its text without markup.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback()
def main() -> None:
    """spoder command-line interface."""


def _fail(message: str) -> None:
    typer.echo(f"[ERROR]: {message}", err=True)
    raise typer.Exit(code=1)


def _emit_categories(groups: Dict[str, List[str]], sink, sort: bool) -> None:
    matches = {k: v for k, v in groups.items() if k != "text"}
    if sort:
        for category in sorted(matches):
            sink.write(f"[{category}]")
            drain(matches[category], sink)
        return
    for category, values in matches.items():
        drain((f"{category}: {value}" for value in values), sink)


@app.command("fetch")
def fetch(
    url: str = typer.Argument(..., help="http:// or https:// URL to fetch."),
    port: Optional[int] = typer.Option(
        None, "--port", "-p", min=0, max=65535,
        help="Port to connect to (default: 80 for http, 443 for https).",
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Write output to this file instead of stdout."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log connection details."),
    email: bool = typer.Option(False, "--email", "-e", help="Also search for email addresses."),
    tel: bool = typer.Option(False, "--tel", "-t", help="Also search for phone numbers."),
    sort: bool = typer.Option(
        False, "--sort", "-s", help="Group email/phone matches by category."
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", min=0.001, help="Per-operation network timeout in seconds."
    ),
) -> None:
    """Fetch URL and print every run of text between tags."""
    try:
        settings = Settings().with_overrides(
            request_timeout=timeout,
            log_level="DEBUG" if verbose else None,
        )
    except ValueError as exc:
        _fail(f"Invalid configuration: {exc}")
    setup_logging(settings.log_level)

    try:
        endpoint, path = parse_url(url, port)
    except ValueError as exc:
        _fail(str(exc))

    try:
        sink = FileSink(output) if output else PrintSink()
    except OSError as exc:
        _fail(f"Cannot open output file: {exc}")

    try:
        segments = fetch_segments(endpoint, path, settings=settings)
        if email or tel:
            collected = CollectingSink()
            drain(segments, collected)
            groups = categorize(collected.segments, emails=email, phones=tel)
            _emit_categories(groups, sink, sort)
        else:
            drain(segments, sink)
    except (FetchError, ValueError) as exc:
        _fail(str(exc))
    finally:
        sink.close()


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
