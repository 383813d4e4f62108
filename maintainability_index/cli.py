"""
Command-line interface for Maintainability Index.
"""

import re
from enum import Enum
from pathlib import Path

import httpx
import typer
from rich.console import Console
from rich.markup import escape

from maintainability_index import __version__, core, scoring
from maintainability_index.config import (
    load_threshold_overrides,
    set_config_path,
    set_llm_model,
    set_llm_timeout,
    set_verify_ssl,
)
from maintainability_index.core import analyze_repository
from maintainability_index.formatters import display_report, format_json
from maintainability_index.llm import analyzer
from maintainability_index.llm.client import LLMClient

# --- Typer App ---
app = typer.Typer(help="Score the maintainability of a GitHub repository.")
console = Console()
err_console = Console(stderr=True)

_REPOSITORY_PATTERN = re.compile(
    r"^(?:https?://github\.com/)?(?P<owner>[\w.-]+)/(?P<name>[\w.-]+?)(?:\.git)?/?$"
)


class OutputFormat(str, Enum):
    text = "text"
    json = "json"


def parse_repository(value: str) -> tuple[str, str]:
    """
    Split ``owner/repo`` (or a github.com URL) into owner and name.

    Raises:
        ValueError: If the value is not a repository reference.
    """
    match = _REPOSITORY_PATTERN.match(value.strip())
    if not match:
        raise ValueError(
            f"Invalid repository '{value}'. Expected OWNER/REPO or a GitHub URL."
        )
    return match.group("owner"), match.group("name")


def _set_quiet(quiet: bool) -> None:
    """Silence progress and warning output on stderr."""
    for diagnostics in (core.console, scoring.console, analyzer.console):
        diagnostics.quiet = quiet


@app.command()
def analyze(
    repository: str = typer.Argument(
        ...,
        help="Repository to analyze, as OWNER/REPO or a GitHub URL.",
    ),
    token: str | None = typer.Option(
        None,
        "--token",
        "-t",
        help="GitHub token (defaults to the GITHUB_TOKEN environment variable).",
    ),
    output_format: OutputFormat = typer.Option(
        OutputFormat.text,
        "--format",
        "-f",
        help="Output format.",
    ),
    llm: bool = typer.Option(
        False,
        "--llm",
        "-l",
        help="Add AI analysis (requires OPENROUTER_API_KEY).",
    ),
    model: str | None = typer.Option(
        None,
        "--model",
        "-m",
        help="LLM model identifier (defaults to OPENROUTER_MODEL or the configured model).",
    ),
    timeout: float | None = typer.Option(
        None,
        "--timeout",
        help="Per-request timeout for AI analysis, in seconds.",
    ),
    parallel: bool = typer.Option(
        False,
        "--parallel",
        help="Run metric calculators in parallel.",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Only print the report.",
    ),
    insecure: bool = typer.Option(
        False,
        "--insecure",
        help="Disable SSL certificate verification for HTTPS requests.",
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        help="Path to a TOML file with a [tool.maintainability-index] table.",
    ),
):
    """Analyze the maintainability of a GitHub repository."""
    set_verify_ssl(not insecure)
    _set_quiet(quiet)

    try:
        owner, name = parse_repository(repository)
        set_config_path(config)
        load_threshold_overrides()
        set_llm_model(model)
        set_llm_timeout(timeout)
    except ValueError as e:
        err_console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from None

    backend = None
    if llm:
        try:
            backend = LLMClient(model=model)
        except ValueError as e:
            # AI analysis is optional; the deterministic report still runs
            if not quiet:
                err_console.print(
                    f"[yellow]⚠️  AI analysis skipped: {escape(str(e))}[/yellow]"
                )

    try:
        report = analyze_repository(
            owner,
            name,
            token=token,
            backend=backend,
            parallel=parallel,
            timeout=timeout,
        )
    except httpx.HTTPStatusError as e:
        err_console.print(f"[red]HTTP Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from None
    except httpx.HTTPError as e:
        err_console.print(f"[red]Network Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from None
    except ValueError as e:
        err_console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from None

    if output_format == OutputFormat.json:
        typer.echo(format_json(report))
    else:
        display_report(report, console)


@app.command()
def version():
    """Show the installed version."""
    console.print(f"maintainability-index {__version__}")


if __name__ == "__main__":
    app()
