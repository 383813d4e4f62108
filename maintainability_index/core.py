"""
Core analysis logic for Maintainability Index.
"""

import asyncio
from datetime import datetime

from dotenv import load_dotenv
from rich.console import Console

from maintainability_index.http_client import close_async_http_client
from maintainability_index.llm.analyzer import augment_report_async
from maintainability_index.llm.client import AIBackend
from maintainability_index.models import MaintainabilityReport, RepositorySnapshot
from maintainability_index.scoring import build_report
from maintainability_index.vcs import get_vcs_provider

# Load environment variables from .env file
load_dotenv()
console = Console(stderr=True)


async def analyze_snapshot_async(
    snapshot: RepositorySnapshot,
    backend: AIBackend | None = None,
    now: datetime | None = None,
    parallel: bool = False,
    timeout: float | None = None,
) -> MaintainabilityReport:
    """Score a snapshot and, if a backend is given, augment the report."""
    report = build_report(snapshot, now=now, parallel=parallel)
    if backend is None:
        return report
    console.print("[dim]Requesting AI analysis...[/dim]")
    return await augment_report_async(report, snapshot, backend, timeout)


def analyze_snapshot(
    snapshot: RepositorySnapshot,
    backend: AIBackend | None = None,
    now: datetime | None = None,
    parallel: bool = False,
    timeout: float | None = None,
) -> MaintainabilityReport:
    """
    Analyze an already-fetched snapshot.

    Args:
        snapshot: Repository facts.
        backend: Optional AI backend; None skips augmentation.
        now: Reference time for recency metrics (defaults to now, UTC).
        parallel: Run metric calculators on a thread pool.
        timeout: Per-request AI timeout in seconds.

    Returns:
        The finished MaintainabilityReport.
    """
    if backend is None:
        return build_report(snapshot, now=now, parallel=parallel)

    async def _run() -> MaintainabilityReport:
        try:
            return await analyze_snapshot_async(snapshot, backend, now, parallel, timeout)
        finally:
            await close_async_http_client()

    return asyncio.run(_run())


async def analyze_repository_async(
    owner: str,
    name: str,
    token: str | None = None,
    backend: AIBackend | None = None,
    now: datetime | None = None,
    parallel: bool = False,
    timeout: float | None = None,
    platform: str = "github",
) -> MaintainabilityReport:
    """
    Fetch a repository snapshot and analyze it.

    Raises:
        ValueError: If GITHUB_TOKEN is not set or the repository is not found
        httpx.HTTPStatusError: If GitHub API returns an error
    """
    console.print(f"Analyzing [bold cyan]{owner}/{name}[/bold cyan]...")

    provider = get_vcs_provider(platform, token=token)
    snapshot = await provider.get_snapshot(owner, name)
    console.print(
        f"[dim]Fetched {len(snapshot.commits)} commits, "
        f"{len(snapshot.branches)} branches, "
        f"{len(snapshot.contributors)} contributors[/dim]"
    )

    return await analyze_snapshot_async(snapshot, backend, now, parallel, timeout)


def analyze_repository(
    owner: str,
    name: str,
    token: str | None = None,
    backend: AIBackend | None = None,
    now: datetime | None = None,
    parallel: bool = False,
    timeout: float | None = None,
) -> MaintainabilityReport:
    """
    Performs a full maintainability analysis on a given repository.

    Queries GitHub for a repository snapshot, runs the six metric
    calculators, aggregates the weighted score and rating, and optionally
    enriches the report with AI analysis. AI failures never fail the run.

    Args:
        owner: GitHub repository owner (username or organization)
        name: GitHub repository name
        token: GitHub token (defaults to GITHUB_TOKEN)
        backend: Optional AI backend
        now: Reference time for recency metrics
        parallel: Run metric calculators on a thread pool
        timeout: Per-request AI timeout in seconds

    Returns:
        MaintainabilityReport for the repository

    Raises:
        ValueError: If GITHUB_TOKEN is not set or the repository is not found
        httpx.HTTPStatusError: If GitHub API returns an error
    """

    async def _run() -> MaintainabilityReport:
        try:
            return await analyze_repository_async(
                owner, name, token, backend, now, parallel, timeout
            )
        finally:
            await close_async_http_client()

    return asyncio.run(_run())
