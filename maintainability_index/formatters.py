"""
Text and JSON rendering of maintainability reports.
"""

import json
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from maintainability_index.metrics.base import MetricResult
from maintainability_index.models import AIAnalysis, MaintainabilityReport, Rating

BAR_WIDTH = 20

RATING_STYLES = {
    Rating.EXCELLENT: ("🏆", "green"),
    Rating.GOOD: ("✅", "green"),
    Rating.FAIR: ("⚠️", "yellow"),
    Rating.POOR: ("❌", "red"),
}

# Metrics scoring below this are listed as improvement areas
IMPROVEMENT_THRESHOLD = 80.0


# --- JSON ---


def _round(value: float) -> float:
    return round(float(value), 2)


def metric_to_dict(metric: MetricResult) -> dict[str, Any]:
    return {
        "name": metric.name,
        "score": _round(metric.score),
        "weight": metric.weight,
        "weightedScore": _round(metric.weighted_score),
        "description": metric.description,
        "details": metric.details,
    }


def llm_analysis_to_dict(analysis: AIAnalysis) -> dict[str, Any]:
    readme = analysis.readme
    commits = analysis.commits
    community = analysis.community
    return {
        "readme": (
            {
                "clarity": _round(readme.clarity),
                "completeness": _round(readme.completeness),
                "newcomerFriendly": _round(readme.newcomer_friendly),
                "strengths": list(readme.strengths),
                "suggestions": list(readme.suggestions),
            }
            if readme is not None
            else None
        ),
        "commits": (
            {
                "clarity": _round(commits.clarity),
                "consistency": _round(commits.consistency),
                "informativeness": _round(commits.informativeness),
                "patterns": list(commits.patterns),
            }
            if commits is not None
            else None
        ),
        "community": (
            {
                "responsiveness": _round(community.responsiveness),
                "helpfulness": _round(community.helpfulness),
                "tone": _round(community.tone),
                "strengths": list(community.strengths),
                "suggestions": list(community.suggestions),
            }
            if community is not None
            else None
        ),
        "recommendations": [
            {
                "title": rec.title,
                "description": rec.description,
                "impact": rec.impact.value,
                "confidence": _round(rec.confidence),
                "category": rec.category,
            }
            for rec in analysis.recommendations
        ],
        "tokensUsed": analysis.tokens_used,
        "confidence": _round(analysis.confidence),
        "model": analysis.model,
    }


def report_to_dict(report: MaintainabilityReport) -> dict[str, Any]:
    """
    Convert a report to a JSON-ready dict.

    Metrics keep the fixed calculation order; ``llmAnalysis`` is present only
    when the report carries an AI analysis.
    """
    data: dict[str, Any] = {
        "repository": report.full_name,
        "owner": report.owner,
        "name": report.name,
        "description": report.description,
        "url": report.url,
        "language": report.language,
        "overallScore": _round(report.overall_score),
        "rating": report.rating.value,
        "metrics": [metric_to_dict(metric) for metric in report.metrics],
        "recommendation": report.recommendation,
    }
    if report.llm_analysis is not None:
        data["llmAnalysis"] = llm_analysis_to_dict(report.llm_analysis)
    data["analyzedAt"] = report.analyzed_at.isoformat() if report.analyzed_at else None
    data["analysisVersion"] = report.analysis_version
    return data


def format_json(report: MaintainabilityReport) -> str:
    return json.dumps(report_to_dict(report), indent=2, ensure_ascii=False)


# --- Text ---


def score_color(score: float) -> str:
    if score >= 80:
        return "green"
    if score >= 60:
        return "yellow"
    return "red"


def score_indicator(score: float) -> str:
    if score >= 80:
        return "✅"
    if score >= 60:
        return "⚠️"
    return "❌"


def score_bar(score: float, width: int = BAR_WIDTH) -> str:
    """Render a 0-100 score as a fixed-width bar."""
    filled = round(max(0.0, min(100.0, score)) / 100 * width)
    return "█" * filled + "░" * (width - filled)


def improvement_priorities(metrics: tuple[MetricResult, ...]) -> list[MetricResult]:
    """Metrics below 80, ordered by how many overall points they leave on the table."""
    candidates = [metric for metric in metrics if metric.score < IMPROVEMENT_THRESHOLD]
    return sorted(
        candidates,
        key=lambda metric: metric.weight * (100.0 - metric.score),
        reverse=True,
    )


def _display_ai_analysis(analysis: AIAnalysis, console: Console) -> None:
    table = Table(title="🤖 AI Analysis", show_lines=False)
    table.add_column("Area", style="cyan", no_wrap=True)
    table.add_column("Aspect", justify="left")
    table.add_column("Score", justify="right")

    sections = (
        (
            "README",
            analysis.readme,
            ("Clarity", "Completeness", "Newcomer friendly"),
        ),
        (
            "Commits",
            analysis.commits,
            ("Clarity", "Consistency", "Informativeness"),
        ),
        (
            "Community",
            analysis.community,
            ("Responsiveness", "Helpfulness", "Tone"),
        ),
    )
    for area, sub_analysis, labels in sections:
        if sub_analysis is None:
            table.add_row(area, "[dim]unavailable[/dim]", "-")
            continue
        for label, score in zip(labels, sub_analysis.scores):
            color = score_color(score)
            table.add_row(area, label, f"[{color}]{score:.0f}[/{color}]")
            area = ""

    console.print(table)

    if analysis.readme is not None and analysis.readme.suggestions:
        console.print("\n[bold]README suggestions:[/bold]")
        for suggestion in analysis.readme.suggestions:
            console.print(f"  • {escape(suggestion)}")

    if analysis.commits is not None and analysis.commits.patterns:
        console.print("\n[bold]Commit patterns:[/bold]")
        for pattern in analysis.commits.patterns:
            console.print(f"  • {escape(pattern)}")

    if analysis.community is not None and analysis.community.suggestions:
        console.print("\n[bold]Community suggestions:[/bold]")
        for suggestion in analysis.community.suggestions:
            console.print(f"  • {escape(suggestion)}")

    if analysis.recommendations:
        console.print("\n[bold]AI recommendations:[/bold]")
        for rec in analysis.recommendations:
            console.print(
                f"  {escape(f'[{rec.impact.value}]')} {escape(rec.title)} "
                f"[dim]({escape(rec.category)}, confidence {rec.confidence:.0f}%)[/dim]"
            )
            if rec.description:
                console.print(f"      {escape(rec.description)}")

    console.print(
        f"\n[dim]Model: {escape(analysis.model or 'unknown')} • "
        f"Confidence: {analysis.confidence:.0f}% • "
        f"Tokens used: {analysis.tokens_used}[/dim]"
    )


def display_report(report: MaintainabilityReport, console: Console) -> None:
    """Display a report with rich tables and panels."""
    emoji, color = RATING_STYLES[report.rating]

    header = f"[bold cyan]{escape(report.full_name)}[/bold cyan]"
    if report.description:
        header += f"\n{escape(report.description)}"
    if report.language:
        header += f"\n[dim]Language: {escape(report.language)}[/dim]"
    header += (
        f"\n\nOverall score: [{color}]{report.overall_score:.2f}/100[/{color}] "
        f"{score_bar(report.overall_score)}"
        f"\nRating: {emoji} [bold {color}]{report.rating.value}[/bold {color}]"
    )
    console.print(Panel(header, title="Repository Maintainability Report"))

    table = Table(title="Metrics")
    table.add_column("", justify="center")
    table.add_column("Metric", justify="left", style="cyan", no_wrap=True)
    table.add_column("Score", justify="right")
    table.add_column("", justify="left", no_wrap=True)
    table.add_column("Weight", justify="right")
    table.add_column("Weighted", justify="right")
    table.add_column("Details", justify="left")

    for metric in report.metrics:
        metric_color = score_color(metric.score)
        table.add_row(
            score_indicator(metric.score),
            metric.name,
            f"[{metric_color}]{metric.score:.2f}[/{metric_color}]",
            f"[{metric_color}]{score_bar(metric.score, 10)}[/{metric_color}]",
            f"{metric.weight:.0%}",
            f"{metric.weighted_score:.2f}",
            escape(metric.details),
        )

    console.print(table)
    console.print(f"\n💡 [bold]Recommendation:[/bold] {escape(report.recommendation)}")

    priorities = improvement_priorities(report.metrics)
    if priorities:
        console.print("\n[bold]Improvement priorities:[/bold]")
        for index, metric in enumerate(priorities, start=1):
            gain = metric.weight * (100.0 - metric.score)
            console.print(
                f"  {index}. {metric.name} "
                f"[dim](up to +{gain:.2f} points)[/dim] - {escape(metric.details)}"
            )

    if report.llm_analysis is not None:
        console.print()
        _display_ai_analysis(report.llm_analysis, console)
