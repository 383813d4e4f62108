"""Documentation presence metric."""

from datetime import datetime

from maintainability_index.metrics.base import (
    MetricResult,
    MetricSpec,
    clamp_score,
    incomplete_metric,
)
from maintainability_index.models import RepositorySnapshot
from maintainability_index.thresholds import DocumentationThresholds, get_thresholds

NAME = "Documentation"
DESCRIPTION = "Evaluates the presence of essential documentation files"


def _canonical_stem(file_name: str, thresholds: DocumentationThresholds) -> str | None:
    """Map a top-level file name to a canonical documentation stem, if any."""
    lowered = file_name.strip().lower()
    for extension in sorted(thresholds.extensions, key=len, reverse=True):
        if extension and not lowered.endswith(extension):
            continue
        stem = lowered[: len(lowered) - len(extension)] if extension else lowered
        stem = stem.replace("-", "_").upper()
        stem = dict(thresholds.aliases).get(stem, stem)
        if stem in thresholds.required_files:
            return stem
    return None


def find_documents(
    files: frozenset[str] | set[str], thresholds: DocumentationThresholds | None = None
) -> dict[str, str]:
    """Map each canonical documentation stem that is present to its file name."""
    if thresholds is None:
        thresholds = get_thresholds().documentation
    found: dict[str, str] = {}
    for file_name in sorted(files):
        stem = _canonical_stem(file_name, thresholds)
        if stem is not None and stem not in found:
            found[stem] = file_name
    return found


def check_documentation(
    snapshot: RepositorySnapshot, now: datetime | None = None
) -> MetricResult:
    """
    Checks for the essential documentation files at the repository root.

    Looks for README, CONTRIBUTING, LICENSE, CODE_OF_CONDUCT and CHANGELOG.
    Names match case-insensitively, ``-`` counts as ``_``, and the usual
    documentation extensions (.md, .rst, .txt, ...) are accepted.

    Scoring:
    - Each file present: +20 points (5 files = 100)
    """
    thresholds = get_thresholds().documentation

    found = find_documents(snapshot.files, thresholds)
    found_files = [found[stem] for stem in thresholds.required_files if stem in found]
    missing_files = [stem for stem in thresholds.required_files if stem not in found]

    score = clamp_score(len(found_files) / len(thresholds.required_files) * 100)
    details = (
        f"Found: {', '.join(found_files) or 'none'}. "
        f"Missing: {', '.join(missing_files) or 'none'}"
    )
    return MetricResult(NAME, score, DESCRIPTION, details)


def _check(snapshot: RepositorySnapshot, now: datetime) -> MetricResult:
    return check_documentation(snapshot, now)


def _on_error(error: Exception) -> MetricResult:
    return incomplete_metric(NAME, DESCRIPTION, error)


METRIC = MetricSpec(
    name=NAME,
    description=DESCRIPTION,
    checker=_check,
    on_error=_on_error,
)
