"""
Scoring policy constants, grouped per metric.

The breakpoints below are defaults, not laws: they can be overridden from the
``[tool.maintainability-index.thresholds]`` configuration table. Overrides are
validated so that every step function stays monotonic and every score stays
within 0-100.
"""

from typing import Any, NamedTuple

WEIGHT_TOLERANCE = 1e-9


class StepThresholds(NamedTuple):
    """A non-increasing step function.

    ``steps`` holds ``(inclusive upper bound, score)`` pairs with ascending
    bounds; any value above the last bound scores ``floor``.
    """

    steps: tuple[tuple[float, float], ...]
    floor: float


class DocumentationThresholds(NamedTuple):
    """Canonical documentation files and the spellings that count for them."""

    required_files: tuple[str, ...] = (
        "README",
        "CONTRIBUTING",
        "LICENSE",
        "CODE_OF_CONDUCT",
        "CHANGELOG",
    )
    aliases: tuple[tuple[str, str], ...] = (("LICENCE", "LICENSE"),)
    extensions: tuple[str, ...] = (
        "",
        ".md",
        ".markdown",
        ".rst",
        ".txt",
        ".adoc",
        ".org",
    )


class CommitQualityThresholds(NamedTuple):
    sample_size: int = 50
    min_length: int = 10
    descriptive_min_length: int = 20


class IssueThresholds(NamedTuple):
    """Issue management policy.

    ``closure_steps`` holds ``(minimum closure rate %, base score)`` pairs in
    descending order; a rate below every minimum scores ``closure_floor``.
    ``open_penalties`` holds ``(open issues above, multiplier)`` pairs in
    descending order; the first matching pair applies.
    """

    closure_steps: tuple[tuple[float, float], ...] = (
        (80.0, 100.0),
        (60.0, 85.0),
        (40.0, 70.0),
        (20.0, 50.0),
    )
    closure_floor: float = 30.0
    open_penalties: tuple[tuple[float, float], ...] = ((100.0, 0.8), (50.0, 0.9))
    no_issues_score: float = 80.0
    issues_disabled_score: float = 50.0


class CommunityThresholds(NamedTuple):
    """Log-scale ceilings and sub-weights for the community signals."""

    star_ceiling: float = 1000.0
    fork_ceiling: float = 500.0
    contributor_ceiling: float = 10.0
    star_weight: float = 0.4
    fork_weight: float = 0.3
    contributor_weight: float = 0.3


class MetricThresholds(NamedTuple):
    documentation: DocumentationThresholds
    commit_quality: CommitQualityThresholds
    activity: StepThresholds
    issue_management: IssueThresholds
    community: CommunityThresholds
    branch_management: StepThresholds


# Days since the most recent commit
DEFAULT_ACTIVITY = StepThresholds(
    steps=((7, 100.0), (30, 90.0), (90, 70.0), (180, 50.0), (365, 30.0)),
    floor=10.0,
)

# Number of branches; 0-3 branches is the "reasonable" plateau
DEFAULT_BRANCH_MANAGEMENT = StepThresholds(
    steps=((3, 100.0), (5, 95.0), (10, 85.0), (20, 70.0), (50, 50.0)),
    floor=30.0,
)

DEFAULT_THRESHOLDS = MetricThresholds(
    documentation=DocumentationThresholds(),
    commit_quality=CommitQualityThresholds(),
    activity=DEFAULT_ACTIVITY,
    issue_management=IssueThresholds(),
    community=CommunityThresholds(),
    branch_management=DEFAULT_BRANCH_MANAGEMENT,
)

_THRESHOLDS: MetricThresholds = DEFAULT_THRESHOLDS


def get_thresholds() -> MetricThresholds:
    """Return the thresholds currently in effect."""
    return _THRESHOLDS


def reset_thresholds() -> None:
    """Restore the default thresholds."""
    global _THRESHOLDS
    _THRESHOLDS = DEFAULT_THRESHOLDS


def step_score(value: float, thresholds: StepThresholds) -> float:
    """Score ``value`` against a non-increasing step function."""
    for upper_bound, score in thresholds.steps:
        if value <= upper_bound:
            return score
    return thresholds.floor


def apply_threshold_overrides(overrides: dict[str, dict[str, Any]] | None) -> None:
    """
    Apply threshold overrides on top of the defaults.

    Args:
        overrides: Mapping of metric section name (``activity``,
            ``branch_management``, ``issue_management``, ``community``,
            ``commit_quality``) to the fields to replace.

    Raises:
        ValueError: If a section or field is unknown, or the resulting
            thresholds break monotonicity or leave the 0-100 range.
    """
    global _THRESHOLDS
    if not overrides:
        _THRESHOLDS = DEFAULT_THRESHOLDS
        return

    builders = {
        "activity": _build_step_thresholds,
        "branch_management": _build_step_thresholds,
        "issue_management": _build_issue_thresholds,
        "community": _build_community_thresholds,
        "commit_quality": _build_commit_quality_thresholds,
    }

    unknown_sections = set(overrides) - set(builders)
    if unknown_sections:
        unknown_list = ", ".join(sorted(unknown_sections))
        raise ValueError(f"Unknown threshold sections: {unknown_list}.")

    merged = DEFAULT_THRESHOLDS
    for section, section_overrides in overrides.items():
        if not isinstance(section_overrides, dict):
            raise ValueError(
                f"Threshold section '{section}' should be a table of values."
            )
        default = getattr(DEFAULT_THRESHOLDS, section)
        unknown_fields = set(section_overrides) - set(default._fields)
        if unknown_fields:
            unknown_list = ", ".join(sorted(unknown_fields))
            raise ValueError(
                f"Threshold section '{section}' includes unknown fields: {unknown_list}."
            )
        values = {**default._asdict(), **section_overrides}
        merged = merged._replace(**{section: builders[section](section, values)})

    _THRESHOLDS = merged


# --- Validation helpers ---


def _number(section: str, field: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"Threshold '{section}.{field}' must be a number, got {value!r}.")
    return float(value)


def _score(section: str, field: str, value: Any) -> float:
    number = _number(section, field, value)
    if not 0.0 <= number <= 100.0:
        raise ValueError(
            f"Threshold '{section}.{field}' must be between 0 and 100, got {number}."
        )
    return number


def _pairs(section: str, field: str, value: Any) -> tuple[tuple[float, float], ...]:
    if not isinstance(value, (list, tuple)) or not value:
        raise ValueError(f"Threshold '{section}.{field}' must be a non-empty list of pairs.")
    pairs = []
    for item in value:
        if not isinstance(item, (list, tuple)) or len(item) != 2:
            raise ValueError(
                f"Threshold '{section}.{field}' entries must be [bound, value] pairs, got {item!r}."
            )
        pairs.append((_number(section, field, item[0]), _number(section, field, item[1])))
    return tuple(pairs)


def _build_step_thresholds(section: str, values: dict[str, Any]) -> StepThresholds:
    steps = _pairs(section, "steps", values["steps"])
    floor = _score(section, "floor", values["floor"])

    for _, score in steps:
        _score(section, "steps", score)
    bounds = [bound for bound, _ in steps]
    scores = [score for _, score in steps]
    if any(later <= earlier for earlier, later in zip(bounds, bounds[1:])):
        raise ValueError(f"Threshold '{section}.steps' bounds must be strictly increasing.")
    if any(later > earlier for earlier, later in zip(scores, scores[1:])):
        raise ValueError(f"Threshold '{section}.steps' scores must not increase.")
    if floor > scores[-1]:
        raise ValueError(
            f"Threshold '{section}.floor' must not exceed the last step score ({scores[-1]})."
        )
    return StepThresholds(steps=steps, floor=floor)


def _build_issue_thresholds(section: str, values: dict[str, Any]) -> IssueThresholds:
    closure_steps = _pairs(section, "closure_steps", values["closure_steps"])
    closure_floor = _score(section, "closure_floor", values["closure_floor"])
    open_penalties = _pairs(section, "open_penalties", values["open_penalties"])

    minimums = [minimum for minimum, _ in closure_steps]
    scores = [score for _, score in closure_steps]
    for minimum in minimums:
        _score(section, "closure_steps", minimum)
    for score in scores:
        _score(section, "closure_steps", score)
    if any(later >= earlier for earlier, later in zip(minimums, minimums[1:])):
        raise ValueError(
            f"Threshold '{section}.closure_steps' minimums must be strictly decreasing."
        )
    if any(later > earlier for earlier, later in zip(scores, scores[1:])):
        raise ValueError(f"Threshold '{section}.closure_steps' scores must not increase.")
    if closure_floor > scores[-1]:
        raise ValueError(
            f"Threshold '{section}.closure_floor' must not exceed the last step score."
        )

    bounds = [bound for bound, _ in open_penalties]
    multipliers = [multiplier for _, multiplier in open_penalties]
    if any(bound < 0 for bound in bounds):
        raise ValueError(f"Threshold '{section}.open_penalties' bounds must be non-negative.")
    if any(not 0.0 < multiplier <= 1.0 for multiplier in multipliers):
        raise ValueError(
            f"Threshold '{section}.open_penalties' multipliers must be in (0, 1]."
        )
    if any(later >= earlier for earlier, later in zip(bounds, bounds[1:])):
        raise ValueError(
            f"Threshold '{section}.open_penalties' bounds must be strictly decreasing."
        )
    if any(later < earlier for earlier, later in zip(multipliers, multipliers[1:])):
        raise ValueError(
            f"Threshold '{section}.open_penalties' multipliers must not decrease "
            "as the bound decreases."
        )

    return IssueThresholds(
        closure_steps=closure_steps,
        closure_floor=closure_floor,
        open_penalties=open_penalties,
        no_issues_score=_score(section, "no_issues_score", values["no_issues_score"]),
        issues_disabled_score=_score(
            section, "issues_disabled_score", values["issues_disabled_score"]
        ),
    )


def _build_community_thresholds(
    section: str, values: dict[str, Any]
) -> CommunityThresholds:
    thresholds = CommunityThresholds(
        **{field: _number(section, field, values[field]) for field in CommunityThresholds._fields}
    )
    for field in ("star_ceiling", "fork_ceiling", "contributor_ceiling"):
        if getattr(thresholds, field) <= 0:
            raise ValueError(f"Threshold '{section}.{field}' must be greater than 0.")
    weights = (thresholds.star_weight, thresholds.fork_weight, thresholds.contributor_weight)
    if any(weight < 0 for weight in weights):
        raise ValueError(f"Threshold '{section}' sub-weights must be non-negative.")
    if abs(sum(weights) - 1.0) > WEIGHT_TOLERANCE:
        raise ValueError(
            f"Threshold '{section}' sub-weights must sum to 1.0, got {sum(weights)}."
        )
    return thresholds


def _build_commit_quality_thresholds(
    section: str, values: dict[str, Any]
) -> CommitQualityThresholds:
    numbers = {
        field: _number(section, field, values[field])
        for field in CommitQualityThresholds._fields
    }
    if any(not number.is_integer() for number in numbers.values()):
        raise ValueError(f"Threshold section '{section}' values must be integers.")
    thresholds = CommitQualityThresholds(**{k: int(v) for k, v in numbers.items()})
    if not 1 <= thresholds.sample_size <= 100:
        raise ValueError(f"Threshold '{section}.sample_size' must be between 1 and 100.")
    if thresholds.min_length < 1:
        raise ValueError(f"Threshold '{section}.min_length' must be at least 1.")
    if thresholds.descriptive_min_length < thresholds.min_length:
        raise ValueError(
            f"Threshold '{section}.descriptive_min_length' must be at least min_length."
        )
    return thresholds
