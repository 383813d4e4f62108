"""
Prompt construction for the AI sub-analyses.

Every prompt asks for a single JSON object scored on a 0-100 scale and
carries only a bounded excerpt of repository data.
"""

from collections.abc import Sequence

from maintainability_index.models import CommitInfo, MaintainabilityReport, RepositorySnapshot

MAX_README_LENGTH = 4000
MIN_README_LENGTH = 50
README_TRUNCATION_NOTICE = "\n\n[Content truncated - README exceeds character limit]"

MAX_PROMPT_COMMITS = 20
MAX_COMMIT_TEXT_LENGTH = 1000

JSON_ONLY = (
    "IMPORTANT: Respond ONLY with a valid JSON object. "
    "No markdown, no explanations, no additional text."
)

# Files reported to the model so it does not suggest adding them again
_CONTEXT_FILES = (
    ("LICENSE", "LICENSE file"),
    ("CONTRIBUTING", "CONTRIBUTING guide"),
    ("CODE_OF_CONDUCT", "CODE_OF_CONDUCT"),
    ("CHANGELOG", "CHANGELOG"),
)


def prepare_readme_content(content: str) -> str:
    """Truncate long README text, preferring a paragraph boundary."""
    if len(content) <= MAX_README_LENGTH:
        return content

    truncated = content[:MAX_README_LENGTH]
    boundary = truncated.rfind("\n\n")
    if boundary > MAX_README_LENGTH // 2:
        truncated = truncated[:boundary]
    return truncated + README_TRUNCATION_NOTICE


def readme_source(snapshot: RepositorySnapshot) -> str | None:
    """
    Text to send for README analysis.

    Falls back to the repository description when the README is missing or
    too short; returns None when there is nothing to analyze.
    """
    readme = (snapshot.readme or "").strip()
    if len(readme) >= MIN_README_LENGTH:
        return prepare_readme_content(readme)

    description = (snapshot.description or "").strip()
    if description:
        return (
            f"Repository Description: {description}\n\n"
            "Note: No README.md file found in this repository."
        )
    if readme:
        return readme
    return None


def build_repository_context(present_stems: Sequence[str]) -> str:
    """Describe which documentation files already exist."""
    lines = ["REPOSITORY CONTEXT - Essential documentation files:"]
    present = [label for stem, label in _CONTEXT_FILES if stem in present_stems]
    if present:
        lines.extend(f"- {label} exists" for label in present)
    else:
        lines.append("- No standard documentation files detected")
    lines.append("")
    lines.append("Do NOT suggest adding files that are already present above.")
    return "\n".join(lines)


def build_readme_prompt(readme_text: str, repository_context: str) -> str:
    return f"""{JSON_ONLY}

Analyze the following README documentation and score it from 0 to 100 on three metrics.

SCORING GUIDELINES:
- clarity: 80-100 clear purpose and value with examples; 40-60 basic description; below 30 unclear
- completeness: 90-100 quick start, installation, usage, contributing, license, links; 50-60 basic install and usage; below 30 minimal
- newcomerFriendly: 90-100 step-by-step quick start, prerequisites, troubleshooting; 50-60 basic instructions; below 30 hard to follow

{repository_context}

RULES:
1. Do NOT suggest adding files that already exist.
2. If the README links to existing files, score completeness higher.
3. Focus suggestions on README content.

Provide 2-3 specific strengths and 3-5 actionable suggestions.

Expected JSON format:
{{"clarity":80,"completeness":75,"newcomerFriendly":85,"strengths":["clear quick start"],"suggestions":["add API reference"]}}

README content:
{readme_text}

Output ONLY the JSON object."""


def format_commit_messages(commits: Sequence[CommitInfo]) -> str:
    """Bounded excerpt of recent commit subjects."""
    lines = [
        f"- {commit.subject.strip()}"
        for commit in commits[:MAX_PROMPT_COMMITS]
        if commit.subject.strip()
    ]
    return "\n".join(lines)[:MAX_COMMIT_TEXT_LENGTH]


def build_commit_prompt(commit_text: str) -> str:
    return f"""{JSON_ONLY}

Analyze these commit messages and score them from 0 to 100 for clarity, consistency, and informativeness.
Also identify 3-5 patterns (positive and negative).

Expected JSON format:
{{"clarity":80,"consistency":60,"informativeness":70,"patterns":["Positive: clear subject lines","Negative: inconsistent capitalization"]}}

Commits:
{commit_text}

Output ONLY the JSON object."""


def build_community_prompt(snapshot: RepositorySnapshot) -> str:
    description = snapshot.description or "No description"
    return f"""{JSON_ONLY}

Analyze the community health of repository {snapshot.full_name} and score it from 0 to 100 for responsiveness, helpfulness, and tone.

Repository facts:
- Description: {description}
- Stars: {snapshot.stars}, Forks: {snapshot.forks}, Contributors: {len(snapshot.contributors)}
- Open issues: {snapshot.open_issues}, Closed issues: {snapshot.closed_issues}
- Issues enabled: {"yes" if snapshot.has_issues else "no"}

Provide 2-3 strengths and 3-5 suggestions.

Expected JSON format:
{{"responsiveness":80,"helpfulness":70,"tone":90,"strengths":["active maintainers"],"suggestions":["add a triage process"]}}

Output ONLY the JSON object."""


def build_recommendations_prompt(report: MaintainabilityReport) -> str:
    metric_lines = "\n".join(
        f"- {metric.name}: {metric.score:.1f}/100 ({metric.details})"
        for metric in report.metrics
    )
    return f"""{JSON_ONLY}

Repository {report.full_name} received a maintainability score of {report.overall_score:.2f}/100 ({report.rating.value}).

Metric results:
{metric_lines}

Suggest 3-5 prioritized, concrete improvements. For each give a title, a one-sentence description,
an impact of HIGH, MEDIUM or LOW, a confidence from 0 to 100, and a category
(documentation, commits, activity, issues, community or branches).

Expected JSON format:
{{"recommendations":[{{"title":"Add a CHANGELOG","description":"Track notable changes per release.","impact":"MEDIUM","confidence":85,"category":"documentation"}}]}}

Output ONLY the JSON object."""
