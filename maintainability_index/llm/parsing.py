"""
Parsing of model replies into sub-analysis records.

Model output is untrusted text: it may be wrapped in markdown fences,
surrounded by chatter, or carry trailing commas. Every parser either returns a
fully populated record or raises ``ValueError``.
"""

import json
import math
import re
from typing import Any

from maintainability_index.metrics.base import clamp_score
from maintainability_index.models import (
    AIRecommendation,
    CommitAnalysis,
    CommunityAnalysis,
    ImpactTier,
    ReadmeAnalysis,
)

_FENCE = re.compile(r"```(?:json|JSON)?\s*\n?(.*?)```", re.DOTALL)
_TRAILING_COMMA = re.compile(r",(\s*[}\]])")

DEFAULT_CATEGORY = "general"


def _first_balanced_object(text: str) -> str | None:
    """Return the first balanced ``{...}`` block, ignoring braces inside strings."""
    start = text.find("{")
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        for index in range(start, len(text)):
            char = text[index]
            if in_string:
                if escaped:
                    escaped = False
                elif char == "\\":
                    escaped = True
                elif char == '"':
                    in_string = False
            elif char == '"':
                in_string = True
            elif char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    return text[start : index + 1]
        start = text.find("{", start + 1)
    return None


def extract_json(text: str | None) -> dict[str, Any]:
    """
    Extract the first JSON object from model output.

    Raises:
        ValueError: If the text holds no parseable JSON object.
    """
    if not text or not text.strip():
        raise ValueError("Empty response")

    candidates = [block for block in _FENCE.findall(text) if "{" in block]
    candidates.append(text)

    for candidate in candidates:
        block = _first_balanced_object(candidate)
        if block is None:
            continue
        try:
            data = json.loads(_TRAILING_COMMA.sub(r"\1", block))
        except json.JSONDecodeError:
            continue
        if isinstance(data, dict):
            return data

    raise ValueError(f"No JSON object found in response: {text[:100]!r}")


def _number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip().rstrip("%"))
        except ValueError:
            return None
    else:
        return None
    return None if math.isnan(number) else number


def required_score(data: dict[str, Any], *keys: str) -> float:
    """
    Read a required numeric field (first matching key) clamped to 0-100.

    Raises:
        ValueError: If no key holds a number.
    """
    for key in keys:
        if key in data:
            number = _number(data[key])
            if number is not None:
                return clamp_score(number)
    raise ValueError(f"Missing required numeric field '{keys[0]}'")


def string_list(data: dict[str, Any], key: str) -> tuple[str, ...]:
    """Read a list of strings; anything missing or malformed becomes empty."""
    value = data.get(key)
    if not isinstance(value, list):
        return ()
    return tuple(item.strip() for item in value if isinstance(item, str) and item.strip())


def parse_readme_analysis(text: str) -> ReadmeAnalysis:
    data = extract_json(text)
    return ReadmeAnalysis(
        clarity=required_score(data, "clarity", "clarity_score"),
        completeness=required_score(data, "completeness", "completeness_score"),
        newcomer_friendly=required_score(
            data, "newcomerFriendly", "newcomer_friendly", "newcomer_friendly_score"
        ),
        strengths=string_list(data, "strengths"),
        suggestions=string_list(data, "suggestions"),
    )


def parse_commit_analysis(text: str) -> CommitAnalysis:
    data = extract_json(text)
    return CommitAnalysis(
        clarity=required_score(data, "clarity", "clarity_score"),
        consistency=required_score(data, "consistency", "consistency_score"),
        informativeness=required_score(data, "informativeness", "informativeness_score"),
        patterns=string_list(data, "patterns"),
    )


def parse_community_analysis(text: str) -> CommunityAnalysis:
    data = extract_json(text)
    return CommunityAnalysis(
        responsiveness=required_score(data, "responsiveness", "responsiveness_score"),
        helpfulness=required_score(data, "helpfulness", "helpfulness_score"),
        tone=required_score(data, "tone", "tone_score"),
        strengths=string_list(data, "strengths"),
        suggestions=string_list(data, "suggestions"),
    )


def parse_impact(value: Any) -> ImpactTier:
    """Map an impact label onto a tier; anything unknown is MEDIUM."""
    if isinstance(value, str):
        try:
            return ImpactTier(value.strip().upper())
        except ValueError:
            pass
    return ImpactTier.MEDIUM


def parse_recommendations(text: str) -> tuple[AIRecommendation, ...]:
    """
    Parse the recommendation list.

    Items without a title or a numeric confidence are dropped.

    Raises:
        ValueError: If the reply has no recommendation list or no usable item.
    """
    data = extract_json(text)
    items = data.get("recommendations")
    if not isinstance(items, list):
        raise ValueError("Missing required list field 'recommendations'")

    recommendations = []
    for item in items:
        if not isinstance(item, dict):
            continue
        title = item.get("title")
        confidence = _number(item.get("confidence"))
        if not isinstance(title, str) or not title.strip() or confidence is None:
            continue
        description = item.get("description")
        category = item.get("category")
        recommendations.append(
            AIRecommendation(
                title=title.strip(),
                description=description.strip() if isinstance(description, str) else "",
                impact=parse_impact(item.get("impact")),
                confidence=clamp_score(confidence),
                category=(
                    category.strip()
                    if isinstance(category, str) and category.strip()
                    else DEFAULT_CATEGORY
                ),
            )
        )

    if not recommendations:
        raise ValueError("No usable recommendations in response")
    return tuple(recommendations)
