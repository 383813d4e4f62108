"""Tests for shared metric helpers."""

import math

import pytest

from maintainability_index.metrics.base import (
    MetricResult,
    clamp_score,
    incomplete_metric,
)


def test_clamp_score_bounds():
    assert clamp_score(-5) == 0.0
    assert clamp_score(150) == 100.0
    assert clamp_score(42.5) == 42.5


def test_clamp_score_nan_is_zero():
    assert clamp_score(math.nan) == 0.0


def test_with_weight_returns_copy():
    result = MetricResult("Activity", 80.0, "desc", "details")
    weighted = result.with_weight(0.15)
    assert result.weight == 0.0
    assert weighted.weight == 0.15
    assert weighted.weighted_score == pytest.approx(12.0)


def test_incomplete_metric():
    result = incomplete_metric("Community", "desc", ValueError("no data"))
    assert result.score == 0.0
    assert result.details == "Note: Analysis incomplete - no data"
