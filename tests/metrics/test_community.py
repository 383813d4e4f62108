"""
Tests for the community metric.
"""

import pytest

from maintainability_index.metrics.community import check_community, log_normalize
from maintainability_index.models import RepositorySnapshot


def _snapshot(stars: int = 0, forks: int = 0, contributors: int = 0):
    return RepositorySnapshot(
        owner="octo",
        name="repo",
        stars=stars,
        forks=forks,
        contributors=tuple(f"user{index}" for index in range(contributors)),
    )


class TestCommunityMetric:
    """Test the check_community metric function."""

    def test_empty_project(self):
        result = check_community(_snapshot())
        assert result.name == "Community"
        assert result.score == 0.0
        assert result.details == "Stars: 0, Forks: 0, Contributors: 0"

    def test_saturated_project(self):
        result = check_community(_snapshot(stars=50000, forks=8000, contributors=300))
        assert result.score == pytest.approx(100.0)

    def test_stars_only_capped_by_weight(self):
        result = check_community(_snapshot(stars=1000))
        assert result.score == pytest.approx(40.0)

    def test_small_project_gets_partial_credit(self):
        result = check_community(_snapshot(stars=120, forks=15, contributors=3))
        assert 40.0 < result.score < 80.0

    def test_more_stars_never_lowers_score(self):
        scores = [
            check_community(_snapshot(stars=stars, forks=5, contributors=2)).score
            for stars in (0, 1, 10, 50, 100, 500, 1000, 5000)
        ]
        assert scores == sorted(scores)

    def test_more_contributors_never_lowers_score(self):
        scores = [
            check_community(_snapshot(stars=10, contributors=count)).score
            for count in range(0, 30)
        ]
        assert scores == sorted(scores)


class TestLogNormalize:
    def test_bounds(self):
        assert log_normalize(0, 1000) == 0.0
        assert log_normalize(1000, 1000) == pytest.approx(100.0)
        assert log_normalize(10**6, 1000) == 100.0

    def test_negative_counts_as_zero(self):
        assert log_normalize(-5, 10) == 0.0
