"""
Tests for the documentation metric.
"""

from maintainability_index.metrics.documentation import (
    check_documentation,
    find_documents,
)
from maintainability_index.models import RepositorySnapshot


def _snapshot(*files: str) -> RepositorySnapshot:
    return RepositorySnapshot(owner="octo", name="repo", files=frozenset(files))


class TestDocumentationMetric:
    """Test the check_documentation metric function."""

    def test_readme_only(self):
        """Test that a lone README scores one fifth."""
        result = check_documentation(_snapshot("README.md"))
        assert result.name == "Documentation"
        assert result.score == 20.0
        assert result.details == (
            "Found: README.md. Missing: CONTRIBUTING, LICENSE, CODE_OF_CONDUCT, CHANGELOG"
        )

    def test_all_files_present(self):
        result = check_documentation(
            _snapshot(
                "README.md",
                "CONTRIBUTING.md",
                "LICENSE",
                "CODE_OF_CONDUCT.md",
                "CHANGELOG.md",
            )
        )
        assert result.score == 100.0
        assert result.details.endswith("Missing: none")

    def test_no_files(self):
        result = check_documentation(_snapshot())
        assert result.score == 0.0
        assert result.details.startswith("Found: none.")

    def test_case_insensitive_and_hyphenated(self):
        """Test lowercase names, hyphens and alternative extensions."""
        result = check_documentation(
            _snapshot("readme.rst", "code-of-conduct.md", "Changelog.txt")
        )
        assert result.score == 60.0

    def test_licence_spelling(self):
        result = check_documentation(_snapshot("LICENCE.txt"))
        assert result.score == 20.0
        assert "LICENCE.txt" in result.details

    def test_unrelated_files_ignored(self):
        result = check_documentation(
            _snapshot("README-template.j2", "setup.py", "LICENSE.py", "docs")
        )
        assert result.score == 0.0

    def test_duplicate_spellings_count_once(self):
        result = check_documentation(_snapshot("README.md", "README.rst", "readme"))
        assert result.score == 20.0

    def test_score_grows_with_each_file(self):
        """Adding a documentation file never lowers the score."""
        files = ["README.md", "CONTRIBUTING.md", "LICENSE", "CODE_OF_CONDUCT.md"]
        previous = -1.0
        for count in range(len(files) + 1):
            score = check_documentation(_snapshot(*files[:count])).score
            assert score > previous
            previous = score


class TestFindDocuments:
    def test_maps_stems_to_file_names(self):
        found = find_documents(frozenset({"README.md", "LICENSE", "main.py"}))
        assert found == {"LICENSE": "LICENSE", "README": "README.md"}
