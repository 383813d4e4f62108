"""
Tests for the command-line interface.
"""

import json
from unittest.mock import patch

import httpx
import pytest
from typer.testing import CliRunner

from maintainability_index import __version__
from maintainability_index.cli import app, parse_repository
from maintainability_index.config import get_llm_timeout, get_verify_ssl
from maintainability_index.llm.client import LLMClient
from maintainability_index.scoring import build_report

runner = CliRunner()


@pytest.fixture
def mock_analyze(snapshot, now):
    """Patch analyze_repository to return a report for the shared snapshot."""
    with patch("maintainability_index.cli.analyze_repository") as mock:
        mock.return_value = build_report(snapshot, now)
        yield mock


class TestParseRepository:
    @pytest.mark.parametrize(
        "value",
        [
            "octo/widgets",
            "https://github.com/octo/widgets",
            "https://github.com/octo/widgets.git",
            "https://github.com/octo/widgets/",
            " octo/widgets ",
        ],
    )
    def test_valid(self, value):
        assert parse_repository(value) == ("octo", "widgets")

    @pytest.mark.parametrize(
        "value", ["widgets", "octo/widgets/extra", "https://gitlab.com/octo/widgets", ""]
    )
    def test_invalid(self, value):
        with pytest.raises(ValueError, match="Invalid repository"):
            parse_repository(value)


class TestAnalyzeCommand:
    def test_text_output(self, mock_analyze):
        result = runner.invoke(app, ["analyze", "octo/widgets"])

        assert result.exit_code == 0
        assert "octo/widgets" in result.output
        assert "Recommendation" in result.output
        mock_analyze.assert_called_once_with(
            "octo",
            "widgets",
            token=None,
            backend=None,
            parallel=False,
            timeout=None,
        )

    def test_json_output(self, mock_analyze):
        result = runner.invoke(app, ["analyze", "octo/widgets", "--format", "json"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["repository"] == "octo/widgets"
        assert len(data["metrics"]) == 6
        assert "llmAnalysis" not in data

    def test_options_are_forwarded(self, mock_analyze):
        result = runner.invoke(
            app,
            [
                "analyze",
                "https://github.com/octo/widgets",
                "--token",
                "cli_token",
                "--parallel",
                "--timeout",
                "12",
                "--quiet",
            ],
        )

        assert result.exit_code == 0
        kwargs = mock_analyze.call_args.kwargs
        assert kwargs["token"] == "cli_token"
        assert kwargs["parallel"] is True
        assert kwargs["timeout"] == 12.0
        assert get_llm_timeout() == 12.0

    def test_insecure_disables_ssl_verification(self, mock_analyze):
        result = runner.invoke(app, ["analyze", "octo/widgets", "--insecure"])
        assert result.exit_code == 0
        assert get_verify_ssl() is False

    def test_invalid_repository(self, mock_analyze):
        result = runner.invoke(app, ["analyze", "not-a-repo"])

        assert result.exit_code == 1
        assert "Invalid repository" in result.output
        mock_analyze.assert_not_called()

    def test_invalid_timeout(self, mock_analyze):
        result = runner.invoke(app, ["analyze", "octo/widgets", "--timeout", "0"])

        assert result.exit_code == 1
        assert "greater than 0" in result.output
        mock_analyze.assert_not_called()

    def test_missing_config_file(self, mock_analyze, tmp_path):
        missing = tmp_path / "nope.toml"
        result = runner.invoke(app, ["analyze", "octo/widgets", "--config", str(missing)])

        assert result.exit_code == 1
        assert "Config file not found" in result.output

    def test_invalid_threshold_config(self, mock_analyze, tmp_path):
        config_file = tmp_path / "thresholds.toml"
        config_file.write_text(
            """
[tool.maintainability-index.thresholds.branch_management]
floor = 150
"""
        )
        result = runner.invoke(
            app, ["analyze", "octo/widgets", "--config", str(config_file)]
        )

        assert result.exit_code == 1
        assert "branch_management.floor" in result.output

    def test_data_source_error(self, mock_analyze):
        mock_analyze.side_effect = ValueError("GITHUB_TOKEN is required")
        result = runner.invoke(app, ["analyze", "octo/widgets"])

        assert result.exit_code == 1
        assert "GITHUB_TOKEN is required" in result.output

    def test_http_error(self, mock_analyze):
        request = httpx.Request("POST", "https://api.github.com/graphql")
        mock_analyze.side_effect = httpx.HTTPStatusError(
            "401 Unauthorized", request=request, response=httpx.Response(401)
        )
        result = runner.invoke(app, ["analyze", "octo/widgets"])

        assert result.exit_code == 1
        assert "HTTP Error" in result.output

    def test_network_error(self, mock_analyze):
        mock_analyze.side_effect = httpx.ConnectError("connection refused")
        result = runner.invoke(app, ["analyze", "octo/widgets"])

        assert result.exit_code == 1
        assert "Network Error" in result.output


class TestLLMOption:
    def test_missing_api_key_degrades(self, mock_analyze):
        with patch.dict("os.environ", {}, clear=True):
            result = runner.invoke(app, ["analyze", "octo/widgets", "--llm"])

        assert result.exit_code == 0
        assert "AI analysis skipped" in result.output
        assert mock_analyze.call_args.kwargs["backend"] is None

    def test_backend_created_with_model(self, mock_analyze):
        with patch.dict("os.environ", {"OPENROUTER_API_KEY": "key"}):
            result = runner.invoke(
                app, ["analyze", "octo/widgets", "--llm", "--model", "some/model"]
            )

        assert result.exit_code == 0
        backend = mock_analyze.call_args.kwargs["backend"]
        assert isinstance(backend, LLMClient)
        assert backend.model == "some/model"


def test_version_command():
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert __version__ in result.output
