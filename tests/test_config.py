"""
Tests for the configuration module.
"""

import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest

from maintainability_index.config import (
    DEFAULT_LLM_MODEL,
    DEFAULT_LLM_TIMEOUT,
    get_llm_api_url,
    get_llm_model,
    get_llm_timeout,
    get_threshold_overrides,
    get_tool_config,
    get_verify_ssl,
    load_threshold_overrides,
    set_config_path,
    set_llm_model,
    set_llm_timeout,
    set_verify_ssl,
)
from maintainability_index.thresholds import DEFAULT_THRESHOLDS, get_thresholds

CLEAN_ENV = {"PATH": ""}


@pytest.fixture
def temp_project_root(monkeypatch):
    """Create a temporary project root for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        tmpdir_path = Path(tmpdir)

        # Patch PROJECT_ROOT
        import maintainability_index.config

        monkeypatch.setattr(maintainability_index.config, "PROJECT_ROOT", tmpdir_path)
        with patch.dict("os.environ", CLEAN_ENV, clear=True):
            yield tmpdir_path


def test_get_tool_config_from_local_config(temp_project_root):
    """Test loading settings from .maintainability-index.toml."""
    (temp_project_root / ".maintainability-index.toml").write_text(
        """
[tool.maintainability-index.llm]
model = "local/model"
"""
    )

    assert get_tool_config() == {"llm": {"model": "local/model"}}
    assert get_llm_model() == "local/model"


def test_get_tool_config_from_pyproject(temp_project_root):
    (temp_project_root / "pyproject.toml").write_text(
        """
[project]
name = "demo"

[tool.maintainability-index.llm]
api_url = "https://llm.example/v1/chat/completions"
"""
    )

    assert get_llm_api_url() == "https://llm.example/v1/chat/completions"


def test_local_config_takes_priority(temp_project_root):
    """Test that .maintainability-index.toml takes priority over pyproject.toml."""
    (temp_project_root / "pyproject.toml").write_text(
        """
[tool.maintainability-index.llm]
model = "pyproject/model"
"""
    )
    (temp_project_root / ".maintainability-index.toml").write_text(
        """
[tool.maintainability-index.llm]
model = "local/model"
"""
    )

    assert get_llm_model() == "local/model"


def test_missing_files_use_defaults(temp_project_root):
    assert get_tool_config() == {}
    assert get_llm_model() == DEFAULT_LLM_MODEL
    assert get_llm_timeout() == DEFAULT_LLM_TIMEOUT
    assert get_threshold_overrides() == {}


def test_invalid_toml_raises(temp_project_root):
    (temp_project_root / ".maintainability-index.toml").write_text("not = [valid")
    with pytest.raises(ValueError, match="Failed to load config"):
        get_tool_config()


def test_explicit_config_path(temp_project_root):
    config_file = temp_project_root / "custom.toml"
    config_file.write_text(
        """
[tool.maintainability-index.llm]
timeout_seconds = 15
"""
    )
    set_config_path(config_file)
    assert get_llm_timeout() == 15.0


def test_explicit_config_path_must_exist(temp_project_root):
    with pytest.raises(ValueError, match="Config file not found"):
        set_config_path(temp_project_root / "missing.toml")


class TestLLMSettings:
    def test_model_priority(self, temp_project_root):
        (temp_project_root / ".maintainability-index.toml").write_text(
            """
[tool.maintainability-index.llm]
model = "config/model"
"""
        )
        assert get_llm_model() == "config/model"

        with patch.dict("os.environ", {"OPENROUTER_MODEL": "env/model"}):
            assert get_llm_model() == "env/model"

            set_llm_model("cli/model")
            assert get_llm_model() == "cli/model"

    def test_api_url_from_env(self, temp_project_root):
        with patch.dict("os.environ", {"OPENROUTER_API_URL": "https://env.example"}):
            assert get_llm_api_url() == "https://env.example"

    def test_timeout_from_env(self, temp_project_root):
        with patch.dict("os.environ", {"MAINTAINABILITY_INDEX_LLM_TIMEOUT": "12.5"}):
            assert get_llm_timeout() == 12.5

    def test_invalid_env_timeout_ignored(self, temp_project_root):
        with patch.dict("os.environ", {"MAINTAINABILITY_INDEX_LLM_TIMEOUT": "soon"}):
            assert get_llm_timeout() == DEFAULT_LLM_TIMEOUT

    def test_explicit_timeout_wins(self, temp_project_root):
        set_llm_timeout(3)
        with patch.dict("os.environ", {"MAINTAINABILITY_INDEX_LLM_TIMEOUT": "12.5"}):
            assert get_llm_timeout() == 3

    @pytest.mark.parametrize("seconds", [0, -1])
    def test_non_positive_timeout_rejected(self, seconds):
        with pytest.raises(ValueError, match="greater than 0"):
            set_llm_timeout(seconds)

    def test_invalid_config_timeout_rejected(self, temp_project_root):
        (temp_project_root / ".maintainability-index.toml").write_text(
            """
[tool.maintainability-index.llm]
timeout_seconds = "fast"
"""
        )
        with pytest.raises(ValueError, match="timeout_seconds"):
            get_llm_timeout()


class TestThresholdConfig:
    def test_load_threshold_overrides(self, temp_project_root):
        (temp_project_root / ".maintainability-index.toml").write_text(
            """
[tool.maintainability-index.thresholds.branch_management]
steps = [[5, 100], [25, 60]]
floor = 20
"""
        )
        load_threshold_overrides()
        branch = get_thresholds().branch_management
        assert branch.steps == ((5.0, 100.0), (25.0, 60.0))
        assert branch.floor == 20.0
        assert get_thresholds().activity == DEFAULT_THRESHOLDS.activity

    def test_invalid_threshold_overrides(self, temp_project_root):
        (temp_project_root / ".maintainability-index.toml").write_text(
            """
[tool.maintainability-index.thresholds.activity]
steps = [[7, 10], [30, 90]]
"""
        )
        with pytest.raises(ValueError, match="must not increase"):
            load_threshold_overrides()

    def test_no_overrides_restores_defaults(self, temp_project_root):
        load_threshold_overrides()
        assert get_thresholds() == DEFAULT_THRESHOLDS


def test_verify_ssl_toggle():
    assert get_verify_ssl() is True
    set_verify_ssl(False)
    assert get_verify_ssl() is False
