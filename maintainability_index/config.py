"""
Configuration management for Maintainability Index.

Settings are resolved in this order:
1. Values set explicitly (CLI flags)
2. Environment variables (a .env file is loaded on import of ``core``)
3. .maintainability-index.toml (local config)
4. pyproject.toml ``[tool.maintainability-index]`` (project-level config)
5. Built-in defaults
"""

import os
import tomllib
from pathlib import Path
from typing import Any

from maintainability_index.thresholds import apply_threshold_overrides

# Directory searched for configuration files
PROJECT_ROOT = Path.cwd()

LOCAL_CONFIG_NAME = ".maintainability-index.toml"
TOOL_TABLE = "maintainability-index"

# Global configuration for SSL verification
# Default: True (verify SSL certificates)
# Can be set to False by CLI --insecure flag
VERIFY_SSL = True

# LLM defaults (OpenRouter)
DEFAULT_LLM_API_URL = "https://openrouter.ai/api/v1/chat/completions"
DEFAULT_LLM_MODEL = "openai/gpt-oss-20b:free"
DEFAULT_LLM_TIMEOUT = 60.0

# Explicit overrides (can be set from the CLI)
_CONFIG_PATH: Path | None = None
_LLM_MODEL: str | None = None
_LLM_TIMEOUT: float | None = None


def load_config_file(config_path: Path) -> dict:
    """Load a TOML configuration file."""
    if not config_path.exists():
        return {}
    try:
        with open(config_path, "rb") as f:
            return tomllib.load(f)
    except Exception as e:
        raise ValueError(f"Failed to load config from {config_path}: {e}") from e


def set_config_path(path: Path | str | None) -> None:
    """
    Use a specific configuration file instead of searching PROJECT_ROOT.

    Args:
        path: Path to a TOML file with a ``[tool.maintainability-index]``
            table, or None to restore the default search.

    Raises:
        ValueError: If the file does not exist.
    """
    global _CONFIG_PATH
    if path is None:
        _CONFIG_PATH = None
        return
    config_path = Path(path).expanduser()
    if not config_path.is_file():
        raise ValueError(f"Config file not found: {config_path}")
    _CONFIG_PATH = config_path


def get_tool_config() -> dict[str, Any]:
    """
    Return the ``[tool.maintainability-index]`` table.

    Priority:
    1. File set via set_config_path()
    2. .maintainability-index.toml (local config)
    3. pyproject.toml (fallback)

    Returns:
        The tool table, or an empty dict when no file defines it.
    """
    if _CONFIG_PATH is not None:
        return load_config_file(_CONFIG_PATH).get("tool", {}).get(TOOL_TABLE, {})

    for file_name in (LOCAL_CONFIG_NAME, "pyproject.toml"):
        config_path = PROJECT_ROOT / file_name
        if config_path.exists():
            tool_config = load_config_file(config_path).get("tool", {}).get(TOOL_TABLE)
            if tool_config:
                return tool_config

    return {}


def _get_llm_config() -> dict[str, Any]:
    llm_config = get_tool_config().get("llm", {})
    if not isinstance(llm_config, dict):
        raise ValueError("[tool.maintainability-index.llm] should be a table.")
    return llm_config


def set_verify_ssl(verify: bool) -> None:
    """
    Set the SSL verification setting globally.

    Args:
        verify: Whether to verify SSL certificates.
    """
    global VERIFY_SSL
    VERIFY_SSL = verify


def get_verify_ssl() -> bool:
    """
    Get the current SSL verification setting.

    Returns:
        Whether SSL verification is enabled.
    """
    return VERIFY_SSL


def get_github_token() -> str | None:
    """GitHub token from the GITHUB_TOKEN environment variable."""
    return os.getenv("GITHUB_TOKEN") or None


def get_llm_api_key() -> str | None:
    """OpenRouter API key from the OPENROUTER_API_KEY environment variable."""
    return os.getenv("OPENROUTER_API_KEY") or None


def set_llm_model(model: str | None) -> None:
    """Set the LLM model identifier explicitly (None restores lookup)."""
    global _LLM_MODEL
    _LLM_MODEL = model


def get_llm_model() -> str:
    """
    Get the LLM model identifier.

    Priority:
    1. Explicitly set value via set_llm_model()
    2. OPENROUTER_MODEL environment variable
    3. ``llm.model`` in the config file
    4. Default: openai/gpt-oss-20b:free
    """
    if _LLM_MODEL:
        return _LLM_MODEL

    env_model = os.getenv("OPENROUTER_MODEL")
    if env_model:
        return env_model

    model = _get_llm_config().get("model")
    if model:
        return str(model)

    return DEFAULT_LLM_MODEL


def get_llm_api_url() -> str:
    """
    Get the chat-completions endpoint.

    Priority:
    1. OPENROUTER_API_URL environment variable
    2. ``llm.api_url`` in the config file
    3. Default: OpenRouter
    """
    env_url = os.getenv("OPENROUTER_API_URL")
    if env_url:
        return env_url

    api_url = _get_llm_config().get("api_url")
    if api_url:
        return str(api_url)

    return DEFAULT_LLM_API_URL


def set_llm_timeout(seconds: float | None) -> None:
    """
    Set the per-request LLM timeout explicitly.

    Raises:
        ValueError: If seconds is not positive.
    """
    global _LLM_TIMEOUT
    if seconds is not None and seconds <= 0:
        raise ValueError(f"LLM timeout must be greater than 0, got {seconds}.")
    _LLM_TIMEOUT = seconds


def get_llm_timeout() -> float:
    """
    Get the per-request LLM timeout in seconds.

    Priority:
    1. Explicitly set value via set_llm_timeout()
    2. MAINTAINABILITY_INDEX_LLM_TIMEOUT environment variable
    3. ``llm.timeout_seconds`` in the config file
    4. Default: 60 seconds
    """
    if _LLM_TIMEOUT is not None:
        return _LLM_TIMEOUT

    env_timeout = os.getenv("MAINTAINABILITY_INDEX_LLM_TIMEOUT")
    if env_timeout:
        try:
            timeout = float(env_timeout)
            if timeout > 0:
                return timeout
        except ValueError:
            pass

    timeout = _get_llm_config().get("timeout_seconds")
    if timeout is not None:
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
            raise ValueError(
                f"llm.timeout_seconds must be a positive number, got {timeout!r}."
            )
        return float(timeout)

    return DEFAULT_LLM_TIMEOUT


def get_threshold_overrides() -> dict[str, dict[str, Any]]:
    """Return the ``thresholds`` sub-tables from the config file."""
    overrides = get_tool_config().get("thresholds", {})
    if not isinstance(overrides, dict):
        raise ValueError("[tool.maintainability-index.thresholds] should be a table.")
    return overrides


def load_threshold_overrides() -> None:
    """
    Apply configured threshold overrides (or restore the defaults).

    Raises:
        ValueError: If the configured thresholds are invalid.
    """
    apply_threshold_overrides(get_threshold_overrides())
