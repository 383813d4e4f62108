"""
Repository data sources.
"""

from maintainability_index.vcs.base import BaseVCSProvider
from maintainability_index.vcs.github import GitHubProvider

__all__ = [
    "BaseVCSProvider",
    "GitHubProvider",
    "get_vcs_provider",
    "list_supported_platforms",
]

# Registry of supported providers
_PROVIDERS: dict[str, type[BaseVCSProvider]] = {
    "github": GitHubProvider,
}


def get_vcs_provider(platform: str = "github", **kwargs) -> BaseVCSProvider:
    """
    Factory function to get a provider instance.

    Args:
        platform: Platform name. Default: 'github'
        **kwargs: Provider-specific configuration (e.g., token)

    Raises:
        ValueError: If the platform is not supported
    """
    platform_lower = platform.lower()

    if platform_lower not in _PROVIDERS:
        supported = ", ".join(sorted(_PROVIDERS.keys()))
        raise ValueError(
            f"Unsupported VCS platform: {platform}. Supported platforms: {supported}"
        )

    return _PROVIDERS[platform_lower](**kwargs)


def list_supported_platforms() -> list[str]:
    """Names of the supported platforms."""
    return sorted(_PROVIDERS.keys())
