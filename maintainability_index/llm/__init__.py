"""
Optional AI augmentation: qualitative README, commit and community analysis
from a chat-completion backend.
"""

from maintainability_index.llm.analyzer import (
    Success,
    Unavailable,
    augment_report,
    augment_report_async,
)
from maintainability_index.llm.client import AIBackend, LLMClient, LLMResponse

__all__ = [
    "AIBackend",
    "LLMClient",
    "LLMResponse",
    "Success",
    "Unavailable",
    "augment_report",
    "augment_report_async",
]
