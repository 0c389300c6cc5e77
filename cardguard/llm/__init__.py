"""
Remote language-model integration for CardGuard.
"""

from cardguard.llm.exceptions import (
    CardGuardError,
    ConfigurationError,
    InvalidResponseError,
    TransportError,
    VerdictDecodeError,
)
from cardguard.llm.gemini import GeminiClient, TextGenerationClient, extract_text

__all__ = [
    # Exceptions
    "CardGuardError",
    "ConfigurationError",
    "TransportError",
    "InvalidResponseError",
    "VerdictDecodeError",
    # Client
    "GeminiClient",
    "TextGenerationClient",
    "extract_text",
]
