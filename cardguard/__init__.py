"""
CardGuard: LLM-assisted review of credit card transactions.

Collects transaction attributes, asks a remote language model for a
"valid"/"fraudulent" verdict and presents it with a confidence score and
the model's reasoning.
"""

__version__ = "0.1.0"

from cardguard.config import CardGuardSettings, get_settings
from cardguard.review import (
    TransactionInput,
    TransactionReviewFlow,
    VerdictResult,
    VerdictStatus,
)

__all__ = [
    "CardGuardSettings",
    "get_settings",
    "TransactionInput",
    "TransactionReviewFlow",
    "VerdictResult",
    "VerdictStatus",
]
