"""
Transaction review: form state, prompt, verdict decoding and submit flow.
"""

from cardguard.review.flow import TransactionReviewFlow
from cardguard.review.models import (
    CARD_TYPES,
    CURRENCIES,
    MERCHANT_CATEGORIES,
    REQUIRED_FIELDS,
    Notification,
    TransactionInput,
    VerdictResult,
    VerdictStatus,
)
from cardguard.review.prompt import build_prompt
from cardguard.review.verdict import (
    FALLBACK_CONFIDENCE,
    classify_verdict,
    decode_verdict,
    parse_verdict,
)

__all__ = [
    # Flow
    "TransactionReviewFlow",
    # Models
    "TransactionInput",
    "VerdictResult",
    "VerdictStatus",
    "Notification",
    "CURRENCIES",
    "MERCHANT_CATEGORIES",
    "CARD_TYPES",
    "REQUIRED_FIELDS",
    # Prompt and decoding
    "build_prompt",
    "decode_verdict",
    "classify_verdict",
    "parse_verdict",
    "FALLBACK_CONFIDENCE",
]
