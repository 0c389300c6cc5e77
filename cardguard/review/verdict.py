"""
Decoding of the remote model's reply into a verdict.

Decoding happens in two explicit stages:

1. ``decode_verdict`` looks for a JSON object in the text and validates it.
2. ``classify_verdict`` is the heuristic used when stage 1 fails: a
   substring check for "fraudulent" with a fixed confidence of 85.

The fixed confidence is not derived from the reply. It is kept so that a
malformed reply still yields something displayable.
"""

import json
import re

from pydantic import BaseModel, ValidationError, field_validator

from cardguard.llm.exceptions import VerdictDecodeError
from cardguard.observability.logging import get_logger
from cardguard.review.models import VerdictResult, VerdictStatus

logger = get_logger(__name__)

FALLBACK_CONFIDENCE = 85

# Greedy: spans from the first "{" to the last "}".
JSON_OBJECT_PATTERN = re.compile(r"\{.*\}", re.DOTALL)


class VerdictPayload(BaseModel):
    """Shape of the JSON object the model is asked to return."""

    status: VerdictStatus
    confidence: int | float
    reasoning: str

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v):
        return v.strip().lower() if isinstance(v, str) else v


def decode_verdict(raw_text: str) -> VerdictResult:
    """
    Strictly decode a JSON verdict from the model's text.

    The greedy brace-delimited substring is parsed when present; the whole
    text is parsed only when no braces are found.

    Raises:
        VerdictDecodeError: If no valid verdict object can be decoded
    """
    match = JSON_OBJECT_PATTERN.search(raw_text)
    candidate = match.group(0) if match else raw_text

    try:
        data = json.loads(candidate)
    except json.JSONDecodeError as e:
        raise VerdictDecodeError(f"Reply is not valid JSON: {e.msg}") from e

    if not isinstance(data, dict):
        raise VerdictDecodeError("Reply JSON is not an object")

    try:
        payload = VerdictPayload.model_validate(data)
    except ValidationError as e:
        raise VerdictDecodeError(
            "Reply JSON does not match the verdict format",
            details={"errors": e.errors(include_url=False)},
        ) from e

    return VerdictResult(
        status=payload.status,
        confidence=payload.confidence,
        reasoning=payload.reasoning,
    )


def classify_verdict(raw_text: str) -> VerdictResult:
    """Heuristic verdict for replies without a usable JSON object."""
    status = (
        VerdictStatus.FRAUDULENT
        if "fraudulent" in raw_text.lower()
        else VerdictStatus.VALID
    )
    return VerdictResult(
        status=status,
        confidence=FALLBACK_CONFIDENCE,
        reasoning=raw_text,
    )


def parse_verdict(raw_text: str) -> tuple[VerdictResult, bool]:
    """
    Turn the model's raw text into a verdict.

    Returns:
        The verdict and whether the heuristic fallback produced it
    """
    try:
        return decode_verdict(raw_text), False
    except VerdictDecodeError as e:
        logger.info("verdict_fallback", reason=e.message)
        return classify_verdict(raw_text), True
