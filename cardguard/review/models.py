"""
Data models for the transaction review flow.

Form values are kept as the strings the user typed; nothing here checks that
an amount is positive or that a date lies in the past.
"""

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

CURRENCIES = ["USD", "EUR", "GBP", "JPY"]

MERCHANT_CATEGORIES = {
    "grocery": "Grocery",
    "gas": "Gas Station",
    "restaurant": "Restaurant",
    "retail": "Retail",
    "online": "Online Shopping",
    "entertainment": "Entertainment",
    "travel": "Travel",
    "other": "Other",
}

CARD_TYPES = {
    "visa": "Visa",
    "mastercard": "Mastercard",
    "amex": "American Express",
    "discover": "Discover",
}

REQUIRED_FIELDS = (
    "amount",
    "merchant_name",
    "card_number",
    "transaction_date",
    "transaction_time",
    "location",
    "country",
)


class VerdictStatus(str, Enum):
    """Outcome reported by the remote model."""

    VALID = "valid"
    FRAUDULENT = "fraudulent"


class TransactionInput(BaseModel):
    """Values of the transaction form."""

    model_config = ConfigDict(extra="forbid")

    amount: str = ""
    currency: str = "USD"
    merchant_name: str = ""
    merchant_category: str = ""
    card_number: str = Field(default="", description="Last four digits of the card")
    card_type: str = ""
    transaction_date: str = ""
    transaction_time: str = ""
    location: str = Field(default="", description="City, State")
    country: str = ""
    is_online_transaction: bool = False
    customer_age: str = ""
    account_balance: str = ""
    previous_transaction_amount: str = ""
    time_since_last_transaction: str = ""
    additional_notes: str = ""

    @property
    def last_four(self) -> str:
        return self.card_number[-4:]

    def missing_required(self) -> list[str]:
        """Names of required fields that are still blank."""
        return [
            name for name in REQUIRED_FIELDS
            if not str(getattr(self, name)).strip()
        ]


class VerdictResult(BaseModel):
    """
    Verdict for one transaction.

    ``status`` is None until an analysis succeeds. Confidence is nominally
    0-100 but is shown as received.
    """

    status: VerdictStatus | None = None
    confidence: int | float = 0
    reasoning: str = ""

    @property
    def is_set(self) -> bool:
        return self.status is not None

    @property
    def is_fraudulent(self) -> bool:
        return self.status == VerdictStatus.FRAUDULENT

    @property
    def confidence_label(self) -> str:
        """Confidence as received, without a trailing ``.0`` on whole numbers."""
        if isinstance(self.confidence, float) and self.confidence.is_integer():
            return str(int(self.confidence))
        return str(self.confidence)


class Notification(BaseModel):
    """Transient toast shown after an analysis finishes."""

    title: str
    description: str
    variant: Literal["default", "destructive"] = "default"

    @property
    def is_failure(self) -> bool:
        return self.variant == "destructive"
