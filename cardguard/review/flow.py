"""
Transaction review flow.

Holds the form values, the last verdict and the in-flight flag for one
form instance, and runs a single analysis against the remote model.
"""

import time
from typing import Any, Callable, Optional

from cardguard.config.settings import CardGuardSettings, get_settings
from cardguard.llm.exceptions import CardGuardError, ConfigurationError
from cardguard.llm.gemini import GeminiClient, TextGenerationClient
from cardguard.observability.logging import get_audit_logger, get_logger, log_context
from cardguard.review.models import Notification, TransactionInput, VerdictResult
from cardguard.review.prompt import build_prompt
from cardguard.review.verdict import parse_verdict

logger = get_logger(__name__)

MISSING_KEY_MESSAGE = (
    "Gemini API key not configured. Please add CARDGUARD_GEMINI_API_KEY "
    "(or GEMINI_API_KEY) to your .env.local file."
)
GENERIC_FAILURE_MESSAGE = "There was an error analyzing the transaction"

ClientFactory = Callable[[CardGuardSettings], TextGenerationClient]


class TransactionReviewFlow:
    """
    State container and submit logic for one transaction form.

    Example:
        ```python
        flow = TransactionReviewFlow()
        flow.update_field("amount", "129.99")
        flow.update_field("merchant_name", "Amazon")

        verdict = await flow.submit()
        for notification in flow.drain_notifications():
            print(notification.title, notification.description)
        ```
    """

    def __init__(
        self,
        settings: Optional[CardGuardSettings] = None,
        client_factory: Optional[ClientFactory] = None,
    ):
        self.settings = settings or get_settings()
        self.client_factory = client_factory or GeminiClient.from_settings
        self.form = TransactionInput()
        self.result = VerdictResult()
        self.is_analyzing = False
        self.last_duration_ms: Optional[float] = None
        self._notifications: list[Notification] = []

    def update_field(self, field: str, value: Any) -> None:
        """Set one form value. Values are stored as given."""
        if field not in TransactionInput.model_fields:
            raise ValueError(f"Unknown transaction field: {field}")
        setattr(self.form, field, value)

    def update_fields(self, **values: Any) -> None:
        for field, value in values.items():
            self.update_field(field, value)

    def drain_notifications(self) -> list[Notification]:
        """Return pending notifications and clear the outbox."""
        pending, self._notifications = self._notifications, []
        return pending

    def _publish(self, notification: Notification) -> None:
        self._notifications.append(notification)

    async def submit(self) -> Optional[VerdictResult]:
        """
        Analyze the current form values.

        On success the verdict replaces ``result`` and a success notification
        is published. On failure a destructive notification carries the error
        message and ``result`` is left as it was. The in-flight flag is
        cleared on every path.

        Returns:
            The new verdict, or None if the analysis failed or another one
            is still running
        """
        if self.is_analyzing:
            logger.warning("submit_ignored", reason="analysis already in flight")
            return None

        self.is_analyzing = True
        audit = get_audit_logger()
        start_time = time.perf_counter()

        with log_context():
            try:
                return await self._analyze(start_time)

            except CardGuardError as e:
                audit.log_error(
                    error_type=type(e).__name__,
                    error_message=e.message,
                    component="review_flow",
                    status_code=getattr(e, "status_code", None),
                )
                self._publish(
                    Notification(
                        title="Analysis Failed",
                        description=e.message,
                        variant="destructive",
                    )
                )
                return None

            except Exception as e:
                logger.exception("analysis_error", error=str(e))
                self._publish(
                    Notification(
                        title="Analysis Failed",
                        description=str(e) or GENERIC_FAILURE_MESSAGE,
                        variant="destructive",
                    )
                )
                return None

            finally:
                self.last_duration_ms = (time.perf_counter() - start_time) * 1000
                self.is_analyzing = False

    async def _analyze(self, start_time: float) -> VerdictResult:
        if not self.settings.has_api_key():
            raise ConfigurationError(MISSING_KEY_MESSAGE)

        prompt = build_prompt(self.form)
        logger.info(
            "transaction_submitted",
            currency=self.form.currency,
            merchant_category=self.form.merchant_category,
            online=self.form.is_online_transaction,
        )
        logger.debug("prompt_built", prompt=prompt)

        client = self.client_factory(self.settings)
        try:
            raw_text = await client.generate(prompt)
        finally:
            await client.close()

        verdict, used_fallback = parse_verdict(raw_text)
        self.result = verdict

        get_audit_logger().log_verdict(
            status=verdict.status.value,
            confidence=verdict.confidence,
            used_fallback=used_fallback,
            duration_ms=(time.perf_counter() - start_time) * 1000,
        )
        self._publish(
            Notification(
                title="Analysis Complete",
                description=(
                    f"Transaction marked as {verdict.status.value} "
                    f"with {verdict.confidence_label}% confidence"
                ),
            )
        )
        return verdict
