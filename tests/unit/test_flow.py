"""Tests for the transaction review flow."""

import asyncio

import pytest

from cardguard.config import CardGuardSettings
from cardguard.llm.exceptions import InvalidResponseError, TransportError
from cardguard.review.flow import (
    GENERIC_FAILURE_MESSAGE,
    MISSING_KEY_MESSAGE,
    TransactionReviewFlow,
)
from cardguard.review.models import VerdictResult, VerdictStatus


class FakeClient:
    """Fake text-generation client for testing."""

    def __init__(self, reply: str = "", error: Exception | None = None, gate: asyncio.Event | None = None):
        self.reply = reply
        self.error = error
        self.gate = gate
        self.prompts: list[str] = []
        self.closed = False
        self.in_flight_seen: list[bool] = []
        self.flow: TransactionReviewFlow | None = None

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.flow is not None:
            self.in_flight_seen.append(self.flow.is_analyzing)
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.reply

    async def close(self) -> None:
        self.closed = True


def make_flow(client: FakeClient, api_key: str | None = "test-key") -> TransactionReviewFlow:
    settings = CardGuardSettings(_env_file=None, gemini_api_key=api_key)
    flow = TransactionReviewFlow(settings=settings, client_factory=lambda _: client)
    client.flow = flow
    flow.update_fields(
        amount="129.99",
        merchant_name="Amazon",
        merchant_category="online",
        card_number="1234",
        card_type="visa",
        transaction_date="2024-05-01",
        transaction_time="14:30",
        location="New York, NY",
        country="United States",
    )
    return flow


class TestUpdateField:
    """Test form mutation."""

    def test_update_field_sets_value(self):
        flow = make_flow(FakeClient())

        flow.update_field("amount", "5.00")
        flow.update_field("is_online_transaction", True)

        assert flow.form.amount == "5.00"
        assert flow.form.is_online_transaction is True

    def test_values_are_not_validated(self):
        flow = make_flow(FakeClient())

        flow.update_field("amount", "-42")
        flow.update_field("transaction_date", "2999-01-01")

        assert flow.form.amount == "-42"

    def test_unknown_field_rejected(self):
        flow = make_flow(FakeClient())

        with pytest.raises(ValueError):
            flow.update_field("cvv", "123")

    def test_new_flow_starts_empty(self):
        flow = TransactionReviewFlow(settings=CardGuardSettings(_env_file=None))

        assert flow.form.amount == ""
        assert flow.form.currency == "USD"
        assert flow.result == VerdictResult()
        assert flow.is_analyzing is False


class TestSubmit:
    """Test submit outcomes."""

    @pytest.mark.asyncio
    async def test_structured_reply_published_verbatim(self):
        client = FakeClient(reply='{"status":"valid","confidence":92,"reasoning":"Normal spending pattern."}')
        flow = make_flow(client)

        verdict = await flow.submit()

        expected = VerdictResult(status=VerdictStatus.VALID, confidence=92, reasoning="Normal spending pattern.")
        assert verdict == expected
        assert flow.result == expected
        assert flow.is_analyzing is False
        assert client.in_flight_seen == [True]
        assert client.closed is True

        notifications = flow.drain_notifications()
        assert len(notifications) == 1
        assert notifications[0].title == "Analysis Complete"
        assert notifications[0].description == "Transaction marked as valid with 92% confidence"
        assert notifications[0].is_failure is False

    @pytest.mark.asyncio
    async def test_prose_reply_uses_fallback(self):
        raw = "Based on analysis, this transaction is fraudulent due to unusual location."
        flow = make_flow(FakeClient(reply=raw))

        verdict = await flow.submit()

        assert verdict == VerdictResult(status=VerdictStatus.FRAUDULENT, confidence=85, reasoning=raw)
        assert flow.drain_notifications()[0].description == (
            "Transaction marked as fraudulent with 85% confidence"
        )

    @pytest.mark.asyncio
    async def test_prose_without_keyword_is_valid(self):
        flow = make_flow(FakeClient(reply="Looks like a routine purchase."))

        verdict = await flow.submit()

        assert verdict.status == VerdictStatus.VALID
        assert verdict.confidence == 85

    @pytest.mark.asyncio
    async def test_prompt_sent_to_client(self):
        client = FakeClient(reply="valid")
        flow = make_flow(client)

        await flow.submit()

        assert len(client.prompts) == 1
        assert "- Merchant: Amazon (online)" in client.prompts[0]
        assert "ending in 1234" in client.prompts[0]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("api_key", [None, "", "   "])
    async def test_missing_key_never_calls_client(self, api_key):
        client = FakeClient(reply="valid")
        flow = make_flow(client, api_key=api_key)

        verdict = await flow.submit()

        assert verdict is None
        assert client.prompts == []
        assert flow.result.is_set is False
        assert flow.is_analyzing is False

        notifications = flow.drain_notifications()
        assert notifications[0].title == "Analysis Failed"
        assert notifications[0].description == MISSING_KEY_MESSAGE
        assert notifications[0].is_failure is True

    @pytest.mark.asyncio
    async def test_transport_error_reports_status(self):
        client = FakeClient(error=TransportError("API request failed: 503 Service Unavailable", status_code=503))
        flow = make_flow(client)

        verdict = await flow.submit()

        assert verdict is None
        assert flow.result.is_set is False
        assert flow.is_analyzing is False
        assert client.closed is True
        assert "503" in flow.drain_notifications()[0].description

    @pytest.mark.asyncio
    async def test_invalid_response_reported(self):
        flow = make_flow(FakeClient(error=InvalidResponseError("Invalid response from Gemini API")))

        await flow.submit()

        notification = flow.drain_notifications()[0]
        assert notification.description == "Invalid response from Gemini API"
        assert notification.variant == "destructive"

    @pytest.mark.asyncio
    async def test_unexpected_error_reported(self):
        flow = make_flow(FakeClient(error=RuntimeError()))

        verdict = await flow.submit()

        assert verdict is None
        assert flow.is_analyzing is False
        assert flow.drain_notifications()[0].description == GENERIC_FAILURE_MESSAGE

    @pytest.mark.asyncio
    async def test_failure_keeps_previous_verdict(self):
        client = FakeClient(reply='{"status":"valid","confidence":70,"reasoning":"ok"}')
        flow = make_flow(client)
        first = await flow.submit()

        client.error = TransportError("API request failed: 500", status_code=500)
        await flow.submit()

        assert flow.result == first

    @pytest.mark.asyncio
    async def test_result_replaced_wholesale(self):
        client = FakeClient(reply='{"status":"fraudulent","confidence":99,"reasoning":"first"}')
        flow = make_flow(client)
        await flow.submit()

        client.reply = "second reply"
        await flow.submit()

        assert flow.result == VerdictResult(status=VerdictStatus.VALID, confidence=85, reasoning="second reply")

    @pytest.mark.asyncio
    async def test_second_submit_while_in_flight_is_ignored(self):
        gate = asyncio.Event()
        client = FakeClient(reply="valid", gate=gate)
        flow = make_flow(client)

        first = asyncio.create_task(flow.submit())
        await asyncio.sleep(0)
        assert flow.is_analyzing is True

        assert await flow.submit() is None

        gate.set()
        await first

        assert len(client.prompts) == 1
        assert flow.is_analyzing is False

    @pytest.mark.asyncio
    async def test_duration_recorded(self):
        flow = make_flow(FakeClient(reply="valid"))

        await flow.submit()

        assert flow.last_duration_ms is not None
        assert flow.last_duration_ms >= 0

    @pytest.mark.asyncio
    async def test_notifications_drained_once(self):
        flow = make_flow(FakeClient(reply="valid"))

        await flow.submit()

        assert len(flow.drain_notifications()) == 1
        assert flow.drain_notifications() == []
