#!/usr/bin/env python3
"""
Gradio interface for CardGuard.

A single page with the transaction form on the left and the analysis result
and system status on the right.
"""

import argparse
from typing import Any, Optional

import gradio as gr
from loguru import logger

from cardguard.config.settings import CardGuardSettings, get_settings
from cardguard.observability.logging import setup_logging
from cardguard.review.flow import TransactionReviewFlow
from cardguard.review.models import (
    CARD_TYPES,
    CURRENCIES,
    MERCHANT_CATEGORIES,
    Notification,
    VerdictResult,
)
from cardguard.ui.render import render_system_status, render_verdict

SUBMIT_LABEL = "🛡️ Analyze for Fraud"
BUSY_LABEL = "⏳ Analyzing Transaction..."
IN_PERSON = "In-Person"
ONLINE = "Online"

# Order of the form inputs passed to ``analyze_transaction``.
FORM_FIELDS = [
    "amount",
    "currency",
    "merchant_name",
    "merchant_category",
    "card_number",
    "card_type",
    "transaction_date",
    "transaction_time",
    "location",
    "country",
    "is_online_transaction",
    "customer_age",
    "account_balance",
    "previous_transaction_amount",
    "time_since_last_transaction",
    "additional_notes",
]


def apply_form_values(flow: TransactionReviewFlow, values: tuple) -> None:
    """Copy raw component values into the flow's form."""
    for field, value in zip(FORM_FIELDS, values):
        if field == "is_online_transaction":
            value = value == ONLINE
        elif value is None:
            value = ""
        flow.update_field(field, value)


def show_notification(notification: Notification) -> None:
    message = f"{notification.title}: {notification.description}"
    if notification.is_failure:
        gr.Warning(message)
    else:
        gr.Info(message)


def lock_submit() -> dict[str, Any]:
    return gr.update(value=BUSY_LABEL, interactive=False)


def unlock_submit() -> dict[str, Any]:
    return gr.update(value=SUBMIT_LABEL, interactive=True)


def panel_outputs(flow: TransactionReviewFlow) -> tuple[TransactionReviewFlow, str, str]:
    return (
        flow,
        render_verdict(flow.result),
        render_system_status(flow.settings, flow.last_duration_ms),
    )


async def analyze_transaction(flow: TransactionReviewFlow, *values):
    """Submit handler: update the form, run the analysis, raise toasts."""
    apply_form_values(flow, values)

    missing = flow.form.missing_required()
    if missing:
        labels = ", ".join(name.replace("_", " ") for name in missing)
        gr.Warning(f"Please fill in the required fields: {labels}")
        return panel_outputs(flow)

    await flow.submit()

    for notification in flow.drain_notifications():
        show_notification(notification)

    return panel_outputs(flow)


def create_interface(settings: Optional[CardGuardSettings] = None) -> gr.Blocks:
    """Build the single-page review interface."""
    settings = settings or get_settings()

    with gr.Blocks(title="CardGuard - Fraud Detection", theme=gr.themes.Soft()) as interface:
        flow_state = gr.State(lambda: TransactionReviewFlow(settings))

        gr.Markdown(
            f"""
            # 🛡️ Fraud Detection System
            AI-powered credit card transaction analysis using the {settings.model_display_name()} model.
            Enter transaction details below for real-time fraud detection.
            """
        )

        with gr.Row():
            with gr.Column(scale=2):
                gr.Markdown("### 💳 Transaction Details\nFill in the transaction information for fraud analysis")

                with gr.Row():
                    amount = gr.Textbox(label="💲 Transaction Amount", placeholder="0.00", scale=2)
                    currency = gr.Dropdown(choices=CURRENCIES, value="USD", label="Currency")

                with gr.Row():
                    merchant_name = gr.Textbox(label="Merchant Name", placeholder="e.g., Amazon, Walmart, etc.")
                    merchant_category = gr.Dropdown(
                        choices=[(label, value) for value, label in MERCHANT_CATEGORIES.items()],
                        label="Merchant Category",
                    )

                with gr.Row():
                    card_number = gr.Textbox(
                        label="Card Number (Last 4 digits)",
                        placeholder="****-****-****-1234",
                        max_length=4,
                    )
                    card_type = gr.Dropdown(
                        choices=[(label, value) for value, label in CARD_TYPES.items()],
                        label="Card Type",
                    )

                with gr.Row():
                    transaction_date = gr.Textbox(label="🕒 Transaction Date", placeholder="YYYY-MM-DD")
                    transaction_time = gr.Textbox(label="Transaction Time", placeholder="HH:MM")

                with gr.Row():
                    location = gr.Textbox(label="📍 Location (City, State)", placeholder="e.g., New York, NY")
                    country = gr.Textbox(label="Country", placeholder="e.g., United States")

                transaction_type = gr.Radio(
                    choices=[IN_PERSON, ONLINE],
                    value=IN_PERSON,
                    label="Transaction Type",
                )

                with gr.Row():
                    customer_age = gr.Textbox(label="Customer Age", placeholder="25")
                    account_balance = gr.Textbox(label="Account Balance", placeholder="5000.00")

                with gr.Row():
                    previous_transaction_amount = gr.Textbox(
                        label="Previous Transaction Amount", placeholder="50.00"
                    )
                    time_since_last_transaction = gr.Textbox(
                        label="Time Since Last Transaction", placeholder="e.g., 2 hours, 1 day"
                    )

                additional_notes = gr.Textbox(
                    label="Additional Notes",
                    placeholder="Any additional context or suspicious behavior...",
                    lines=3,
                )

                submit_btn = gr.Button(SUBMIT_LABEL, variant="primary")

            with gr.Column(scale=1):
                gr.Markdown("### ⚠️ Analysis Result")
                result_output = gr.Markdown(render_verdict(VerdictResult()))

                gr.Markdown("### System Status")
                status_output = gr.Markdown(render_system_status(settings))

        form_inputs = [
            amount,
            currency,
            merchant_name,
            merchant_category,
            card_number,
            card_type,
            transaction_date,
            transaction_time,
            location,
            country,
            transaction_type,
            customer_age,
            account_balance,
            previous_transaction_amount,
            time_since_last_transaction,
            additional_notes,
        ]

        submit_btn.click(
            fn=lock_submit,
            outputs=submit_btn,
            queue=False,
        ).then(
            fn=analyze_transaction,
            inputs=[flow_state, *form_inputs],
            outputs=[flow_state, result_output, status_output],
        ).then(
            fn=unlock_submit,
            outputs=submit_btn,
        )

    return interface


def main():
    """Launch the CardGuard web interface."""
    parser = argparse.ArgumentParser(description="CardGuard transaction fraud review")
    parser.add_argument("--host", help="Interface to bind (default from settings)")
    parser.add_argument("--port", type=int, help="Port to listen on (default from settings)")
    parser.add_argument("--share", action="store_true", help="Create a public Gradio share link")
    args = parser.parse_args()

    settings = get_settings()
    setup_logging(
        level=settings.log_level,
        json_output=settings.json_logs,
        environment=settings.environment,
    )

    if not settings.has_api_key():
        logger.warning("No Gemini API key configured; analyses will fail until one is set")

    host = args.host or settings.server_host
    port = args.port or settings.server_port

    logger.info(f"Starting CardGuard on http://{host}:{port}")
    interface = create_interface(settings)
    interface.queue()
    interface.launch(
        server_name=host,
        server_port=port,
        share=args.share,
    )


if __name__ == "__main__":
    main()
