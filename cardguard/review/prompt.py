"""
Prompt templating for transaction review.
"""

from cardguard.review.models import TransactionInput

RESPONSE_FORMAT_INSTRUCTION = """Please analyze this transaction and determine if it's "valid" or "fraudulent".
Provide your response in this exact JSON format:
{
  "status": "valid" or "fraudulent",
  "confidence": number between 0-100,
  "reasoning": "detailed explanation of your analysis"
}"""


def build_prompt(transaction: TransactionInput) -> str:
    """
    Describe a transaction in plain language for the remote model.

    Every form field is embedded, blank or not, followed by the instruction
    to answer with a JSON verdict.
    """
    transaction_type = "Online" if transaction.is_online_transaction else "In-person"

    details = [
        f"- Amount: {transaction.amount} {transaction.currency}",
        f"- Merchant: {transaction.merchant_name} ({transaction.merchant_category})",
        f"- Card: {transaction.card_type} ending in {transaction.last_four}",
        f"- Date/Time: {transaction.transaction_date} at {transaction.transaction_time}",
        f"- Location: {transaction.location}, {transaction.country}",
        f"- Transaction Type: {transaction_type}",
        f"- Customer Age: {transaction.customer_age}",
        f"- Account Balance: {transaction.account_balance}",
        f"- Previous Transaction: {transaction.previous_transaction_amount}",
        f"- Time Since Last Transaction: {transaction.time_since_last_transaction}",
        f"- Additional Notes: {transaction.additional_notes}",
    ]

    return "\n".join(
        [
            "Analyze this credit card transaction for fraud detection:",
            "",
            "Transaction Details:",
            *details,
            "",
            RESPONSE_FORMAT_INSTRUCTION,
        ]
    )
