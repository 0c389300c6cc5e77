"""
Markdown rendering for the results and system status panels.
"""

from typing import Optional

from cardguard.config.settings import CardGuardSettings
from cardguard.review.models import VerdictResult

EMPTY_RESULT_MARKDOWN = """
<div style="text-align: center; opacity: 0.6; padding: 2em 0;">

🛡️

Submit transaction details to see analysis results

</div>
"""


def render_verdict(result: VerdictResult) -> str:
    """Results panel: badge, confidence score and reasoning."""
    if not result.is_set:
        return EMPTY_RESULT_MARKDOWN

    if result.is_fraudulent:
        badge = "🚨 **FRAUDULENT TRANSACTION**"
    else:
        badge = "✅ **VALID TRANSACTION**"

    return f"""
### {badge}

## {result.confidence_label}%
Confidence Score

---

**Reasoning:**

{result.reasoning}
"""


def render_system_status(
    settings: CardGuardSettings,
    last_duration_ms: Optional[float] = None,
) -> str:
    """System status panel: credential state, model and last response time."""
    api_status = "🟢 Online" if settings.has_api_key() else "🔴 Not configured"
    response_time = (
        f"{last_duration_ms / 1000:.1f}s" if last_duration_ms is not None else "n/a"
    )

    return f"""
| | |
|---|---|
| API Status | {api_status} |
| Model | {settings.model_display_name()} |
| Response Time | {response_time} |
"""
