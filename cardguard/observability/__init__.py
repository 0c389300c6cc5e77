"""
Observability for CardGuard.

Structured logging with per-request correlation and an audit trail of
remote model calls and published verdicts.
"""

from cardguard.observability.logging import (
    AuditLogger,
    LogContext,
    get_audit_logger,
    get_log_context,
    get_logger,
    log_context,
    set_log_context,
    setup_logging,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "log_context",
    "get_log_context",
    "set_log_context",
    "LogContext",
    "AuditLogger",
    "get_audit_logger",
]
