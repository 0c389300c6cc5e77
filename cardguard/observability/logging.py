"""
Structured logging for CardGuard with JSON output and per-request correlation.
"""

import logging
import sys
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import structlog


@dataclass
class LogContext:
    """Context for structured logging."""

    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    environment: str = "dev"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


_log_context: ContextVar[Optional[LogContext]] = ContextVar("log_context", default=None)


def get_log_context() -> Optional[LogContext]:
    """Get current log context."""
    return _log_context.get()


def set_log_context(context: LogContext) -> None:
    """Set log context."""
    _log_context.set(context)


@contextmanager
def log_context(**kwargs):
    """
    Context manager for enriching logs.

    A fresh ``request_id`` is generated unless one is passed explicitly.

    Example:
        with log_context(environment="staging"):
            logger.info("transaction_submitted")
    """
    current = get_log_context() or LogContext()

    values = current.to_dict()
    values.pop("request_id", None)
    values.update(kwargs)
    new_context = LogContext(**values)

    token = _log_context.set(new_context)
    try:
        yield new_context
    finally:
        _log_context.reset(token)


def add_context_to_event(logger, method_name, event_dict):
    """Add context to log event."""
    context = get_log_context()
    if context:
        event_dict.update(context.to_dict())
    return event_dict


def add_timestamp(logger, method_name, event_dict):
    """Add ISO timestamp to event."""
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def setup_logging(
    level: str = "INFO",
    json_output: bool = False,
    environment: str = "dev",
) -> structlog.stdlib.BoundLogger:
    """
    Setup structured logging.

    Args:
        level: Log level
        json_output: Whether to output JSON
        environment: Environment name

    Returns:
        Configured logger
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper()),
    )
    logging.getLogger().setLevel(getattr(logging, level.upper()))

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        add_context_to_event,
        add_timestamp,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    set_log_context(LogContext(environment=environment))

    return structlog.get_logger()


def get_logger(name: str = __name__) -> structlog.stdlib.BoundLogger:
    """
    Get a logger instance.

    Args:
        name: Logger name

    Returns:
        Configured logger
    """
    return structlog.get_logger(name)


class AuditLogger:
    """
    Specialized logger for audit trails.

    Records every call to the remote model and every verdict shown to the user.
    """

    def __init__(self, logger: Optional[structlog.stdlib.BoundLogger] = None):
        """Initialize audit logger."""
        self.logger = logger or get_logger("cardguard.audit")

    def log_llm_request(
        self,
        provider: str,
        model: str,
        duration_ms: float,
        success: bool,
        status_code: Optional[int] = None,
    ) -> None:
        """Log LLM API request."""
        self.logger.info(
            "llm_request",
            provider=provider,
            model=model,
            duration_ms=round(duration_ms, 2),
            success=success,
            status_code=status_code,
        )

    def log_verdict(
        self,
        status: str,
        confidence: float,
        used_fallback: bool,
        duration_ms: float,
    ) -> None:
        """Log a published verdict."""
        self.logger.info(
            "verdict_published",
            status=status,
            confidence=confidence,
            used_fallback=used_fallback,
            duration_ms=round(duration_ms, 2),
        )

    def log_error(
        self,
        error_type: str,
        error_message: str,
        component: str,
        **extra,
    ) -> None:
        """Log error event."""
        self.logger.error(
            "error_occurred",
            error_type=error_type,
            error_message=error_message,
            component=component,
            **extra,
        )


_audit_logger: Optional[AuditLogger] = None


def get_audit_logger() -> AuditLogger:
    """Get global audit logger."""
    global _audit_logger

    if _audit_logger is None:
        _audit_logger = AuditLogger()

    return _audit_logger
