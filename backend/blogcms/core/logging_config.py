"""
Structured JSON logging with correlation IDs and security audit events.
"""

import logging
import sys
import uuid
from typing import Optional
from datetime import datetime, timezone
from pythonjsonlogger import jsonlogger
from contextvars import ContextVar
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

# Context variable for correlation ID (thread-safe)
correlation_id_var: ContextVar[Optional[str]] = ContextVar(
    "correlation_id", default=None
)

AUDIT_LOGGER_NAME = "security.audit"


class CorrelationIdFilter(logging.Filter):
    """Add correlation ID to log records."""

    def filter(self, record):
        record.correlation_id = correlation_id_var.get() or "none"
        return True


class SecurityJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter that adds timestamp, level, logger and source fields."""

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record.setdefault("correlation_id", getattr(record, "correlation_id", "none"))
        log_record["source"] = {
            "file": record.pathname,
            "line": record.lineno,
            "function": record.funcName,
        }


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Configure structured JSON logging and return the audit logger."""
    formatter = SecurityJsonFormatter("%(message)s")

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.addFilter(CorrelationIdFilter())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(console_handler)

    for name in ("uvicorn", "uvicorn.access", "uvicorn.error"):
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers.clear()
        uvicorn_logger.addHandler(console_handler)
        uvicorn_logger.propagate = False

    security_logger = logging.getLogger(AUDIT_LOGGER_NAME)
    security_logger.setLevel(logging.INFO)
    return security_logger


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Middleware to add correlation IDs to requests."""

    async def dispatch(self, request: Request, call_next):
        correlation_id = request.headers.get("X-Correlation-ID") or str(uuid.uuid4())
        token = correlation_id_var.set(correlation_id)
        request.state.correlation_id = correlation_id
        try:
            response = await call_next(request)
        finally:
            correlation_id_var.reset(token)
        response.headers["X-Correlation-ID"] = correlation_id
        return response


def get_client_ip(request: Optional[Request]) -> str:
    """Extract client IP address from request, considering proxies."""
    if request is None:
        return "unknown"

    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip

    if request.client:
        return request.client.host

    return "unknown"


def log_security_event(
    event_type: str,
    message: str,
    level: int = logging.INFO,
    user_id: Optional[str] = None,
    email: Optional[str] = None,
    request: Optional[Request] = None,
    event_category: str = "security",
    **extra_fields,
):
    """
    Log a security event with structured data.

    Args:
        event_type: Type of security event (e.g., "auth.login.success")
        message: Human-readable message
        level: Logging level (default: INFO)
        user_id: User ID if applicable
        email: Account email if applicable
        request: Current request, used for IP, user agent, method and path
        event_category: Event category (default: "security")
        **extra_fields: Additional fields to include
    """
    logger = logging.getLogger(AUDIT_LOGGER_NAME)

    extra = {
        "event_type": event_type,
        "event_category": event_category,
    }

    if user_id:
        extra["user_id"] = user_id
    if email:
        extra["email"] = email
    if request is not None:
        extra["ip_address"] = get_client_ip(request)
        extra["user_agent"] = request.headers.get("user-agent")
        extra["request"] = {"method": request.method, "path": request.url.path}

    extra.update(extra_fields)

    logger.log(level, message, extra=extra)
