"""Shared utilities for the billing core."""

from careledger.utils.logging_utils import (
    LogContext,
    generate_correlation_id,
    get_correlation_id,
    get_log_context,
    log_function_call,
    sanitize_sensitive_data,
)

__all__ = [
    "LogContext",
    "generate_correlation_id",
    "get_correlation_id",
    "get_log_context",
    "log_function_call",
    "sanitize_sensitive_data",
]
