"""Structured logging infrastructure.

Centralized structlog configuration and utilities.

Public API:
    - configure_logging(): Initialize logging for the application
    - get_module_logger(): Get a logger for the calling module
    - bind_dispatch_context(): Context manager for dispatch-scoped logging
    - get_correlation_id(): Get current correlation ID from context
    - clear_dispatch_context(): Clear all dispatch context

Example:
    from herald.logging import configure_logging, get_module_logger

    configure_logging()
    logger = get_module_logger()
    logger.info("module_initialized")
"""

from herald.logging.setup import configure_logging, get_module_logger
from herald.logging.context import (
    bind_dispatch_context,
    clear_dispatch_context,
    get_correlation_id,
)
from herald.logging.formatters import (
    SENSITIVE_PATTERNS,
    add_app_info,
    mask_sensitive_data,
    truncate_large_values,
)

__all__ = [
    "configure_logging",
    "get_module_logger",
    "bind_dispatch_context",
    "clear_dispatch_context",
    "get_correlation_id",
    "SENSITIVE_PATTERNS",
    "add_app_info",
    "mask_sensitive_data",
    "truncate_large_values",
]
