"""Dispatch context binding for structured logging.

Binds dispatch-scoped context (correlation ID, notification metadata) so
every log entry emitted while a notification is routed carries it.

Usage:
    from herald.logging import bind_dispatch_context

    with bind_dispatch_context(correlation_id="req-123", channel="email"):
        await manager.send("email", notification)
"""

import uuid
from contextlib import contextmanager
from typing import Any, Generator, Optional

import structlog


@contextmanager
def bind_dispatch_context(
    correlation_id: Optional[str] = None,
    **extra_context: Any,
) -> Generator[str, None, None]:
    """Bind dispatch-scoped context to all logs within the block.

    Args:
        correlation_id: Unique dispatch identifier. Auto-generated if not provided.
        **extra_context: Additional key-value pairs to include in logs.

    Yields:
        The correlation ID bound for the block.
    """
    context: dict[str, Any] = {"correlation_id": correlation_id or str(uuid.uuid4())}
    context.update(extra_context)

    structlog.contextvars.bind_contextvars(**context)
    try:
        yield context["correlation_id"]
    finally:
        structlog.contextvars.unbind_contextvars(*context.keys())


def get_correlation_id() -> Optional[str]:
    """Get the current correlation ID from the logging context."""
    ctx = structlog.contextvars.get_contextvars()
    return ctx.get("correlation_id")


def clear_dispatch_context() -> None:
    """Clear all dispatch-scoped context from the logging context."""
    structlog.contextvars.clear_contextvars()
