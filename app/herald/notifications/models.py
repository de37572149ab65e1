"""Notification dispatch core models.

Channel-agnostic models shared by the registry, the fallback dispatcher and
every driver. Drivers translate a Notification into their own wire shape;
the core never interprets its contents.

Uses Pydantic BaseModel for:
- Runtime validation of caller-supplied payloads and channel configs
- Pass-through of driver-specific extension fields (extra="allow")
"""

import math
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class ChannelType(str, Enum):
    """Well-known logical channel families.

    Any string is a valid channel type; these are the ones the bundled
    drivers report.
    """

    EMAIL = "email"
    SMS = "sms"
    PUSH = "push"
    CHAT = "chat"
    IN_APP = "in_app"


class NotificationPriority(Enum):
    """Notification priority levels."""

    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"


class NotificationStatus(Enum):
    """Delivery status reported by a driver."""

    PENDING = "pending"
    QUEUED = "queued"
    SENT = "sent"
    FAILED = "failed"


class FallbackStrategy(str, Enum):
    """Strategies for choosing among several drivers of one logical channel.

    PRIORITY_FALLBACK favours reliability: drivers are tried by priority
    until one succeeds. ROUND_ROBIN and RANDOM distribute load and attempt
    exactly one driver per dispatch.
    """

    PRIORITY_FALLBACK = "priority-fallback"
    ROUND_ROBIN = "round-robin"
    RANDOM = "random"


class DeliveryStrategy(str, Enum):
    """How a multi-channel send treats per-channel failures."""

    ALL_OR_NOTHING = "all-or-nothing"
    BEST_EFFORT = "best-effort"


class ChannelConfig(BaseModel):
    """Driver configuration plus the dispatcher's policy fields.

    Driver-specific keys (credentials, endpoints) are accepted as extra
    fields and read by the driver; the core only reads the policy fields.

    Attributes:
        priority: Higher is tried first (default: 0)
        weight: Relative selection probability for the random strategy.
            Unset counts as 1.
        enabled: Disabled configs are skipped at registration time

    Example:
        config = ChannelConfig(priority=10, weight=3, api_key="re_123")
        config.options["api_key"]  # "re_123"
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    priority: int = 0
    weight: Optional[float] = None
    enabled: bool = True

    @field_validator("weight")
    @classmethod
    def validate_weight(cls, v: Optional[float]) -> Optional[float]:
        """Weights must be non-negative."""
        if v is not None and (math.isnan(v) or v < 0):
            raise ValueError(f"Channel weight must be non-negative: {v}")
        return v

    @property
    def options(self) -> Dict[str, Any]:
        """Driver-specific settings (everything but the policy fields)."""
        return dict(self.model_extra or {})

    @property
    def effective_weight(self) -> float:
        return 1.0 if self.weight is None else float(self.weight)


class Notification(BaseModel):
    """Channel-agnostic notification payload.

    At least one of message, text or body must be non-blank. Any other
    field (recipient identifiers, push tokens, template data) is accepted
    and passed through to the driver untouched.

    Attributes:
        message: Plain text message body
        text: Alternative text field (chat-style payloads)
        body: Alternative body field (email-style payloads)
        subject: Subject line (email), title (push/chat), ignored (SMS)
        priority: NotificationPriority level (default: NORMAL)
        metadata: Additional context (e.g., correlation_id, tenant)

    Example:
        notification = Notification(
            subject="Payment received",
            message="We received your payment of $20.",
            user_id="user-42",
        )
    """

    model_config = ConfigDict(extra="allow")

    message: Optional[str] = None
    text: Optional[str] = None
    body: Optional[str] = None
    subject: Optional[str] = None
    priority: NotificationPriority = NotificationPriority.NORMAL
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def validate_content(self) -> "Notification":
        """Ensure the payload carries some message content."""
        if not any(
            value and value.strip() for value in (self.message, self.text, self.body)
        ):
            raise ValueError(
                "Notification requires at least one of message, text or body"
            )
        return self

    @property
    def content(self) -> str:
        """First non-blank of message, text, body."""
        for value in (self.message, self.text, self.body):
            if value and value.strip():
                return value
        return ""

    def get(self, field: str, default: Any = None) -> Any:
        """Read a declared or pass-through field by name."""
        if field in type(self).model_fields:
            return getattr(self, field)
        return (self.model_extra or {}).get(field, default)


class NotificationResponse(BaseModel):
    """Result of a single driver send.

    The dispatcher inspects only ``success`` (and ``error`` for logging).
    Driver extension fields such as ``units`` or ``success_count`` are kept
    as extra fields and returned to the caller unmodified.

    Attributes:
        success: Whether the provider accepted the notification
        status: NotificationStatus reported by the driver
        message_id: Provider reference (message ID, Slack ts, ...)
        channel: Name of the driver that produced the response
        error: Human-readable error for failures
        error_code: Machine error code for failures
        raw: Raw provider payload or error (never inspected by the core)

    Example:
        response = NotificationResponse.sent(channel="resend", message_id="em_1")
        failure = NotificationResponse.failed(
            channel="resend", error="HTTP 503", error_code="HTTP_503"
        )
    """

    model_config = ConfigDict(extra="allow", arbitrary_types_allowed=True)

    success: bool
    status: NotificationStatus
    message_id: Optional[str] = None
    channel: Optional[str] = None
    error: Optional[str] = None
    error_code: Optional[str] = None
    raw: Optional[Any] = None

    @property
    def is_success(self) -> bool:
        return self.success

    @classmethod
    def sent(
        cls,
        channel: Optional[str] = None,
        message_id: Optional[str] = None,
        status: NotificationStatus = NotificationStatus.SENT,
        raw: Optional[Any] = None,
        **extra: Any,
    ) -> "NotificationResponse":
        """Create a successful response."""
        return cls(
            success=True,
            status=status,
            channel=channel,
            message_id=message_id,
            raw=raw,
            **extra,
        )

    @classmethod
    def failed(
        cls,
        error: str,
        channel: Optional[str] = None,
        error_code: Optional[str] = None,
        raw: Optional[Any] = None,
        **extra: Any,
    ) -> "NotificationResponse":
        """Create a failed response."""
        return cls(
            success=False,
            status=NotificationStatus.FAILED,
            channel=channel,
            error=error,
            error_code=error_code,
            raw=raw,
            **extra,
        )


class ManagerConfig(BaseModel):
    """Registry construction options.

    Attributes:
        default_channel: Channel returned by get_default_channel()
        enable_fallback: Scan other ready channels when the preferred one
            is missing or not ready (default: True)
    """

    default_channel: Optional[str] = None
    enable_fallback: bool = True


class DispatchResult(BaseModel):
    """Outcome of sending one notification through several channels.

    Attributes:
        status: 'success' (no errors), 'partial' (some of each) or 'failed'
        results: Successful responses keyed by channel name
        errors: Error messages keyed by channel name
        responses: Every response received, successful or not
    """

    status: str
    results: Dict[str, NotificationResponse] = Field(default_factory=dict)
    errors: Dict[str, str] = Field(default_factory=dict)
    responses: Dict[str, NotificationResponse] = Field(default_factory=dict)

    @property
    def is_success(self) -> bool:
        return self.status == "success"
