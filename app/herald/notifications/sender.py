"""Multi-channel notification sender.

Sends one notification through several logical channels registered in a
NotificationManager and emits lifecycle events.

Delivery strategies:
- best-effort: every channel is attempted concurrently; the result is
  'success', 'partial' or 'failed'.
- all-or-nothing: channels are attempted in order and sending stops at the
  first failure, which makes the whole dispatch 'failed'.

Usage Example:
    sender = NotificationSender(manager, events=events)
    result = await sender.send(notification, ["email", "sms", "in_app"])
    if result.status == "partial":
        logger.warning("partial_delivery", errors=result.errors)
"""

import asyncio
from dataclasses import dataclass
from typing import List, Optional, Sequence, TYPE_CHECKING, Union
from uuid import uuid4

from herald.logging import bind_dispatch_context, get_module_logger
from herald.notifications.events import (
    EventDispatcher,
    NotificationFailed,
    NotificationSending,
    NotificationSent,
)
from herald.notifications.exceptions import NotificationValidationError
from herald.notifications.manager import NotificationManager
from herald.notifications.models import (
    DeliveryStrategy,
    DispatchResult,
    Notification,
    NotificationResponse,
)

if TYPE_CHECKING:
    from herald.configuration import Settings

logger = get_module_logger()


@dataclass
class _ChannelOutcome:
    channel: str
    response: Optional[NotificationResponse] = None
    error: Optional[str] = None

    @property
    def is_success(self) -> bool:
        return self.response is not None and self.response.success


class NotificationSender:
    """Fan-out of one notification across logical channels.

    Attributes:
        manager: Registry used to resolve channel names
        strategy: Default DeliveryStrategy
        events: EventDispatcher receiving lifecycle events
    """

    def __init__(
        self,
        manager: NotificationManager,
        strategy: Union[DeliveryStrategy, str] = DeliveryStrategy.BEST_EFFORT,
        events: Optional[EventDispatcher] = None,
    ):
        self.manager = manager
        self.strategy = DeliveryStrategy(strategy)
        self.events = events or EventDispatcher()

    @classmethod
    def from_settings(
        cls,
        manager: NotificationManager,
        settings: "Settings",
        events: Optional[EventDispatcher] = None,
    ) -> "NotificationSender":
        return cls(
            manager,
            strategy=settings.notifications.delivery_strategy,
            events=events,
        )

    async def send(
        self,
        notification: Notification,
        channels: Sequence[str],
        strategy: Optional[Union[DeliveryStrategy, str]] = None,
    ) -> DispatchResult:
        """Send a notification through each named channel.

        Args:
            notification: Payload passed unchanged to every channel
            channels: Logical channel names
            strategy: Override of the sender's default DeliveryStrategy

        Returns:
            DispatchResult with per-channel responses and errors

        Raises:
            NotificationValidationError: A driver rejected the request shape
        """
        strategy = DeliveryStrategy(strategy or self.strategy)
        channel_names = list(dict.fromkeys(name.strip().lower() for name in channels))
        correlation_id = uuid4()

        with bind_dispatch_context(
            correlation_id=str(correlation_id), delivery_strategy=strategy.value
        ):
            await self.events.dispatch(
                NotificationSending(
                    notification, channel_names, correlation_id=correlation_id
                )
            )

            if strategy is DeliveryStrategy.BEST_EFFORT:
                outcomes = list(
                    await asyncio.gather(
                        *(self._send_to_channel(name, notification) for name in channel_names)
                    )
                )
            else:
                outcomes = []
                for name in channel_names:
                    outcome = await self._send_to_channel(name, notification)
                    outcomes.append(outcome)
                    if not outcome.is_success:
                        logger.warning(
                            "delivery_aborted",
                            failed_channel=name,
                            skipped=channel_names[len(outcomes):],
                        )
                        break

            for outcome in outcomes:
                if not outcome.is_success:
                    await self.events.dispatch(
                        NotificationFailed(
                            notification,
                            channel_names,
                            correlation_id=correlation_id,
                            error=outcome.error,
                            failed_channel=outcome.channel,
                        )
                    )

            result = self._build_result(strategy, outcomes)

            if result.status == "failed":
                await self.events.dispatch(
                    NotificationFailed(
                        notification,
                        channel_names,
                        correlation_id=correlation_id,
                        error="; ".join(f"{k}: {v}" for k, v in result.errors.items()),
                    )
                )
            else:
                await self.events.dispatch(
                    NotificationSent(
                        notification,
                        channel_names,
                        correlation_id=correlation_id,
                        responses=result.results,
                    )
                )

            logger.info(
                "notification_dispatched",
                status=result.status,
                channels=channel_names,
                success_count=len(result.results),
                error_count=len(result.errors),
            )
            return result

    async def _send_to_channel(
        self, name: str, notification: Notification
    ) -> _ChannelOutcome:
        try:
            response = await self.manager.send(name, notification)
        except NotificationValidationError:
            raise
        except Exception as e:
            logger.error(
                "channel_send_failed",
                channel=name,
                error=str(e),
                error_type=type(e).__name__,
            )
            return _ChannelOutcome(channel=name, error=str(e))

        if response.success:
            return _ChannelOutcome(channel=name, response=response)
        return _ChannelOutcome(
            channel=name,
            response=response,
            error=response.error or f"Channel returned status {response.status.value}",
        )

    @staticmethod
    def _build_result(
        strategy: DeliveryStrategy, outcomes: List[_ChannelOutcome]
    ) -> DispatchResult:
        results = {o.channel: o.response for o in outcomes if o.is_success}
        errors = {o.channel: o.error for o in outcomes if not o.is_success}
        responses = {o.channel: o.response for o in outcomes if o.response is not None}

        if not errors:
            status = "success"
        elif strategy is DeliveryStrategy.BEST_EFFORT and results:
            status = "partial"
        else:
            status = "failed"

        return DispatchResult(
            status=status, results=results, errors=errors, responses=responses
        )
