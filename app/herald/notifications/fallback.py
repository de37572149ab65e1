"""Fallback group dispatcher.

A FallbackGroup backs one logical channel with several drivers and decides,
per send, which driver attempts delivery:

- priority-fallback: ready drivers are tried by (priority desc, registration
  asc) until one succeeds; when all fail the last failure is returned.
- round-robin: a lock-guarded cursor picks exactly one driver per send.
- random: a weighted draw picks exactly one driver per send.

The group satisfies the NotificationChannel protocol, so the registry
stores it like any other channel.

Usage Example:
    group = FallbackGroup(
        "email",
        members=[
            (resend_channel, ChannelConfig(priority=10)),
            (smtp_channel, ChannelConfig(priority=1)),
        ],
        strategy=FallbackStrategy.PRIORITY_FALLBACK,
    )
    response = await group.send(notification)
"""

import math
import random
import threading
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

from herald.logging import get_module_logger
from herald.notifications.channels.base import NotificationChannel
from herald.notifications.channels.validation import provider_failure
from herald.notifications.exceptions import (
    AllDriversUnavailableError,
    ChannelConfigurationError,
    NotificationValidationError,
)
from herald.notifications.models import (
    ChannelConfig,
    FallbackStrategy,
    Notification,
    NotificationResponse,
)

logger = get_module_logger()


@dataclass(frozen=True)
class FallbackMember:
    """One driver inside a fallback group.

    Attributes:
        channel: Driver instance
        priority: Higher is tried first under priority-fallback
        weight: Relative selection probability under random (None counts as 1)
        sequence: Registration order, used only to break priority ties
    """

    channel: NotificationChannel
    priority: int = 0
    weight: Optional[float] = None
    sequence: int = 0

    def __post_init__(self):
        if self.weight is not None and (math.isnan(self.weight) or self.weight < 0):
            raise ChannelConfigurationError(
                f"Driver weight must be a non-negative number: {self.weight}",
                details={"driver": self.channel.channel_name, "weight": self.weight},
            )

    @property
    def name(self) -> str:
        return self.channel.channel_name

    @property
    def effective_weight(self) -> float:
        return 1.0 if self.weight is None else float(self.weight)


MemberSpec = Union[
    FallbackMember,
    Tuple[NotificationChannel, ChannelConfig],
    NotificationChannel,
]


def _to_member(spec: MemberSpec, sequence: int) -> Optional[FallbackMember]:
    """Normalize a member spec, dropping disabled configs."""
    if isinstance(spec, FallbackMember):
        return FallbackMember(
            channel=spec.channel,
            priority=spec.priority,
            weight=spec.weight,
            sequence=sequence,
        )
    if isinstance(spec, tuple):
        channel, config = spec
        if not config.enabled:
            return None
        return FallbackMember(
            channel=channel,
            priority=config.priority,
            weight=config.weight,
            sequence=sequence,
        )
    return FallbackMember(channel=spec, sequence=sequence)


class FallbackGroup:
    """Strategy-driven driver selection for one logical channel.

    Attributes:
        name: Logical channel name the group is registered under
        strategy: Immutable FallbackStrategy
        members: Members in the order the strategy walks them
        cursor: Next round-robin position (always 0 for other strategies)
    """

    def __init__(
        self,
        name: str,
        members: Sequence[MemberSpec],
        strategy: FallbackStrategy = FallbackStrategy.PRIORITY_FALLBACK,
        rng: Optional[random.Random] = None,
    ):
        """Initialize a fallback group.

        Args:
            name: Logical channel name
            members: FallbackMember objects, (channel, ChannelConfig) pairs
                or bare channels (priority 0, weight 1)
            strategy: How a driver is chosen per send
            rng: Random source for the random strategy (injectable for tests)

        Raises:
            ChannelConfigurationError: No enabled members, or random weights
                that do not sum to a positive number
        """
        normalized = [
            member
            for member in (_to_member(spec, seq) for seq, spec in enumerate(members))
            if member is not None
        ]
        if not normalized:
            raise ChannelConfigurationError(
                f"Fallback group '{name}' requires at least one driver",
                details={"channel": name},
            )

        self._name = name
        self._strategy = FallbackStrategy(strategy)
        if self._strategy is FallbackStrategy.PRIORITY_FALLBACK:
            normalized.sort(key=lambda m: (-m.priority, m.sequence))
        self._members: Tuple[FallbackMember, ...] = tuple(normalized)

        self._total_weight = sum(m.effective_weight for m in self._members)
        if self._strategy is FallbackStrategy.RANDOM and self._total_weight <= 0:
            raise ChannelConfigurationError(
                f"Fallback group '{name}' weights must sum to a positive number",
                details={
                    "channel": name,
                    "weights": [m.weight for m in self._members],
                },
            )

        self._rng = rng or random.Random()
        self._cursor = 0
        self._cursor_lock = threading.Lock()

        logger.debug(
            "initialized_fallback_group",
            channel=name,
            strategy=self._strategy.value,
            drivers=[m.name for m in self._members],
        )

    @property
    def channel_name(self) -> str:
        return self._name

    @property
    def channel_type(self) -> str:
        return self._members[0].channel.channel_type

    @property
    def strategy(self) -> FallbackStrategy:
        return self._strategy

    @property
    def members(self) -> Tuple[FallbackMember, ...]:
        return self._members

    @property
    def cursor(self) -> int:
        with self._cursor_lock:
            return self._cursor

    def is_ready(self) -> bool:
        """A group is ready when any member is ready."""
        return any(m.channel.is_ready() for m in self._members)

    def is_valid_notification_request(self, notification: Notification) -> bool:
        return any(
            m.channel.is_valid_notification_request(notification)
            for m in self._members
        )

    async def send(self, notification: Notification) -> NotificationResponse:
        """Dispatch through the group according to its strategy.

        Args:
            notification: Payload passed unchanged to each attempted driver

        Returns:
            NotificationResponse from the driver that handled the send. For
            priority-fallback, the first success or the last failure.

        Raises:
            AllDriversUnavailableError: priority-fallback found no ready driver
            NotificationValidationError: a driver rejected the request shape
        """
        if self._strategy is FallbackStrategy.PRIORITY_FALLBACK:
            return await self._send_with_priority_fallback(notification)

        if self._strategy is FallbackStrategy.ROUND_ROBIN:
            member = self._select_round_robin()
        else:
            member = self._select_weighted_random()

        logger.debug(
            "fallback_group_selected_driver",
            channel=self._name,
            strategy=self._strategy.value,
            driver=member.name,
        )
        # Single attempt; provider exceptions reach the caller.
        return await member.channel.send(notification)

    async def _send_with_priority_fallback(
        self, notification: Notification
    ) -> NotificationResponse:
        candidates = [m for m in self._members if m.channel.is_ready()]
        if not candidates:
            logger.warning(
                "fallback_group_no_ready_driver",
                channel=self._name,
                drivers=[m.name for m in self._members],
            )
            raise AllDriversUnavailableError(
                f"No ready driver for channel '{self._name}'",
                details={
                    "channel": self._name,
                    "drivers": [m.name for m in self._members],
                },
            )

        last_response: Optional[NotificationResponse] = None
        attempted: List[str] = []

        for attempt, member in enumerate(candidates, start=1):
            attempted.append(member.name)
            try:
                response = await member.channel.send(notification)
            except NotificationValidationError:
                raise
            except Exception as e:
                logger.warning(
                    "fallback_driver_raised",
                    channel=self._name,
                    driver=member.name,
                    attempt=attempt,
                    error=str(e),
                    exc_info=True,
                )
                response = provider_failure(member.name, e)

            if response.success:
                if attempt > 1:
                    logger.info(
                        "fallback_driver_succeeded",
                        channel=self._name,
                        driver=member.name,
                        attempt=attempt,
                    )
                return response

            logger.warning(
                "fallback_driver_failed",
                channel=self._name,
                driver=member.name,
                attempt=attempt,
                remaining=len(candidates) - attempt,
                error=response.error,
                error_code=response.error_code,
            )
            last_response = response

        logger.error(
            "fallback_group_exhausted",
            channel=self._name,
            attempted=attempted,
        )
        return last_response

    def _select_round_robin(self) -> FallbackMember:
        # Read and increment under one lock with no await in between, so
        # concurrent dispatches never skip or repeat an index.
        with self._cursor_lock:
            index = self._cursor % len(self._members)
            self._cursor = (self._cursor + 1) % len(self._members)
        return self._members[index]

    def _select_weighted_random(self) -> FallbackMember:
        draw = self._rng.random() * self._total_weight
        accumulated = 0.0
        selected = None
        for member in self._members:
            weight = member.effective_weight
            if weight <= 0:
                continue
            selected = member
            if draw < accumulated + weight:
                return member
            accumulated += weight
        # Float rounding can leave the draw at the very top of the range.
        return selected
