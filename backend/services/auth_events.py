"""
In-process auth state notifications.

Login, logout and profile changes (e.g. a completed purchase) publish an
AuthEvent; subscribers such as the application shell resolve or drop the
session's profile in response. Subscribers are awaited in subscription order.
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import Optional

logger = logging.getLogger(__name__)


class AuthEvent(StrEnum):
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    USER_UPDATED = "USER_UPDATED"


@dataclass(frozen=True)
class AuthChange:
    """Payload delivered to subscribers."""

    event: AuthEvent
    user_id: str
    session_id: Optional[str] = None


Listener = Callable[[AuthChange], Awaitable[None]]


class Subscription:
    """Handle returned by ``AuthEventBus.subscribe``."""

    def __init__(self, bus: "AuthEventBus", listener: Listener) -> None:
        self._bus = bus
        self._listener = listener
        self.active = True

    def unsubscribe(self) -> None:
        if self.active:
            self._bus._remove(self._listener)
            self.active = False


class AuthEventBus:
    """Minimal publish/subscribe hub for auth changes."""

    def __init__(self) -> None:
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Subscription:
        self._listeners.append(listener)
        return Subscription(self, listener)

    def _remove(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    async def publish(self, change: AuthChange) -> None:
        logger.debug("auth event %s for user %s", change.event, change.user_id)
        for listener in list(self._listeners):
            await listener(change)
