"""
Session event fan-out.

Login, logout and session-invalid notifications are published here and
delivered to every subscriber (audit trail, cache invalidation, ...).
One instance lives on ``app.state.session_sync`` for the lifetime of the
application.
"""

import inspect
import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, List, Optional
from pydantic import BaseModel, Field


class SessionEventType(str, Enum):
    login = "login"
    logout = "logout"
    session_invalid = "session_invalid"

class SessionEvent(BaseModel):
    type: SessionEventType
    user_id: Optional[str] = None
    user: Optional[Dict[str, Any]] = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


SessionListener = Callable[[SessionEvent], Any]


class SessionSync:
    def __init__(self):
        self._listeners: List[SessionListener] = []
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def subscribe(self, callback: SessionListener) -> Callable[[], None]:
        """Register ``callback`` and return a function that removes it again."""
        if self._closed:
            raise RuntimeError("SessionSync is closed")
        self._listeners.append(callback)

        def unsubscribe():
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    async def publish(self, event: SessionEvent) -> None:
        if self._closed:
            return
        # Copy so listeners may unsubscribe while being notified
        for callback in list(self._listeners):
            try:
                result = callback(event)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logging.error(f"Session listener failed on {event.type.value}: {e}")

    async def notify_login(self, user: Dict[str, Any]) -> None:
        await self.publish(SessionEvent(
            type=SessionEventType.login,
            user_id=user.get("id"),
            user=user,
        ))

    async def notify_logout(self, user_id: Optional[str]) -> None:
        await self.publish(SessionEvent(type=SessionEventType.logout, user_id=user_id))

    async def notify_session_invalid(self, user_id: Optional[str] = None) -> None:
        await self.publish(SessionEvent(type=SessionEventType.session_invalid, user_id=user_id))

    def close(self) -> None:
        self._listeners.clear()
        self._closed = True
