"""Transient, auto-dismissing user notifications."""

import asyncio
import itertools
from dataclasses import dataclass
from typing import Callable, Optional

from config.settings import settings


@dataclass(frozen=True)
class Notification:
    id: int
    message: str
    is_error: bool = False

    def to_dict(self) -> dict:
        return {"id": self.id, "message": self.message, "is_error": self.is_error}


class Notifier:
    """Holds at most one visible notification and hides it after a fixed delay.

    ``on_change`` is called with the new notification, or with None when it is
    dismissed. A newer notification replaces the visible one and restarts the
    timer.
    """

    def __init__(
        self,
        on_change: Optional[Callable[[Optional[Notification]], None]] = None,
        duration: Optional[float] = None
    ):
        self.on_change = on_change
        self.duration = settings.notification_duration_seconds if duration is None else duration
        self.current: Optional[Notification] = None
        self._ids = itertools.count(1)
        self._timer: Optional[asyncio.TimerHandle] = None

    def show(self, message: str, is_error: bool = False) -> Notification:
        if self._timer is not None:
            self._timer.cancel()
        self.current = Notification(next(self._ids), message, is_error)
        self._timer = asyncio.get_running_loop().call_later(self.duration, self._dismiss, self.current.id)
        if self.on_change:
            self.on_change(self.current)
        return self.current

    def _dismiss(self, notification_id: int) -> None:
        if self.current is None or self.current.id != notification_id:
            return
        self.current = None
        self._timer = None
        if self.on_change:
            self.on_change(None)

    def close(self) -> None:
        """Cancel the pending dismissal without notifying."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
