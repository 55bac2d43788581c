from __future__ import annotations

from collections import defaultdict
from typing import Callable, DefaultDict

from rfl.contracts import Notification

NotificationHandler = Callable[[Notification], None]


class EventBus:
    def __init__(self) -> None:
        self._handlers: list[NotificationHandler] = []
        self._counter: DefaultDict[str, int] = defaultdict(int)

    def subscribe(self, handler: NotificationHandler) -> None:
        self._handlers.append(handler)

    def unsubscribe(self, handler: NotificationHandler) -> None:
        if handler in self._handlers:
            self._handlers.remove(handler)

    def publish(self, notification: Notification) -> None:
        self._counter[notification.variant] += 1
        for handler in list(self._handlers):
            handler(notification)

    def emitted_count(self, variant: str | None = None) -> int:
        if variant is None:
            return sum(self._counter.values())
        return self._counter[variant]
