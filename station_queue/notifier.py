from __future__ import annotations

# Notifier: best-effort fan-out of status strings to live observers.
#
# Observers register a callback and get a handle back; transports (e.g. the
# MQTT service) unsubscribe when the observer goes away. A callback that
# raises is skipped for that message only. Nothing is retried or buffered.

import itertools
import logging
import threading
from typing import Callable

logger = logging.getLogger(__name__)

Subscriber = Callable[[str], None]


class Notifier:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        # Serializes broadcasts so every observer sees them in the same order.
        self._send_lock = threading.Lock()
        self._subscribers: dict[int, Subscriber] = {}
        self._ids = itertools.count(1)

    def subscribe(self, callback: Subscriber) -> int:
        with self._lock:
            handle = next(self._ids)
            self._subscribers[handle] = callback
            return handle

    def unsubscribe(self, handle: int) -> None:
        with self._lock:
            self._subscribers.pop(handle, None)

    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def broadcast(self, text: str) -> int:
        """Send `text` to every current subscriber. Returns successful deliveries."""
        with self._send_lock:
            with self._lock:
                targets = list(self._subscribers.items())
            delivered = 0
            for handle, callback in targets:
                try:
                    callback(text)
                except Exception:
                    logger.warning("Dropping broadcast for subscriber %s", handle, exc_info=True)
                    continue
                delivered += 1
            return delivered
