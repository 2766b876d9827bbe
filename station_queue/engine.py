from __future__ import annotations

# The Queue Engine is the *authoritative brain* of the system.
#
# It owns the single EngineState instance and is the only place where queue
# rules live. Transports (see service.py) translate requests into calls on
# this class and never touch the state directly.
#
# Every public operation runs under one lock, including its snapshot write
# and broadcast, so snapshots and observer messages follow mutation order.

import logging
import threading
import time
from typing import Any, Callable

from .config import Settings
from .errors import NoDataToExport, NothingToRecall, QueueFull
from .notifier import Notifier
from .persistence import SnapshotFile
from .state import EngineState
from .ticket import Ticket

logger = logging.getLogger(__name__)


def now_serving_message(ticket: Ticket) -> str:
    return f"Now serving number {ticket.number} at {ticket.station}"


def announcement_message(text: str) -> str:
    return f"New Announcement: {text}"


class QueueEngine:
    """Core business logic (testable without MQTT)."""

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        snapshots: SnapshotFile | None = None,
        notifier: Notifier | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.settings = settings or Settings()
        self.notifier = notifier or Notifier()
        self._snapshots = snapshots
        self._clock = clock
        self._lock = threading.Lock()

        state = snapshots.load(self.settings.stations) if snapshots is not None else None
        self._state = state or EngineState.fresh(self.settings.stations)

    # -------------------- reads --------------------

    def status(self) -> dict[str, dict[str, Any]]:
        """Current ticket, waiting numbers and estimated wait per station."""
        avg = self.settings.average_service_time
        with self._lock:
            return {
                st.station: {
                    "current": st.current.number if st.current is not None else None,
                    "waiting": [t.number for t in st.waiting],
                    "estimated_wait": len(st.waiting) * avg,
                }
                for st in self._state.store
            }

    def get_announcement(self) -> str:
        with self._lock:
            return self._state.announcement

    def export_waiting(self) -> list[dict[str, str]]:
        """Every waiting ticket as a `{service, number}` row, stations in config order."""
        with self._lock:
            rows = [
                {"service": st.station, "number": t.number}
                for st in self._state.store
                for t in st.waiting
            ]
        if not rows:
            raise NoDataToExport()
        return rows

    def stats(self) -> dict[str, Any]:
        with self._lock:
            return {
                "total_served": self._state.total_served,
                "total_wait_time": self._state.total_wait_time,
                "served_history": [t.number for t in self._state.served_history],
            }

    # -------------------- mutations --------------------

    def enqueue(self, station: str) -> str:
        """Issue a ticket for `station` and return its number.

        The number is minted before the capacity check. When the queue is full
        the ticket is dropped (logged, not raised), the number stays consumed
        and is still returned to the caller.
        """
        with self._lock:
            store = self._state.store
            number = store.next_number(station)
            ticket = Ticket(number=number, station=station, issued_at=self._clock())
            try:
                store.enqueue(station, ticket, self.settings.max_queue_length)
            except QueueFull as e:
                logger.warning("%s; ticket %s was not queued", e, number)
                return number
            self._persist()
            return number

    def call_next(self, station: str) -> Ticket | None:
        """Move the head of `station`'s waiting list to "currently serving"."""
        with self._lock:
            ticket = self._state.store.dequeue_next(station)
            if ticket is None:
                return None
            self._state.served_history.append(ticket)
            self._state.total_served += 1
            self._state.total_wait_time += self.settings.average_service_time
            self.notifier.broadcast(now_serving_message(ticket))
            self._persist()
            return ticket

    def recall(self, station: str) -> Ticket:
        """Serve the last-served ticket again. `waiting` is left untouched."""
        with self._lock:
            ticket = self._state.store.recall_last(station)
            if ticket is None:
                raise NothingToRecall(station)
            self.notifier.broadcast(now_serving_message(ticket))
            self._persist()
            return ticket

    def set_announcement(self, text: str) -> None:
        with self._lock:
            self._state.announcement = text
            self.notifier.broadcast(announcement_message(text))
            self._persist()

    def reset_all(self) -> None:
        """Clear every station and all counters, and drop the snapshot.

        Observers are not notified.
        """
        with self._lock:
            self._state.reset()
            if self._snapshots is not None:
                self._snapshots.delete()
        logger.info("Queue has been reset.")

    # -------------------- internal --------------------

    def _persist(self) -> None:
        # Caller holds self._lock.
        if self._snapshots is not None:
            self._snapshots.save(self._state)
