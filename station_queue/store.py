from __future__ import annotations

# Queue Store: per-station waiting lists plus the "currently serving" and
# "last served" slots.
#
# The store is plain bookkeeping. It is NOT thread-safe on its own; the
# QueueEngine serializes every access behind its lock.

from dataclasses import dataclass, field
from typing import Iterable, Iterator

from .errors import QueueFull, UnknownStation
from .ticket import Ticket, format_number


@dataclass
class StationQueueState:
    """In-memory state for one station."""

    station: str
    waiting: list[Ticket] = field(default_factory=list)  # FIFO, head is called next
    current: Ticket | None = None
    last_served: Ticket | None = None
    next_sequence: int = 0

    def reset(self) -> None:
        self.waiting = []
        self.current = None
        self.last_served = None
        self.next_sequence = 0


class QueueStore:
    def __init__(self, stations: Iterable[str]) -> None:
        self._stations: dict[str, StationQueueState] = {}
        for name in stations:
            self._stations[name] = StationQueueState(station=name)

    # -------------------- lookup --------------------

    def stations(self) -> list[str]:
        """Configured station names, in configuration order."""
        return list(self._stations)

    def get(self, station: object) -> StationQueueState:
        if not isinstance(station, str):
            raise UnknownStation(station)
        st = self._stations.get(station)
        if st is None:
            raise UnknownStation(station)
        return st

    def __iter__(self) -> Iterator[StationQueueState]:
        return iter(self._stations.values())

    # -------------------- ticket counter --------------------

    def next_number(self, station: str) -> str:
        """Consume and return the next ticket number for `station`."""
        st = self.get(station)
        st.next_sequence += 1
        return format_number(station, st.next_sequence)

    # -------------------- queue operations --------------------

    def enqueue(self, station: str, ticket: Ticket, max_length: int) -> None:
        st = self.get(station)
        if len(st.waiting) >= max_length:
            raise QueueFull(station, max_length)
        st.waiting.append(ticket)

    def dequeue_next(self, station: str) -> Ticket | None:
        st = self.get(station)
        if not st.waiting:
            return None
        ticket = st.waiting.pop(0)
        st.current = ticket
        st.last_served = ticket
        return ticket

    def recall_last(self, station: str) -> Ticket | None:
        st = self.get(station)
        if st.last_served is None:
            return None
        st.current = st.last_served
        return st.current

    def reset_station(self, station: str) -> None:
        self.get(station).reset()
