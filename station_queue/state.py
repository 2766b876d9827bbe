"""Engine state and its snapshot layout.

The snapshot is one flat JSON object; per-station maps are keyed by station
name::

    {
      "queues": {"Charging": [ticket, ...], ...},
      "currentServing": {"Charging": ticket | null, ...},
      "lastServed": {"Charging": ticket | null, ...},
      "queueNumbers": {"Charging": 17, ...},
      "servedHistory": [ticket, ...],
      "totalServed": 3,
      "totalWaitTime": 15,
      "currentAnnouncement": ""
    }

Parsing is lenient: any field that is missing or has the wrong shape falls
back to its fresh-state value, so snapshots written by older versions still
load.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Iterable

from .store import QueueStore
from .ticket import Ticket


@dataclass
class EngineState:
    store: QueueStore
    served_history: list[Ticket] = field(default_factory=list)
    total_served: int = 0
    total_wait_time: float = 0
    announcement: str = ""

    @classmethod
    def fresh(cls, stations: Iterable[str]) -> "EngineState":
        return cls(store=QueueStore(stations))

    def reset(self) -> None:
        for name in self.store.stations():
            self.store.reset_station(name)
        self.served_history = []
        self.total_served = 0
        self.total_wait_time = 0
        self.announcement = ""

    # -------------------- snapshot --------------------

    def to_snapshot(self) -> dict[str, Any]:
        stations = list(self.store)
        return {
            "queues": {st.station: [t.to_dict() for t in st.waiting] for st in stations},
            "currentServing": {st.station: _ticket_or_none(st.current) for st in stations},
            "lastServed": {st.station: _ticket_or_none(st.last_served) for st in stations},
            "queueNumbers": {st.station: st.next_sequence for st in stations},
            "servedHistory": [t.to_dict() for t in self.served_history],
            "totalServed": self.total_served,
            "totalWaitTime": self.total_wait_time,
            "currentAnnouncement": self.announcement,
        }

    @classmethod
    def from_snapshot(cls, data: Any, stations: Iterable[str]) -> "EngineState":
        state = cls.fresh(stations)
        if not isinstance(data, dict):
            return state

        queues = _mapping(data.get("queues"))
        current = _mapping(data.get("currentServing"))
        last = _mapping(data.get("lastServed"))
        numbers = _mapping(data.get("queueNumbers"))

        # Stations that are no longer configured are dropped.
        for st in state.store:
            name = st.station
            raw_waiting = queues.get(name)
            if isinstance(raw_waiting, list):
                st.waiting = [t for t in (Ticket.from_dict(r, station=name) for r in raw_waiting) if t]
            st.current = Ticket.from_dict(current.get(name), station=name)
            st.last_served = Ticket.from_dict(last.get(name), station=name)
            st.next_sequence = _non_negative_int(numbers.get(name), 0)

        history = data.get("servedHistory")
        if isinstance(history, list):
            state.served_history = [t for t in (Ticket.from_dict(r) for r in history) if t]
        state.total_served = _non_negative_int(data.get("totalServed"), 0)

        wait = data.get("totalWaitTime")
        if isinstance(wait, (int, float)) and not isinstance(wait, bool) and wait >= 0:
            if isinstance(wait, int) or math.isfinite(wait):
                state.total_wait_time = wait

        announcement = data.get("currentAnnouncement")
        if isinstance(announcement, str):
            state.announcement = announcement
        return state


def _ticket_or_none(ticket: Ticket | None) -> dict[str, Any] | None:
    return ticket.to_dict() if ticket is not None else None


def _mapping(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _non_negative_int(value: Any, default: int) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    if isinstance(value, float) and not math.isfinite(value):
        return default
    if value < 0:
        return default
    return int(value)
