from __future__ import annotations

# Tickets.
#
# A ticket is one customer's place in line at one station. Tickets never
# change after they are issued; only the queue slots that reference them do.
#
# Numbers look like `C17`: the upper-cased first letter of the station name
# followed by the station's sequence counter.

import math
from dataclasses import dataclass
from typing import Any


def ticket_prefix(station: str) -> str:
    return station[:1].upper()


def format_number(station: str, sequence: int) -> str:
    return f"{ticket_prefix(station)}{sequence}"


@dataclass(frozen=True)
class Ticket:
    number: str
    station: str
    issued_at: float  # epoch seconds

    def to_dict(self) -> dict[str, Any]:
        # Snapshot layout keeps the historic `service` / millisecond `timestamp` keys.
        return {
            "number": self.number,
            "service": self.station,
            "timestamp": int(round(self.issued_at * 1000)),
        }

    @classmethod
    def from_dict(cls, data: Any, *, station: str | None = None) -> "Ticket | None":
        """Rebuild a ticket from a snapshot entry.

        Returns None for entries that are not shaped like a ticket, so a
        partially damaged snapshot can still be loaded.
        """
        if not isinstance(data, dict):
            return None
        number = data.get("number")
        if not isinstance(number, str) or not number:
            return None
        owner = data.get("service")
        if not isinstance(owner, str) or not owner:
            owner = station
        if owner is None:
            return None
        ts = data.get("timestamp", 0)
        try:
            issued_at = float(ts) / 1000.0
        except (TypeError, ValueError, OverflowError):
            issued_at = 0.0
        if not math.isfinite(issued_at):
            issued_at = 0.0
        return cls(number=number, station=owner, issued_at=issued_at)
