"""Engine errors and the shared error envelope.

Every engine failure carries a stable ``code`` so the MQTT service can reply
with the same envelope regardless of which operation failed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


class QueueError(Exception):
    code = "queue_error"

    def to_response(self) -> "ErrorResponse":
        return ErrorResponse(self.code, str(self))


class UnknownStation(QueueError):
    code = "unknown_station"

    def __init__(self, station: object) -> None:
        super().__init__(f"Invalid service: {station!r}")
        self.station = station


class QueueFull(QueueError):
    code = "queue_full"

    def __init__(self, station: str, max_length: int) -> None:
        super().__init__(f"Queue for {station} is full ({max_length} waiting)")
        self.station = station
        self.max_length = max_length


class NothingToRecall(QueueError):
    code = "nothing_to_recall"

    def __init__(self, station: str) -> None:
        super().__init__("Nothing to recall.")
        self.station = station


class NoDataToExport(QueueError):
    code = "no_data"

    def __init__(self) -> None:
        super().__init__("No data available to export.")


class PersistenceWriteFailed(QueueError):
    """Snapshot could not be written. Logged only, never raised to callers."""

    code = "persistence_write_failed"


@dataclass(frozen=True)
class ErrorResponse:
    code: str
    message: str

    def to_message(self, *, corr_id: str | None = None) -> dict[str, Any]:
        msg: dict[str, Any] = {"type": "error", "code": self.code, "message": self.message}
        if corr_id is not None:
            msg["corr_id"] = corr_id
        return msg
