"""Runtime configuration.

Settings are read once at startup (environment first, CLI flags on top) and
are not reloaded while the engine runs.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

DEFAULT_STATIONS = ("Charging", "Releasing", "Extraction")
DEFAULT_AVERAGE_SERVICE_TIME = 5  # minutes
DEFAULT_MAX_QUEUE_LENGTH = 100
DEFAULT_DATA_FILE = "queue_data.json"

ENV_PREFIX = "STATION_QUEUE_"


@dataclass(frozen=True)
class Settings:
    average_service_time: float = DEFAULT_AVERAGE_SERVICE_TIME
    max_queue_length: int = DEFAULT_MAX_QUEUE_LENGTH
    stations: tuple[str, ...] = DEFAULT_STATIONS
    data_file: str = DEFAULT_DATA_FILE

    def __post_init__(self) -> None:
        if self.average_service_time < 0:
            raise ValueError("average_service_time must be >= 0")
        if self.max_queue_length < 0:
            raise ValueError("max_queue_length must be >= 0")
        if not self.stations:
            raise ValueError("at least one station is required")
        if any(not name for name in self.stations):
            raise ValueError("station names must be non-empty")
        if len(set(self.stations)) != len(self.stations):
            raise ValueError("station names must be unique")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        env = os.environ if environ is None else environ

        def get(name: str) -> str | None:
            value = env.get(ENV_PREFIX + name)
            if value is None or not value.strip():
                return None
            return value.strip()

        kwargs: dict = {}
        avg = get("AVERAGE_SERVICE_TIME")
        if avg is not None:
            kwargs["average_service_time"] = float(avg)
        max_len = get("MAX_QUEUE_LENGTH")
        if max_len is not None:
            kwargs["max_queue_length"] = int(max_len)
        stations = get("STATIONS")
        if stations is not None:
            kwargs["stations"] = parse_stations(stations)
        data_file = get("DATA_FILE")
        if data_file is not None:
            kwargs["data_file"] = data_file
        return cls(**kwargs)


def parse_stations(text: str) -> tuple[str, ...]:
    """Parse a comma separated station list (`"Charging, Releasing"`)."""
    return tuple(part.strip() for part in text.split(",") if part.strip())
