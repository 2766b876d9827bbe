"""Snapshot persistence for the queue engine.

The whole engine state is written to one JSON file after every mutating
operation (last write wins). Writes go to a sibling ``.tmp`` file first and
are then moved over the target, so a crash mid-write never leaves a
truncated snapshot behind.

Persistence never raises into the engine: the in-memory state stays the
source of truth for the running process, and failures are only logged.
"""

from __future__ import annotations

import json
import logging
import pathlib
from typing import Iterable

from .errors import PersistenceWriteFailed
from .state import EngineState

logger = logging.getLogger(__name__)


class SnapshotFile:
    def __init__(self, path: str | pathlib.Path) -> None:
        self.path = pathlib.Path(path)

    def save(self, state: EngineState) -> bool:
        """Write `state` as the current snapshot. Returns False on failure."""
        try:
            payload = json.dumps(state.to_snapshot(), indent=2)
            tmp = self.path.with_suffix(self.path.suffix + ".tmp")
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(payload, encoding="utf-8")
            tmp.replace(self.path)
        except (OSError, OverflowError, TypeError, ValueError) as e:
            err = PersistenceWriteFailed(f"could not write {self.path}: {e}")
            logger.error("%s", err)
            return False
        return True

    def load(self, stations: Iterable[str]) -> EngineState | None:
        """Read the snapshot, or return None when there is nothing usable."""
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.error("Could not read queue snapshot %s: %s", self.path, e)
            return None
        try:
            data = json.loads(raw)
        except ValueError as e:
            logger.error("Ignoring corrupt queue snapshot %s: %s", self.path, e)
            return None

        try:
            state = EngineState.from_snapshot(data, stations)
        except (TypeError, ValueError, OverflowError) as e:
            logger.error("Ignoring unusable queue snapshot %s: %s", self.path, e)
            return None
        logger.info("Queue state loaded from %s.", self.path)
        return state

    def delete(self) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError:
            return
        except OSError as e:
            logger.error("Failed to remove saved queue file %s: %s", self.path, e)
