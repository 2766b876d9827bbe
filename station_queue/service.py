from __future__ import annotations

# MQTT adapter around the QueueEngine.
#
# Layers:
# 1) `QueueEngine` (engine.py) holds all rules and state.
# 2) `MqttQueueService` translates request messages into engine calls and
#    relays engine broadcasts to the display topic.
# 3) `main()` wires settings, snapshot file, MQTT connection and the service.

import argparse
import logging
import time
from dataclasses import replace
from typing import Any, Callable, TYPE_CHECKING

from .config import Settings, parse_stations
from .engine import QueueEngine
from .errors import ErrorResponse, QueueError
from .log import configure_logging
from .mqtt_topics import DEFAULT_NAMESPACE, display_updates, engine_requests
from .persistence import SnapshotFile
from .ticket import Ticket

if TYPE_CHECKING:
    from .mqtt_client import MqttClient

logger = logging.getLogger(__name__)


class MqttQueueService:
    def __init__(self, *, mqtt: "MqttClient", engine: QueueEngine, namespace: str = DEFAULT_NAMESPACE) -> None:
        self.mqtt = mqtt
        self.engine = engine
        self.namespace = namespace
        self._notice_handle: int | None = None

        self._handlers: dict[str, Callable[[dict[str, Any]], dict[str, Any]]] = {
            "status": self._status,
            "enqueue": self._enqueue,
            "call_next": self._call_next,
            "recall": self._recall,
            "set_announcement": self._set_announcement,
            "get_announcement": self._get_announcement,
            "reset": self._reset,
            "export": self._export,
            "stats": self._stats,
        }

    def start(self) -> None:
        self.mqtt.subscribe(engine_requests(self.namespace))
        self.mqtt.add_handler(self._handle_message)
        self._notice_handle = self.engine.notifier.subscribe(self._publish_notice)

    def stop(self) -> None:
        if self._notice_handle is not None:
            self.engine.notifier.unsubscribe(self._notice_handle)
            self._notice_handle = None
        self.mqtt.remove_handler(self._handle_message)

    def _publish_notice(self, text: str) -> None:
        self.mqtt.publish(display_updates(self.namespace), {"type": "notice", "text": text, "ts": time.time()})

    def _reply(self, reply_to: str, corr_id: str | None, message: dict[str, Any]) -> None:
        msg = dict(message)
        if corr_id is not None:
            msg["corr_id"] = corr_id
        self.mqtt.publish(reply_to, msg)

    def _handle_message(self, topic: str, msg: dict[str, Any]) -> None:
        if topic != engine_requests(self.namespace):
            return

        corr_id = msg.get("corr_id") if isinstance(msg.get("corr_id"), str) else None
        reply_to = msg.get("reply_to") if isinstance(msg.get("reply_to"), str) else None
        if not reply_to:
            # Every request expects an answer; without a reply topic we drop it.
            return

        mtype = msg.get("type")
        logger.debug("request %r from %s", mtype, reply_to)
        handler = self._handlers.get(mtype) if isinstance(mtype, str) else None
        if handler is None:
            err = ErrorResponse("unknown_request", f"Unsupported request type: {mtype!r}")
            self._reply(reply_to, corr_id, err.to_message())
            return

        try:
            response = handler(msg)
        except QueueError as e:
            self._reply(reply_to, corr_id, e.to_response().to_message())
            return
        except ValueError as e:
            self._reply(reply_to, corr_id, ErrorResponse("bad_request", str(e)).to_message())
            return
        self._reply(reply_to, corr_id, response)

    # -------------------- request handlers --------------------

    def _status(self, msg: dict[str, Any]) -> dict[str, Any]:
        return {"type": "status", "stations": self.engine.status()}

    def _enqueue(self, msg: dict[str, Any]) -> dict[str, Any]:
        number = self.engine.enqueue(msg.get("service"))
        return {"type": "ticket", "number": number}

    def _call_next(self, msg: dict[str, Any]) -> dict[str, Any]:
        ticket = self.engine.call_next(msg.get("service"))
        return {"type": "called", "current": _number(ticket)}

    def _recall(self, msg: dict[str, Any]) -> dict[str, Any]:
        ticket = self.engine.recall(msg.get("service"))
        return {"type": "recalled", "lastNumber": ticket.number}

    def _set_announcement(self, msg: dict[str, Any]) -> dict[str, Any]:
        text = msg.get("announcement", "")
        if text is None:
            text = ""
        if not isinstance(text, str):
            raise ValueError("announcement must be a string")
        self.engine.set_announcement(text)
        return {"type": "ok"}

    def _get_announcement(self, msg: dict[str, Any]) -> dict[str, Any]:
        return {"type": "announcement", "announcement": self.engine.get_announcement()}

    def _reset(self, msg: dict[str, Any]) -> dict[str, Any]:
        self.engine.reset_all()
        return {"type": "ok", "message": "Queue reset successfully"}

    def _export(self, msg: dict[str, Any]) -> dict[str, Any]:
        return {"type": "export", "rows": self.engine.export_waiting()}

    def _stats(self, msg: dict[str, Any]) -> dict[str, Any]:
        return {"type": "stats", **self.engine.stats()}


def _number(ticket: Ticket | None) -> str | None:
    return ticket.number if ticket is not None else None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Station queue engine (MQTT)")
    parser.add_argument("--mqtt-host", default="127.0.0.1")
    parser.add_argument("--mqtt-port", type=int, default=1883)
    parser.add_argument("--namespace", default=DEFAULT_NAMESPACE)
    parser.add_argument("--data-file", default=None, help="snapshot file (default: queue_data.json)")
    parser.add_argument("--average-service-time", type=float, default=None, help="minutes per ticket")
    parser.add_argument("--max-queue-length", type=int, default=None)
    parser.add_argument("--stations", default=None, help="comma separated station names")
    return parser


def settings_from_args(args: argparse.Namespace) -> Settings:
    settings = Settings.from_env()
    overrides: dict[str, Any] = {}
    if args.data_file is not None:
        overrides["data_file"] = args.data_file
    if args.average_service_time is not None:
        overrides["average_service_time"] = args.average_service_time
    if args.max_queue_length is not None:
        overrides["max_queue_length"] = args.max_queue_length
    if args.stations is not None:
        overrides["stations"] = parse_stations(args.stations)
    return replace(settings, **overrides) if overrides else settings


def main() -> None:
    # Import MQTT dependencies only when running the real service.
    from .mqtt_client import MqttClient

    args = build_parser().parse_args()
    configure_logging()
    settings = settings_from_args(args)

    engine = QueueEngine(settings, snapshots=SnapshotFile(settings.data_file))

    mqtt_client = MqttClient(client_id="engine", host=args.mqtt_host, port=args.mqtt_port)
    mqtt_client.start()

    service = MqttQueueService(mqtt=mqtt_client, engine=engine, namespace=args.namespace)
    service.start()

    print(
        f"[engine] connected to MQTT {args.mqtt_host}:{args.mqtt_port}, namespace={args.namespace}, "
        f"stations={', '.join(settings.stations)}"
    )

    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        pass
    finally:
        service.stop()
        mqtt_client.stop()


if __name__ == "__main__":
    main()
