from __future__ import annotations

# Client side of the engine protocol.
#
# Kiosks, counter staff and admin tools are short-lived processes:
# - connect to broker
# - publish one request
# - wait for the correlated reply
# - return it and disconnect

import time
from typing import Any

from .errors import ErrorResponse
from .mqtt_client import MqttClient
from .mqtt_topics import DEFAULT_NAMESPACE, engine_requests, engine_responses


class EngineRequestError(Exception):
    """The engine answered with an error envelope."""

    def __init__(self, error: ErrorResponse) -> None:
        super().__init__(error.message)
        self.error = error


class EngineClient:
    def __init__(
        self,
        *,
        mqtt_host: str,
        mqtt_port: int,
        namespace: str = DEFAULT_NAMESPACE,
        name: str = "client",
        timeout: float = 5.0,
    ) -> None:
        # Unique client id so several kiosks can run concurrently.
        self.client_id = f"{name}-{int(time.time() * 1000)}"
        self.namespace = namespace
        self.timeout = timeout
        self.mqtt = MqttClient(client_id=self.client_id, host=mqtt_host, port=mqtt_port)
        self._reply_topic = engine_responses(self.client_id, namespace)

    def __enter__(self) -> "EngineClient":
        self.mqtt.start()
        self.mqtt.subscribe(self._reply_topic)
        return self

    def __exit__(self, *exc: object) -> None:
        self.mqtt.stop()

    def request(self, message: dict[str, Any]) -> dict[str, Any]:
        resp = self.mqtt.request(
            request_topic=engine_requests(self.namespace),
            response_topic=self._reply_topic,
            message=message,
            timeout=self.timeout,
        )
        if resp.get("type") == "error":
            raise EngineRequestError(
                ErrorResponse(str(resp.get("code", "error")), str(resp.get("message", "")))
            )
        return resp

    # -------------------- operations --------------------

    def status(self) -> dict[str, Any]:
        return self.request({"type": "status"})["stations"]

    def take_ticket(self, service: str) -> str:
        return self.request({"type": "enqueue", "service": service})["number"]

    def call_next(self, service: str) -> str | None:
        return self.request({"type": "call_next", "service": service})["current"]

    def recall(self, service: str) -> str:
        return self.request({"type": "recall", "service": service})["lastNumber"]

    def set_announcement(self, text: str) -> None:
        self.request({"type": "set_announcement", "announcement": text})

    def get_announcement(self) -> str:
        return self.request({"type": "get_announcement"})["announcement"]

    def reset(self) -> str:
        return self.request({"type": "reset"}).get("message", "")

    def export(self) -> list[dict[str, str]]:
        return self.request({"type": "export"})["rows"]

    def stats(self) -> dict[str, Any]:
        resp = self.request({"type": "stats"})
        return {k: v for k, v in resp.items() if k not in ("type", "corr_id")}
