from __future__ import annotations

# Console display.
#
# Subscribes to the broadcast topic and prints every notice as it arrives,
# the same stream a wall display would render. MQTT callbacks run on paho's
# network thread; printing from there is fine for a console.

import time
from datetime import datetime
from typing import Any, Callable

from .mqtt_client import MqttClient
from .mqtt_topics import DEFAULT_NAMESPACE, display_updates


def format_notice(msg: dict[str, Any]) -> str | None:
    """Render a broadcast message as a display line, or None if it is not a notice."""
    if msg.get("type") != "notice":
        return None
    text = msg.get("text")
    if not isinstance(text, str):
        return None
    ts = msg.get("ts")
    if isinstance(ts, (int, float)):
        return f"[{datetime.fromtimestamp(ts):%H:%M:%S}] {text}"
    return text


def run_display(
    *,
    mqtt_host: str,
    mqtt_port: int,
    namespace: str = DEFAULT_NAMESPACE,
    emit: Callable[[str], None] = print,
) -> None:
    mqtt = MqttClient(client_id=f"display-{int(time.time() * 1000)}", host=mqtt_host, port=mqtt_port)
    topic = display_updates(namespace)

    def on_message(msg_topic: str, msg: dict[str, Any]) -> None:
        if msg_topic != topic:
            return
        line = format_notice(msg)
        if line is not None:
            emit(line)

    mqtt.add_handler(on_message)
    mqtt.start()
    mqtt.subscribe(topic)
    emit(f"[display] listening on {topic}")

    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        pass
    finally:
        mqtt.stop()
