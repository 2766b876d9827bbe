"""MQTT topic helpers.

Topic construction lives in one place so the engine service, the clients and
the displays agree on naming.

Topic layout under a configurable namespace (default: `stations/v0`):

Request/response:
- `<ns>/engine/requests`
    Every client request (take ticket, call, recall, ...).
- `<ns>/engine/responses/<client_id>`
    Replies, one topic per client.

Broadcast:
- `<ns>/display/updates`
    Human-readable notices ("Now serving number C3 at Charging").
    Displays subscribe here.

Run several independent sites on one broker by changing the namespace
(e.g. `--namespace site/north`).
"""

from __future__ import annotations

DEFAULT_NAMESPACE = "stations/v0"


def engine_requests(namespace: str = DEFAULT_NAMESPACE) -> str:
    return f"{namespace}/engine/requests"


def engine_responses(client_id: str, namespace: str = DEFAULT_NAMESPACE) -> str:
    return f"{namespace}/engine/responses/{client_id}"


def display_updates(namespace: str = DEFAULT_NAMESPACE) -> str:
    return f"{namespace}/display/updates"
