from station_queue.mqtt_topics import display_updates, engine_requests, engine_responses


def test_topic_helpers():
    ns = "demo/v0"
    assert engine_requests(ns) == "demo/v0/engine/requests"
    assert engine_responses("kiosk-1", ns) == "demo/v0/engine/responses/kiosk-1"
    assert display_updates(ns) == "demo/v0/display/updates"


def test_default_namespace():
    assert engine_requests() == "stations/v0/engine/requests"
