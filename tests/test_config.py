import pytest

from station_queue.config import Settings, parse_stations


def test_defaults():
    s = Settings()
    assert s.average_service_time == 5
    assert s.max_queue_length == 100
    assert s.stations == ("Charging", "Releasing", "Extraction")
    assert s.data_file == "queue_data.json"


def test_from_env():
    s = Settings.from_env(
        {
            "STATION_QUEUE_AVERAGE_SERVICE_TIME": "2.5",
            "STATION_QUEUE_MAX_QUEUE_LENGTH": "7",
            "STATION_QUEUE_STATIONS": "Charging, Releasing ,",
            "STATION_QUEUE_DATA_FILE": "/tmp/q.json",
        }
    )
    assert s == Settings(
        average_service_time=2.5,
        max_queue_length=7,
        stations=("Charging", "Releasing"),
        data_file="/tmp/q.json",
    )


def test_from_env_ignores_blank_values():
    assert Settings.from_env({"STATION_QUEUE_MAX_QUEUE_LENGTH": "  "}) == Settings()


def test_rejects_bad_values():
    with pytest.raises(ValueError):
        Settings(max_queue_length=-1)
    with pytest.raises(ValueError):
        Settings(stations=())
    with pytest.raises(ValueError):
        Settings(stations=("Charging", "Charging"))
    with pytest.raises(ValueError):
        Settings.from_env({"STATION_QUEUE_MAX_QUEUE_LENGTH": "lots"})


def test_parse_stations():
    assert parse_stations("A,,B") == ("A", "B")


def test_configure_logging_honours_env(monkeypatch):
    import logging

    from station_queue.log import configure_logging

    root = logging.getLogger()
    old_level = root.level
    try:
        monkeypatch.setenv("STATION_QUEUE_LOG_LEVEL", "warning")
        assert configure_logging() == logging.WARNING

        monkeypatch.delenv("STATION_QUEUE_LOG_LEVEL")
        monkeypatch.setenv("STATION_QUEUE_DEBUG", "yes")
        assert configure_logging() == logging.DEBUG

        monkeypatch.delenv("STATION_QUEUE_DEBUG")
        assert configure_logging("error") == logging.ERROR
    finally:
        root.setLevel(old_level)
