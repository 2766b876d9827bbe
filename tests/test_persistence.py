import json

from station_queue.persistence import SnapshotFile
from station_queue.state import EngineState
from station_queue.ticket import Ticket

STATIONS = ["Charging", "Releasing", "Extraction"]


def test_missing_snapshot_is_fresh_start(tmp_path):
    assert SnapshotFile(tmp_path / "none.json").load(STATIONS) is None


def test_snapshot_layout(tmp_path):
    state = EngineState.fresh(STATIONS)
    t = Ticket(number="C1", station="Charging", issued_at=1.0)
    state.store.get("Charging").waiting.append(t)
    state.store.get("Charging").next_sequence = 1
    state.announcement = "hi"

    f = SnapshotFile(tmp_path / "queue_data.json")
    assert f.save(state) is True

    data = json.loads(f.path.read_text(encoding="utf-8"))
    assert set(data) == {
        "queues",
        "currentServing",
        "lastServed",
        "queueNumbers",
        "servedHistory",
        "totalServed",
        "totalWaitTime",
        "currentAnnouncement",
    }
    assert data["queues"]["Charging"] == [{"number": "C1", "service": "Charging", "timestamp": 1000}]
    assert data["currentServing"] == {"Charging": None, "Releasing": None, "Extraction": None}
    assert data["queueNumbers"] == {"Charging": 1, "Releasing": 0, "Extraction": 0}
    assert data["currentAnnouncement"] == "hi"
    assert not f.path.with_suffix(".json.tmp").exists()


def test_partial_snapshot_defaults_missing_fields(tmp_path):
    path = tmp_path / "old.json"
    path.write_text(
        json.dumps(
            {
                "queues": {"Charging": [{"number": "C4", "service": "Charging", "timestamp": 5}, "junk"]},
                "queueNumbers": {"Charging": 4, "Retired": 9},
                "totalServed": "many",
            }
        ),
        encoding="utf-8",
    )

    state = SnapshotFile(path).load(STATIONS)
    charging = state.store.get("Charging")
    assert [t.number for t in charging.waiting] == ["C4"]
    assert charging.next_sequence == 4
    assert charging.current is None
    assert state.store.get("Releasing").next_sequence == 0
    assert state.store.stations() == STATIONS
    assert state.total_served == 0
    assert state.total_wait_time == 0
    assert state.announcement == ""
    assert state.served_history == []


def test_corrupt_snapshot_is_ignored(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    assert SnapshotFile(path).load(STATIONS) is None


def test_save_failure_returns_false(tmp_path):
    target = tmp_path / "dir"
    target.mkdir()
    assert SnapshotFile(target).save(EngineState.fresh(STATIONS)) is False


def test_delete_is_idempotent(tmp_path):
    f = SnapshotFile(tmp_path / "queue_data.json")
    f.save(EngineState.fresh(STATIONS))
    f.delete()
    assert not f.path.exists()
    f.delete()


def test_non_finite_and_oversized_numbers_fall_back_to_defaults(tmp_path):
    path = tmp_path / "odd.json"
    path.write_text(
        '{"totalServed": 1e999, "totalWaitTime": NaN,'
        ' "queueNumbers": {"Charging": -Infinity, "Releasing": 3},'
        ' "queues": {"Charging": [{"number": "C1", "timestamp": 1' + "0" * 400 + "}]},"
        ' "lastServed": {"Charging": {"number": "C0", "timestamp": Infinity}}}',
        encoding="utf-8",
    )

    state = SnapshotFile(path).load(STATIONS)
    assert state.total_served == 0
    assert state.total_wait_time == 0
    assert state.store.get("Charging").next_sequence == 0
    assert state.store.get("Releasing").next_sequence == 3
    assert state.store.get("Charging").waiting == [Ticket(number="C1", station="Charging", issued_at=0.0)]
    assert state.store.get("Charging").last_served == Ticket(number="C0", station="Charging", issued_at=0.0)


def test_save_never_raises_on_unserializable_numbers(tmp_path):
    state = EngineState.fresh(STATIONS)
    state.store.get("Charging").waiting.append(Ticket(number="C1", station="Charging", issued_at=float("inf")))
    assert SnapshotFile(tmp_path / "queue_data.json").save(state) is False
