from station_queue.ticket import Ticket, format_number, ticket_prefix


def test_number_uses_upper_cased_station_initial():
    assert ticket_prefix("Charging") == "C"
    assert ticket_prefix("releasing") == "R"
    assert format_number("Extraction", 17) == "E17"


def test_ticket_dict_keeps_snapshot_keys():
    t = Ticket(number="C1", station="Charging", issued_at=1700000000.5)
    assert t.to_dict() == {"number": "C1", "service": "Charging", "timestamp": 1700000000500}
    assert Ticket.from_dict(t.to_dict()) == t


def test_from_dict_rejects_malformed_entries():
    assert Ticket.from_dict(None) is None
    assert Ticket.from_dict({"service": "Charging"}) is None
    assert Ticket.from_dict({"number": "C1"}) is None


def test_from_dict_falls_back_to_owning_station():
    t = Ticket.from_dict({"number": "C1", "timestamp": "bogus"}, station="Charging")
    assert t == Ticket(number="C1", station="Charging", issued_at=0.0)
