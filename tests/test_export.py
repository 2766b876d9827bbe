import io

from station_queue.display import format_notice
from station_queue.export import write_waiting_csv


def test_write_waiting_csv():
    out = io.StringIO()
    count = write_waiting_csv(
        [{"service": "Charging", "number": "C2"}, {"service": "Releasing", "number": "R1"}], out
    )
    assert count == 2
    assert out.getvalue() == '"service","number"\n"Charging","C2"\n"Releasing","R1"\n'


def test_format_notice():
    assert format_notice({"type": "notice", "text": "Now serving number C1 at Charging"}) == (
        "Now serving number C1 at Charging"
    )
    assert format_notice({"type": "status"}) is None
    assert format_notice({"type": "notice", "text": 3}) is None
