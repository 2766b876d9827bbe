from station_queue.notifier import Notifier


def test_broadcast_reaches_every_subscriber_in_order():
    n = Notifier()
    a, b = [], []
    n.subscribe(a.append)
    n.subscribe(b.append)

    assert n.broadcast("one") == 2
    assert n.broadcast("two") == 2
    assert a == ["one", "two"]
    assert b == ["one", "two"]


def test_failing_subscriber_is_skipped():
    n = Notifier()
    got = []

    def broken(text):
        raise ConnectionError("gone")

    n.subscribe(broken)
    n.subscribe(got.append)

    assert n.broadcast("hello") == 1
    assert got == ["hello"]


def test_unsubscribe():
    n = Notifier()
    got = []
    handle = n.subscribe(got.append)
    n.unsubscribe(handle)
    n.unsubscribe(handle)

    assert n.broadcast("hello") == 0
    assert got == []
    assert n.subscriber_count() == 0
