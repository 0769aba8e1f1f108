from timetravel.scheduling.debounce import DebounceChannel
from timetravel.scheduling.timers import VirtualTimerBackend


def _channel(delay_ms=500):
    backend = VirtualTimerBackend()
    channel = DebounceChannel(backend, delay_ms, name="test")
    delivered = []
    channel.triggered.connect(lambda v: delivered.append(v))
    return backend, channel, delivered


def test_burst_coalesces_to_last_value():
    backend, channel, delivered = _channel()
    channel.schedule("a")
    backend.advance(200)
    channel.schedule("b")
    backend.advance(200)
    channel.schedule("c")
    backend.advance(499)
    assert delivered == []
    assert channel.pending() and channel.pending_value() == "c"
    backend.advance(1)
    assert delivered == ["c"]
    assert not channel.pending()
    backend.advance(5000)
    assert delivered == ["c"]


def test_cancel_drops_pending_value():
    backend, channel, delivered = _channel()
    channel.schedule(1)
    assert channel.cancel() is True
    assert channel.cancel() is False
    backend.advance(1000)
    assert delivered == []


def test_cancelled_delivery_never_fires_even_if_already_due():
    backend, channel, delivered = _channel()
    channel.schedule("stale")
    backend.advance(600)  # delivered normally
    channel.schedule("newer")
    channel.cancel()
    # Simulate a timeout that was already queued before cancel() ran.
    channel._onTimeout()
    assert delivered == ["stale"]


def test_flush_delivers_immediately_once():
    backend, channel, delivered = _channel()
    channel.schedule("x")
    assert channel.flush() is True
    assert delivered == ["x"]
    assert channel.flush() is False
    backend.advance(1000)
    assert delivered == ["x"]


def test_none_is_a_valid_pending_value():
    backend, channel, delivered = _channel(delay_ms=5000)
    channel.schedule()
    assert channel.pending()
    backend.advance(5000)
    assert delivered == [None]
