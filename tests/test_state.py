from redx.runtime.state import (
    IDLE,
    Begin,
    Errored,
    Failed,
    Finished,
    Opened,
    Sending,
    Settle,
    Streaming,
    active_stream,
    is_busy,
    transition,
)


def test_happy_path():
    state = transition(IDLE, Begin("s", "m"))
    assert state == Sending("s", "m")
    state = transition(state, Opened())
    assert state == Streaming("s", "m")
    assert transition(state, Finished()) == IDLE


def test_error_path_settles_to_idle():
    for start in (Sending("s", "m"), Streaming("s", "m")):
        failed = transition(start, Errored("boom"))
        assert failed == Failed("s", "m", "boom")
        assert transition(failed, Settle()) == IDLE


def test_unlisted_events_keep_state():
    streaming = Streaming("s", "m")
    assert transition(streaming, Begin("other", "x")) == streaming
    assert transition(IDLE, Finished()) == IDLE
    assert transition(IDLE, Errored("x")) == IDLE
    assert transition(Sending("s", "m"), Finished()) == Sending("s", "m")


def test_busy_and_active_stream():
    assert not is_busy(IDLE)
    assert is_busy(Failed("s", "m", "e"))
    assert active_stream(Streaming("s", "m")) == ("s", "m")
    assert active_stream(Failed("s", "m", "e")) is None
    assert active_stream(IDLE) is None
