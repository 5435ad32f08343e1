from scheduler import EventHub, FrameScheduler


def test_callback_runs_once_per_request():
    scheduler = FrameScheduler()
    calls = []
    scheduler.request_frame(calls.append)

    assert scheduler.pending == 1
    assert scheduler.tick(16.0) == 1
    assert scheduler.tick(32.0) == 0
    assert calls == [16.0]


def test_handles_are_unique():
    scheduler = FrameScheduler()
    a = scheduler.request_frame(lambda ts: None)
    b = scheduler.request_frame(lambda ts: None)
    assert a != b
    assert a > 0 and b > 0


def test_cancelled_callback_never_runs():
    scheduler = FrameScheduler()
    calls = []
    handle = scheduler.request_frame(calls.append)
    scheduler.cancel_frame(handle)
    assert scheduler.tick(16.0) == 0
    assert calls == []


def test_cancel_unknown_handle_is_a_no_op():
    scheduler = FrameScheduler()
    scheduler.cancel_frame(42)
    handle = scheduler.request_frame(lambda ts: None)
    scheduler.tick(1.0)
    scheduler.cancel_frame(handle)
    assert scheduler.pending == 0


def test_request_during_tick_waits_for_next_frame():
    scheduler = FrameScheduler()
    calls = []

    def loop(ts):
        calls.append(ts)
        scheduler.request_frame(loop)

    scheduler.request_frame(loop)
    assert scheduler.tick(1.0) == 1
    assert scheduler.tick(2.0) == 1
    assert calls == [1.0, 2.0]
    assert scheduler.pending == 1


def test_cancel_within_same_batch():
    scheduler = FrameScheduler()
    calls = []
    handles = {}

    def first(ts):
        calls.append("first")
        scheduler.cancel_frame(handles["second"])

    handles["first"] = scheduler.request_frame(first)
    handles["second"] = scheduler.request_frame(lambda ts: calls.append("second"))
    assert scheduler.tick(1.0) == 1
    assert calls == ["first"]


def test_event_hub_dispatch_and_remove():
    hub = EventHub()
    seen = []

    def listener(x, y):
        seen.append((x, y))

    hub.add_listener("pointermove", listener)
    assert hub.listener_count("pointermove") == 1
    assert hub.dispatch("pointermove", 1, 2) == 1

    hub.remove_listener("pointermove", listener)
    hub.remove_listener("pointermove", listener)
    assert hub.dispatch("pointermove", 3, 4) == 0
    assert hub.dispatch("resize", 5, 6) == 0
    assert seen == [(1, 2)]


def test_listener_may_remove_itself_while_dispatching():
    hub = EventHub()
    seen = []

    def once(value):
        seen.append(value)
        hub.remove_listener("resize", once)

    hub.add_listener("resize", once)
    hub.dispatch("resize", 1)
    hub.dispatch("resize", 2)
    assert seen == [1]
