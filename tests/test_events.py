from dynastydip.events import DiplomacyEvent, EventBus


def test_emit_without_subscribers_is_a_no_op():
    EventBus().emit(DiplomacyEvent.KINGDOM_CREATED, {"kingdom": None})


def test_subscribers_receive_only_their_event():
    bus = EventBus()
    received = []
    bus.subscribe(DiplomacyEvent.MARRIAGE_FORMED, lambda e, p: received.append((e, p)))

    bus.emit(DiplomacyEvent.MARRIAGE_REJECTED, {"n": 1})
    bus.emit(DiplomacyEvent.MARRIAGE_FORMED, {"n": 2})

    assert received == [(DiplomacyEvent.MARRIAGE_FORMED, {"n": 2})]


def test_wildcard_subscriber_and_string_event_names():
    bus = EventBus()
    seen = []
    bus.subscribe(None, lambda e, p: seen.append(e))
    bus.subscribe("rulerSucceeded", lambda e, p: seen.append("specific"))

    bus.emit(DiplomacyEvent.RULER_SUCCEEDED, {})

    assert seen == ["specific", DiplomacyEvent.RULER_SUCCEEDED]


def test_failing_listener_does_not_stop_others(caplog):
    bus = EventBus()
    seen = []

    def broken(event, payload):
        raise RuntimeError("toast renderer missing")

    bus.subscribe(DiplomacyEvent.KINGDOM_DESTROYED, broken)
    bus.subscribe(DiplomacyEvent.KINGDOM_DESTROYED, lambda e, p: seen.append(e))

    bus.emit(DiplomacyEvent.KINGDOM_DESTROYED, {})

    assert seen == [DiplomacyEvent.KINGDOM_DESTROYED]
    assert "toast renderer missing" in caplog.text


def test_unsubscribe():
    bus = EventBus()
    seen = []
    listener = lambda e, p: seen.append(e)  # noqa: E731
    bus.subscribe(DiplomacyEvent.KINGDOM_CREATED, listener)
    bus.unsubscribe(DiplomacyEvent.KINGDOM_CREATED, listener)

    bus.emit(DiplomacyEvent.KINGDOM_CREATED, {})

    assert seen == []
