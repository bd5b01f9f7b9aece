import pytest

from conftest import frames
from dockstream.managers.image.base import (
    DaemonOperationError,
    DaemonTransportError,
    FailureKind,
    Operation,
    Outcome,
    StreamDecodeError,
    StreamEvent,
)
from dockstream.managers.image.outcome import classify_events, raise_for_outcome
from dockstream.managers.image.stream import iter_events
from dockstream.managers.transport import StreamHandle


def msg(text):
    return StreamEvent(message=text)


def err(error, detail=None):
    return StreamEvent(error=error, error_detail=detail)


@pytest.mark.parametrize("count", [0, 1, 5])
def test_messages_only_is_success_and_all_logged_in_order(log, count):
    events = [msg(f"line {i}") for i in range(count)]

    outcome = classify_events(iter(events), log)

    assert outcome == Outcome.success()
    assert outcome.ok
    assert log.messages("info") == [f"line {i}" for i in range(count)]


@pytest.mark.parametrize("position", [1, 3, 5])
def test_error_does_not_stop_draining(log, position):
    events = [msg(f"line {i}") for i in range(1, 6)]
    events[position - 1] = err("no space left on device")

    outcome = classify_events(iter(events), log)

    assert not outcome.ok
    assert outcome.failure_kind is FailureKind.DAEMON
    assert outcome.reason == "no space left on device"
    assert log.messages("info") == [f"line {i}" for i in range(1, 6) if i != position]


def test_first_error_wins(log):
    events = [msg("a"), err("first", "detail one"), msg("b"), err("second", "detail two"), msg("c")]

    outcome = classify_events(iter(events), log)

    assert outcome.reason == "first: detail one"
    assert log.messages("info") == ["a", "b", "c"]
    assert log.messages("warning") == ["忽略后续错误: second: detail two"]


def test_empty_events_are_ignored(log):
    outcome = classify_events(iter([StreamEvent(), msg("x"), StreamEvent()]), log)

    assert outcome.ok
    assert log.messages("info") == ["x"]


def test_decode_fault_short_circuits(log):
    consumed = []

    def events():
        for text in ("one", "two"):
            consumed.append(text)
            yield msg(text)
        raise StreamDecodeError("无法解析守护进程响应: 'garbage'")

    outcome = classify_events(events(), log)

    assert outcome.failure_kind is FailureKind.DECODE
    assert "garbage" in outcome.reason
    assert consumed == ["one", "two"]
    assert log.messages("info") == ["one", "two"]


def test_decode_fault_from_real_stream_stops_at_bad_line(log):
    chunks = frames({"stream": "before"}) + [b"not json\n"] + frames({"stream": "after"})
    handle = StreamHandle(iter(chunks), release=lambda: None)

    outcome = classify_events(iter_events(handle), log)

    assert outcome.failure_kind is FailureKind.DECODE
    assert log.messages("info") == ["before"]
    assert handle.closed


def test_transport_fault_overrides_earlier_daemon_error(log):
    def events():
        yield err("unauthorized")
        raise DaemonTransportError(Operation.PUSH, "connection reset")

    outcome = classify_events(events(), log)

    assert outcome == Outcome.failure("connection reset", FailureKind.TRANSPORT)


def test_generator_is_closed_when_classification_ends(log):
    closed = []

    def events():
        try:
            yield msg("a")
            yield msg("b")
        finally:
            closed.append(True)

    classify_events(events(), log)

    assert closed == [True]


def test_raise_for_outcome_maps_failure_kinds():
    raise_for_outcome(Outcome.success(), Operation.BUILD)

    with pytest.raises(DaemonOperationError) as excinfo:
        raise_for_outcome(Outcome.failure("unauthorized: 401"), Operation.PUSH)
    assert excinfo.value.reason == "unauthorized: 401"
    assert excinfo.value.operation is Operation.PUSH

    with pytest.raises(DaemonTransportError):
        raise_for_outcome(Outcome.failure("reset", FailureKind.TRANSPORT), Operation.BUILD)

    with pytest.raises(StreamDecodeError):
        raise_for_outcome(Outcome.failure("bad line", FailureKind.DECODE), Operation.BUILD)


def test_decode_failure_keeps_offending_line(log):
    handle = StreamHandle(iter([b'{"stream": "ok"}\n', b"<html>502 Bad Gateway</html>\n"]), release=lambda: None)

    outcome = classify_events(iter_events(handle), log)

    assert outcome.failure_kind is FailureKind.DECODE
    with pytest.raises(StreamDecodeError) as excinfo:
        raise_for_outcome(outcome, Operation.BUILD)
    assert excinfo.value is outcome.fault
    assert excinfo.value.line == "<html>502 Bad Gateway</html>"
