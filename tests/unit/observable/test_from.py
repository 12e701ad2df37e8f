"""Unit tests for the Observable.from_ and Observable.of factories."""

import logging

import pytest

from streamlet import Observable


@pytest.mark.unit
@pytest.mark.observable
def test_from_emits_values_in_order_then_completes(recorder):
    """from_ delivers each element in order, then exactly one completion"""
    # Act
    Observable.from_([1, 2, 3]).subscribe(recorder.handlers)

    # Assert
    assert recorder.events == [
        ("next", 1),
        ("next", 2),
        ("next", 3),
        ("complete", None),
    ]
    assert recorder.errors == []


@pytest.mark.unit
@pytest.mark.observable
def test_from_runs_teardown_once_after_completion(stream_logs):
    """The end-of-stream teardown logs once, after on_complete"""
    # Arrange
    order = []

    # Act
    subscription = Observable.from_([1, 2, 3]).subscribe(
        order.append, on_complete=lambda: order.append("done")
    )
    subscription.unsubscribe()

    # Assert
    assert order == [1, 2, 3, "done"]
    teardown_logs = [
        record
        for record in stream_logs.records
        if record.getMessage() == "Unsubscribed from the iterable observable."
    ]
    assert len(teardown_logs) == 1
    assert teardown_logs[0].levelno == logging.INFO


@pytest.mark.unit
@pytest.mark.observable
def test_from_subscription_is_closed_when_subscribe_returns():
    """Synchronous completion closes the subscription before it is handed back"""
    subscription = Observable.from_(["a"]).subscribe()

    assert subscription.closed


@pytest.mark.unit
@pytest.mark.observable
def test_from_unsubscribe_after_subscribe_keeps_delivered_values():
    """Unsubscribing after subscribe cannot retract values already delivered"""
    received = []

    subscription = Observable.from_([1, 2]).subscribe(received.append)
    subscription.unsubscribe()

    assert received == [1, 2]


@pytest.mark.unit
@pytest.mark.observable
def test_from_empty_sequence_only_completes(recorder):
    """An empty sequence produces a bare completion"""
    Observable.from_([]).subscribe(recorder.handlers)

    assert recorder.events == [("complete", None)]


@pytest.mark.unit
@pytest.mark.observable
def test_from_replays_for_every_subscription():
    """Each subscription receives the full sequence independently"""
    source = Observable.from_(["x", "y"])
    first, second = [], []

    source.subscribe(first.append)
    source.subscribe(second.append)

    assert first == ["x", "y"]
    assert second == ["x", "y"]


@pytest.mark.edge_case
@pytest.mark.unit
@pytest.mark.observable
def test_from_captures_single_pass_iterables():
    """A generator is captured once, so later subscriptions still see every value"""
    source = Observable.from_(i * 10 for i in range(3))
    first, second = [], []

    source.subscribe(first.append)
    source.subscribe(second.append)

    assert first == [0, 10, 20]
    assert second == [0, 10, 20]


@pytest.mark.edge_case
@pytest.mark.unit
@pytest.mark.observable
def test_from_is_unaffected_by_later_mutation_of_source_list():
    """Mutating the input list after construction changes nothing"""
    values = [1, 2]
    source = Observable.from_(values)
    values.append(3)
    received = []

    source.subscribe(received.append)

    assert received == [1, 2]


@pytest.mark.unit
@pytest.mark.observable
def test_from_with_empty_handlers_never_raises():
    """from_ tolerates a subscriber with no handlers at all"""
    subscription = Observable.from_(range(5)).subscribe({})

    assert subscription.closed


@pytest.mark.unit
@pytest.mark.observable
def test_of_and_from_iterable_are_aliases_of_from(recorder):
    """of(*values) and from_iterable behave like from_"""
    received = []

    Observable.of("a", "b").subscribe(received.append)
    Observable.from_iterable(["c"]).subscribe(recorder.handlers)

    assert received == ["a", "b"]
    assert recorder.events == [("next", "c"), ("complete", None)]
