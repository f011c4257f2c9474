"""Unit tests for the state channel."""

from __future__ import annotations

from rdf_explorer.utils.observable import StateChannel


def test_publish_updates_value_and_notifies_in_order():
    channel: StateChannel[int] = StateChannel("n", 0)
    calls: list[tuple[str, int]] = []
    channel.subscribe(lambda v: calls.append(("first", v)))
    channel.subscribe(lambda v: calls.append(("second", v)))

    channel.publish(5)

    assert channel.value == 5
    assert calls == [("first", 5), ("second", 5)]


def test_subscribe_does_not_replay_current_value():
    channel = StateChannel("n", 1)
    seen: list[int] = []
    channel.subscribe(seen.append)
    assert seen == []


def test_unsubscribe():
    channel = StateChannel("n", 0)
    seen: list[int] = []
    unsubscribe = channel.subscribe(seen.append)
    channel.publish(1)
    unsubscribe()
    unsubscribe()
    channel.publish(2)
    assert seen == [1]
    assert channel.subscriber_count == 0


def test_failing_subscriber_does_not_block_others():
    channel = StateChannel("n", 0)
    seen: list[int] = []

    def boom(value: int) -> None:
        raise ValueError("subscriber bug")

    channel.subscribe(boom)
    channel.subscribe(seen.append)
    channel.publish(3)

    assert seen == [3]
    assert channel.value == 3
