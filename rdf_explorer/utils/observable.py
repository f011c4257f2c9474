"""Latest-value state channel with synchronous subscriber callbacks."""

from __future__ import annotations

from typing import Callable, Generic, TypeVar

from rdf_explorer.utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

Subscriber = Callable[[T], None]


class StateChannel(Generic[T]):
    """Holds the most recently published value of one piece of state.

    Every ``publish`` replaces the value atomically and then notifies
    subscribers in registration order. Subscribing does not replay the
    current value; read ``value`` for that.
    """

    def __init__(self, name: str, initial: T) -> None:
        self.name = name
        self._value = initial
        self._subscribers: list[Subscriber[T]] = []

    @property
    def value(self) -> T:
        return self._value

    def publish(self, value: T) -> None:
        self._value = value
        for callback in list(self._subscribers):
            try:
                callback(value)
            except Exception as exc:
                logger.error(
                    "state_subscriber_failed",
                    channel=self.name,
                    callback=getattr(callback, "__name__", repr(callback)),
                    error=str(exc),
                )

    def subscribe(self, callback: Subscriber[T]) -> Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)
