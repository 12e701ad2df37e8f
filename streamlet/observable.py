"""
Observable - Cold Push Streams
==============================

An Observable is a stateless template around a producer function. Every call
to ``subscribe`` runs the producer again against a brand-new Observer, so
subscriptions never share state:

    σ: Obs × Handlers → Sub

    numbers = Observable.from_([1, 2, 3])
    subscription = numbers.subscribe(print, on_complete=lambda: print("done"))
    subscription.unsubscribe()

A producer receives the Observer, signals ``next``/``error``/``complete`` on
it (now or later, from any callback) and may return a zero-argument teardown
action. The teardown is registered only after the producer returns.
"""

import logging
from typing import Any, Callable, Generic, Iterable, Optional, TypeVar

from .observer import Handlers, Observer, Teardown

logger = logging.getLogger(__name__)

T = TypeVar("T")

Producer = Callable[[Observer[T]], Optional[Teardown]]


# ============================================================================
# SUBSCRIPTION - Cancellation Handle
# ============================================================================


class Subscription(Generic[T]):
    """
    Handle returned by ``Observable.subscribe``.

    Calling the handle is the same as calling ``unsubscribe``, so it can be
    passed anywhere a plain unsubscribe function is expected.
    """

    __slots__ = ("_observer",)

    def __init__(self, observer: Observer[T]):
        self._observer = observer

    @property
    def closed(self) -> bool:
        """True once the subscription has been torn down."""
        return self._observer.is_unsubscribed

    def unsubscribe(self) -> None:
        """Stop further delivery. Safe to call any number of times."""
        self._observer.unsubscribe()

    def __call__(self) -> None:
        self.unsubscribe()

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"Subscription({state})"


# ============================================================================
# OBSERVABLE - Producer Template
# ============================================================================


class Observable(Generic[T]):
    """
    Binds a producer to fresh Observers on demand.

    The Observable holds nothing but the producer: it keeps no list of
    subscribers and outlives every subscription made from it.
    """

    __slots__ = ("_producer",)

    def __init__(self, producer: Producer[T]):
        if not callable(producer):
            raise TypeError(f"Producer must be callable, got {type(producer)}")
        self._producer = producer

    def subscribe(
        self,
        on_next: Any = None,
        on_error: Optional[Callable[[Any], Any]] = None,
        on_complete: Optional[Callable[[], Any]] = None,
    ) -> Subscription[T]:
        """
        Run the producer against a new Observer.

        Args:
            on_next: Value callback, or a whole handler set given as a
                ``Handlers`` record or a ``{"next", "error", "complete"}``
                mapping.
            on_error: Terminal error callback.
            on_complete: Terminal completion callback.

        Returns:
            Subscription whose ``unsubscribe`` cancels this run only

        Raises:
            TypeError: If the handler set is malformed.
        """
        observer = Observer(Handlers.coerce(on_next, on_error, on_complete))
        logger.debug("Subscribing %r to %r", observer, self)

        try:
            teardown = self._producer(observer)
        except Exception:
            logger.debug("Producer failed during subscribe", exc_info=True)
            observer.unsubscribe()
            raise

        if callable(teardown):
            observer.teardown = teardown
        elif teardown is not None:
            logger.debug("Ignoring non-callable teardown %r", teardown)

        return Subscription(observer)

    # ------------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------------

    @classmethod
    def from_(cls, values: Iterable[T]) -> "Observable[T]":
        """
        Observable that emits every element of ``values`` in order, then completes.

        The values are captured once, so single-pass iterables still replay
        in full for every subscription. Emission is synchronous: by the time
        ``subscribe`` returns, every signal has already been delivered.
        """
        items = tuple(values)

        def produce(observer: Observer[T]) -> Teardown:
            for item in items:
                observer.next(item)
            observer.complete()

            def teardown() -> None:
                logger.info("Unsubscribed from the iterable observable.")

            return teardown

        return cls(produce)

    from_iterable = from_

    @classmethod
    def of(cls, *values: T) -> "Observable[T]":
        """Shorthand for ``Observable.from_(values)``."""
        return cls.from_(values)

    def __repr__(self) -> str:
        name = getattr(self._producer, "__qualname__", repr(self._producer))
        return f"Observable({name})"
