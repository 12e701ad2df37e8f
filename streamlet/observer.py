"""
Observer - Per-Subscription Signal Gate
=======================================

An Observer wraps the handlers a consumer passed to ``subscribe`` and is the
single source of truth for whether that subscription is still live.

Lifecycle (one Observer per subscription):
- Active: ``next`` reaches ``on_next``
- Terminated: reached through ``error``, ``complete`` or ``unsubscribe``;
  absorbing, every further signal is a no-op

Guarantees:
1. Only the first terminal signal (``error`` or ``complete``) reaches a handler
2. Teardown runs at most once, and never before it has been registered
3. Stream operations never raise on their own behalf; handler exceptions
   propagate to whoever emitted the signal
"""

import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Generic, Mapping, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

Teardown = Callable[[], None]


# ============================================================================
# EXCEPTIONS
# ============================================================================


class StreamError(Exception):
    """Generic error value for producers that signal ``error`` without a better one."""

    pass


class TeardownAlreadySetError(Exception):
    """A teardown action was registered twice on the same Observer."""

    pass


# ============================================================================
# HANDLERS - Immutable Callback Record
# ============================================================================

# Mapping keys accepted by Handlers.coerce, normalized to field names.
_HANDLER_KEYS = {
    "next": "on_next",
    "error": "on_error",
    "complete": "on_complete",
    "on_next": "on_next",
    "on_error": "on_error",
    "on_complete": "on_complete",
}


@dataclass(frozen=True)
class Handlers(Generic[T]):
    """
    The callbacks a consumer registers for one subscription.

    Every field is optional. A missing handler drops its signal silently and
    has no influence on the subscription's state transitions.
    """

    on_next: Optional[Callable[[T], Any]] = None
    on_error: Optional[Callable[[Any], Any]] = None
    on_complete: Optional[Callable[[], Any]] = None

    @classmethod
    def coerce(
        cls,
        handlers: Any = None,
        on_error: Optional[Callable[[Any], Any]] = None,
        on_complete: Optional[Callable[[], Any]] = None,
    ) -> "Handlers":
        """
        Build a Handlers record from any shape ``subscribe`` accepts.

        ``handlers`` may be a Handlers record, a mapping keyed by
        ``next``/``error``/``complete`` (or the ``on_*`` field names), a
        plain ``on_next`` callable, or None.

        Raises:
            TypeError: For unknown mapping keys, non-callable handlers, or a
                record/mapping combined with separate callbacks.
        """
        if isinstance(handlers, (Handlers, Mapping)):
            if on_error is not None or on_complete is not None:
                raise TypeError(
                    "Pass either a handler record or separate callbacks, not both"
                )

        if isinstance(handlers, Handlers):
            return handlers

        if isinstance(handlers, Mapping):
            fields = {}
            for key, callback in handlers.items():
                try:
                    fields[_HANDLER_KEYS[key]] = callback
                except KeyError:
                    raise TypeError(f"Unknown handler key: {key!r}") from None
            return cls._checked(**fields)

        return cls._checked(
            on_next=handlers, on_error=on_error, on_complete=on_complete
        )

    @classmethod
    def _checked(cls, **fields: Any) -> "Handlers":
        for name, callback in fields.items():
            if callback is not None and not callable(callback):
                raise TypeError(f"{name} must be callable, got {type(callback)}")
        return cls(**fields)


# ============================================================================
# OBSERVER - Active/Terminated State Machine
# ============================================================================


class Observer(Generic[T]):
    """
    Gatekeeper for one subscription's signals and teardown.

    ``is_stopped`` closes the gate for handler invocations as soon as a
    terminal signal is accepted, before its handler runs, so a handler that
    re-enters ``next`` or ``complete`` cannot produce a second delivery.
    ``is_unsubscribed`` flips right after the handler returns, together with
    the teardown call.

    While a terminal handler runs, ``unsubscribe`` from any thread (or from
    the handler itself) is absorbed: the terminal signal owns the transition
    and runs the teardown once its handler is done, so the teardown never
    precedes ``on_error``/``on_complete``.

    The read-modify-write on the flags holds ``_lock``; handlers and the
    teardown always run outside of it.
    """

    __slots__ = (
        "_handlers",
        "_is_stopped",
        "_is_terminating",
        "_is_unsubscribed",
        "_teardown",
        "_has_teardown",
        "_lock",
    )

    def __init__(self, handlers: Any = None):
        self._handlers = Handlers.coerce(handlers)
        self._is_stopped = False
        self._is_terminating = False
        self._is_unsubscribed = False
        self._teardown: Optional[Teardown] = None
        self._has_teardown = False
        self._lock = threading.Lock()

    @property
    def handlers(self) -> Handlers[T]:
        return self._handlers

    @property
    def is_stopped(self) -> bool:
        """True once a terminal signal was accepted or the observer unsubscribed."""
        return self._is_stopped

    @property
    def is_unsubscribed(self) -> bool:
        return self._is_unsubscribed

    @property
    def teardown(self) -> Optional[Teardown]:
        """The registered teardown action, or None if unset or already run."""
        return self._teardown

    @teardown.setter
    def teardown(self, action: Teardown) -> None:
        """
        Register the teardown action. Allowed once per Observer.

        When the subscription already terminated (a producer that completes
        synchronously), the action runs immediately instead of being stored.
        """
        if not callable(action):
            raise TypeError(f"Teardown must be callable, got {type(action)}")

        with self._lock:
            if self._has_teardown:
                raise TeardownAlreadySetError(
                    "Teardown can only be registered once per observer"
                )
            self._has_teardown = True
            if not self._is_unsubscribed:
                self._teardown = action
                return

        logger.debug("Observer %r already unsubscribed, running teardown now", self)
        action()

    # ------------------------------------------------------------------------
    # Signals
    # ------------------------------------------------------------------------

    def next(self, value: T) -> None:
        """Deliver a value to ``on_next`` while the subscription is active."""
        if self._is_stopped:
            return

        on_next = self._handlers.on_next
        if on_next is not None:
            on_next(value)

    def error(self, error: Any) -> None:
        """Deliver a terminal error, then unsubscribe. No-op once terminated."""
        if not self._stop():
            return

        logger.debug("Observer %r received error: %r", self, error)
        try:
            on_error = self._handlers.on_error
            if on_error is not None:
                on_error(error)
        finally:
            self._finish()

    def complete(self) -> None:
        """Deliver completion, then unsubscribe. No-op once terminated."""
        if not self._stop():
            return

        logger.debug("Observer %r completed", self)
        try:
            on_complete = self._handlers.on_complete
            if on_complete is not None:
                on_complete()
        finally:
            self._finish()

    def unsubscribe(self) -> None:
        """
        Cancel the subscription silently.

        Idempotent. Neither ``on_error`` nor ``on_complete`` is invoked; only
        the first call runs the teardown action. A call made while a terminal
        handler is running returns at once and leaves the teardown to the
        terminal signal.
        """
        with self._lock:
            if self._is_unsubscribed or self._is_terminating:
                return
            self._is_unsubscribed = True
            self._is_stopped = True
            teardown = self._teardown
            self._teardown = None

        if teardown is not None:
            logger.debug("Running teardown for observer %r", self)
            teardown()

    def _stop(self) -> bool:
        """Claim the single terminal transition. True for the winning caller."""
        with self._lock:
            if self._is_stopped:
                return False
            self._is_stopped = True
            self._is_terminating = True
            return True

    def _finish(self) -> None:
        with self._lock:
            self._is_terminating = False
        self.unsubscribe()

    def __repr__(self) -> str:
        if self._is_unsubscribed:
            state = "unsubscribed"
        elif self._is_stopped:
            state = "stopping"
        else:
            state = "active"
        return f"Observer({state})"
