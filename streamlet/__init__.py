"""
Streamlet - Push-Based Event Streams

A minimal Observable/Observer primitive: a producer pushes values, an error,
or a completion signal to the consumer of one subscription, and the consumer
can cancel at any time with an idempotent ``unsubscribe``.
"""

from .observable import Observable, Producer, Subscription
from .observer import (
    Handlers,
    Observer,
    StreamError,
    Teardown,
    TeardownAlreadySetError,
)

__version__ = "0.1.0"

__all__ = [
    # Core
    "Observable",
    "Observer",
    "Handlers",
    "Subscription",
    # Type aliases
    "Producer",
    "Teardown",
    # Exceptions
    "StreamError",
    "TeardownAlreadySetError",
    "__version__",
]
