#!/usr/bin/env python3
"""
Streamlet Mock Request Stream
=============================

Pushes a small batch of mock HTTP requests through an Observable and maps the
stream signals to mock responses:

- every request is handled with status 200
- a stream error is mapped to status 500
- completion is logged

The second half shows an erroring stream: the value emitted after ``error``
never reaches the handler.

To run:
```bash
$ pip install -e ".[demo]" && python examples/requests_demo.py
```
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Union

from rich.logging import RichHandler

from streamlet import Observable, StreamError

# ==============================================================================================
# Configuration and Constants
# ==============================================================================================

LOG_LEVEL = logging.INFO

HTTP_GET_METHOD = "GET"
HTTP_POST_METHOD = "POST"

HTTP_STATUS_OK = 200
HTTP_STATUS_INTERNAL_SERVER_ERROR = 500

logger = logging.getLogger(__name__)


# ==============================================================================================
# Mock Records
# ==============================================================================================


@dataclass
class User:
    name: str
    age: int
    roles: List[str]
    created_at: datetime = field(default_factory=datetime.now)
    is_deleted: bool = False


@dataclass
class RequestMock:
    method: str
    host: str
    path: str
    params: Dict[str, Union[str, int]] = field(default_factory=dict)
    body: Optional[User] = None


@dataclass
class ResponseMock:
    status: int


USER_MOCK = User(name="User Name", age=26, roles=["user", "admin"])

REQUESTS_MOCK = [
    RequestMock(
        method=HTTP_POST_METHOD,
        host="service.example",
        path="user",
        body=USER_MOCK,
    ),
    RequestMock(
        method=HTTP_GET_METHOD,
        host="service.example",
        path="user",
        params={"id": "3f5h67s4s"},
    ),
]


# ==============================================================================================
# Handlers
# ==============================================================================================


def handle_request(request: RequestMock) -> ResponseMock:
    logger.info("Handling request: %s %s/%s", request.method, request.host, request.path)
    return ResponseMock(status=HTTP_STATUS_OK)


def handle_error(error: Exception) -> ResponseMock:
    logger.error("An error occurred: %s", error)
    return ResponseMock(status=HTTP_STATUS_INTERNAL_SERVER_ERROR)


def handle_complete() -> None:
    logger.info("Processing complete.")


# ==============================================================================================
# Demo
# ==============================================================================================


def main() -> List[ResponseMock]:
    """Run both demonstrations and return every response produced, in order."""
    responses: List[ResponseMock] = []

    requests = Observable.from_(REQUESTS_MOCK)

    logger.info("Subscribing to requests stream...")
    subscription = requests.subscribe(
        lambda request: responses.append(handle_request(request)),
        on_error=lambda error: responses.append(handle_error(error)),
        on_complete=handle_complete,
    )

    logger.info("Unsubscribing immediately.")
    subscription.unsubscribe()

    logger.info("--- Demonstrating error handling ---")

    def failing_producer(observer):
        observer.next(REQUESTS_MOCK[0])
        observer.error(StreamError("Something went wrong during the stream!"))
        observer.next(REQUESTS_MOCK[1])

    Observable(failing_producer).subscribe(
        {
            "next": lambda request: responses.append(handle_request(request)),
            "error": lambda error: responses.append(handle_error(error)),
            "complete": handle_complete,
        }
    )

    return responses


if __name__ == "__main__":
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True)],
    )
    main()
