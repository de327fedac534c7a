# tests/utils.py
"""
Single source of truth for test data, stub transports, and canonical payloads.
Update values here to cascade across the test suite.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from pydantic import BaseModel

from webservice.core.fetch.transport import TransportCallback, TransportRequest, TransportResult
from webservice.schemas.models import Resource

# -----------------------------
# Domain payloads
# -----------------------------


class Coffee(BaseModel):
    id: int
    name: str


class NewCoffee(BaseModel):
    name: str


COFFEES_URL = "/coffees"
COFFEES_JSON = b'[{"id":1,"name":"Latte"}]'
MOCHA_BODY = b'{"name":"Mocha"}'
MOCHA_ECHO = b'{"id":2,"name":"Mocha"}'


def coffees_resource() -> Resource[list[Coffee]]:
    return Resource(url=COFFEES_URL, response_type=list[Coffee])


def create_coffee_resource(body: bytes = MOCHA_BODY) -> Resource[Coffee]:
    return Resource(url=COFFEES_URL, response_type=Coffee, method="POST", body=body)


# -----------------------------
# Transport stubs
# -----------------------------

Responder = Callable[[TransportRequest], TransportResult]


def body(data: bytes | None) -> Responder:
    return lambda _req: TransportResult(data=data, response={"status": 200}, error=None)


def failure(error: BaseException, data: bytes | None = None) -> Responder:
    return lambda _req: TransportResult(data=data, response=None, error=error)


def echo_with_id(new_id: int) -> Responder:
    """Echo the posted JSON object back with an `id` assigned."""

    def _respond(req: TransportRequest) -> TransportResult:
        created = NewCoffee.model_validate_json(req.body or b"{}")
        return TransportResult(data=Coffee(id=new_id, name=created.name).model_dump_json().encode(), response=None)

    return _respond


class StubTransport:
    """
    In-memory transport.

    - threaded=False: callback runs inline inside `submit`
    - threaded=True:  callback runs on a worker thread (like the real transport)
    - repeat: how many times to fire the callback per request (misbehaving transport)
    """

    def __init__(self, responder: Responder, *, threaded: bool = False, repeat: int = 1, max_workers: int = 4) -> None:
        self.responder = responder
        self.threaded = threaded
        self.repeat = repeat
        self.requests: list[TransportRequest] = []
        self.callback_threads: list[int] = []
        self._lock = threading.Lock()
        self._pool = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="stub-transport") if threaded else None

    def submit(self, request: TransportRequest, callback: TransportCallback) -> None:
        with self._lock:
            self.requests.append(request)
        if self._pool is not None:
            self._pool.submit(self._fire, request, callback)
        else:
            self._fire(request, callback)

    def _fire(self, request: TransportRequest, callback: TransportCallback) -> None:
        result = self.responder(request)
        for _ in range(self.repeat):
            with self._lock:
                self.callback_threads.append(threading.get_ident())
            callback(result)

    def close(self) -> None:
        if self._pool is not None:
            self._pool.shutdown(wait=True)


class ExplodingTransport:
    """Raises from `submit` instead of calling back."""

    def __init__(self, exc: Exception | None = None) -> None:
        self.exc = exc or RuntimeError("transport offline")

    def submit(self, request: TransportRequest, callback: TransportCallback) -> None:
        raise self.exc


class RecordingCompletion:
    """Completion that records every outcome and the thread it ran on."""

    def __init__(self) -> None:
        self.calls: list[Any] = []
        self.threads: list[int] = []
        self.event = threading.Event()
        self._lock = threading.Lock()

    def __call__(self, result: Any) -> None:
        with self._lock:
            self.calls.append(result)
            self.threads.append(threading.get_ident())
        self.event.set()

    @property
    def result(self) -> Any:
        assert len(self.calls) == 1, f"expected exactly one completion, got {len(self.calls)}"
        return self.calls[0]
