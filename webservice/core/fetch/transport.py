# webservice/core/fetch/transport.py
"""
Transport collaborator: "perform this HTTP request, hand me bytes or an error".

The fetcher only relies on the `Transport` protocol below. `RequestsTransport`
is the default implementation: a `requests.Session` driven from a small thread
pool, so `submit` never blocks the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Protocol

import requests

from webservice.schemas.models import FetcherSettings, HttpMethod

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransportRequest:
    method: HttpMethod
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes | None = None


@dataclass(frozen=True)
class TransportResult:
    """Raw outcome: bytes (maybe absent), opaque response metadata, optional error."""

    data: bytes | None = None
    response: Any = None
    error: BaseException | None = None


TransportCallback = Callable[[TransportResult], None]


class Transport(Protocol):
    def submit(self, request: TransportRequest, callback: TransportCallback) -> None: ...


class RequestsTransport:
    """
    Thread-pool backed transport over `requests`.

    - Connection errors, timeouts and invalid URLs come back as `error`.
    - 4xx/5xx statuses come back as `error` too (HTTPError from raise_for_status),
      with the body still attached in `data`.
    - The callback runs on a pool worker thread.
    """

    def __init__(
        self,
        settings: FetcherSettings | None = None,
        *,
        session: requests.Session | None = None,
        executor: Executor | None = None,
    ) -> None:
        self.settings = settings or FetcherSettings()
        self._session = session or requests.Session()
        self._owns_session = session is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=self.settings.max_workers,
            thread_name_prefix="webservice-transport",
        )
        self._owns_executor = executor is None

    def submit(self, request: TransportRequest, callback: TransportCallback) -> None:
        self._executor.submit(self._run, request, callback)

    def _run(self, request: TransportRequest, callback: TransportCallback) -> None:
        try:
            result = self.perform(request)
        except Exception as e:  # noqa: BLE001
            # anything outside RequestException (adapter bugs, bad arguments) still has to call back
            logger.exception("transport failed unexpectedly for %s %s", request.method, request.url)
            result = TransportResult(data=None, response=None, error=e)
        try:
            callback(result)
        except Exception:  # noqa: BLE001
            # nothing upstream would see it: the pool future is never awaited
            logger.exception("transport callback failed for %s %s", request.method, request.url)

    def perform(self, request: TransportRequest) -> TransportResult:
        """Blocking single request. Never raises for request-level failures."""
        headers = {"User-Agent": self.settings.user_agent, **request.headers}
        try:
            resp = self._session.request(
                request.method,
                request.url,
                data=request.body,
                headers=headers,
                timeout=self.settings.timeout_s,
            )
        except requests.RequestException as e:
            logger.debug("transport error for %s %s: %s", request.method, request.url, e)
            return TransportResult(data=None, response=None, error=e)

        try:
            resp.raise_for_status()
        except requests.HTTPError as e:
            logger.debug("HTTP %s for %s %s", resp.status_code, request.method, request.url)
            return TransportResult(data=resp.content, response=resp, error=e)

        return TransportResult(data=resp.content, response=resp, error=None)

    def close(self) -> None:
        if self._owns_executor:
            self._executor.shutdown(wait=True)
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> RequestsTransport:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


__all__ = [
    "TransportRequest",
    "TransportResult",
    "TransportCallback",
    "Transport",
    "RequestsTransport",
]
