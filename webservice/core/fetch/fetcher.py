# webservice/core/fetch/fetcher.py
"""
Generic JSON resource fetcher.

`Fetcher.load(resource, completion)` builds a request from a `Resource`, hands
it to the transport, classifies the raw outcome, decodes the body and reports
exactly one `Result` to `completion`.

Classification precedence (first match wins):
  1. URL cannot be used              → urlError   (transport never called)
  2. transport error OR no bytes     → domainError
  3. decoder raises                  → decodingError
  4. otherwise                       → success

Dispatch policy:
  - success completions go through `success_dispatcher` (the designated
    "main" context; inline unless one is configured)
  - failure completions go through `failure_dispatcher`, which defaults to
    running inline on the transport's callback thread, or to the success
    dispatcher when `settings.dispatch_failures_to_main` is set

The returned future resolves with the same `Result` as soon as it is
classified, independently of where the completion gets dispatched.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Callable
from concurrent.futures import Future
from typing import Any, TypeVar
from urllib.parse import urljoin, urlsplit

from webservice.schemas.models import FetcherSettings, Resource, Result

from .decoding import decoder_for
from .dispatch import Dispatcher, inline_dispatcher
from .errors import DomainError, UrlError, classify_decode_error, classify_transport_outcome
from .transport import RequestsTransport, Transport, TransportRequest, TransportResult

logger = logging.getLogger(__name__)

T = TypeVar("T")

Completion = Callable[[Result[T]], None]

JSON_HEADERS = {"Content-Type": "application/json"}


class _Delivery:
    """One-shot latch: the first `claim()` wins, every later one is refused."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._claimed = False

    def claim(self) -> bool:
        with self._lock:
            if self._claimed:
                return False
            self._claimed = True
            return True


class Fetcher:
    """
    Stateless service that executes `Resource`s.

    The only state is the injected collaborators, so one instance can be shared
    across threads. A transport built here from `settings` is owned and closed
    by `close()`; an injected one is left alone.
    """

    def __init__(
        self,
        transport: Transport | None = None,
        *,
        settings: FetcherSettings | None = None,
        success_dispatcher: Dispatcher | None = None,
        failure_dispatcher: Dispatcher | None = None,
    ) -> None:
        self.settings = settings or FetcherSettings()
        self._owns_transport = transport is None
        self.transport: Transport = transport or RequestsTransport(self.settings)
        self.success_dispatcher: Dispatcher = success_dispatcher or inline_dispatcher
        if failure_dispatcher is not None:
            self.failure_dispatcher: Dispatcher = failure_dispatcher
        elif self.settings.dispatch_failures_to_main:
            self.failure_dispatcher = self.success_dispatcher
        else:
            self.failure_dispatcher = inline_dispatcher

    # -------------------------
    # Public API
    # -------------------------

    def load(self, resource: Resource[T], completion: Completion[T] | None = None) -> Future[Result[T]]:
        """
        Start fetching `resource`; returns immediately.

        `completion` is invoked exactly once with the outcome. The returned
        future carries the same outcome and cannot be cancelled.
        """
        future: Future[Result[T]] = Future()
        future.set_running_or_notify_cancel()
        delivery = _Delivery()

        def finish(result: Result[T]) -> None:
            future.set_result(result)
            self._dispatch(result, completion)

        try:
            request = self.build_request(resource)
        except UrlError as e:
            delivery.claim()
            logger.debug("url rejected before dispatch: %r", resource.url)
            finish(Result.failure(e))
            return future

        def on_transport_complete(raw: TransportResult) -> None:
            if not delivery.claim():
                logger.warning("transport reported %s %s more than once; ignoring", request.method, request.url)
                return
            finish(self.classify(resource, raw, url=request.url))

        try:
            self.transport.submit(request, on_transport_complete)
        except Exception as e:  # noqa: BLE001
            # a transport that blows up synchronously is still a transport failure
            if delivery.claim():
                err = classify_transport_outcome(e, None, url=request.url)
                logger.debug("transport submit failed for %s %s: %s", request.method, request.url, e)
                finish(Result.failure(err or DomainError(str(e), url=request.url)))

        return future

    def fetch(self, resource: Resource[T], timeout: float | None = None) -> Result[T]:
        """Blocking convenience around `load`."""
        return self.load(resource).result(timeout=timeout)

    async def fetch_async(self, resource: Resource[T]) -> Result[T]:
        """Awaitable convenience around `load`."""
        return await asyncio.wrap_future(self.load(resource))

    # -------------------------
    # Pipeline steps
    # -------------------------

    def build_request(self, resource: Resource[Any]) -> TransportRequest:
        """Method, resolved URL, body, and an always-present JSON content type."""
        return TransportRequest(
            method=resource.method,
            url=self.resolve_url(resource.url),
            headers=dict(JSON_HEADERS),
            body=resource.body,
        )

    def resolve_url(self, url: str) -> str:
        """
        Join relative URLs onto `settings.base_url`; reject unusable ones.

        Relative URLs without a base are passed through untouched: whether
        they are reachable is the transport's call.
        """
        if not url or not url.strip():
            raise UrlError("empty url", url=url)
        try:
            parts = urlsplit(url)
            parts.port  # noqa: B018  (raises ValueError on a malformed port)
        except ValueError as e:
            raise UrlError(f"malformed url: {e}", url=url) from e

        base = self.settings.base_url
        if base and not parts.scheme:
            return urljoin(base.rstrip("/") + "/", url.lstrip("/"))
        return url

    def classify(self, resource: Resource[T], raw: TransportResult, *, url: str | None = None) -> Result[T]:
        domain_err = classify_transport_outcome(raw.error, raw.data, url=url)
        if domain_err is not None:
            logger.debug("domainError for %s: %s", url, domain_err)
            return Result.failure(domain_err)

        try:
            value = decoder_for(resource)(raw.data)  # type: ignore[arg-type]
        except Exception as e:  # noqa: BLE001
            decode_err = classify_decode_error(e, url=url)
            logger.debug("decodingError for %s: %s", url, decode_err)
            return Result.failure(decode_err)

        logger.debug("decoded %s into %r", url, resource.response_type)
        return Result.success(value)

    # -------------------------
    # Completion dispatch
    # -------------------------

    def _dispatch(self, result: Result[T], completion: Completion[T] | None) -> None:
        if completion is None:
            return
        dispatcher = self.success_dispatcher if result.ok else self.failure_dispatcher

        def run() -> None:
            try:
                completion(result)
            except Exception:  # noqa: BLE001
                logger.exception("completion raised; outcome was %s", "ok" if result.ok else result.kind)

        try:
            dispatcher(run)
        except Exception:  # noqa: BLE001
            # the context refused the post (e.g. closed loop); deliver here instead
            logger.exception("dispatcher failed to post completion; running it inline")
            run()

    # -------------------------
    # Lifecycle
    # -------------------------

    def close(self) -> None:
        if self._owns_transport and isinstance(self.transport, RequestsTransport):
            self.transport.close()

    def __enter__(self) -> Fetcher:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


__all__ = ["Fetcher", "Completion", "JSON_HEADERS"]
