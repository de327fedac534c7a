# webservice/core/fetch/errors.py
"""
Typed errors + classification helpers for the JSON resource fetcher.

Exports
-------
- FetchErrorKind (urlError / domainError / decodingError)
- FetchError, UrlError, DomainError, DecodingError
- FETCH_ERRORS
- classify_transport_outcome(error, data)
- classify_decode_error(exc)

Errors are values here: the fetcher never raises them across the async
boundary, it wraps them in a `Result` and hands them to the caller's
completion. `Result.unwrap()` is the only place they get raised.
"""

from __future__ import annotations

from enum import Enum

# =========================
# Taxonomy
# =========================


class FetchErrorKind(str, Enum):
    """Flat, mutually exclusive failure kinds."""

    URL = "urlError"
    DOMAIN = "domainError"
    DECODING = "decodingError"


class FetchError(RuntimeError):
    """Base class for fetch failures. `kind` names the taxonomy entry."""

    kind: FetchErrorKind = FetchErrorKind.DOMAIN

    def __init__(self, message: str = "", *, url: str | None = None) -> None:
        super().__init__(message or self.kind.value)
        self.url = url


class UrlError(FetchError):
    """The resource URL could not be turned into a request."""

    kind = FetchErrorKind.URL


class DomainError(FetchError):
    """Transport failure, 4xx/5xx status, or a response with no payload."""

    kind = FetchErrorKind.DOMAIN


class DecodingError(FetchError):
    """A payload arrived but does not match the expected shape."""

    kind = FetchErrorKind.DECODING


# Selector tuple for grouped exception handling
FETCH_ERRORS = (UrlError, DomainError, DecodingError)

# =========================
# Classification helpers
# =========================


def classify_transport_outcome(
    error: BaseException | None,
    data: bytes | None,
    *,
    url: str | None = None,
) -> DomainError | None:
    """
    Return a DomainError when the transport outcome is unusable, else None.

    Precedence:
      - transport reported an error  → DomainError (bytes are ignored)
      - no bytes / zero bytes        → DomainError
      - otherwise                    → None (go on to decoding)
    """
    if error is not None:
        if isinstance(error, DomainError):
            return error
        return DomainError(f"{type(error).__name__}: {error}", url=url)
    if not data:
        return DomainError("empty response body", url=url)
    return None


def classify_decode_error(exc: Exception, *, url: str | None = None) -> DecodingError:
    """Any decoder failure (malformed JSON, missing field, wrong type) is a DecodingError."""
    if isinstance(exc, DecodingError):
        return exc
    return DecodingError(f"{type(exc).__name__}: {exc}", url=url)


__all__ = [
    "FetchErrorKind",
    "FetchError",
    "UrlError",
    "DomainError",
    "DecodingError",
    "FETCH_ERRORS",
    "classify_transport_outcome",
    "classify_decode_error",
]
