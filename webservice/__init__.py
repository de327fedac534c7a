"""
webservice — generic JSON resource fetcher.

Exports the pieces a caller needs to describe a resource, load it, and read
the outcome:

  - Resource, Result, FetcherSettings   (from .schemas.models)
  - Fetcher, FetchErrorKind + errors    (from .core.fetch)
  - load_settings                       (from .config)
"""

from __future__ import annotations

from .config import load_settings
from .core.fetch import (
    DecodingError,
    DomainError,
    Fetcher,
    FetchError,
    FetchErrorKind,
    LoopDispatcher,
    MainQueueDispatcher,
    RequestsTransport,
    UrlError,
)
from .schemas.models import FetcherSettings, Resource, Result

__all__ = [
    "Resource",
    "Result",
    "FetcherSettings",
    "Fetcher",
    "FetchErrorKind",
    "FetchError",
    "UrlError",
    "DomainError",
    "DecodingError",
    "MainQueueDispatcher",
    "LoopDispatcher",
    "RequestsTransport",
    "load_settings",
]
