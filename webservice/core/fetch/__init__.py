# webservice/core/fetch/__init__.py
from .decoding import Decoder, JsonDecoder, decoder_for, json_decoder
from .dispatch import Dispatcher, LoopDispatcher, MainQueueDispatcher, inline_dispatcher
from .errors import (
    FETCH_ERRORS,
    DecodingError,
    DomainError,
    FetchError,
    FetchErrorKind,
    UrlError,
    classify_decode_error,
    classify_transport_outcome,
)
from .fetcher import JSON_HEADERS, Completion, Fetcher
from .transport import RequestsTransport, Transport, TransportRequest, TransportResult

__all__ = [
    "Fetcher",
    "Completion",
    "JSON_HEADERS",
    "FetchErrorKind",
    "FetchError",
    "UrlError",
    "DomainError",
    "DecodingError",
    "FETCH_ERRORS",
    "classify_transport_outcome",
    "classify_decode_error",
    "Decoder",
    "JsonDecoder",
    "json_decoder",
    "decoder_for",
    "Dispatcher",
    "inline_dispatcher",
    "MainQueueDispatcher",
    "LoopDispatcher",
    "Transport",
    "TransportRequest",
    "TransportResult",
    "RequestsTransport",
]
