# webservice/core/fetch/decoding.py
"""
Schema-driven decode strategies for response bodies.

The fetcher is polymorphic over "decode(bytes) -> T". The default strategy is
a strict pydantic `TypeAdapter` over the resource's `response_type`; callers
can hand a resource any other callable with the same shape.
"""

from __future__ import annotations

from collections.abc import Callable
from functools import lru_cache
from typing import Any, Generic, Protocol, TypeVar

from pydantic import TypeAdapter

from webservice.schemas.models import Resource

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)


class Decoder(Protocol[T_co]):
    def __call__(self, data: bytes) -> T_co: ...


class JsonDecoder(Generic[T]):
    """
    Decode JSON bytes into `response_type`.

    strict=True means no lax coercion: "1" does not become 1 and 1 does not
    become "1". Unknown keys on models are ignored unless the model forbids them.
    """

    def __init__(self, response_type: Any, *, strict: bool = True) -> None:
        self.response_type = response_type
        self.strict = strict
        self._adapter: TypeAdapter[T] = TypeAdapter(response_type)

    def __call__(self, data: bytes) -> T:
        return self._adapter.validate_json(data, strict=self.strict)

    def __repr__(self) -> str:
        return f"JsonDecoder({self.response_type!r}, strict={self.strict})"


@lru_cache(maxsize=256)
def _cached_json_decoder(response_type: Any) -> JsonDecoder[Any]:
    return JsonDecoder(response_type)


def json_decoder(response_type: Any) -> JsonDecoder[Any]:
    """Shared strict decoder for `response_type` (built once per hashable type)."""
    try:
        return _cached_json_decoder(response_type)
    except TypeError:
        # unhashable type expressions (e.g. Annotated with dict metadata)
        return JsonDecoder(response_type)


def decoder_for(resource: Resource[T]) -> Callable[[bytes], T]:
    """The resource's explicit decoder, else the shared JSON decoder for its shape."""
    if resource.decoder is not None:
        return resource.decoder
    return json_decoder(resource.response_type)


__all__ = ["Decoder", "JsonDecoder", "json_decoder", "decoder_for"]
