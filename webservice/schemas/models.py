# webservice/schemas/models.py

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

if TYPE_CHECKING:
    from webservice.core.fetch.errors import FetchError, FetchErrorKind

T = TypeVar("T")

HttpMethod = Literal["GET", "POST"]

# =========================
# Resource descriptor
# =========================


@dataclass(frozen=True)
class Resource(Generic[T]):
    """
    Immutable description of one HTTP call and the shape its JSON body decodes into.

    `response_type` is anything pydantic can validate (a model, `list[Model]`,
    `dict[str, int]`, a primitive). `decoder`, when given, replaces the default
    schema decoder for this resource.
    """

    url: str
    response_type: Any = Any
    method: HttpMethod = "GET"
    body: bytes | None = None
    decoder: Callable[[bytes], T] | None = field(default=None, compare=False, repr=False)

    @classmethod
    def post_json(cls, url: str, payload: Any, response_type: Any = Any) -> Resource[Any]:
        """POST resource whose body is the JSON encoding of `payload`."""
        if isinstance(payload, BaseModel):
            body = payload.model_dump_json().encode("utf-8")
        else:
            body = TypeAdapter(type(payload)).dump_json(payload)
        return cls(url=url, response_type=response_type, method="POST", body=body)


# =========================
# Outcome
# =========================


@dataclass(frozen=True)
class Result(Generic[T]):
    """Terminal outcome of one `load`: a decoded value or exactly one FetchError."""

    value: T | None = None
    error: FetchError | None = None

    @classmethod
    def success(cls, value: T) -> Result[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: FetchError) -> Result[T]:
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def kind(self) -> FetchErrorKind | None:
        return self.error.kind if self.error is not None else None

    def unwrap(self) -> T:
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]


# =========================
# Fetcher settings
# =========================


class FetcherSettings(BaseModel):
    """
    Runtime knobs for the fetcher and its default requests transport.

    Kept deliberately small: there is no caching, retry or auth policy here.
    Anything not listed is the transport's own business.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    base_url: str | None = Field(
        None,
        description="Optional prefix joined onto relative resource URLs before dispatch.",
    )
    timeout_s: float = Field(
        15.0,
        gt=0,
        description="HTTP timeout in seconds applied by the requests transport.",
    )
    max_workers: int = Field(
        4,
        ge=1,
        description="Thread pool size of the requests transport (concurrent loads in flight).",
    )
    user_agent: str = Field(
        "webservice/0.1 (+json-fetcher)",
        description="User-Agent string used in HTTP requests.",
    )
    dispatch_failures_to_main: bool = Field(
        False,
        description=(
            "If True, failure completions are posted to the same context as successes. "
            "If False, failures run on the transport's callback thread."
        ),
    )
    debug: bool = Field(False, description="Attach the rotating debug log file handler.")

    @field_validator("base_url")
    @classmethod
    def _strip_base_url(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        return v or None
