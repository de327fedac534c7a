# webservice/config.py
"""
Settings loader for the fetcher.

Settings are plain `FetcherSettings` values; this module only layers optional
environment overrides on top of explicit keyword values or defaults.

Environment overrides (optional, prefix defaults to WEBSERVICE_)
-----------------------------------------------------------------
- WEBSERVICE_BASE_URL           -> base_url
- WEBSERVICE_TIMEOUT_S          -> timeout_s (float > 0)
- WEBSERVICE_MAX_WORKERS        -> max_workers (int >= 1)
- WEBSERVICE_USER_AGENT         -> user_agent
- WEBSERVICE_DISPATCH_FAILURES  -> dispatch_failures_to_main (1/true/yes/on)
- WEBSERVICE_DEBUG              -> debug (1/true/yes/on)

Unparseable or out-of-range values are ignored with a WARNING; the validated
default (or the explicit keyword value) wins.
"""

from __future__ import annotations

import logging
import os
from typing import Any

from pydantic import ValidationError

from webservice.logging_utils import get_debug_logger
from webservice.schemas.models import FetcherSettings

logger = logging.getLogger(__name__)

DEFAULT_ENV_PREFIX = "WEBSERVICE_"

_ENV_NAMES = {
    "base_url": "BASE_URL",
    "timeout_s": "TIMEOUT_S",
    "max_workers": "MAX_WORKERS",
    "user_agent": "USER_AGENT",
    "dispatch_failures_to_main": "DISPATCH_FAILURES",
    "debug": "DEBUG",
}

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


def _ignored(name: str, raw: object) -> None:
    logger.warning("ignoring invalid %s=%r", name, raw)


def _env_flag(name: str) -> bool | None:
    raw = os.getenv(name)
    if raw is None:
        return None
    v = raw.strip().lower()
    if v in _TRUTHY:
        return True
    if v in _FALSY:
        return False
    _ignored(name, raw)
    return None


def _env_overrides(prefix: str) -> dict[str, Any]:
    updates: dict[str, Any] = {}

    base_url = os.getenv(f"{prefix}BASE_URL")
    if base_url:
        updates["base_url"] = base_url

    timeout = os.getenv(f"{prefix}TIMEOUT_S")
    if timeout:
        try:
            updates["timeout_s"] = float(timeout)
        except ValueError:
            _ignored(f"{prefix}TIMEOUT_S", timeout)

    workers = os.getenv(f"{prefix}MAX_WORKERS")
    if workers:
        try:
            updates["max_workers"] = int(workers)
        except ValueError:
            _ignored(f"{prefix}MAX_WORKERS", workers)

    ua = os.getenv(f"{prefix}USER_AGENT")
    if ua and ua.strip():
        updates["user_agent"] = ua.strip()

    dispatch_failures = _env_flag(f"{prefix}DISPATCH_FAILURES")
    if dispatch_failures is not None:
        updates["dispatch_failures_to_main"] = dispatch_failures

    debug = _env_flag(f"{prefix}DEBUG")
    if debug is not None:
        updates["debug"] = debug

    return updates


def load_settings(*, env_prefix: str = DEFAULT_ENV_PREFIX, **overrides: Any) -> FetcherSettings:
    """
    Build FetcherSettings from keyword values plus environment overrides.

    Environment values win over keywords. Each env value is validated on its
    own so one bad variable does not discard the rest.
    """
    try:
        settings = FetcherSettings(**overrides)
    except ValidationError as e:
        raise ValueError(f"Fetcher settings validation failed:\n{e}") from e

    for key, value in _env_overrides(env_prefix).items():
        try:
            settings = FetcherSettings.model_validate({**settings.model_dump(), key: value})
        except ValidationError:
            _ignored(f"{env_prefix}{_ENV_NAMES[key]}", value)

    if settings.debug:
        get_debug_logger()
    return settings


__all__ = ["DEFAULT_ENV_PREFIX", "load_settings"]
