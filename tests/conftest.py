# tests/conftest.py
from __future__ import annotations

import os
import random

import pytest

from tests.utils import RecordingCompletion, StubTransport, body
from webservice.core.fetch import Fetcher
from webservice.logging_utils import reset_debug_logger


# -------- Global deterministic seed --------
@pytest.fixture(autouse=True, scope="session")
def _seed_session():
    random.seed(1337)
    os.environ.setdefault("PYTHONHASHSEED", "0")
    yield


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Keep WEBSERVICE_* variables from the host shell out of tests."""
    for key in list(os.environ):
        if key.startswith("WEBSERVICE_"):
            monkeypatch.delenv(key, raising=False)
    yield
    reset_debug_logger()


# -------- Fetcher fixtures --------
@pytest.fixture
def stub_transport_factory():
    """
    Callable factory for StubTransport; threaded stubs are shut down after the test.

    Usage:
        stub = stub_transport_factory(body(b"[]"), threaded=True)
    """
    made: list[StubTransport] = []

    def _factory(responder=None, **kwargs) -> StubTransport:
        stub = StubTransport(responder or body(b"null"), **kwargs)
        made.append(stub)
        return stub

    yield _factory
    for stub in made:
        stub.close()


@pytest.fixture
def fetcher_factory():
    """Factory for a Fetcher over a given transport (defaults: inline dispatch)."""

    def _factory(transport, **kwargs) -> Fetcher:
        return Fetcher(transport, **kwargs)

    return _factory


@pytest.fixture
def completion():
    return RecordingCompletion()


# -------- Pytest markers --------
def pytest_configure(config):
    config.addinivalue_line("markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')")
    config.addinivalue_line("markers", "integration: marks integration tests")
