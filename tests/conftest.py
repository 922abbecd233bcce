"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from collections.abc import Generator

import pytest

from tests.fixtures.http_mocks import CHANNEL_URI, FakeHTTPClient
from tests.fixtures.send_contexts import ContextFactory, make_send_context
from wns_push.config import ClientSettings, EnvLoader
from wns_push.utils.logging import clear_correlation_id


@pytest.fixture(autouse=True)
def reset_correlation_id() -> Generator[None]:
    """Keep correlation IDs from leaking between tests."""
    clear_correlation_id()
    yield
    clear_correlation_id()


@pytest.fixture
def channel() -> str:
    return CHANNEL_URI


@pytest.fixture
def fake_http() -> FakeHTTPClient:
    """Scripted transport answering token and notification requests."""
    return FakeHTTPClient()


@pytest.fixture
def settings() -> ClientSettings:
    return ClientSettings()


@pytest.fixture
def empty_env() -> EnvLoader:
    """Environment loader that sees no variables."""
    return EnvLoader(environ={})


@pytest.fixture
def make_context() -> ContextFactory:
    """Factory for SendContexts bound to the running loop."""
    return make_send_context
