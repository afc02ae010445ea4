"""Shared pytest fixtures for the trace.moe client test suite.

Provides ready-made clients with and without API key / rate-limit retry,
all wired to a FakeTraceMoe from `helpers`.
"""
from __future__ import annotations

import pytest
import pytest_asyncio

from helpers import API_KEY, FakeTraceMoe
from tracemoe.api_clients.tracemoe_client import TraceMoeClient


@pytest.fixture
def fake_api():
    return FakeTraceMoe()


@pytest_asyncio.fixture
async def tracemoe(fake_api):
    """Anonymous client without rate-limit retry."""
    client = TraceMoeClient(transport=fake_api.transport)
    yield client
    await client.aclose()


@pytest_asyncio.fixture
async def tracemoe_with_key(fake_api):
    client = TraceMoeClient(API_KEY, transport=fake_api.transport)
    yield client
    await client.aclose()


@pytest_asyncio.fixture
async def tracemoe_with_retry(fake_api):
    client = TraceMoeClient(retry_on_rate_limit=True, transport=fake_api.transport)
    yield client
    await client.aclose()
