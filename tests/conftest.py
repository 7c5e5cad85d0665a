"""Common test fixtures for focus server tests."""

import grpc
import pytest
import pytest_asyncio

from focus_bridge.config import FocusConfig
from focus_bridge.server import FocusService
from focus_grpc import focus_pb2_grpc
from tests.mock_data import TEST_VERSION


@pytest.fixture
def focus_config():
    """Config bound to an ephemeral localhost port."""
    return FocusConfig(host="127.0.0.1", port=0, timeout_sec=2.0)


@pytest_asyncio.fixture
async def focus_service(focus_config):
    """Start a focus server for one test."""
    service = FocusService(focus_config, TEST_VERSION)
    await service.start()
    yield service
    await service.stop(grace=0)


@pytest_asyncio.fixture
async def focus_stub(focus_service):
    """gRPC client connected to ``focus_service``."""
    channel = grpc.aio.insecure_channel(f"127.0.0.1:{focus_service.port}")
    stub = focus_pb2_grpc.FocusStub(channel)
    yield stub
    await channel.close()


@pytest.fixture
def client_config(focus_service):
    """Client-side config pointing at ``focus_service``."""
    return FocusConfig(host="127.0.0.1", port=focus_service.port, timeout_sec=2.0)
