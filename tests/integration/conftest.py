"""Pytest configuration and fixtures for integration tests."""

from typing import Generator

import pytest
from fastapi.testclient import TestClient

from api.dependencies import get_chain_gateway, get_tool_service, reset_dependencies
from api.main import app
from core.infrastructure.chain import ChainGateway


@pytest.fixture
def test_client(tool_service, app_settings, chain) -> Generator[TestClient, None, None]:
    """FastAPI test client wired to the in-memory chain."""
    gateway = ChainGateway(app_settings.network, connection_factory=lambda profile: chain)

    app.dependency_overrides[get_tool_service] = lambda: tool_service
    app.dependency_overrides[get_chain_gateway] = lambda: gateway

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()
    reset_dependencies()
