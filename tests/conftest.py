"""Shared fixtures for the relay tests."""
import pytest
from fastapi.testclient import TestClient

from chatrelay.app import create_app
from chatrelay.config import Settings
from chatrelay.registry import ConnectionRegistry


@pytest.fixture
def settings():
    return Settings(cors_origins=['http://testserver'], outbox_size=64)


@pytest.fixture
def registry():
    return ConnectionRegistry()


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    # entering the client shares one event loop between all websockets
    with TestClient(app) as test_client:
        yield test_client
