import pytest
from fastapi.testclient import TestClient

from app.config import ServerConfig
from app.main import create_app


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def config():
    return ServerConfig(version="9.9.9")


@pytest.fixture
def client(config):
    with TestClient(create_app(config)) as c:
        yield c
