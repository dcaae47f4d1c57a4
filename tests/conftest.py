import os
from pathlib import Path
from typing import Any, Generator
from unittest.mock import AsyncMock

import pytest

from exa_mcp.configuration import Config, ConfigFactory, ConfigStore, MockConfigProvider, reset_config_provider
from exa_mcp.mcp import ExaMCPServer, ResultStore

# pylint: disable=unused-argument, redefined-outer-name

TEST_CONFIG_FILE: str = str(Path(__file__).parent / "config.yml")


def pytest_sessionstart(session) -> None:
    """Hook to run before any tests are executed."""
    os.environ["CONFIG_FILE"] = TEST_CONFIG_FILE
    os.environ.setdefault("EXA_API_KEY", "test-api-key")


@pytest.fixture(autouse=True)
def setup_reset_config() -> Generator[None, Any, None]:
    """Reset Config Store and provider before each test"""
    ConfigStore.reset_instance()
    reset_config_provider()
    yield
    ConfigStore.reset_instance()
    reset_config_provider()


@pytest.fixture
def test_config(tmp_path: Path) -> Config:
    """Test configuration with storage redirected to a temporary folder"""
    config: Config = ConfigFactory().load(source=TEST_CONFIG_FILE)
    config.update({"storage:folder": str(tmp_path / "data")})
    return config


@pytest.fixture
def test_provider(test_config: Config) -> MockConfigProvider:
    return MockConfigProvider(test_config)


def make_payload(*titles: str, request_id: str = "req-123") -> dict[str, Any]:
    """Build an Exa-shaped search response with one hit per title"""
    return {
        "requestId": request_id,
        "resolvedSearchType": "neural",
        "results": [
            {
                "id": f"https://example.com/{i}",
                "url": f"https://example.com/{i}",
                "title": title,
                "score": round(0.9 - i * 0.05, 2),
                "publishedDate": "2024-03-01T00:00:00.000Z",
                "author": f"Author {i}",
                "text": f"Full text of {title}",
            }
            for i, title in enumerate(titles)
        ],
    }


@pytest.fixture
def sample_payload() -> dict[str, Any]:
    return make_payload("Rust vs Go in 2024", "Choosing a systems language", "Go concurrency patterns")


@pytest.fixture
def store(tmp_path: Path) -> ResultStore:
    return ResultStore(tmp_path / "data").load()


@pytest.fixture
def gateway(sample_payload: dict[str, Any]) -> AsyncMock:
    """SearchGateway double returning sample_payload"""
    mock = AsyncMock()
    mock.search.return_value = sample_payload
    return mock


@pytest.fixture
def server(store: ResultStore, gateway: AsyncMock) -> ExaMCPServer:
    return ExaMCPServer(store, gateway)
