"""
Shared test fixtures for schema-sentinel tests.

Provides:
- Paths to the bundled contract baselines (contracts/)
- A loaded WSDL model and a fresh SchemaRegistry per test
- An HttpFetcher factory backed by httpx.MockTransport (no network access)
"""

import os
from pathlib import Path
from typing import Callable

import httpx
import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]

# Set test environment variables before importing schema_sentinel modules
os.environ["SENTINEL_CONTRACTS_ROOT"] = str(REPO_ROOT)
for _name in (
    "APP2_STAGING_URL",
    "INTEGRATION_LAYER_URL",
    "SENTINEL_APP2_STAGING_URL",
    "SENTINEL_INTEGRATION_LAYER_URL",
):
    os.environ.pop(_name, None)

from schema_sentinel.core.config import get_settings
from schema_sentinel.core.resources import FileResourceReader, HttpFetcher
from schema_sentinel.services.schema_registry import SchemaRegistry, get_registry
from schema_sentinel.services.wsdl_model import WsdlModel, load_model
from tests._fixture_builders import MESSAGES_DIR, WSDL_PATH


@pytest.fixture(autouse=True)
def _reset_cached_singletons():
    """Clear cached settings and the shared registry around every test."""
    get_settings.cache_clear()
    get_registry.cache_clear()
    yield
    get_settings.cache_clear()
    get_registry.cache_clear()


@pytest.fixture
def reader() -> FileResourceReader:
    return FileResourceReader(REPO_ROOT)


@pytest.fixture
def wsdl_bytes() -> bytes:
    return (REPO_ROOT / WSDL_PATH).read_bytes()


@pytest.fixture
def wsdl_model(wsdl_bytes) -> WsdlModel:
    return load_model(wsdl_bytes)


@pytest.fixture
def registry(reader) -> SchemaRegistry:
    """A fresh registry with the bundled message schemas loaded."""
    reg = SchemaRegistry(reader)
    reg.load_all(MESSAGES_DIR)
    return reg


@pytest.fixture
def mock_http_fetcher():
    """Build HttpFetchers whose requests are answered by a handler function."""
    created: list[HttpFetcher] = []

    def factory(handler: Callable[[httpx.Request], httpx.Response]) -> HttpFetcher:
        client = httpx.Client(transport=httpx.MockTransport(handler))
        fetcher = HttpFetcher(client=client)
        created.append(fetcher)
        return fetcher

    yield factory
    for fetcher in created:
        fetcher.close()
