"""Shared pytest fixtures for Querysmith tests."""

from unittest.mock import MagicMock

import pytest
import yaml


# ============================================================================
# Auto-mark tests based on directory
# ============================================================================

def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        test_path = str(item.fspath)

        if '/tests/integration/' in test_path or '\\tests\\integration\\' in test_path:
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# ============================================================================
# Schema Fixtures
# ============================================================================

PRODUCT_FIELDS = {
    "id": {"type": "string"},
    "name": {"type": "string", "facet": True, "sort": True},
    "description": {"type": "string"},
    "price": {"type": "float", "facet": True, "sort": True},
}


@pytest.fixture
def product_fields():
    """Field descriptors for a small product collection."""
    return {name: dict(descriptor) for name, descriptor in PRODUCT_FIELDS.items()}


@pytest.fixture
def catalog_fields():
    """Richer field descriptors covering every capability flag."""
    return {
        "id": {"type": "string"},
        "title": {"type": "string", "sort": True},
        "tags": {"type": "string[]", "facet": True},
        "internal_notes": {"type": "string", "index": False},
        "category": {"type": "string", "facet": True, "optional": True},
        "rating": {"type": "int32", "facet": True, "sort": True},
        "in_stock": {"type": "bool", "facet": True},
        "embedding": {"type": "float[]", "num_dim": 3},
    }


# ============================================================================
# Config Fixtures
# ============================================================================

@pytest.fixture
def config_file(tmp_path):
    """Write a config file declaring the products collection."""
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump({
        "typesense": {
            "url": "https://search.example.com:8108",
            "api_key": "test-key",
        },
        "collections": {
            "products": {
                "fields": PRODUCT_FIELDS,
                "default_sorting_field": "price",
            },
        },
    }, sort_keys=False))
    return path


# ============================================================================
# Mock Typesense Client Fixtures
# ============================================================================

@pytest.fixture
def mock_collection_handle():
    """Mocked ``client.collections[name]`` handle."""
    handle = MagicMock()
    handle.retrieve.return_value = {"name": "products", "num_documents": 0}
    handle.documents.search.return_value = {
        "found": 0,
        "hits": [],
        "facet_counts": [],
        "search_time_ms": 1,
    }
    return handle


@pytest.fixture
def mock_typesense_client(mock_collection_handle):
    """Create a mocked typesense.Client for testing."""
    client = MagicMock()
    client.collections.__getitem__.return_value = mock_collection_handle
    client.multi_search.perform.return_value = {"results": [{"found": 0, "hits": []}]}
    return client
