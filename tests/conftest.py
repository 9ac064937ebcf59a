"""Pytest configuration and shared fixtures."""

from collections.abc import Mapping
from pathlib import Path
from typing import Any
from unittest.mock import Mock

import pytest

from contentmap.adapters.memory.in_memory_index import InMemoryIndexClient
from contentmap.core.sync.destination_adapter import IndexDestinationAdapter
from contentmap.domain.entities import Document, SelectResult

# ============================================================================
# Config Isolation
# ============================================================================
# Keep the developer's global config and environment out of the tests.


@pytest.fixture(autouse=True)
def isolated_config_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the global config location at an empty temp dir.

    Returns:
        The directory used as XDG_CONFIG_HOME.
    """
    xdg = tmp_path / "xdg"
    xdg.mkdir()
    monkeypatch.setenv("XDG_CONFIG_HOME", str(xdg))
    monkeypatch.delenv("CONTENTMAP_ES_HOSTS", raising=False)
    monkeypatch.delenv("CONTENTMAP_ES_PASSWORD", raising=False)
    return xdg


# ============================================================================
# Index Client Helpers
# ============================================================================


def make_document(object_id: int, object_class: str = "App-Entity-Article", **fields: Any) -> Document:
    """Create an indexed-looking document.

    Args:
        object_id: Numeric object id.
        object_class: Normalized class token.
        **fields: Extra fields.

    Returns:
        Document with id, objectid and objectclass set.
    """
    return Document(
        {
            "id": f"{object_class}:{object_id}",
            "objectid": object_id,
            "objectclass": object_class,
            **fields,
        }
    )


def make_mock_client(
    num_found: int = 0, documents: list[Mapping[str, Any]] | None = None
) -> Mock:
    """Create a Mock index client.

    Select requests return a SelectResult with the given documents; update
    requests return None. Documents created through the client are real
    Document instances.
    """
    client = Mock(spec=InMemoryIndexClient)
    client.create_document.side_effect = lambda fields=None: Document(fields)
    client.execute.return_value = SelectResult(
        num_found=num_found,
        documents=[Document(d) for d in documents or []],
    )
    return client


@pytest.fixture
def mock_client() -> Mock:
    """Mock index client that records every request."""
    return make_mock_client()


@pytest.fixture
def adapter(mock_client: Mock) -> IndexDestinationAdapter:
    """Adapter with the default batch size of 20 on a mock client."""
    return IndexDestinationAdapter(mock_client)


@pytest.fixture
def memory_index() -> InMemoryIndexClient:
    """Empty in-memory index."""
    return InMemoryIndexClient()
