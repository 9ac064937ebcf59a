"""Factory classes for adapter instantiation.

This module centralizes the creation of index clients and destination
adapters, keeping the CLI layer free from direct adapter imports.

The factories use lazy imports so that the elasticsearch package is only
loaded when an Elasticsearch-backed client is actually requested.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from contentmap.core.sync.destination_adapter import IndexDestinationAdapter
    from contentmap.domain.config import ContentMapConfig
    from contentmap.ports.index import IndexClient


class ConfigFactory:
    """Factory for creating configuration-related instances."""

    def create_config_provider(self):
        """Create a TomlConfigProvider instance.

        Returns:
            TomlConfigProvider instance.
        """
        from contentmap.adapters.config.toml_config_provider import TomlConfigProvider

        return TomlConfigProvider()


class IndexClientFactory:
    """Factory for creating index clients.

    Args:
        config: ContentMapConfig with Elasticsearch settings.
    """

    def __init__(self, config: ContentMapConfig) -> None:
        self._config = config

    def create_index_client(self, in_memory: bool = False) -> IndexClient:
        """Create the index client.

        Args:
            in_memory: Use an empty in-process index instead of Elasticsearch.

        Returns:
            IndexClient implementation.
        """
        if in_memory:
            from contentmap.adapters.memory.in_memory_index import InMemoryIndexClient

            return InMemoryIndexClient()

        from contentmap.adapters.elasticsearch.client import ElasticsearchIndexClient

        return ElasticsearchIndexClient.from_config(self._config.elasticsearch)


class AdapterFactory:
    """Factory for creating destination adapters.

    Args:
        config: ContentMapConfig with adapter settings.
    """

    def __init__(self, config: ContentMapConfig) -> None:
        self._config = config

    def create_destination_adapter(
        self,
        index_client: IndexClient,
        logger: logging.Logger | None = None,
    ) -> IndexDestinationAdapter:
        """Create a batching destination adapter for the given client.

        Args:
            index_client: Client the adapter sends requests to.
            logger: Optional logger for count notifications.

        Returns:
            Configured IndexDestinationAdapter.
        """
        from contentmap.core.sync.destination_adapter import IndexDestinationAdapter

        return IndexDestinationAdapter.from_config(
            index_client, self._config.adapter, logger=logger
        )
