"""Destination-side synchronization against a search index."""

from contentmap.core.sync.destination_adapter import IndexDestinationAdapter

__all__ = ["IndexDestinationAdapter"]
