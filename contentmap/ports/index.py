"""Index client port.

Defines the capability set the destination adapter needs from a search
index. Transport, authentication and query execution live in adapters/.
"""

from collections.abc import Mapping
from typing import Any, Protocol, overload

from contentmap.domain.entities import Document, SelectQuery, SelectResult, UpdateQuery


class IndexClient(Protocol):
    """Protocol for search index clients.

    execute() is the single point of network I/O. A SelectQuery returns a
    SelectResult; an UpdateQuery is sent as one request and returns None.
    """

    def create_document(self, fields: Mapping[str, Any] | None = None) -> Document:
        """Create an empty (or pre-filled) document for this index.

        Args:
            fields: Optional initial field values.

        Returns:
            New mutable document, not yet part of any request.
        """
        ...

    @overload
    def execute(self, request: SelectQuery) -> SelectResult: ...

    @overload
    def execute(self, request: UpdateQuery) -> None: ...

    def execute(self, request: SelectQuery | UpdateQuery) -> SelectResult | None:
        """Execute a request against the index.

        Args:
            request: Select or update request.

        Returns:
            SelectResult for select requests, None for update requests.

        Raises:
            Exception: Any transport or server failure, unchanged.
        """
        ...
