"""Batching destination adapter for a search index.

The synchronizer decides per object whether it is new, updated or deleted;
this adapter collects those decisions and sends them to the index in batches.
It also provides the read path the synchronizer diffs against: all indexed
objects of a class, ordered by object id.

A flush is triggered from after_object_processed() once the pending deletes
plus writes reach batch_size, and always from commit(). A batch_size of 1
flushes after every processed object.
"""

import copy
import logging
from collections.abc import Iterable, Iterator, Sequence
from typing import Any

from contentmap.domain.config import AdapterConfig
from contentmap.domain.entities import Document, SelectQuery, UpdateQuery
from contentmap.domain.exceptions import (
    ConfigurationError,
    FlushError,
    MalformedDocumentError,
    QueryError,
)
from contentmap.domain.keys import (
    ID_FIELD,
    OBJECT_CLASS_FIELD,
    OBJECT_ID_FIELD,
    composite_key,
    normalize_object_class,
)
from contentmap.ports.index import IndexClient

DEFAULT_FIELDS = ("id", "objectid", "objectclass", "hash")

# Methods an object needs to be accepted as an IndexClient
INDEX_CLIENT_METHODS = ("create_document", "execute")


class IndexDestinationAdapter:
    """Destination adapter that batches writes to a search index.

    Implements the DestinationAdapter, ProgressListener and
    UpdateableObjectProvider ports.

    Pending state:
        Deletes are kept as an ordered set of document keys, writes as a list
        of documents in call order. Both are cleared only after the index
        accepted the flush; a failed flush leaves them as they were so the
        caller can retry commit().

    Thread Safety:
        Not thread-safe. One synchronization loop drives one adapter.

    Example:
        adapter = IndexDestinationAdapter(client, batch_size=50)
        for obj in adapter.get_objects_ordered_by_id("App\\Entity\\Article"):
            ...
        adapter.commit()
    """

    def __init__(
        self,
        index_client: IndexClient,
        logger: logging.Logger | None = None,
        batch_size: int = 20,
        max_rows: int = 1_000_000,
        fields: Sequence[str] = DEFAULT_FIELDS,
    ) -> None:
        """Initialize the adapter.

        Args:
            index_client: Client used for all index requests.
            logger: Logger receiving count notifications. Defaults to the
                module logger.
            batch_size: Pending operations that trigger an automatic flush.
            max_rows: Page size for enumeration, treated as "everything".
            fields: Fields requested when enumerating documents.

        Raises:
            ConfigurationError: If index_client is not an IndexClient, or
                batch_size/max_rows is not positive.
        """
        if not all(
            callable(getattr(index_client, name, None)) for name in INDEX_CLIENT_METHODS
        ):
            raise ConfigurationError(
                f"index_client must implement IndexClient, got {type(index_client).__name__}",
                hint="Pass an ElasticsearchIndexClient or InMemoryIndexClient",
            )
        if batch_size < 1:
            raise ConfigurationError(f"batch_size must be positive, got {batch_size}")
        if max_rows < 1:
            raise ConfigurationError(f"max_rows must be positive, got {max_rows}")

        self._client = index_client
        self._logger = logger or logging.getLogger(__name__)
        self._batch_size = batch_size
        self._max_rows = max_rows
        self._fields = list(fields)

        self._pending_deletes: dict[str | int, None] = {}
        self._pending_writes: list[Document] = []

    @classmethod
    def from_config(
        cls,
        index_client: IndexClient,
        config: AdapterConfig,
        logger: logging.Logger | None = None,
    ) -> "IndexDestinationAdapter":
        """Create an adapter from an AdapterConfig."""
        return cls(
            index_client,
            logger=logger,
            batch_size=config.batch_size,
            max_rows=config.max_rows,
            fields=config.fields,
        )

    @property
    def batch_size(self) -> int:
        return self._batch_size

    @property
    def pending_deletes(self) -> tuple[str | int, ...]:
        """Document keys marked for deletion, in call order."""
        return tuple(self._pending_deletes)

    @property
    def pending_writes(self) -> tuple[Document, ...]:
        """Documents to insert or update, in call order."""
        return tuple(self._pending_writes)

    @property
    def pending_count(self) -> int:
        return len(self._pending_deletes) + len(self._pending_writes)

    def get_objects_ordered_by_id(self, object_class: str) -> Iterator[Document]:
        """Iterate over all indexed documents of a class, by ascending object id.

        Issues a single select request. The returned iterator is lazy and
        single-pass; it reflects the index at query time.

        Args:
            object_class: Fully qualified class name of the mapped objects.

        Returns:
            Iterator over the indexed documents.

        Raises:
            QueryError: If the index client fails, either when the request is
                executed or while the iterator is consumed.
        """
        normalized = normalize_object_class(object_class)
        query = SelectQuery(
            query=f"{OBJECT_CLASS_FIELD}:{normalized}",
            start=0,
            rows=self._max_rows,
            fields=list(self._fields),
            sort=[(OBJECT_ID_FIELD, "asc")],
        )

        try:
            result = self._client.execute(query)
        except Exception as e:
            raise QueryError(
                f"Failed to enumerate objects of class {object_class}: {e}",
                query=query.query,
            ) from e

        self._logger.info(
            "IndexDestinationAdapter found %s objects for object class %s",
            result.num_found,
            object_class,
        )
        return self._iterate(result.documents, query.query)

    def _iterate(self, documents: Iterable[Document], query: str) -> Iterator[Document]:
        """Yield documents, converting client failures into QueryError."""
        try:
            yield from documents
        except Exception as e:
            raise QueryError(f"Failed to read query results: {e}", query=query) from e

    def id_of(self, document: Any) -> int:
        """Return the numeric object id stored in a document.

        Args:
            document: Indexed or newly created document.

        Returns:
            The object id.

        Raises:
            MalformedDocumentError: If the field is missing or not an integer.
        """
        try:
            value = document[OBJECT_ID_FIELD]
        except (KeyError, TypeError) as e:
            raise MalformedDocumentError(
                f"Document has no '{OBJECT_ID_FIELD}' field: {document!r}"
            ) from e

        # bool is an int subclass but never a valid id
        if isinstance(value, bool):
            raise MalformedDocumentError(
                f"Document field '{OBJECT_ID_FIELD}' is not numeric: {value!r}"
            )
        if isinstance(value, int):
            return value
        if isinstance(value, float) and value.is_integer():
            return int(value)
        if isinstance(value, str):
            try:
                return int(value)
            except ValueError as e:
                raise MalformedDocumentError(
                    f"Document field '{OBJECT_ID_FIELD}' is not numeric: {value!r}"
                ) from e
        raise MalformedDocumentError(
            f"Document field '{OBJECT_ID_FIELD}' is not numeric: {value!r}"
        )

    def create_object(self, object_id: int, object_class: str) -> Document:
        """Create a new document for a source object.

        The index is not contacted; the document is sent on the next flush
        after it has been passed to updated().

        Args:
            object_id: Id of the source object.
            object_class: Fully qualified class name of the source object.

        Returns:
            Document with key, object id and normalized class set.
        """
        normalized = normalize_object_class(object_class)
        document = self._client.create_document()
        document[ID_FIELD] = composite_key(normalized, object_id)
        document[OBJECT_ID_FIELD] = object_id
        document[OBJECT_CLASS_FIELD] = normalized
        return document

    def prepare_update(self, document: Any) -> Document:
        """Return a mutable copy of an indexed document.

        Changes to the copy never reach the original document.

        Args:
            document: Document as returned from get_objects_ordered_by_id().

        Returns:
            New document seeded with all fields of the original.
        """
        return Document(copy.deepcopy(document.get_fields()))

    def delete(self, document: Any) -> None:
        """Mark a document for deletion by its key.

        Raises:
            MalformedDocumentError: If the document has no key field.
        """
        try:
            key = document[ID_FIELD]
        except (KeyError, TypeError) as e:
            raise MalformedDocumentError(
                f"Document has no '{ID_FIELD}' field: {document!r}"
            ) from e
        self._pending_deletes[key] = None

    def updated(self, document: Document) -> None:
        """Queue a new or changed document for writing.

        Unchanged documents must not be passed here; no change detection
        happens in the adapter.
        """
        self._pending_writes.append(document)

    def after_object_processed(self) -> None:
        """Flush once the pending batch has reached batch_size.

        Raises:
            FlushError: If the triggered flush fails.
        """
        if self.pending_count >= self._batch_size:
            self.commit()

    def commit(self) -> None:
        """Send all pending deletes and writes to the index.

        Does nothing if there is nothing pending. Otherwise one update request
        is sent holding the deletes, then the writes, then a commit. The
        pending batch is cleared once the request succeeds.

        Raises:
            FlushError: If the index client fails. Pending state is unchanged.
        """
        if not self._pending_deletes and not self._pending_writes:
            return

        n_deletes = len(self._pending_deletes)
        n_writes = len(self._pending_writes)
        self._logger.info(
            "Flushing %s inserts or updates and %s deletes", n_writes, n_deletes
        )

        update = UpdateQuery()
        if self._pending_deletes:
            update.add_delete_by_ids(list(self._pending_deletes))
        if self._pending_writes:
            update.add_documents(list(self._pending_writes))
        update.add_commit()

        try:
            self._client.execute(update)
        except Exception as e:
            raise FlushError(
                f"Failed to flush {n_writes} inserts or updates and {n_deletes} deletes: {e}",
                pending_deletes=n_deletes,
                pending_writes=n_writes,
                hint="Pending changes were kept; call commit() again to retry",
            ) from e

        self._pending_deletes = {}
        self._pending_writes = []
        self._logger.debug("Flushed")
