"""Elasticsearch adapter implementing the IndexClient protocol.

Select requests are answered with a count request (for num_found) plus a
lazy scroll over the sorted hits. Update requests become a single bulk
request; a Commit command maps to refreshing the index as part of that bulk
request so the changes are visible to the next select.

The index is created on first use with INDEX_MAPPINGS. The key fields must be
keyword fields: a "field:value" filter is sent as a term query, and the
standard analyzer would split "App-Entity-Article" into tokens that other
classes share.
"""

import logging
from collections.abc import Iterator, Mapping
from itertools import islice
from typing import Any

from elasticsearch import Elasticsearch, helpers

from contentmap.domain.config import ElasticsearchConfig
from contentmap.domain.entities import (
    AddDocuments,
    DeleteByIds,
    Document,
    SelectQuery,
    SelectResult,
    UpdateQuery,
)
from contentmap.domain.keys import ID_FIELD, OBJECT_CLASS_FIELD, OBJECT_ID_FIELD

logger = logging.getLogger(__name__)

# Hits fetched per scroll round trip
SCROLL_PAGE_SIZE = 1000

MATCH_ALL = "*:*"

INDEX_MAPPINGS: dict[str, Any] = {
    "properties": {
        ID_FIELD: {"type": "keyword"},
        OBJECT_CLASS_FIELD: {"type": "keyword"},
        OBJECT_ID_FIELD: {"type": "long"},
        "hash": {"type": "keyword"},
    }
}


class BulkRequestError(Exception):
    """Raised when a bulk request reports failed items.

    Attributes:
        errors: The failed bulk response items.
    """

    def __init__(self, errors: list[dict[str, Any]]) -> None:
        self.errors = errors
        first = errors[0] if errors else {}
        super().__init__(f"{len(errors)} bulk item(s) failed, first: {first}")


class ElasticsearchIndexClient:
    """IndexClient backed by an Elasticsearch index.

    The document key ("id" field) is used as the Elasticsearch _id, and is
    also stored in _source so selected documents carry every field.
    """

    def __init__(self, client: Elasticsearch, index: str) -> None:
        """Initialize the adapter.

        Args:
            client: Configured Elasticsearch client.
            index: Name of the index holding the documents.
        """
        self._client = client
        self.index = index
        self._index_ready = False

    @classmethod
    def from_config(cls, config: ElasticsearchConfig) -> "ElasticsearchIndexClient":
        """Build the Elasticsearch client described by config."""
        basic_auth = None
        if config.username is not None:
            basic_auth = (config.username, config.password or "")
        client = Elasticsearch(
            config.hosts,
            basic_auth=basic_auth,
            request_timeout=config.request_timeout,
        )
        return cls(client, config.index)

    def ensure_index(self) -> bool:
        """Create the index with INDEX_MAPPINGS unless it already exists.

        An existing index is left as it is; a warning is logged if its
        objectclass field is not a keyword field, since class filters would
        then match documents of other classes.

        Returns:
            True if the index was created.
        """
        if self._client.indices.exists(index=self.index):
            mappings = self._client.indices.get_mapping(index=self.index)
            properties = mappings[self.index]["mappings"].get("properties", {})
            field_type = properties.get(OBJECT_CLASS_FIELD, {}).get("type")
            if field_type != "keyword":
                logger.warning(
                    "Field %s of index %s is mapped as %s, not keyword; "
                    "class filters may match other classes",
                    OBJECT_CLASS_FIELD,
                    self.index,
                    field_type,
                )
            return False

        self._client.indices.create(index=self.index, mappings=INDEX_MAPPINGS)
        logger.info("Created Elasticsearch index %s", self.index)
        return True

    def create_document(self, fields: Mapping[str, Any] | None = None) -> Document:
        return Document(fields)

    def execute(self, request: SelectQuery | UpdateQuery) -> SelectResult | None:
        """Execute a select or update request.

        Raises:
            TypeError: For unsupported request types.
            BulkRequestError: If an update request has failed items.
            elasticsearch.ApiError: For server-side failures.
            elasticsearch.TransportError: For connection failures.
        """
        if not self._index_ready:
            self.ensure_index()
            self._index_ready = True

        if isinstance(request, SelectQuery):
            return self._select(request)
        if isinstance(request, UpdateQuery):
            self._update(request)
            return None
        raise TypeError(f"Unsupported request type: {type(request).__name__}")

    def _select(self, query: SelectQuery) -> SelectResult:
        es_query = to_es_query(query.query)
        num_found = self._client.count(index=self.index, query=es_query)["count"]
        logger.debug("Elasticsearch count for %r in %s: %s", query.query, self.index, num_found)

        body: dict[str, Any] = {
            "query": es_query,
            "_source": True if "*" in query.fields else list(query.fields),
        }
        if query.sort:
            body["sort"] = [{name: {"order": order}} for name, order in query.sort]

        hits = helpers.scan(
            self._client,
            query=body,
            index=self.index,
            size=min(SCROLL_PAGE_SIZE, query.rows),
            preserve_order=bool(query.sort),
        )
        page = islice(hits, query.start, query.start + query.rows)
        return SelectResult(num_found=num_found, documents=_to_documents(page))

    def _update(self, request: UpdateQuery) -> None:
        operations: list[dict[str, Any]] = []
        for command in request.commands:
            if isinstance(command, DeleteByIds):
                for document_id in command.ids:
                    operations.append({"delete": {"_index": self.index, "_id": str(document_id)}})
            elif isinstance(command, AddDocuments):
                for document in command.documents:
                    fields = document.get_fields()
                    operations.append(
                        {"index": {"_index": self.index, "_id": str(fields[ID_FIELD])}}
                    )
                    operations.append(fields)

        if not operations:
            # Commit-only request
            if request.has_commit:
                self._client.indices.refresh(index=self.index)
            return

        response = self._client.bulk(operations=operations, refresh=request.has_commit)
        if response["errors"]:
            failed = [
                result
                for item in response["items"]
                for result in item.values()
                if "error" in result
            ]
            if failed:
                raise BulkRequestError(failed)
        logger.debug("Bulk request with %s lines sent to %s", len(operations), self.index)


def to_es_query(query: str) -> dict[str, Any]:
    """Translate a filter string into an Elasticsearch query.

    "*:*" matches everything and "field:value" becomes an exact term query;
    anything else is passed through as a query_string query.
    """
    if query == MATCH_ALL:
        return {"match_all": {}}
    field_name, sep, value = query.partition(":")
    if sep and field_name and not any(c.isspace() for c in query):
        return {"term": {field_name: value}}
    return {"query_string": {"query": query}}


def _to_documents(hits: Iterator[dict[str, Any]]) -> Iterator[Document]:
    for hit in hits:
        yield Document(hit.get("_source", {}))
