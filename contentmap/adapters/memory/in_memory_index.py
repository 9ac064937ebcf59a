"""In-process index client implementing the IndexClient protocol.

Keeps documents in a dict keyed by document id. Suitable for tests and dry
runs; nothing is persisted.

Supported filter syntax is a single field-equality term ("objectclass:Foo")
or the match-all query "*:*".
"""

import copy
from collections.abc import Iterator, Mapping
from itertools import islice
from typing import Any

from contentmap.domain.entities import (
    AddDocuments,
    Commit,
    DeleteByIds,
    Document,
    SelectQuery,
    SelectResult,
    UpdateQuery,
)
from contentmap.domain.keys import ID_FIELD

MATCH_ALL = "*:*"


class InMemoryIndexClient:
    """Dict-backed index client.

    Deletes and adds inside one UpdateQuery are staged and only become
    visible when a Commit command is applied, like a real index refresh.
    Every executed request is appended to `executed` so tests can inspect
    what was sent.
    """

    def __init__(self, documents: list[Mapping[str, Any]] | None = None) -> None:
        """Initialize the index.

        Args:
            documents: Optional documents to preload. Each needs an "id" field.
        """
        self._committed: dict[str | int, dict[str, Any]] = {}
        self._staged: dict[str | int, dict[str, Any] | None] = {}
        self.executed: list[SelectQuery | UpdateQuery] = []
        for document in documents or []:
            self._committed[document[ID_FIELD]] = dict(document)

    def __len__(self) -> int:
        return len(self._committed)

    def get(self, document_id: str | int) -> Document | None:
        """Return a committed document by id, or None."""
        fields = self._committed.get(document_id)
        return Document(copy.deepcopy(fields)) if fields is not None else None

    def create_document(self, fields: Mapping[str, Any] | None = None) -> Document:
        return Document(fields)

    def execute(self, request: SelectQuery | UpdateQuery) -> SelectResult | None:
        """Execute a select or update request.

        Raises:
            TypeError: For unsupported request types.
            ValueError: For unsupported filter expressions.
        """
        self.executed.append(request)
        if isinstance(request, SelectQuery):
            return self._select(request)
        if isinstance(request, UpdateQuery):
            self._update(request)
            return None
        raise TypeError(f"Unsupported request type: {type(request).__name__}")

    def _select(self, query: SelectQuery) -> SelectResult:
        matches = [doc for doc in self._committed.values() if _matches(query.query, doc)]

        # Stable sorts applied from the last key to the first
        for sort_field, order in reversed(query.sort):
            matches.sort(
                key=lambda doc: _sort_key(doc.get(sort_field)),
                reverse=order == "desc",
            )

        page = islice(matches, query.start, query.start + query.rows)
        return SelectResult(
            num_found=len(matches),
            documents=self._project(page, query.fields),
        )

    def _project(
        self, documents: Iterator[dict[str, Any]], wanted: list[str]
    ) -> Iterator[Document]:
        for fields in documents:
            if "*" in wanted:
                yield Document(copy.deepcopy(fields))
            else:
                yield Document(
                    {name: copy.deepcopy(fields[name]) for name in wanted if name in fields}
                )

    def _update(self, request: UpdateQuery) -> None:
        # A rejected request leaves earlier staged changes untouched
        staged = dict(self._staged)
        commit = False
        for command in request.commands:
            if isinstance(command, DeleteByIds):
                for document_id in command.ids:
                    staged[document_id] = None
            elif isinstance(command, AddDocuments):
                for document in command.documents:
                    fields = document.get_fields()
                    if ID_FIELD not in fields:
                        raise ValueError(f"Document without '{ID_FIELD}' field: {fields!r}")
                    staged[fields[ID_FIELD]] = copy.deepcopy(fields)
            elif isinstance(command, Commit):
                commit = True

        self._staged = staged
        if commit:
            self._apply_staged()

    def _apply_staged(self) -> None:
        for document_id, fields in self._staged.items():
            if fields is None:
                self._committed.pop(document_id, None)
            else:
                self._committed[document_id] = fields
        self._staged = {}


def _matches(query: str, document: dict[str, Any]) -> bool:
    """Evaluate a single field-equality term against a document."""
    if query == MATCH_ALL:
        return True
    field_name, sep, value = query.partition(":")
    if not sep or not field_name:
        raise ValueError(f"Unsupported query {query!r}: expected 'field:value'")
    return field_name in document and str(document[field_name]) == value


def _sort_key(value: Any) -> tuple[int, Any]:
    # Missing values sort last; numbers before strings
    if value is None:
        return (2, "")
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return (0, value)
    return (1, str(value))
