"""Domain entities for index synchronization.

Documents, and the select/update requests the destination adapter sends to an
index client. Requests own their documents; documents never point back to a
request or a client, so a released batch is freed by reference counting alone.
"""

from collections.abc import Iterable, Iterator, Mapping, MutableMapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Literal

SortOrder = Literal["asc", "desc"]


class Document(MutableMapping[str, Any]):
    """A mutable key/value record representing one object's indexed form.

    Indexed documents carry at least the composite key ("id"), the numeric
    object identity ("objectid") and the normalized class ("objectclass").
    Any further fields are opaque to the adapter.
    """

    __slots__ = ("_fields",)

    def __init__(self, fields: Mapping[str, Any] | None = None) -> None:
        self._fields: dict[str, Any] = dict(fields) if fields else {}

    def get_fields(self) -> dict[str, Any]:
        """Return a shallow copy of all field values."""
        return dict(self._fields)

    def __getitem__(self, name: str) -> Any:
        return self._fields[name]

    def __setitem__(self, name: str, value: Any) -> None:
        self._fields[name] = value

    def __delitem__(self, name: str) -> None:
        del self._fields[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Document):
            return self._fields == other._fields
        if isinstance(other, Mapping):
            return self._fields == dict(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"Document({self._fields!r})"


@dataclass
class SelectQuery:
    """Read request against the index.

    Attributes:
        query: Filter expression, e.g. "objectclass:App-Entity-Article".
        start: Offset of the first matching document.
        rows: Maximum number of documents to return.
        fields: Fields to return; "*" selects all stored fields.
        sort: (field, order) pairs applied in sequence.

    Raises:
        ValueError: If start is negative or rows is not positive.
    """

    query: str
    start: int = 0
    rows: int = 10
    fields: list[str] = field(default_factory=lambda: ["*"])
    sort: list[tuple[str, SortOrder]] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate paging parameters."""
        if self.start < 0:
            raise ValueError(f"start cannot be negative, got {self.start}")
        if self.rows <= 0:
            raise ValueError(f"rows must be positive, got {self.rows}")


@dataclass
class SelectResult:
    """Result of a SelectQuery.

    The documents iterable is consumed once; it reflects the index state at
    query time.

    Attributes:
        num_found: Total number of documents matching the filter.
        documents: Single-pass iterable over the returned documents.
    """

    num_found: int
    documents: Iterable[Document]

    def __iter__(self) -> Iterator[Document]:
        return iter(self.documents)


@dataclass(frozen=True)
class DeleteByIds:
    """Update command removing documents by key."""

    ids: tuple[str | int, ...]


@dataclass(frozen=True)
class AddDocuments:
    """Update command adding or replacing documents."""

    documents: tuple[Document, ...]


@dataclass(frozen=True)
class Commit:
    """Update command making all previous commands visible to readers."""


UpdateCommand = DeleteByIds | AddDocuments | Commit


@dataclass
class UpdateQuery:
    """Write request against the index.

    Commands are sent to the index as a single request, in the order they
    were added.
    """

    commands: list[UpdateCommand] = field(default_factory=list)

    def add_delete_by_ids(self, ids: Sequence[str | int]) -> "UpdateQuery":
        """Append a delete-by-ids command."""
        self.commands.append(DeleteByIds(tuple(ids)))
        return self

    def add_documents(self, documents: Sequence[Document]) -> "UpdateQuery":
        """Append an add-documents command."""
        self.commands.append(AddDocuments(tuple(documents)))
        return self

    def add_commit(self) -> "UpdateQuery":
        """Append a commit command."""
        self.commands.append(Commit())
        return self

    @property
    def has_commit(self) -> bool:
        """Whether the request ends with its changes made visible."""
        return any(isinstance(command, Commit) for command in self.commands)
