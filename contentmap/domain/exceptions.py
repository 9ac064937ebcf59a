"""Domain exceptions for contentmap.

These exceptions describe failures of the destination adapter and its
collaborators. They carry a user-facing message and an optional hint so the
CLI layer can convert them into actionable error output.
"""


class ContentMapError(Exception):
    """Base exception for all contentmap errors.

    Attributes:
        message: User-facing error message.
        hint: Optional actionable suggestion.
    """

    def __init__(self, message: str, hint: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint


class ConfigurationError(ContentMapError):
    """Raised when the adapter or its configuration is set up with invalid values."""

    pass


class QueryError(ContentMapError):
    """Raised when enumerating indexed documents fails at the client layer.

    Attributes:
        query: The filter query string that was being executed.
    """

    def __init__(self, message: str, query: str, hint: str | None = None) -> None:
        super().__init__(message, hint=hint)
        self.query = query


class FlushError(ContentMapError):
    """Raised when sending a pending batch to the index fails.

    The pending batch is left untouched, so the caller may retry commit().

    Attributes:
        pending_deletes: Number of deletes that were being flushed.
        pending_writes: Number of inserts/updates that were being flushed.
    """

    def __init__(
        self,
        message: str,
        pending_deletes: int,
        pending_writes: int,
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.pending_deletes = pending_deletes
        self.pending_writes = pending_writes


class MalformedDocumentError(ContentMapError):
    """Raised when a document lacks a usable identity field."""

    pass
