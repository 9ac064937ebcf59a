"""Document key normalization.

Maps a domain object's fully qualified class name and numeric id onto the
document key used by the search index, and back.

    >>> normalize_object_class("\\\\App\\\\Entity\\\\Article")
    'App-Entity-Article'
    >>> composite_key("App-Entity-Article", 42)
    'App-Entity-Article:42'
"""

from dataclasses import dataclass

ID_FIELD = "id"
OBJECT_ID_FIELD = "objectid"
OBJECT_CLASS_FIELD = "objectclass"

# Namespace separators flattened into NORMALIZED_SEPARATOR
NAMESPACE_SEPARATORS = ("\\", ".")
NORMALIZED_SEPARATOR = "-"
KEY_SEPARATOR = ":"


def normalize_object_class(object_class: str) -> str:
    """Flatten a fully qualified class name into a filter-safe token.

    One leading separator is stripped, then every remaining namespace
    separator is replaced with "-". Distinct class names used by one
    deployment must not collapse to the same token; that is up to the caller.
    A name made of a single separator normalizes to "".

    Args:
        object_class: Class name such as "\\App\\Entity\\Article" or
            "app.models.Article".

    Returns:
        Normalized class token, e.g. "App-Entity-Article".
    """
    name = object_class
    if name[:1] in NAMESPACE_SEPARATORS:
        name = name[1:]
    for separator in NAMESPACE_SEPARATORS:
        name = name.replace(separator, NORMALIZED_SEPARATOR)
    return name


def composite_key(normalized_class: str, object_id: int | str) -> str:
    """Build the primary document key from a normalized class and object id."""
    return f"{normalized_class}{KEY_SEPARATOR}{object_id}"


@dataclass(frozen=True)
class DocumentKey:
    """Parsed composite document key.

    Attributes:
        object_class: Normalized object class token.
        object_id: Numeric object identity.
    """

    object_class: str
    object_id: int

    @classmethod
    def parse(cls, key: str) -> "DocumentKey":
        """Split a composite key at its last ":".

        Args:
            key: Composite key, e.g. "App-Entity-Article:42".

        Returns:
            DocumentKey with the class token and integer id.

        Raises:
            ValueError: If the key has no separator or the id is not an integer.
        """
        object_class, sep, raw_id = key.rpartition(KEY_SEPARATOR)
        if not sep:
            raise ValueError(f"Invalid document key {key!r}: missing '{KEY_SEPARATOR}'")
        try:
            object_id = int(raw_id)
        except ValueError as e:
            raise ValueError(f"Invalid document key {key!r}: id is not an integer") from e
        return cls(object_class=object_class, object_id=object_id)

    def __str__(self) -> str:
        """Return the composite key string."""
        return composite_key(self.object_class, self.object_id)
