"""Synchronizer-facing port interfaces.

A generic synchronizer walks source objects in ascending id order, compares
them with what the destination holds and calls back into a destination
adapter. These protocols describe the callbacks it relies on.
"""

from collections.abc import Iterator
from typing import Any, Protocol


class DestinationAdapter(Protocol):
    """Destination system as seen by the synchronizer."""

    def get_objects_ordered_by_id(self, object_class: str) -> Iterator[Any]:
        """Iterate over all destination objects of a class, by ascending id.

        Args:
            object_class: Fully qualified class name of the mapped objects.

        Returns:
            Single-pass iterator over destination objects.
        """
        ...

    def id_of(self, destination_object: Any) -> int:
        """Return the numeric identity of a destination object."""
        ...

    def create_object(self, object_id: int, object_class: str) -> Any:
        """Create a new destination object for a source object.

        Args:
            object_id: Id of the source object.
            object_class: Fully qualified class name of the source object.

        Returns:
            New destination object, to be filled by the mapping function.
        """
        ...

    def delete(self, destination_object: Any) -> None:
        """Remove a destination object whose source object is gone."""
        ...

    def updated(self, destination_object: Any) -> None:
        """Report a destination object that was created or actually changed.

        Not called for objects the mapping function left unchanged.
        """
        ...

    def commit(self) -> None:
        """Persist all changes made during synchronization."""
        ...


class ProgressListener(Protocol):
    """Destination adapters that want a callback after every object."""

    def after_object_processed(self) -> None:
        """Called once per processed source object."""
        ...


class UpdateableObjectProvider(Protocol):
    """Destination adapters that hand out a separate object for updates."""

    def prepare_update(self, destination_object: Any) -> Any:
        """Return the object the mapping function may modify.

        Args:
            destination_object: Object as returned from get_objects_ordered_by_id().

        Returns:
            Object that will be passed to the mapping function.
        """
        ...
