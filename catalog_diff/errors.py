"""Exceptions raised by the diff engine."""

from __future__ import annotations

from typing import Any


class CatalogDiffError(Exception):
    """Base class for all engine errors."""


class InvalidSnapshotError(CatalogDiffError):
    """Raised when a snapshot, or an entity inside it, is not a mapping."""

    def __init__(self, side: str, reason: str, name: str | None = None) -> None:
        self.side = side
        self.name = name
        msg = f"Invalid {side} snapshot"
        if name is not None:
            msg += f" entity '{name}'"
        super().__init__(f"{msg}: {reason}")


class SnapshotTooLargeError(CatalogDiffError):
    """Raised when a snapshot holds more nodes than the configured limit."""

    def __init__(self, side: str, limit: int) -> None:
        self.side = side
        self.limit = limit
        super().__init__(f"{side} snapshot exceeds the node limit of {limit}")


class UnhandledPropertyTypeError(CatalogDiffError):
    """A changed value has a shape the classifiers do not recognise.

    Carries the entity name and the path of the offending value so the
    caller can locate the bad data.
    """

    def __init__(self, entity: str | None, path: tuple[str | int, ...], value: Any) -> None:
        self.entity = entity
        self.path = path
        self.value = value
        dotted = ".".join(str(p) for p in path) or "<root>"
        super().__init__(
            f"Unhandled property data type {type(value).__name__} "
            f"for entity '{entity}' at '{dotted}': {value!r}"
        )
