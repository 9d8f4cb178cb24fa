"""Narrow interface to the underlying document store."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Mapping


class DeleteField:
    """Field-update value meaning "remove this field from the document".

    Use the ``DELETE_FIELD`` instance; it is never equal to ``None``, an empty
    value or any string.
    """

    _instance: DeleteField | None = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "DELETE_FIELD"


DELETE_FIELD = DeleteField()


def is_delete_field(value: Any) -> bool:
    return isinstance(value, DeleteField)


@dataclass(frozen=True)
class AllocatedId:
    """A store-generated document id and the address it resolves to."""

    id: str
    address: str


class StoreClient(ABC):
    """Document-store client used by records.

    Addresses are ``/``-separated strings alternating collection and
    document segments.  Implementations own id uniqueness, atomicity of a
    single write, retries and timeouts.
    """

    @abstractmethod
    def root_scope(self) -> str:
        """Return the store's root address, before any configured prefix."""

    @abstractmethod
    async def write(self, address: str, data: Mapping[str, Any], merge: bool) -> None:
        """Write ``data`` at ``address``.

        With ``merge`` the fields already stored but absent from ``data`` are
        kept; without it the document is replaced.
        """

    @abstractmethod
    async def update(self, address: str, field_updates: Mapping[str, Any]) -> None:
        """Apply per-field updates to an existing document.

        A value of ``DELETE_FIELD`` removes the field.
        """

    @abstractmethod
    async def delete(self, address: str) -> None:
        """Delete the document at ``address``. Nested collections are kept."""

    @abstractmethod
    async def allocate_id(self, collection_address: str) -> AllocatedId:
        """Reserve a fresh document id under ``collection_address``."""

    @abstractmethod
    async def read(self, address: str) -> dict[str, Any] | None:
        """Return the stored field map, or None when no document exists."""
