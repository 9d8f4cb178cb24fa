"""In-memory StoreClient, for tests and throwaway sessions."""

from __future__ import annotations

import copy
import uuid
from typing import Any, Mapping

from .address import canonical_address, join_address
from .errors import DocumentNotFoundError
from .store_client import AllocatedId, StoreClient, is_delete_field


class MemoryStoreClient(StoreClient):
    """Keeps documents in a dict keyed by canonical address.

    ``humans/a1`` and ``/humans/a1/`` name the same document.  ``operations``
    lists every call as ``(operation, address)`` in the order it was issued,
    with the address as the caller passed it.
    """

    def __init__(self, root: str = ""):
        self._root = root
        self.documents: dict[str, dict[str, Any]] = {}
        self.operations: list[tuple[str, str]] = []

    def root_scope(self) -> str:
        return self._root

    def get_document(self, address: str) -> dict[str, Any] | None:
        """The stored field map itself (not a copy), or None."""
        return self.documents.get(canonical_address(address))

    async def write(self, address: str, data: Mapping[str, Any], merge: bool) -> None:
        self.operations.append(("write", address))
        key = canonical_address(address)
        payload = {k: copy.deepcopy(v) for k, v in data.items() if not is_delete_field(v)}
        if merge and key in self.documents:
            doc = self.documents[key]
            doc.update(payload)
            for field_name, value in data.items():
                if is_delete_field(value):
                    doc.pop(field_name, None)
        else:
            self.documents[key] = payload

    async def update(self, address: str, field_updates: Mapping[str, Any]) -> None:
        self.operations.append(("update", address))
        doc = self.get_document(address)
        if doc is None:
            raise DocumentNotFoundError(address)
        for field_name, value in field_updates.items():
            if is_delete_field(value):
                doc.pop(field_name, None)
            else:
                doc[field_name] = copy.deepcopy(value)

    async def delete(self, address: str) -> None:
        self.operations.append(("delete", address))
        self.documents.pop(canonical_address(address), None)

    async def allocate_id(self, collection_address: str) -> AllocatedId:
        self.operations.append(("allocate_id", collection_address))
        while True:
            new_id = uuid.uuid4().hex
            address = join_address(collection_address, new_id)
            if canonical_address(address) not in self.documents:
                return AllocatedId(id=new_id, address=address)

    async def read(self, address: str) -> dict[str, Any] | None:
        self.operations.append(("read", address))
        doc = self.get_document(address)
        return copy.deepcopy(doc) if doc is not None else None
