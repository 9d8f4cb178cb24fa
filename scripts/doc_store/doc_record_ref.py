"""Link to a stored document, small enough to embed in another record.

A ref holds identity only (id, collection, and the document path once
known), never attributes.  Refs stored as dicts come back with
``DocRecordRef.from_dict`` and resolve with ``await ref.fetch()``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from .address import join_address, split_address
from .errors import InvalidConstructionError, NotPersistedError

if TYPE_CHECKING:
    from .doc_record import DocRecord
    from .store_settings import SettingsHolder


@dataclass(frozen=True)
class DocRecordRef:
    id: str
    collection: str
    path: str | None = None

    def __str__(self) -> str:
        return self.path or f"{self.collection}/{self.id}"

    def to_dict(self) -> dict[str, str]:
        d = {"id": self.id, "collection": self.collection}
        if self.path is not None:
            d["path"] = self.path
        return d

    @classmethod
    def from_path(cls, path: str) -> DocRecordRef:
        """Ref for the document at ``path`` (``.../<collection>/<id>``)."""
        segments = split_address(path)
        if len(segments) < 2:
            raise InvalidConstructionError(f"Path must end in <collection>/<id>: {path!r}")
        return cls(id=segments[-1], collection=segments[-2], path=join_address(path))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DocRecordRef:
        """Rebuild a ref from ``to_dict`` output. Extra keys are ignored.

        A dict with only ``path`` is accepted; id and collection come from it.
        """
        path = data.get("path")
        if "id" not in data:
            if not path:
                raise InvalidConstructionError(f"Ref needs an id or a path: {data!r}")
            return cls.from_path(path)
        return cls(id=data["id"], collection=data.get("collection", ""), path=path)

    @classmethod
    def from_record(cls, record: DocRecord) -> DocRecordRef:
        return cls(
            id=record.unique_id or "",
            collection=record.collection_name,
            path=record.path,
        )

    async def fetch(self, settings: SettingsHolder | None = None) -> DocRecord | None:
        """Load the referenced document, or None if it no longer exists."""
        if self.path is None:
            raise NotPersistedError(f"Ref to {self.collection}/{self.id} has no path to load")
        from .doc_record import DocRecord

        return await DocRecord.fetch(self.path, settings=settings)
