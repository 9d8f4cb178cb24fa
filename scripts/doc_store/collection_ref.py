"""Reference to a nested collection hanging off a record's address."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from .address import join_address, require_segment
from .store_settings import SettingsHolder

if TYPE_CHECKING:
    from .doc_record import DocRecord


@dataclass(frozen=True)
class CollectionRef:
    """A sub-collection address plus what is needed to build records in it.

    Two refs are equal when their addresses are equal.  Refs are resolved on
    demand and hold no child records.
    """

    name: str
    address: str
    parent_path: str
    settings: SettingsHolder = field(compare=False, repr=False)

    def document_address(self, unique_id: str) -> str:
        """Address of the child document ``unique_id``."""
        return join_address(self.address, require_segment(unique_id, "unique id"))

    def record(self, attributes: dict[str, Any] | None = None, unique_id: str | None = None) -> DocRecord:
        """A new, unsaved record that will be created inside this collection."""
        from .doc_record import DocRecord

        return DocRecord(
            attributes,
            unique_id=unique_id,
            collection_name=self.name,
            parent_path=self.parent_path,
            settings=self.settings,
        )

    async def get(self, unique_id: str) -> DocRecord | None:
        """Load a child record, or None when it does not exist."""
        from .doc_record import DocRecord

        return await DocRecord.fetch(self.document_address(unique_id), settings=self.settings)
