"""DocRecord: an attribute map bound to a document address.

A record is either ``Unsaved`` (it knows the collection it will be created
in) or ``Persisted`` (it knows its document path).  The first successful
``save()`` moves it from the first state to the second; nothing moves it
back.

Attributes live in memory and are only written by ``save``,
``save_attribute`` and ``delete_attribute``::

    human = DocRecord({"name": "Ann"}, collection_name="humans")
    await human.save()                  # /projects/demo/humans/<generated-id>
    await human.save_attribute("age", 40)
    pets = human.collection("pets")     # /projects/demo/humans/<id>/pets
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, TypeVar, Union

from .address import (
    join_address,
    require_segment,
    resolve_document_address,
    resolve_new_document_address,
    resolve_sub_collection_address,
    split_address,
)
from .collection_ref import CollectionRef
from .doc_record_ref import DocRecordRef
from .errors import (
    DocumentNotFoundError,
    InvalidConstructionError,
    InvalidIdentityError,
    NotPersistedError,
    UnresolvedParentError,
)
from .log import store_log_event
from .store_client import DELETE_FIELD, StoreClient, is_delete_field
from .store_settings import SettingsHolder, store_settings

T = TypeVar("T", bound="DocRecord")

_MISSING = object()


@dataclass(frozen=True)
class Unsaved:
    """Not yet written; will be created in ``collection_name``."""

    collection_name: str
    unique_id: str | None = None
    parent_path: str | None = None


@dataclass(frozen=True)
class Persisted:
    """Written (or loaded) at ``path``."""

    path: str
    unique_id: str

    @property
    def collection_name(self) -> str:
        return split_address(self.path)[-2]


RecordState = Union[Unsaved, Persisted]


class DocRecord:
    """Active record over a ``StoreClient``.

    Subclasses can set ``default_collection`` so new instances need no
    explicit ``collection_name``.
    """

    default_collection: ClassVar[str | None] = None

    def __init__(
        self,
        attributes: dict[str, Any] | None = None,
        *,
        unique_id: str | None = None,
        path: str | None = None,
        collection_name: str | None = None,
        parent_path: str | None = None,
        skip_root_scoping: bool = False,
        settings: SettingsHolder | None = None,
    ):
        self._settings = settings if settings is not None else store_settings
        # Fail fast when the holder was never configured.
        _ = self._settings.store_client
        self.skip_root_scoping = skip_root_scoping
        self.attributes: dict[str, Any] = dict(attributes or {})
        self.deleted = False
        if collection_name is None and path is None:
            collection_name = type(self).default_collection
        self._state: RecordState = self._initial_state(unique_id, path, collection_name, parent_path)
        if isinstance(self._state, Unsaved) and self._state.parent_path is None:
            self._settings.root_address(skip_root_scoping)

    @staticmethod
    def _initial_state(
        unique_id: str | None,
        path: str | None,
        collection_name: str | None,
        parent_path: str | None,
    ) -> RecordState:
        if path is None:
            if collection_name is None:
                raise InvalidConstructionError(
                    "A record needs either a path (persisted) or a collection_name (new)"
                )
            name = require_segment(collection_name, "collection name")
            uid = require_segment(unique_id, "unique id") if unique_id is not None else None
            return Unsaved(collection_name=name, unique_id=uid, parent_path=parent_path or None)

        segments = split_address(path)
        if len(segments) < 2:
            raise InvalidConstructionError(f"Path must end in <collection>/<id>: {path!r}")
        path_collection, path_id = segments[-2], segments[-1]
        if collection_name is not None and collection_name.strip("/") != path_collection:
            raise InvalidConstructionError(
                f"collection_name {collection_name!r} conflicts with path {path!r}"
            )
        if unique_id is not None and unique_id != path_id:
            raise InvalidConstructionError(f"unique_id {unique_id!r} conflicts with path {path!r}")
        normalized = join_address(path)
        if parent_path and join_address(parent_path, path_collection, path_id) != normalized:
            raise InvalidConstructionError(f"parent_path {parent_path!r} conflicts with path {path!r}")
        return Persisted(path=normalized, unique_id=path_id)

    # -- Identity --

    @property
    def state(self) -> RecordState:
        return self._state

    @property
    def settings(self) -> SettingsHolder:
        return self._settings

    @property
    def is_persisted(self) -> bool:
        return isinstance(self._state, Persisted)

    @property
    def path(self) -> str | None:
        return self._state.path if isinstance(self._state, Persisted) else None

    @property
    def unique_id(self) -> str | None:
        return self._state.unique_id

    @property
    def collection_name(self) -> str:
        return self._state.collection_name

    @property
    def document_address(self) -> str | None:
        """This record's address, if it can be resolved without asking the store."""
        state = self._state
        if isinstance(state, Persisted):
            return state.path
        if state.unique_id is None:
            return None
        return resolve_document_address(
            self._settings,
            state.collection_name,
            state.unique_id,
            parent_path=state.parent_path,
            skip_root_scoping=self.skip_root_scoping,
        )

    @property
    def ref(self) -> DocRecordRef:
        return DocRecordRef.from_record(self)

    @property
    def _client(self) -> StoreClient:
        return self._settings.store_client

    def _require_persisted(self, operation: str) -> Persisted:
        if not isinstance(self._state, Persisted):
            raise NotPersistedError(
                f"{operation}() needs a saved record; call save() first "
                f"(collection {self._state.collection_name!r})"
            )
        return self._state

    # -- Key-value access (memory only) --

    def __getitem__(self, key: str) -> Any:
        return self.attributes[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self.attributes[key] = value

    def __delitem__(self, key: str) -> None:
        del self.attributes[key]

    def __contains__(self, key: str) -> bool:
        return key in self.attributes

    def get(self, key: str, default: Any = None) -> Any:
        return self.attributes.get(key, default)

    def keys(self) -> list[str]:
        return list(self.attributes.keys())

    def to_dict(self) -> dict[str, Any]:
        """A shallow copy of the in-memory attributes."""
        return dict(self.attributes)

    def __repr__(self) -> str:
        where = self.path if self.path else f"<unsaved in {self.collection_name!r}>"
        return f"{type(self).__name__}({where}, {self.attributes!r})"

    # -- Persistence --

    async def save(self: T, unique_id: str | None = None) -> T:
        """Merge-write all attributes, creating the document on first save."""
        state = self._state
        data = dict(self.attributes)

        if isinstance(state, Persisted):
            if unique_id is not None and unique_id != state.unique_id:
                raise InvalidIdentityError(
                    f"Record already saved as {state.unique_id!r}; cannot save as {unique_id!r}"
                )
            await self._client.write(state.path, data, merge=True)
            store_log_event("save", state.path, fields=len(data))
            return self

        uid = unique_id if unique_id is not None else state.unique_id
        if uid is not None:
            address = resolve_document_address(
                self._settings,
                state.collection_name,
                uid,
                parent_path=state.parent_path,
                skip_root_scoping=self.skip_root_scoping,
            )
            uid = split_address(address)[-1]
        else:
            allocated = await resolve_new_document_address(
                self._settings,
                state.collection_name,
                parent_path=state.parent_path,
                skip_root_scoping=self.skip_root_scoping,
            )
            uid, address = allocated.id, allocated.address

        await self._client.write(address, data, merge=True)
        self._state = Persisted(path=address, unique_id=uid)
        store_log_event("create", address, fields=len(data))
        return self

    async def save_attribute(self, name: str, value: Any) -> None:
        """Set one field in memory and in the stored document.

        If the store call fails the previous in-memory value is restored and
        the error re-raised.
        """
        if is_delete_field(value):
            await self.delete_attribute(name)
            return
        state = self._require_persisted("save_attribute")
        self._require_field_name(name)
        previous = self.attributes.get(name, _MISSING)
        self.attributes[name] = value
        try:
            await self._client.update(state.path, {name: value})
        except BaseException as e:
            self._restore(name, previous)
            store_log_event("revert", state.path, field=name, error=type(e).__name__)
            raise
        store_log_event("update", state.path, field=name)

    async def delete_attribute(self, name: str) -> None:
        """Remove one field from memory and from the stored document."""
        state = self._require_persisted("delete_attribute")
        self._require_field_name(name)
        previous = self.attributes.pop(name, _MISSING)
        try:
            await self._client.update(state.path, {name: DELETE_FIELD})
        except BaseException as e:
            self._restore(name, previous)
            store_log_event("revert", state.path, field=name, error=type(e).__name__)
            raise
        store_log_event("unset", state.path, field=name)

    @staticmethod
    def _require_field_name(name: str) -> None:
        if not isinstance(name, str) or not name:
            raise InvalidIdentityError(f"Field name must be a non-empty string: {name!r}")

    def _restore(self, name: str, previous: Any) -> None:
        if previous is _MISSING:
            self.attributes.pop(name, None)
        else:
            self.attributes[name] = previous

    async def delete(self) -> None:
        """Delete the stored document. In-memory attributes are kept."""
        state = self._require_persisted("delete")
        await self._client.delete(state.path)
        self.deleted = True
        store_log_event("delete", state.path)

    async def reload(self) -> None:
        """Replace in-memory attributes with the stored document."""
        state = self._require_persisted("reload")
        data = await self._client.read(state.path)
        if data is None:
            raise DocumentNotFoundError(state.path)
        self.attributes = data
        self.deleted = False

    @classmethod
    async def fetch(cls: type[T], path: str, settings: SettingsHolder | None = None) -> T | None:
        """Load the document at ``path``, or return None if there is none."""
        record = cls(path=path, settings=settings)
        data = await record._client.read(record.path)
        if data is None:
            return None
        record.attributes = data
        return record

    # -- Nested collections --

    def collection(self, sub_collection_name: str) -> CollectionRef:
        """Reference to a collection nested under this record's document."""
        parent = self.document_address
        if parent is None:
            raise UnresolvedParentError(
                f"Record in {self.collection_name!r} has no id yet; save it or pass unique_id "
                f"before using collection({sub_collection_name!r})"
            )
        address = resolve_sub_collection_address(parent, sub_collection_name)
        return CollectionRef(
            name=split_address(address)[-1],
            address=address,
            parent_path=parent,
            settings=self._settings,
        )
