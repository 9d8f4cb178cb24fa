"""Address resolution: record identity -> storage address.

Layout::

    <root_scope>/<root_prefix>/<collection>/<doc_id>[/<sub_collection>/<doc_id>...]

Nothing here touches the store except ``resolve_new_document_address``,
which asks the client for a fresh id.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .errors import InvalidIdentityError, UnresolvedParentError
from .store_client import AllocatedId

if TYPE_CHECKING:
    from .store_settings import SettingsHolder

_SEP = "/"


def join_address(*parts: str | None) -> str:
    """Join address segments, keeping a leading ``/`` of the first non-empty part."""
    segments: list[str] = []
    absolute = False
    for part in parts:
        if not part:
            continue
        if not segments and part.startswith(_SEP):
            absolute = True
        stripped = part.strip(_SEP)
        if stripped:
            segments.append(stripped)
    joined = _SEP.join(segments)
    return _SEP + joined if absolute else joined


def split_address(address: str) -> list[str]:
    """Return the non-empty segments of ``address``."""
    return [s for s in address.split(_SEP) if s]


def canonical_address(address: str) -> str:
    """Absolute form of ``address``: same segments, one leading ``/``."""
    return _SEP + _SEP.join(split_address(address))


def require_segment(value: str | None, what: str) -> str:
    segment = str(value).strip(_SEP) if value is not None else ""
    if not segment.strip():
        raise InvalidIdentityError(f"{what} must be a non-empty string")
    if _SEP in segment:
        raise InvalidIdentityError(f"{what} must be a single segment: {value!r}")
    return segment


def collection_address(
    settings: SettingsHolder,
    collection_name: str,
    *,
    parent_path: str | None = None,
    skip_root_scoping: bool = False,
) -> str:
    """Address of a collection under a parent document, or under the root address."""
    name = require_segment(collection_name, "collection name")
    if parent_path:
        return resolve_sub_collection_address(parent_path, name)
    return join_address(settings.root_address(skip_root_scoping), name)


def resolve_document_address(
    settings: SettingsHolder,
    collection_name: str,
    unique_id: str,
    *,
    parent_path: str | None = None,
    skip_root_scoping: bool = False,
) -> str:
    """``root_address/collection_name/unique_id``."""
    uid = require_segment(unique_id, "unique id")
    base = collection_address(
        settings,
        collection_name,
        parent_path=parent_path,
        skip_root_scoping=skip_root_scoping,
    )
    return join_address(base, uid)


async def resolve_new_document_address(
    settings: SettingsHolder,
    collection_name: str,
    *,
    parent_path: str | None = None,
    skip_root_scoping: bool = False,
) -> AllocatedId:
    """Ask the store for a fresh id under the collection and return it with its address."""
    base = collection_address(
        settings,
        collection_name,
        parent_path=parent_path,
        skip_root_scoping=skip_root_scoping,
    )
    return await settings.store_client.allocate_id(base)


def resolve_sub_collection_address(parent_document_address: str | None, sub_collection_name: str) -> str:
    """``parent_document_address/sub_collection_name``."""
    if not parent_document_address or not parent_document_address.strip(_SEP):
        raise UnresolvedParentError(
            f"Cannot resolve collection {sub_collection_name!r}: parent document has no address"
        )
    name = require_segment(sub_collection_name, "sub-collection name")
    return join_address(parent_document_address, name)
