"""Filesystem-backed StoreClient with JSON file I/O.

Every document lives in its own folder::

    <root_dir>/<collection>/<doc_id>/record.json
    <root_dir>/<collection>/<doc_id>/<sub_collection>/<doc_id>/record.json

so nested collections sit next to the parent's ``record.json``.

Values must be JSON types.  Anything else (datetime, Enum, sets) raises
``TypeError`` before the file is touched; tuples come back as lists.
Writes to one address are serialized, so concurrent field updates on a
document never drop each other.
"""

from __future__ import annotations

import asyncio
import json
import os
import tempfile
import threading
import uuid
from pathlib import Path
from typing import Any, Mapping

from .address import join_address, split_address
from .conf import RECORD_JSON
from .errors import DocumentNotFoundError, StoreUnavailableError
from .store_client import AllocatedId, StoreClient, is_delete_field


class FsStoreClient(StoreClient):
    """Stores documents as ``record.json`` files under ``root_dir``."""

    def __init__(self, root_dir: str | Path, root: str = ""):
        self.root_dir = Path(root_dir)
        self._root = root
        self._locks: dict[tuple[str, ...], threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def root_scope(self) -> str:
        return self._root

    # -- Paths --

    def document_dir(self, address: str) -> Path:
        segments = split_address(address)
        if not segments:
            raise ValueError(f"Empty document address: {address!r}")
        if any(s in (".", "..") for s in segments):
            raise ValueError(f"Invalid document address: {address!r}")
        return self.root_dir.joinpath(*segments)

    def document_json_path(self, address: str) -> Path:
        return self.document_dir(address) / RECORD_JSON

    # -- Blocking helpers (run in a worker thread) --

    def _lock_for(self, address: str) -> threading.Lock:
        key = tuple(split_address(address))
        with self._locks_guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            return lock

    def _load(self, address: str) -> dict[str, Any] | None:
        json_path = self.document_json_path(address)
        if not json_path.exists():
            return None
        try:
            with open(json_path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
            raise StoreUnavailableError(f"Could not read {json_path}: {e}") from e

    def _dump(self, address: str, data: Mapping[str, Any]) -> None:
        json_path = self.document_json_path(address)
        try:
            json_path.parent.mkdir(parents=True, exist_ok=True)
            text = json.dumps(dict(data), indent=2, ensure_ascii=False)
            # Write beside the target and swap in, so a failed write leaves the old file.
            fd, tmp = tempfile.mkstemp(dir=json_path.parent, prefix=".record-", suffix=".json")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(text)
                os.replace(tmp, json_path)
            except BaseException:
                Path(tmp).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StoreUnavailableError(f"Could not write {json_path}: {e}") from e

    def _write(self, address: str, data: Mapping[str, Any], merge: bool) -> None:
        with self._lock_for(address):
            current = self._load(address) if merge else None
            doc = dict(current or {})
            for key, value in data.items():
                if is_delete_field(value):
                    doc.pop(key, None)
                else:
                    doc[key] = value
            self._dump(address, doc)

    def _update(self, address: str, field_updates: Mapping[str, Any]) -> None:
        with self._lock_for(address):
            current = self._load(address)
            if current is None:
                raise DocumentNotFoundError(address)
            for key, value in field_updates.items():
                if is_delete_field(value):
                    current.pop(key, None)
                else:
                    current[key] = value
            self._dump(address, current)

    def _delete(self, address: str) -> None:
        json_path = self.document_json_path(address)
        with self._lock_for(address):
            try:
                json_path.unlink(missing_ok=True)
                # Keep the folder while nested collections live in it.
                doc_dir = json_path.parent
                if doc_dir.exists() and not any(doc_dir.iterdir()):
                    doc_dir.rmdir()
            except OSError as e:
                raise StoreUnavailableError(f"Could not delete {json_path}: {e}") from e

    def _allocate(self, collection_address: str) -> AllocatedId:
        while True:
            new_id = uuid.uuid4().hex
            address = join_address(collection_address, new_id)
            if not self.document_json_path(address).exists():
                return AllocatedId(id=new_id, address=address)

    # -- StoreClient --

    async def write(self, address: str, data: Mapping[str, Any], merge: bool) -> None:
        await asyncio.to_thread(self._write, address, dict(data), merge)

    async def update(self, address: str, field_updates: Mapping[str, Any]) -> None:
        await asyncio.to_thread(self._update, address, dict(field_updates))

    async def delete(self, address: str) -> None:
        await asyncio.to_thread(self._delete, address)

    async def allocate_id(self, collection_address: str) -> AllocatedId:
        return await asyncio.to_thread(self._allocate, collection_address)

    async def read(self, address: str) -> dict[str, Any] | None:
        return await asyncio.to_thread(self._load, address)
