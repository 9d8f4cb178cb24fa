"""Active-record layer over a hierarchical document store."""

from .address import (
    collection_address,
    canonical_address,
    join_address,
    resolve_document_address,
    resolve_new_document_address,
    resolve_sub_collection_address,
    split_address,
)
from .collection_ref import CollectionRef
from .doc_record import DocRecord, Persisted, RecordState, Unsaved
from .doc_record_ref import DocRecordRef
from .errors import (
    ConfigurationError,
    DocStoreError,
    DocumentNotFoundError,
    InvalidConstructionError,
    InvalidIdentityError,
    NotPersistedError,
    StoreError,
    StoreUnavailableError,
    UnresolvedParentError,
)
from .fs_store_client import FsStoreClient
from .memory_store import MemoryStoreClient
from .store_client import DELETE_FIELD, AllocatedId, DeleteField, StoreClient, is_delete_field
from .store_settings import SettingsHolder, StoreSettings, store_settings
