"""Error kinds raised by the doc_store layer.

Validation errors are raised before any store call is issued.  Store
failures derive from ``StoreError`` and are propagated to the caller as-is.
"""


class DocStoreError(Exception):
    """Base class for every doc_store error."""


class ConfigurationError(DocStoreError, ValueError):
    """Settings missing or incomplete at use time."""


class InvalidConstructionError(DocStoreError, ValueError):
    """A record was built without a viable addressing strategy."""


class InvalidIdentityError(DocStoreError, ValueError):
    """Empty collection name or document id."""


class UnresolvedParentError(DocStoreError, ValueError):
    """A nested collection was requested on a record with no resolvable address."""


class NotPersistedError(DocStoreError, RuntimeError):
    """A store mutation was requested on a record that was never saved."""


class StoreError(DocStoreError):
    """Failure reported by the underlying store client."""


class StoreUnavailableError(StoreError):
    """The store could not be reached or did not commit the operation."""


class DocumentNotFoundError(StoreError):
    """The addressed document does not exist."""

    def __init__(self, address: str):
        super().__init__(f"No document at {address!r}")
        self.address = address
