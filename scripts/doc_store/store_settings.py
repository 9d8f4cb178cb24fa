"""Process-wide store settings and the holder records resolve against.

Usage::

    from doc_store import MemoryStoreClient, StoreSettings, store_settings

    store_settings.configure(
        StoreSettings(root_prefix="/projects/demo", store_client=MemoryStoreClient())
    )

Records use the module-level ``store_settings`` unless they are given their
own ``SettingsHolder``.
"""

from __future__ import annotations

import os
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .address import join_address
from .conf import ENV_ROOT_PREFIX
from .errors import ConfigurationError
from .store_client import StoreClient


class StoreSettings(BaseModel):
    """Root prefix and client handle. Immutable; reconfigure by replacing it."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    root_prefix: str | None = Field(default=None)
    store_client: StoreClient | None = Field(default=None)

    @field_validator("root_prefix")
    @classmethod
    def _blank_prefix_is_unset(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            return None
        return value

    @classmethod
    def from_env(cls, store_client: StoreClient, **overrides: Any) -> StoreSettings:
        """Build settings with ``root_prefix`` read from ``DOC_STORE_ROOT_PREFIX``."""
        data: dict[str, Any] = {
            "root_prefix": os.environ.get(ENV_ROOT_PREFIX),
            "store_client": store_client,
        }
        data.update(overrides)
        return cls(**data)


class SettingsHolder:
    """Holds the current ``StoreSettings``; set once at startup, read by every record."""

    def __init__(self, settings: StoreSettings | None = None):
        self._settings = settings

    def configure(self, settings: StoreSettings) -> None:
        """Replace the configuration wholesale."""
        if not isinstance(settings, StoreSettings):
            raise ConfigurationError(
                f"Expected StoreSettings, got {type(settings).__name__}"
            )
        self._settings = settings

    def reset(self) -> None:
        """Forget the current configuration."""
        self._settings = None

    @property
    def is_configured(self) -> bool:
        return self._settings is not None

    @property
    def settings(self) -> StoreSettings:
        if self._settings is None:
            raise ConfigurationError("doc_store is not configured; call configure() first")
        return self._settings

    @property
    def store_client(self) -> StoreClient:
        client = self.settings.store_client
        if client is None:
            raise ConfigurationError("No store client configured")
        return client

    def root_address(self, skip_root_scoping: bool = False) -> str:
        """The store's root scope followed by ``root_prefix``.

        With ``skip_root_scoping`` the prefix is neither required nor applied.
        """
        client = self.store_client
        if skip_root_scoping:
            return join_address(client.root_scope())
        prefix = self.settings.root_prefix
        if prefix is None:
            raise ConfigurationError(
                "No root_prefix configured; set one or opt out with skip_root_scoping=True"
            )
        return join_address(client.root_scope(), prefix)


store_settings = SettingsHolder()
