"""doc_store - Central path and environment configuration."""

import os
from pathlib import Path

ENV_HOME = "DOC_STORE_HOME"
ENV_ROOT_PREFIX = "DOC_STORE_ROOT_PREFIX"
ENV_LOG = "DOC_STORE_LOG"
ENV_LOG_STDERR = "DOC_STORE_LOG_STDERR"


def env_flag(key: str, default: bool) -> bool:
    """Read a boolean switch from the environment ("1", "true", "yes")."""
    raw = os.environ.get(key)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in ("true", "1", "yes")


DOC_STORE_HOME = Path(os.environ.get(ENV_HOME) or Path.home() / ".doc_store")

LOG_FILE = DOC_STORE_HOME / "doc_store.log"

# One folder per document, holding this file.
RECORD_JSON = "record.json"
