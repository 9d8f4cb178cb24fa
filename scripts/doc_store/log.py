"""
doc_store - Logging Module
One line per store event in doc_store.log::

    [2024-05-01 12:00:00] CREATE   /projects/demo/humans/4f0c... fields=2
    [2024-05-01 12:00:01] UPDATE   /projects/demo/humans/4f0c... field='age'
"""
import sys
from datetime import datetime

from .conf import DOC_STORE_HOME, ENV_LOG, ENV_LOG_STDERR, LOG_FILE, env_flag

# =============================================================================
# CONFIGURATION
# =============================================================================

LOG = env_flag(ENV_LOG, True)  # Set DOC_STORE_LOG=0 to disable logging
LOG_TO_STDERR = env_flag(ENV_LOG_STDERR, False)
first_line = True

# =============================================================================
# LOGGING
# =============================================================================


def store_log(message: str) -> None:
    """Append a timestamped line to doc_store.log if LOG is enabled."""
    global first_line
    if not LOG:
        return
    if first_line:
        first_line = False
        LOG_FILE.parent.mkdir(parents=True, exist_ok=True)
        store_log(f"--- doc_store session (home {DOC_STORE_HOME}) ---")
    timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    log_line = f"[{timestamp}] {message}\n"
    if LOG_TO_STDERR:
        sys.stderr.write(log_line)
    with open(LOG_FILE, "a", encoding="utf-8") as f:
        f.write(log_line)


def store_log_event(event: str, address: str, **details) -> None:
    """Log a store event against a document address.

    ``store_log_event("update", path, field="age")`` writes
    ``UPDATE   <path> field='age'``.
    """
    line = f"{event.upper():<8} {address}"
    if details:
        line += " " + " ".join(f"{key}={value!r}" for key, value in sorted(details.items()))
    store_log(line)


def read_store_log(address: str | None = None) -> list[str]:
    """Lines of doc_store.log, only those for ``address`` (and its nested documents) if given."""
    if not LOG_FILE.exists():
        return []
    lines = LOG_FILE.read_text(encoding="utf-8").splitlines()
    if address is None:
        return lines
    return [line for line in lines if f" {address}" in line]


def store_log_clear() -> None:
    """Delete the log file."""
    LOG_FILE.unlink(missing_ok=True)
