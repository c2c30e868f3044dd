from __future__ import annotations

from enum import Enum


class LockMode(Enum):
    """Select locking behavior for registration and singleton caching.

    Pass one of these values as ``Container(lock_mode=...)``. The mode applies
    to the registry and to every binding the container creates.
    """

    THREAD = "thread"
    """Guard registry writes and singleton first builds with ``threading`` locks."""

    NONE = "none"
    """Disable locking for containers owned by a single thread."""
