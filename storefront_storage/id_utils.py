"""ID generation for catalog entities.

Entities created from the admin surface get time-based identifiers:
milliseconds since the epoch as a decimal string. Products being edited
keep the identifier they already have.
"""

from __future__ import annotations

import threading
import time

_lock = threading.Lock()
_last_issued = 0


def new_entity_id() -> str:
    """Generate a time-based entity ID.

    IDs are strictly increasing within a process, so two entities created
    in the same millisecond still get distinct IDs.
    """
    global _last_issued
    with _lock:
        candidate = time.time_ns() // 1_000_000
        if candidate <= _last_issued:
            candidate = _last_issued + 1
        _last_issued = candidate
        return str(candidate)
