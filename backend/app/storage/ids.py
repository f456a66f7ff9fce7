"""Time-based identifiers for stored entities."""

import time
from typing import Collection


def new_id(existing: Collection[str]) -> str:
    """Return the current epoch milliseconds as a string, bumped past ``existing``."""
    candidate = int(time.time() * 1000)
    while str(candidate) in existing:
        candidate += 1
    return str(candidate)
