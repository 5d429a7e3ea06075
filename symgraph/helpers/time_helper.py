"""Clock for symbol, connection and status timestamps."""

import time


def now_ms() -> int:
    """Epoch milliseconds, the unit stored in created_at and updated_at."""
    return int(time.time() * 1000)
