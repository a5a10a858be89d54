"""Shared small helpers: clock and env flag parsing."""

import time
from typing import Optional

_TRUTHY_FLAG_VALUES = {"1", "true", "yes"}


# Used by: glanceable_sync.py (feature gate)
def is_truthy_flag(value: Optional[str]) -> bool:
    """Unset or empty flags are off."""
    if value is None:
        return False
    return value.strip().lower() in _TRUTHY_FLAG_VALUES


# Used by: babies_data.py, caregiving_session.py, utils/labels.py
def now_ms() -> int:
    return int(time.time() * 1000)
