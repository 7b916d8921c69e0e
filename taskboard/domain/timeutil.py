from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional


def as_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Aware datetimes become naive UTC; naive ones are returned unchanged.

    Stored timestamps carry no offset, so every value entering the store or a
    date comparison goes through here first.
    """
    if value is None or value.tzinfo is None or value.utcoffset() is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
