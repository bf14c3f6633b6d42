"""Weekly edit-lock window and shared-secret bypass checks.

The lock is a pure function of wall-clock time. It starts at
``lock_hour`` on ``lock_weekday`` (Friday 10:00 by default), covers the
whole following day, and lifts at 00:00 the day after that.
"""

import hmac
from datetime import datetime


def is_locked(now: datetime, lock_weekday: int = 4, lock_hour: int = 10) -> bool:
    """Check whether editing is locked at ``now``.

    Args:
        now: Wall-clock time, already in the board's timezone
        lock_weekday: Weekday the lock starts (0=Monday ... 6=Sunday)
        lock_hour: Hour of ``lock_weekday`` from which editing is locked

    Returns:
        True inside the lock window.
    """
    weekday = now.weekday()
    if weekday == lock_weekday and now.hour >= lock_hour:
        return True
    return weekday == (lock_weekday + 1) % 7


def has_bypass(secret: str | None, provided_key: str | None) -> bool:
    """Check a provided key against a configured shared secret.

    Fails closed: with no secret configured nothing bypasses. Both
    sides are trimmed; the comparison is exact and case-sensitive.
    """
    expected = (secret or "").strip()
    if not expected:
        return False
    key = (provided_key or "").strip()
    if not key:
        return False
    return hmac.compare_digest(key.encode("utf-8"), expected.encode("utf-8"))
