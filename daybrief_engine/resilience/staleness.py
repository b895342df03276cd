"""Cache freshness: how old a stored fetch is and whether it can still be shown as current.

Timestamps are UNIX seconds (UTC). A record written "in the future" (clock skew)
counts as age zero.
"""

import time

DEFAULT_TTL_SECONDS = 15 * 60


def _now(now: float | None) -> int:
    return int(time.time() if now is None else now)


def record_age_seconds(ts: int, now: float | None = None) -> int:
    return max(0, _now(now) - int(ts))


def is_fresh(ts: int, ttl_seconds: int = DEFAULT_TTL_SECONDS, now: float | None = None) -> bool:
    """True if `ts` is within `ttl_seconds` of now."""
    return record_age_seconds(ts, now) <= ttl_seconds


def age_minutes(ts: int, now: float | None = None) -> int:
    """Whole minutes since `ts`, floored at zero (for status text)."""
    return record_age_seconds(ts, now) // 60
