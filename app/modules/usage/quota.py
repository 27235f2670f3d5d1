"""Monthly generation quota bookkeeping.

Usage is tracked per user as a counter plus the ``YYYY-MM`` key of the month
it belongs to. A counter from an earlier month counts as zero.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from app.modules.flashcards.errors import QuotaExceededError


@dataclass(frozen=True)
class UsageSnapshot:
    count: int
    limit: int
    month: str

    @property
    def remaining(self) -> int:
        return max(0, self.limit - self.count)

    @property
    def exhausted(self) -> bool:
        return self.count >= self.limit


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def month_key(now: datetime) -> str:
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    return f"{now.year:04d}-{now.month:02d}"


def effective_count(count: Optional[int], last_month: Optional[str], now: datetime) -> int:
    if last_month != month_key(now):
        return 0
    return int(count or 0)


def snapshot(
    count: Optional[int], last_month: Optional[str], limit: int, now: datetime
) -> UsageSnapshot:
    return UsageSnapshot(
        count=effective_count(count, last_month, now),
        limit=limit,
        month=month_key(now),
    )


def check_quota(
    count: Optional[int], last_month: Optional[str], limit: int, now: datetime
) -> UsageSnapshot:
    """Return the current usage, or raise if the month's quota is used up."""
    usage = snapshot(count, last_month, limit, now)
    if usage.exhausted:
        raise QuotaExceededError(limit)
    return usage


def next_usage(usage: UsageSnapshot, now: datetime) -> dict:
    """Fields merged onto the user after a successful generation."""
    if now.tzinfo is not None:
        # stored as naive UTC
        now = now.astimezone(timezone.utc).replace(tzinfo=None)
    return {
        "monthly_generation_count": usage.count + 1,
        "last_generation_month": month_key(now),
        "last_generation_at": now,
    }
