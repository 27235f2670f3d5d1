"""Tests for monthly quota bookkeeping."""
from datetime import datetime, timedelta, timezone

import pytest

from app.modules.flashcards.errors import QuotaExceededError
from app.modules.usage.quota import (
    UsageSnapshot,
    check_quota,
    effective_count,
    month_key,
    next_usage,
)

NOW = datetime(2026, 10, 18, 12, 30, tzinfo=timezone.utc)


def test_month_key_includes_year() -> None:
    assert month_key(NOW) == "2026-10"
    assert month_key(datetime(2025, 10, 1)) == "2025-10"


def test_month_key_converts_to_utc() -> None:
    # 23:30 on Oct 31 at UTC-2 is already November in UTC
    local = datetime(2026, 10, 31, 23, 30, tzinfo=timezone(timedelta(hours=-2)))
    assert month_key(local) == "2026-11"


def test_effective_count_same_month() -> None:
    assert effective_count(4, "2026-10", NOW) == 4


def test_effective_count_resets_on_new_month() -> None:
    assert effective_count(4, "2026-09", NOW) == 0


def test_effective_count_resets_same_month_previous_year() -> None:
    assert effective_count(4, "2025-10", NOW) == 0


def test_effective_count_without_history() -> None:
    assert effective_count(None, None, NOW) == 0


def test_check_quota_allows_below_limit() -> None:
    usage = check_quota(2, "2026-10", 3, NOW)
    assert usage == UsageSnapshot(count=2, limit=3, month="2026-10")
    assert usage.remaining == 1


def test_check_quota_blocks_at_limit() -> None:
    with pytest.raises(QuotaExceededError) as exc:
        check_quota(3, "2026-10", 3, NOW)
    assert exc.value.status_code == 429
    assert "monthly limit (3 cards / month)" in exc.value.message


def test_check_quota_after_month_rollover() -> None:
    usage = check_quota(3, "2026-09", 3, NOW)
    assert usage.count == 0
    assert usage.remaining == 3


def test_zero_limit_blocks_everything() -> None:
    with pytest.raises(QuotaExceededError):
        check_quota(0, None, 0, NOW)


def test_next_usage_increments_and_stamps() -> None:
    fields = next_usage(UsageSnapshot(count=1, limit=3, month="2026-10"), NOW)
    assert fields["monthly_generation_count"] == 2
    assert fields["last_generation_month"] == "2026-10"
    assert fields["last_generation_at"] == datetime(2026, 10, 18, 12, 30)
    assert fields["last_generation_at"].tzinfo is None
