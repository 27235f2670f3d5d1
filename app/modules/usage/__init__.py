from .quota import UsageSnapshot, check_quota, effective_count, month_key, next_usage

__all__ = [
    "UsageSnapshot",
    "check_quota",
    "effective_count",
    "month_key",
    "next_usage",
]
