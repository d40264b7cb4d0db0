"""Report clock helpers."""

from datetime import datetime, timezone

REPORT_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def report_now(true_utc: bool = False) -> datetime:
    """
    Wall-clock time used in report headers.

    Reports label this value "UTC". Historically the local clock was used, and
    that stays the default so the visible output does not change; pass
    ``true_utc=True`` to get the real UTC time.
    """
    if true_utc:
        return datetime.now(timezone.utc)
    return datetime.now()


def format_report_time(dt: datetime) -> str:
    return dt.strftime(REPORT_TIME_FORMAT)
