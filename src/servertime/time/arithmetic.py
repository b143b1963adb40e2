"""Minute-granularity clock arithmetic for the server time probe.

Instants are local ``datetime`` objects: naive ones are read as local
system time, aware ones carry their zone. Differences are always taken
between epoch milliseconds so a DST change inside the window does not
skew the result.
"""

from datetime import datetime, timedelta, timezone

MINUTES_TO_MILLISECONDS = 60 * 1000

# How far before "now" the probe anchor sits, in whole days.
PAST_DAYS = 2


def local_now() -> datetime:
    """Current local time, aware of the system zone's current UTC offset."""
    return datetime.now().astimezone()


def reference_instant(now: datetime) -> datetime:
    """Return midnight two days before ``now``, in ``now``'s zone.

    The instant is definitely in the server's past no matter how far ahead
    of server time the local clock is.
    """
    day = now.date() - timedelta(days=PAST_DAYS)
    midnight = datetime(day.year, day.month, day.day)
    if now.tzinfo is None:
        return midnight
    if isinstance(now.tzinfo, timezone):
        # Fixed offset from astimezone(): re-localise, the offset two days
        # ago may differ.
        return midnight.astimezone()
    return midnight.replace(tzinfo=now.tzinfo)


def epoch_millis(instant: datetime) -> int:
    return int(instant.timestamp() * 1000)


def minutes_between(a: datetime, b: datetime) -> int:
    """Whole minutes elapsed from ``b`` to ``a``, truncated toward zero."""
    millis = epoch_millis(a) - epoch_millis(b)
    if millis < 0:
        return -(-millis // MINUTES_TO_MILLISECONDS)
    return millis // MINUTES_TO_MILLISECONDS


def offset_to_absolute_instant(offset_minutes: int, now: datetime) -> datetime:
    """Convert a local-minus-server offset into the server's current time."""
    millis = epoch_millis(now) - offset_minutes * MINUTES_TO_MILLISECONDS
    return datetime.fromtimestamp(millis / 1000, tz=now.tzinfo)


def format_month_day_time(instant: datetime) -> str:
    """Format as ``MM-DD HH:MM:SS``."""
    return instant.strftime("%m-%d %H:%M:%S")
