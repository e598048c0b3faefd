"""Calendar-day helpers. All day boundaries are in UTC."""

from datetime import UTC, datetime, time


def start_of_today(now: datetime | None = None) -> datetime:
    """Midnight UTC of the current (or given) day.

    A naive ``now`` is taken to be UTC already.
    """
    current = now or datetime.now(UTC)
    if current.tzinfo is not None:
        current = current.astimezone(UTC)
    return datetime.combine(current.date(), time.min, tzinfo=UTC)
