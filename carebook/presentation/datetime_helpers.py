import datetime as dt


def date_to_us_short(date: dt.date | None) -> str:
    """Convert ``date(2026, 3, 5)`` → ``3/5/2026`` for list display; ``None`` → ``""``."""
    if date is None:
        return ""
    return f"{date.month}/{date.day}/{date.year}"


def time_to_24h(time: dt.time | None) -> str:
    """Convert ``time(9, 5, 0)`` → ``09:05``; seconds are dropped."""
    if time is None:
        return ""
    return time.strftime("%H:%M")


def today_iso(today: dt.date | None = None) -> str:
    """Today's local calendar date as ``YYYY-MM-DD``.

    Used for form defaults and minimums. No timezone normalization is
    applied, so this can differ from the store's UTC date near midnight.
    """
    return (today or dt.date.today()).isoformat()
