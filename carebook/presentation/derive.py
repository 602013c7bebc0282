import datetime as dt
from enum import Enum


class BadgeStyle(Enum):
    """Display tag for an appointment status badge."""

    INFO = "info"
    SUCCESS = "success"
    DANGER = "danger"
    MUTED = "muted"
    DEFAULT = "default"

    @property
    def css_class(self) -> str:
        return _BADGE_CSS[self]


_BADGE_CSS: dict[BadgeStyle, str] = {
    BadgeStyle.INFO: "bg-blue-100 text-blue-800",
    BadgeStyle.SUCCESS: "bg-green-100 text-green-800",
    BadgeStyle.DANGER: "bg-red-100 text-red-800",
    BadgeStyle.MUTED: "bg-gray-100 text-gray-800",
    BadgeStyle.DEFAULT: "bg-gray-100 text-gray-800",
}

_STATUS_BADGES: dict[str, BadgeStyle] = {
    "Scheduled": BadgeStyle.INFO,
    "Completed": BadgeStyle.SUCCESS,
    "Cancelled": BadgeStyle.DANGER,
    "No Show": BadgeStyle.MUTED,
}


def status_badge(status: str | None) -> BadgeStyle:
    """Classify a status string; anything unrecognized gets ``BadgeStyle.DEFAULT``."""
    if status is None:
        return BadgeStyle.DEFAULT
    return _STATUS_BADGES.get(status, BadgeStyle.DEFAULT)


def calculate_age(date_of_birth: dt.date | str, today: dt.date | None = None) -> int:
    """Whole years between ``date_of_birth`` and ``today`` (local calendar date).

    The year difference is reduced by one when this year's birthday has not
    happened yet. Future birth dates give a negative age.
    """
    if isinstance(date_of_birth, str):
        date_of_birth = dt.date.fromisoformat(date_of_birth)
    today = today or dt.date.today()

    age = today.year - date_of_birth.year
    if (today.month, today.day) < (date_of_birth.month, date_of_birth.day):
        age -= 1
    return age
