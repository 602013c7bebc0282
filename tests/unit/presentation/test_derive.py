import datetime as dt

import pytest

from carebook.presentation.derive import BadgeStyle, calculate_age, status_badge


class TestCalculateAge:
    """Whole years as of ``today``; one less until this year's birthday."""

    @pytest.mark.parametrize(
        ("birth", "today", "expected"),
        [
            (dt.date(1990, 3, 1), dt.date(2026, 6, 15), 36),
            (dt.date(1990, 6, 15), dt.date(2026, 6, 15), 36),
            (dt.date(1990, 6, 16), dt.date(2026, 6, 15), 35),
            (dt.date(1990, 12, 31), dt.date(2026, 6, 15), 35),
            (dt.date(2026, 1, 1), dt.date(2026, 6, 15), 0),
            (dt.date(2000, 2, 29), dt.date(2026, 2, 28), 25),
            (dt.date(2000, 2, 29), dt.date(2026, 3, 1), 26),
        ],
        ids=[
            "birthday-passed",
            "birthday-today",
            "birthday-tomorrow",
            "birthday-end-of-year",
            "born-this-year",
            "leap-day-before",
            "leap-day-after",
        ],
    )
    def test_computes_whole_years(self, birth: dt.date, today: dt.date, expected: int) -> None:
        assert calculate_age(birth, today) == expected

    def test_accepts_iso_string(self) -> None:
        assert calculate_age("1985-07-04", dt.date(2026, 7, 3)) == 40

    def test_future_birth_date_is_negative(self) -> None:
        assert calculate_age(dt.date(2027, 1, 1), dt.date(2026, 6, 15)) == -1

    def test_defaults_to_local_today(self) -> None:
        birth = dt.date.today().replace(year=dt.date.today().year - 30, day=1)

        assert calculate_age(birth) == 30


class TestStatusBadge:
    @pytest.mark.parametrize(
        ("status", "expected"),
        [
            ("Scheduled", BadgeStyle.INFO),
            ("Completed", BadgeStyle.SUCCESS),
            ("Cancelled", BadgeStyle.DANGER),
            ("No Show", BadgeStyle.MUTED),
        ],
    )
    def test_known_statuses(self, status: str, expected: BadgeStyle) -> None:
        assert status_badge(status) is expected

    @pytest.mark.parametrize("status", ["Unknown", "completed", "", None])
    def test_anything_else_falls_back(self, status: str | None) -> None:
        assert status_badge(status) is BadgeStyle.DEFAULT

    def test_css_classes(self) -> None:
        assert status_badge("Completed").css_class == "bg-green-100 text-green-800"
        assert status_badge("Unknown").css_class == "bg-gray-100 text-gray-800"
