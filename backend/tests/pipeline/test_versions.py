"""Tests for the bill version vocabulary."""

from datetime import date

import pytest

from pipeline.bills_text.versions import current_congress, version_name_for


class TestCurrentCongress:
    """Tests for current_congress."""

    @pytest.mark.parametrize(
        "today,expected",
        [
            (date(1789, 6, 1), 1),
            (date(2011, 3, 1), 112),
            (date(2012, 12, 31), 112),
            (date(2021, 1, 20), 117),
            (date(2025, 7, 4), 119),
            (date(2026, 10, 18), 119),
        ],
    )
    def test_known_years(self, today: date, expected: int) -> None:
        assert current_congress(today) == expected

    def test_defaults_to_today(self) -> None:
        assert current_congress() == current_congress(date.today())


class TestVersionNameFor:
    """Tests for version_name_for."""

    def test_known_codes(self) -> None:
        assert version_name_for("ih") == "Introduced in House"
        assert version_name_for("enr") == "Enrolled Bill"
        assert version_name_for("rs") == "Reported in Senate"

    def test_unknown_code(self) -> None:
        assert version_name_for("zz") is None
