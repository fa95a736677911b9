"""Tests for birth/death date validation."""

from datetime import UTC, datetime

import pytest

from famtree.validation import (
    calculate_age,
    max_date,
    min_date,
    parse_date,
    validate_birth_date,
    validate_dates,
    validate_death_date,
)

NOW = datetime(2024, 6, 1, tzinfo=UTC)


class TestParseDate:
    """Tests for parse_date."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("1990", datetime(1990, 1, 1, tzinfo=UTC)),
            ("1990-05", datetime(1990, 5, 1, tzinfo=UTC)),
            ("1990-05-04", datetime(1990, 5, 4, tzinfo=UTC)),
            ("1990-05-04T10:30:00+00:00", datetime(1990, 5, 4, 10, 30, tzinfo=UTC)),
        ],
    )
    def test_accepted_forms(self, value, expected):
        """Test accepted forms."""
        assert parse_date(value) == expected

    @pytest.mark.parametrize("value", [None, "", "   ", "yesterday", "1990-13-01", "90-01-01"])
    def test_rejected_forms(self, value):
        """Test rejected forms."""
        assert parse_date(value) is None


class TestBirthDate:
    """Tests for validate_birth_date."""

    def test_empty_is_valid(self):
        """Test empty is valid."""
        assert validate_birth_date("").is_valid
        assert validate_birth_date(None).is_valid

    def test_ordinary_date(self):
        """Test ordinary date."""
        assert validate_birth_date("1990-05-04").is_valid

    def test_future_date(self):
        """Test future date."""
        result = validate_birth_date("2999-01-01")
        assert not result.is_valid
        assert result.error == "Birth date cannot be in the future"

    def test_before_min_year(self):
        """Test before min year."""
        result = validate_birth_date("1799-01-01")
        assert not result.is_valid
        assert result.error == "Birth year must be after 1800"

    def test_min_year_itself_is_valid(self):
        """Test min year itself is valid."""
        assert validate_birth_date("1800-01-01", now=NOW).is_valid

    def test_garbage(self):
        """Test unparseable birth date."""
        result = validate_birth_date("not a date")
        assert not result.is_valid
        assert result.error == "Invalid date format"

    def test_later_this_year_is_future(self):
        """Test later this year is future."""
        assert not validate_birth_date("2024-12-01", now=NOW).is_valid


class TestDeathDate:
    """Tests for validate_death_date."""

    def test_empty_is_valid(self):
        """Test empty is valid."""
        assert validate_death_date("", "1990-01-01").is_valid

    def test_before_birth(self):
        """Test before birth."""
        result = validate_death_date("1990-01-01", "1995-01-01")
        assert not result.is_valid
        assert result.error == "Death date cannot be before birth date"

    def test_future(self):
        """Test death date in the future."""
        result = validate_death_date("2200-01-01")
        assert not result.is_valid
        assert "future" in result.error

    def test_lifespan_over_150_years(self):
        """Test lifespan over 150 years."""
        result = validate_death_date("1960-01-01", "1805-01-01", now=NOW)
        assert not result.is_valid
        assert result.error == "Age at death cannot exceed 150 years"

    def test_lifespan_of_exactly_150_years(self):
        """Test lifespan of exactly 150 years."""
        assert validate_death_date("1955-01-01", "1805-01-01", now=NOW).is_valid

    def test_without_birth(self):
        """Test without birth."""
        assert validate_death_date("2001-09-11", now=NOW).is_valid

    def test_unparseable_birth_is_ignored(self):
        """Test unparseable birth is ignored."""
        assert validate_death_date("2001-09-11", "sometime", now=NOW).is_valid

    @pytest.mark.parametrize(
        ("value", "error"),
        [
            ("not a date", "Invalid date format"),
            ("1700-05-05", "Death year must be after 1800"),
        ],
    )
    def test_format_and_range_checked_before_birth(self, value, error):
        """Test format and range checked before birth."""
        result = validate_death_date(value, "1990-01-01", now=NOW)
        assert not result.is_valid
        assert result.error == error


class TestValidateDates:
    """Tests for the combined check."""

    def test_birth_error_wins(self):
        """Test birth error wins."""
        result = validate_dates("1799-01-01", "1700-01-01", now=NOW)
        assert result.error == "Birth year must be after 1800"

    def test_both_valid(self):
        """Test both valid."""
        assert validate_dates("1920-03-01", "2001-07-15", now=NOW).is_valid

    def test_both_empty(self):
        """Test both empty."""
        assert validate_dates().is_valid


class TestAge:
    """Tests for calculate_age and the date bounds."""

    def test_living(self):
        """Test age of a living member."""
        assert calculate_age("1990-06-02", now=NOW) == 33
        assert calculate_age("1990-06-01", now=NOW) == 34

    def test_deceased(self):
        """Test age at death."""
        assert calculate_age("1920-03-01", "2001-02-28") == 80

    def test_unknown(self):
        """Test age with unknown birth date."""
        assert calculate_age(None) is None
        assert calculate_age("garbage") is None

    def test_bounds(self):
        """Test min and max date bounds."""
        assert min_date() == "1800-01-01"
        assert max_date(NOW) == "2024-06-01"
