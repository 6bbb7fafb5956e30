"""
Tests for data models and cell category derivation.
"""

import pytest

from shiftgrid.models import (
    CellCategory,
    Employee,
    ErrorCause,
    ImportSummary,
    ImportValidationError,
    ShiftKey,
    categorize,
)


class TestCategorize:
    """Tests for the categorize function."""

    def test_off_marker(self):
        """Test that OFF is the day-off category."""
        assert categorize("OFF") == CellCategory.OFF

    def test_off_is_case_insensitive_and_trimmed(self):
        """Test that off, Off and padded OFF are all day off."""
        assert categorize("off") == CellCategory.OFF
        assert categorize("Off") == CellCategory.OFF
        assert categorize("  oFF  ") == CellCategory.OFF

    def test_shift_text(self):
        """Test that other text is a shift."""
        assert categorize("7AM-3PM") == CellCategory.SHIFT
        assert categorize("OFF?") == CellCategory.SHIFT
        assert categorize("OFFICE") == CellCategory.SHIFT

    def test_empty_text(self):
        """Test that blank text is empty."""
        assert categorize("") == CellCategory.EMPTY
        assert categorize("   ") == CellCategory.EMPTY
        assert categorize(None) == CellCategory.EMPTY


class TestEmployee:
    """Tests for the Employee dataclass."""

    def test_initials(self):
        """Test initials are built from each name part."""
        assert Employee("1", "Frank Gmelin", 1).initials == "FG"

    def test_empty_id_rejected(self):
        """Test that an empty id raises an error."""
        with pytest.raises(ValueError, match="id"):
            Employee("  ", "Frank Gmelin", 1)

    def test_empty_name_rejected(self):
        """Test that an empty name raises an error."""
        with pytest.raises(ValueError, match="name"):
            Employee("1", "", 1)

    def test_immutable(self):
        """Test that employees cannot be modified."""
        employee = Employee("1", "Frank Gmelin", 1)
        with pytest.raises(Exception):
            employee.name = "Someone Else"


class TestShiftKey:
    """Tests for ShiftKey."""

    def test_equal_to_plain_tuple(self):
        """Test that a key compares equal to the matching tuple."""
        assert ShiftKey("1", 3) == ("1", 3)

    def test_hashable(self):
        """Test that keys work as dictionary keys."""
        assert {ShiftKey("1", 0): "OFF"}[ShiftKey("1", 0)] == "OFF"


class TestImportRecords:
    """Tests for import result records."""

    def test_validation_error_str(self):
        """Test that an error prints as its message."""
        error = ImportValidationError("Missing required employee: Frank Gmelin",
                                      ErrorCause.MISSING_EMPLOYEE)
        assert str(error) == "Missing required employee: Frank Gmelin"

    def test_summary_format_lists_ignored_names(self):
        """Test that the summary lists names not on the roster."""
        summary = ImportSummary(rows_applied=2, cells_written=14, ignored_names=["Nobody"])
        text = summary.format_summary()

        assert "Rows applied: 2" in text
        assert "Cells written: 14" in text
        assert "- Nobody" in text
