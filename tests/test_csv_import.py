"""
Tests for the CSV import pipeline.
"""

import pytest

from shiftgrid.config import DEFAULT_REQUIRED_EMPLOYEES
from shiftgrid.csv_import import (
    CsvImportPipeline,
    ImportStage,
    ImportStateError,
    parse_csv_text,
    validate_rows,
)
from shiftgrid.models import ErrorCause
from shiftgrid.roster import default_roster
from shiftgrid.shift_store import ShiftStore

HEADER = "Name,Saturday,Sunday,Monday,Tuesday,Wednesday,Thursday,Friday"

WEEK_CSV = "\n".join([
    HEADER,
    "Frank Gmelin,OFF,7AM-3PM,7AM-3PM,7AM-3PM,7AM-3PM,7AM-3PM,OFF",
    "Patrica Garden,9AM-5PM,OFF,OFF,9AM-5PM,9AM-5PM,9AM-5PM,9AM-5PM",
    "Dawn Waddel,OFF,OFF,6AM-2PM,6AM-2PM,6AM-2PM,6AM-2PM,6AM-2PM",
    "Sarah Johnson,10AM-6PM,10AM-6PM,OFF,OFF,10AM-6PM,10AM-6PM,10AM-6PM",
    "Mike Rodriguez,OFF,12PM-8PM,12PM-8PM,12PM-8PM,OFF,12PM-8PM,12PM-8PM",
    "Lisa Chen,8AM-4PM,8AM-4PM,8AM-4PM,OFF,OFF,8AM-4PM,8AM-4PM",
    "Dawn Mitchell,7AM-3PM,7AM-3PM,7AM-3PM,7AM-3PM,OFF,OFF,7AM-3PM",
])


@pytest.fixture
def pipeline():
    return CsvImportPipeline(DEFAULT_REQUIRED_EMPLOYEES)


@pytest.fixture
def store():
    return ShiftStore(default_roster())


def staged(pipeline, text, filename="week.csv"):
    ticket = pipeline.select_file(filename)
    return pipeline.deliver(ticket, text)


class TestParseCsvText:
    """Tests for parse_csv_text."""

    def test_trims_cells_and_skips_blank_lines(self):
        """Test that cells are trimmed and blank lines dropped."""
        rows = parse_csv_text("Name , Sat\n\n   \n Frank Gmelin ,  OFF \n")
        assert rows == [["Name", "Sat"], ["Frank Gmelin", "OFF"]]

    def test_windows_line_endings(self):
        """Test CRLF input."""
        assert parse_csv_text("a,b\r\nc,d\r\n") == [["a", "b"], ["c", "d"]]

    def test_quoted_cells(self):
        """Test that quoted cells are unquoted."""
        rows = parse_csv_text('"Name","Saturday 01/13"\n"Frank Gmelin","7AM-3PM, split"')
        assert rows == [["Name", "Saturday 01/13"], ["Frank Gmelin", "7AM-3PM, split"]]

    def test_empty_text(self):
        """Test that empty input yields no rows."""
        assert parse_csv_text("") == []

    def test_unbalanced_quote_stays_on_its_line(self):
        """Test that a stray quote does not merge the following lines into its row."""
        text = "\n".join([
            HEADER,
            'Frank Gmelin,"Early,7AM-3PM,7AM-3PM,7AM-3PM,7AM-3PM,7AM-3PM,OFF',
            "Patrica Garden,OFF,OFF,OFF,OFF,OFF,OFF,OFF",
            "Dawn Waddel,OFF,OFF,OFF,OFF,OFF,OFF,OFF",
        ])

        rows = parse_csv_text(text)

        assert len(rows) == 4
        assert [row[0] for row in rows[1:]] == ["Frank Gmelin", "Patrica Garden", "Dawn Waddel"]
        assert rows[2] == ["Patrica Garden"] + ["OFF"] * 7
        assert validate_rows(rows, DEFAULT_REQUIRED_EMPLOYEES) == []


class TestValidateRows:
    """Tests for validate_rows."""

    def test_valid_week(self):
        """Test that the sample week passes."""
        assert validate_rows(parse_csv_text(WEEK_CSV), DEFAULT_REQUIRED_EMPLOYEES) == []

    def test_missing_frank_gmelin(self):
        """Test that one missing employee yields exactly one error naming them."""
        text = "\n".join(line for line in WEEK_CSV.splitlines()
                         if not line.startswith("Frank Gmelin"))

        errors = validate_rows(parse_csv_text(text), DEFAULT_REQUIRED_EMPLOYEES)

        assert len(errors) == 1
        assert errors[0].cause == ErrorCause.MISSING_EMPLOYEE
        assert "Frank Gmelin" in errors[0].message
        assert "Patrica Garden" not in errors[0].message

    def test_all_errors_reported_together(self):
        """Test that structure and content errors are collected in order."""
        errors = validate_rows(parse_csv_text("Name,Sat"), DEFAULT_REQUIRED_EMPLOYEES)

        assert [e.cause for e in errors] == [
            ErrorCause.STRUCTURE,
            ErrorCause.STRUCTURE,
            ErrorCause.MISSING_EMPLOYEE,
            ErrorCause.MISSING_EMPLOYEE,
            ErrorCause.MISSING_EMPLOYEE,
        ]
        assert [e.message for e in errors[2:]] == [
            "Missing required employee: Frank Gmelin",
            "Missing required employee: Patrica Garden",
            "Missing required employee: Dawn Waddel",
        ]

    def test_name_in_header_does_not_count(self):
        """Test that only data rows satisfy required employees."""
        rows = [["Frank Gmelin"] + ["x"] * 7, ["Someone"] + ["x"] * 7]
        errors = validate_rows(rows, ["Frank Gmelin"])
        assert [e.cause for e in errors] == [ErrorCause.MISSING_EMPLOYEE]

    def test_no_required_employees(self):
        """Test that an empty required set only checks structure."""
        rows = parse_csv_text(HEADER + "\nNobody,OFF")
        assert validate_rows(rows, []) == []


class TestSelectAndDeliver:
    """Tests for the read stages of the pipeline."""

    def test_wrong_extension_rejected(self, pipeline):
        """Test that non-CSV files are rejected with one structural error."""
        assert pipeline.select_file("week.xlsx") is None

        assert pipeline.stage == ImportStage.AWAITING_FILE
        assert [e.message for e in pipeline.errors] == ["Please select a CSV file"]
        assert pipeline.errors[0].cause == ErrorCause.STRUCTURE

    def test_valid_file_staged_as_preview(self, pipeline, store):
        """Test that a valid file is staged and the store is untouched."""
        result = staged(pipeline, WEEK_CSV)

        assert result.ok
        assert pipeline.stage == ImportStage.PREVIEW
        assert len(pipeline.preview) == 8
        assert len(store) == 0

    def test_invalid_file_returns_to_awaiting(self, pipeline):
        """Test that a rejected file leaves nothing staged."""
        result = staged(pipeline, HEADER)

        assert not result.ok
        assert pipeline.stage == ImportStage.AWAITING_FILE
        assert pipeline.preview == []

    def test_stale_delivery_dropped(self, pipeline):
        """Test that a read superseded by a newer selection is ignored."""
        first = pipeline.select_file("old.csv")
        second = pipeline.select_file("new.csv")

        assert pipeline.deliver(first, WEEK_CSV) is None
        assert pipeline.stage == ImportStage.READING

        result = pipeline.deliver(second, WEEK_CSV)
        assert result.filename == "new.csv"
        assert pipeline.stage == ImportStage.PREVIEW

    def test_delivery_after_cancel_dropped(self, pipeline):
        """Test that closing the import abandons the pending read."""
        ticket = pipeline.select_file("week.csv")
        pipeline.cancel()

        assert pipeline.deliver(ticket, WEEK_CSV) is None
        assert pipeline.stage == ImportStage.AWAITING_FILE

    def test_read_failure(self, pipeline):
        """Test that a read failure rejects the import."""
        ticket = pipeline.select_file("week.csv")
        result = pipeline.deliver_failure(ticket, "permission denied")

        assert result.errors[0].cause == ErrorCause.READ_FAILURE
        assert "permission denied" in result.errors[0].message
        assert pipeline.stage == ImportStage.AWAITING_FILE

    def test_retry_after_rejection(self, pipeline):
        """Test that a new file can be picked after a rejection."""
        staged(pipeline, HEADER)
        result = staged(pipeline, WEEK_CSV)

        assert result.ok
        assert pipeline.stage == ImportStage.PREVIEW


class TestLoadPath:
    """Tests for loading a file from disk."""

    def test_load_valid_file(self, pipeline, tmp_path):
        """Test loading a valid CSV file."""
        csv_file = tmp_path / "week.csv"
        csv_file.write_text(WEEK_CSV, encoding="utf-8")

        result = pipeline.load_path(str(csv_file))

        assert result.ok
        assert result.filename == "week.csv"
        assert len(result.data_rows) == 7

    def test_byte_order_mark_tolerated(self, pipeline, tmp_path):
        """Test that a UTF-8 BOM does not end up in the header."""
        csv_file = tmp_path / "week.csv"
        csv_file.write_bytes(("\ufeff" + WEEK_CSV).encode("utf-8"))

        result = pipeline.load_path(str(csv_file))

        assert result.header[0] == "Name"

    def test_missing_file(self, pipeline, tmp_path):
        """Test that an unreadable file is a read failure."""
        result = pipeline.load_path(str(tmp_path / "missing.csv"))

        assert result.errors[0].cause == ErrorCause.READ_FAILURE

    def test_wrong_extension(self, pipeline, tmp_path):
        """Test that the extension is checked before reading."""
        text_file = tmp_path / "week.txt"
        text_file.write_text(WEEK_CSV)

        result = pipeline.load_path(str(text_file))

        assert [e.message for e in result.errors] == ["Please select a CSV file"]


class TestConfirm:
    """Tests for committing a staged import."""

    def test_commit_sets_store(self, pipeline, store):
        """Test the sample week lands in the store for Frank Gmelin."""
        staged(pipeline, WEEK_CSV)
        summary = pipeline.confirm(store, default_roster())

        assert store.get("1", 0) == "OFF"
        assert store.get("1", 1) == "7AM-3PM"
        assert store.get("1", 6) == "OFF"
        assert store.get("3", 4) == "OFF"  # Dawn Mitchell, Wednesday
        assert pipeline.stage == ImportStage.COMMITTED
        assert summary.rows_applied == 6
        assert summary.cells_written == 42

    def test_unmatched_names_ignored(self, pipeline, store):
        """Test that rows for names not on the roster are dropped silently."""
        staged(pipeline, WEEK_CSV)
        summary = pipeline.confirm(store, default_roster())

        assert summary.ignored_names == ["Dawn Waddel"]
        assert len(store) == 42

    def test_short_and_long_rows(self, store):
        """Test that missing day columns become empty and extras are ignored."""
        pipeline = CsvImportPipeline([])
        store.set("1", 5, "9AM-5PM")
        text = "\n".join([
            HEADER,
            "Frank Gmelin,OFF,7AM-3PM",
            "Patrica Garden,a,b,c,d,e,f,g,extra,more",
        ])
        staged(pipeline, text)
        pipeline.confirm(store, default_roster())

        assert store.get("1", 0) == "OFF"
        assert store.get("1", 1) == "7AM-3PM"
        assert store.get("1", 5) == ""
        assert store.get("2", 6) == "g"

    def test_merge_keeps_other_employees(self, pipeline, store):
        """Test that employees not in the file keep their shifts."""
        roster = default_roster()
        store.set("4", 2, "kept")
        text = "\n".join([
            HEADER,
            "Frank Gmelin,OFF,,,,,,",
            "Patrica Garden,OFF,,,,,,",
            "Dawn Waddel,OFF,,,,,,",
        ])
        staged(pipeline, text)
        pipeline.confirm(store, roster)

        assert store.get("4", 2) == "kept"

    def test_rejected_import_leaves_store(self, pipeline, store):
        """Test that a rejected file cannot be committed."""
        store.set("1", 0, "9AM-5PM")
        staged(pipeline, HEADER + "\nFrank Gmelin,OFF,OFF,OFF,OFF,OFF,OFF,OFF")

        with pytest.raises(ImportStateError):
            pipeline.confirm(store, default_roster())
        assert store.snapshot() == {("1", 0): "9AM-5PM"}

    def test_cancel_before_confirm(self, pipeline, store):
        """Test that cancelling the preview discards it."""
        staged(pipeline, WEEK_CSV)
        pipeline.cancel()

        assert pipeline.preview == []
        with pytest.raises(ImportStateError):
            pipeline.confirm(store, default_roster())
        assert len(store) == 0
