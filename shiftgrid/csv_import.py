"""
CSV import pipeline for weekly shift files.

An import runs in stages:

    AWAITING_FILE --select_file--> READING --deliver--> PREVIEW --confirm--> COMMITTED
                                      |                    |
                                      +--(errors)----------+--cancel--> AWAITING_FILE

Validation errors never raise: they are collected and returned together so
that the user can fix the file and pick it again. The store is only touched
by confirm().
"""

import csv
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Sequence

from .csv_schema import CSVSchema
from .logging_utils import get_logger
from .models import ErrorCause, ImportSummary, ImportValidationError
from .roster import Roster
from .shift_store import ShiftStore

logger = get_logger('csv_import')


class ImportStage(Enum):
    AWAITING_FILE = 'awaiting-file'
    READING = 'reading'
    PREVIEW = 'preview'
    COMMITTED = 'committed'


class ImportStateError(Exception):
    """Raised when an import step is requested in the wrong stage."""
    pass


@dataclass
class ImportResult:
    """
    Outcome of reading and validating one file.

    Attributes:
        filename: Name of the file the rows came from
        rows: Parsed rows, header first (empty if the file was not parsed)
        errors: Every validation error, in the order found
    """
    filename: str
    rows: List[List[str]] = field(default_factory=list)
    errors: List[ImportValidationError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def header(self) -> List[str]:
        return self.rows[0] if self.rows else []

    @property
    def data_rows(self) -> List[List[str]]:
        return self.rows[1:]

    def messages(self) -> List[str]:
        return [error.message for error in self.errors]


def parse_csv_text(text: str) -> List[List[str]]:
    """
    Parse CSV text into rows of trimmed cells.

    Each non-blank line is one row. Cells may be quoted, so files written by the
    exporter read back cell for cell.

    Args:
        text: Full file content

    Returns:
        Rows in file order

    Examples:
        >>> parse_csv_text('Name,Saturday\\n\\n Frank , OFF \\n')
        [['Name', 'Saturday'], ['Frank', 'OFF']]
        >>> parse_csv_text('"Name","Sat 01/13"')
        [['Name', 'Sat 01/13']]
    """
    rows = []
    for line in (text or '').splitlines():
        if not line.strip():
            continue
        # One reader per line: an unbalanced quote must not swallow later rows
        cells = next(csv.reader([line], delimiter=CSVSchema.DELIMITER, skipinitialspace=True))
        rows.append([cell.strip() for cell in cells])
    return rows


def validate_rows(
    rows: List[List[str]],
    required_employees: Sequence[str],
) -> List[ImportValidationError]:
    """
    Validate parsed rows.

    Structure is checked first (row count, header width), then every
    required employee must appear in column 0 of some data row. All
    problems are reported, one error per missing employee.

    Args:
        rows: Parsed rows including the header
        required_employees: Names that must be present

    Returns:
        Validation errors; empty if the rows are importable
    """
    errors = [
        ImportValidationError(message, ErrorCause.STRUCTURE)
        for message in CSVSchema.validate_structure(rows)
    ]

    present = {row[CSVSchema.NAME_COLUMN] for row in rows[1:] if row}
    for name in required_employees:
        if name not in present:
            errors.append(ImportValidationError(
                f"Missing required employee: {name}",
                ErrorCause.MISSING_EMPLOYEE,
            ))

    return errors


class CsvImportPipeline:
    """
    Reads, validates, stages and commits a CSV file into a ShiftStore.

    Reading is the one asynchronous step: select_file() hands out a ticket
    and the reader later calls deliver() (or deliver_failure()) with it. A
    newer selection or cancel() makes older tickets stale, and stale
    deliveries are dropped.
    """

    def __init__(self, required_employees: Sequence[str] = ()):
        self.required_employees = list(required_employees)
        self.stage = ImportStage.AWAITING_FILE
        self.filename: Optional[str] = None
        self.result: Optional[ImportResult] = None
        self._ticket = 0
        self._pending: Optional[int] = None

    @property
    def preview(self) -> List[List[str]]:
        """Rows staged for confirmation (empty unless in PREVIEW)."""
        if self.stage != ImportStage.PREVIEW or self.result is None:
            return []
        return self.result.rows

    @property
    def errors(self) -> List[ImportValidationError]:
        return self.result.errors if self.result else []

    def select_file(self, filename: str) -> Optional[int]:
        """
        Start importing a file.

        Args:
            filename: Name of the selected or dropped file

        Returns:
            Ticket to pass to deliver(), or None if the file was rejected
            because it is not a CSV file
        """
        self._discard()
        self.filename = filename

        if not CSVSchema.has_csv_extension(filename):
            logger.debug(f"Rejected '{filename}': not a CSV file")
            self.result = ImportResult(filename, errors=[
                ImportValidationError("Please select a CSV file", ErrorCause.STRUCTURE)
            ])
            return None

        self._ticket += 1
        self._pending = self._ticket
        self.stage = ImportStage.READING
        return self._ticket

    def deliver(self, ticket: int, text: str) -> Optional[ImportResult]:
        """
        Receive the full content of a selected file and validate it.

        Returns:
            The validation result, or None if the ticket is stale
        """
        if not self._accepts(ticket):
            return None
        self._pending = None

        rows = parse_csv_text(text)
        errors = validate_rows(rows, self.required_employees)
        self.result = ImportResult(self.filename or '', rows=rows, errors=errors)

        if errors:
            logger.info(f"Rejected '{self.filename}' with {len(errors)} error(s)")
            self.stage = ImportStage.AWAITING_FILE
        else:
            logger.info(
                f"Validated '{self.filename}': {len(rows) - 1} data row(s) staged for preview"
            )
            self.stage = ImportStage.PREVIEW

        return self.result

    def deliver_failure(self, ticket: int, message: str) -> Optional[ImportResult]:
        """
        Receive a read failure for a selected file.

        Returns:
            The rejected result, or None if the ticket is stale
        """
        if not self._accepts(ticket):
            return None
        self._pending = None

        self.result = ImportResult(self.filename or '', errors=[
            ImportValidationError(f"Failed to read file: {message}", ErrorCause.READ_FAILURE)
        ])
        self.stage = ImportStage.AWAITING_FILE
        return self.result

    def load_path(self, file_path: str) -> ImportResult:
        """
        Select, read and validate a file from disk in one step.

        Args:
            file_path: Path to the CSV file

        Returns:
            The validation result
        """
        path = Path(file_path)
        ticket = self.select_file(path.name)
        if ticket is None:
            return self.result

        try:
            text = path.read_text(encoding=CSVSchema.READ_ENCODING)
        except (OSError, UnicodeDecodeError) as e:
            return self.deliver_failure(ticket, str(e))

        return self.deliver(ticket, text)

    def confirm(self, store: ShiftStore, roster: Roster) -> ImportSummary:
        """
        Commit the staged rows into the store.

        Rows are matched to the roster by exact name; rows with no match are
        skipped. Matched rows set all seven days, missing columns as "".
        Cells of employees not in the file keep their values.

        Raises:
            ImportStateError: If no validated preview is staged
        """
        if self.stage != ImportStage.PREVIEW or self.result is None:
            raise ImportStateError("No validated import is waiting for confirmation")

        summary = ImportSummary()
        entries = []
        for row in self.result.data_rows:
            name = row[CSVSchema.NAME_COLUMN] if row else ''
            employee = roster.find_by_name(name)
            if employee is None:
                logger.debug(f"Ignoring row for '{name}': not on the roster")
                summary.ignored_names.append(name)
                continue

            summary.rows_applied += 1
            for day, text in enumerate(CSVSchema.day_cells(row)):
                entries.append((employee.employee_id, day, text))

        summary.cells_written = store.bulk_replace(entries)
        self.stage = ImportStage.COMMITTED
        logger.info(
            f"Imported '{self.filename}': {summary.rows_applied} row(s), "
            f"{summary.cells_written} cell(s)"
        )
        return summary

    def cancel(self):
        """Abandon the current import. The store is untouched."""
        self._discard()

    def _accepts(self, ticket: int) -> bool:
        if self._pending is None or ticket != self._pending:
            logger.debug(f"Dropping stale read result (ticket {ticket})")
            return False
        return True

    def _discard(self):
        self._pending = None
        self.result = None
        self.filename = None
        self.stage = ImportStage.AWAITING_FILE
