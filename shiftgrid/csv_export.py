"""
CSV export of the visible week.

Exports are a pure read of the roster, the week anchor and the store. The
resulting text is handed to a save collaborator (save_export() for the CLI,
a file dialog in the desktop grid).
"""

from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import List, Optional

from .csv_schema import CSVSchema
from .logging_utils import get_logger
from .models import DAYS_PER_WEEK
from .roster import Roster
from .shift_store import ShiftStore

logger = get_logger('csv_export')

FORMATS = ('csv', 'excel', 'pdf')
DATE_RANGES = ('current', 'all', 'custom')


class CSVExportError(Exception):
    """Raised when an export cannot be written."""
    pass


class ExportOptionsError(ValueError):
    """Raised for export options that have no defined output."""
    pass


@dataclass
class ExportOptions:
    """
    Options of an export request.

    Attributes:
        format: 'csv', 'excel' or 'pdf'
        include_header: Whether the header row is written
        include_audit: Whether change history is appended
        date_range: 'current', 'all' or 'custom'

    Only CSV of the current week, with or without header, is produced;
    every other combination is rejected by validate().
    """
    format: str = 'csv'
    include_header: bool = True
    include_audit: bool = False
    date_range: str = 'current'

    def validate(self):
        """
        Raises:
            ExportOptionsError: If the options ask for an unsupported output
        """
        if self.format not in FORMATS:
            raise ExportOptionsError(f"Unknown export format: {self.format}")
        if self.date_range not in DATE_RANGES:
            raise ExportOptionsError(f"Unknown date range: {self.date_range}")

        if self.format != 'csv':
            raise ExportOptionsError(f"Export format '{self.format}' is not supported")
        if self.date_range != 'current':
            raise ExportOptionsError(
                f"Date range '{self.date_range}' is not supported; only the current week can be exported"
            )
        if self.include_audit:
            raise ExportOptionsError("Exporting the audit trail is not supported")


def build_rows(
    roster: Roster,
    anchor: date,
    store: ShiftStore,
    include_header: bool = True,
) -> List[List[str]]:
    """
    Build the export rows of a week.

    Returns:
        Optional header row, then one row per employee in roster order
    """
    rows = []
    if include_header:
        rows.append(CSVSchema.header_row(anchor))

    for employee in roster:
        rows.append(
            [employee.name]
            + [store.get(employee.employee_id, day) for day in range(DAYS_PER_WEEK)]
        )

    return rows


def serialize_rows(rows: List[List[str]]) -> str:
    """
    Serialize rows: every cell quoted, cells joined by ",", rows by "\\n".

    Examples:
        >>> serialize_rows([['Name', 'Saturday 01/13'], ['Frank Gmelin', 'OFF']])
        '"Name","Saturday 01/13"\\n"Frank Gmelin","OFF"'
    """
    return CSVSchema.LINE_SEPARATOR.join(
        CSVSchema.DELIMITER.join(CSVSchema.quote(cell) for cell in row)
        for row in rows
    )


def export_csv(
    roster: Roster,
    anchor: date,
    store: ShiftStore,
    options: Optional[ExportOptions] = None,
) -> str:
    """
    Export the week as CSV text.

    Raises:
        ExportOptionsError: If the options are not supported
    """
    options = options or ExportOptions()
    options.validate()

    rows = build_rows(roster, anchor, store, include_header=options.include_header)
    logger.debug(f"Exporting {len(roster)} employee row(s) for week of {anchor.isoformat()}")
    return serialize_rows(rows)


def export_filename(anchor: date) -> str:
    """Suggested file name for a week's export, e.g. schedule_2024-01-13.csv."""
    return f"schedule_{anchor.isoformat()}.csv"


def save_export(text: str, output_path: str, force: bool = False) -> Path:
    """
    Write exported text to disk.

    Args:
        text: Exported CSV text
        output_path: Destination file
        force: Whether to overwrite an existing file

    Returns:
        Absolute path of the written file

    Raises:
        CSVExportError: If the file exists and force is False, or writing fails
    """
    path = Path(output_path)
    if path.exists() and not force:
        raise CSVExportError(
            f"Output file already exists: {output_path}. Use --force to overwrite."
        )

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        # newline='' keeps the "\n" row separator on every platform
        with open(path, 'w', encoding=CSVSchema.ENCODING, newline='') as f:
            f.write(text)
    except OSError as e:
        raise CSVExportError(f"Failed to write CSV file: {e}")

    logger.info(f"Saved export to {path}")
    return path.absolute()
