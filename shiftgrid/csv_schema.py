"""
Central CSV schema definition for weekly shift files.

This module is the single source of truth for the column layout shared by
imports and exports: column 0 holds the employee name and columns 1-7 hold
the shifts for Saturday through Friday.
"""

from datetime import date
from pathlib import PurePath
from typing import List, Optional

from .models import DAYS_PER_WEEK
from .week_utils import day_header


class CSVSchema:
    """
    Defines the CSV format for a week of shifts.

    All CSV generation and parsing should use this schema.
    """

    NAME_HEADER = 'Name'
    NAME_COLUMN = 0
    FIRST_DAY_COLUMN = 1

    # Name + 7 days
    MIN_COLUMNS = 1 + DAYS_PER_WEEK
    # Header + at least one data row
    MIN_ROWS = 2

    EXTENSIONS = ('.csv',)

    # CSV format standards
    ENCODING = 'utf-8'
    READ_ENCODING = 'utf-8-sig'  # tolerate a BOM written by spreadsheet tools
    DELIMITER = ','
    QUOTE = '"'
    LINE_SEPARATOR = '\n'

    @classmethod
    def has_csv_extension(cls, filename: str) -> bool:
        """
        Check whether a file name carries a recognized CSV extension.

        Examples:
            >>> CSVSchema.has_csv_extension('week.CSV')
            True
            >>> CSVSchema.has_csv_extension('week.xlsx')
            False
        """
        if not filename:
            return False
        return PurePath(filename).suffix.lower() in cls.EXTENSIONS

    @classmethod
    def header_row(cls, anchor: date) -> List[str]:
        """
        Header row for a week: "Name" then "<DayName> <MM/DD>" per day.
        """
        return [cls.NAME_HEADER] + [day_header(anchor, day) for day in range(DAYS_PER_WEEK)]

    @classmethod
    def day_cells(cls, row: List[str]) -> List[str]:
        """
        Day columns of a data row, padded with "" up to 7 and without extras.
        """
        cells = row[cls.FIRST_DAY_COLUMN:cls.FIRST_DAY_COLUMN + DAYS_PER_WEEK]
        return cells + [''] * (DAYS_PER_WEEK - len(cells))

    @classmethod
    def validate_structure(cls, rows: List[List[str]]) -> List[str]:
        """
        Check row and header column counts.

        Args:
            rows: Parsed rows including the header

        Returns:
            Error messages; empty if the structure is valid
        """
        errors = []
        if len(rows) < cls.MIN_ROWS:
            errors.append("CSV must have at least a header row and one data row")
        if rows and len(rows[0]) < cls.MIN_COLUMNS:
            errors.append(
                f"CSV must have at least {cls.MIN_COLUMNS} columns (Name + 7 days)"
            )
        return errors

    @classmethod
    def quote(cls, cell: Optional[str]) -> str:
        """
        Quote a single cell for export.

        Embedded quotes are doubled so that cells containing quotes stay one
        cell for spreadsheet tools.
        """
        text = '' if cell is None else str(cell)
        return f'{cls.QUOTE}{text.replace(cls.QUOTE, cls.QUOTE * 2)}{cls.QUOTE}'


# Convenience constants for external use
NAME_HEADER = CSVSchema.NAME_HEADER
MIN_COLUMNS = CSVSchema.MIN_COLUMNS
ENCODING = CSVSchema.ENCODING
DELIMITER = CSVSchema.DELIMITER
