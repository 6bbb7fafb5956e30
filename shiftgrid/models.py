"""
Data models for the shift grid.

This module defines the records shared by the store, the editor, and the
CSV pipelines: employees, shift keys, derived cell categories, and the
validation and summary records returned by an import.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, NamedTuple

DAYS_PER_WEEK = 7
OFF_MARKER = 'OFF'


@dataclass(frozen=True)
class Employee:
    """
    A roster member. Immutable for the life of a session.

    Attributes:
        employee_id: Unique identifier (e.g., "1")
        name: Display name, also the key matched by CSV imports
        order: Position of the employee's row in the grid
        is_static: Whether the employee is a fixed member of the roster
    """
    employee_id: str
    name: str
    order: int
    is_static: bool = True

    def __post_init__(self):
        """Validate identifier and name are not empty."""
        if not self.employee_id or not self.employee_id.strip():
            raise ValueError("Employee id cannot be empty")
        if not self.name or not self.name.strip():
            raise ValueError("Employee name cannot be empty")

    @property
    def initials(self) -> str:
        """Initials shown next to the name in the grid."""
        return ''.join(part[0] for part in self.name.split() if part)


class ShiftKey(NamedTuple):
    """Identity of one grid cell: an employee and a day index (0=Saturday)."""
    employee_id: str
    day: int


class CellCategory(Enum):
    """Display category of a cell, derived from its text."""
    OFF = 'off'
    SHIFT = 'shift'
    EMPTY = 'empty'


def categorize(text: str) -> CellCategory:
    """
    Derive the display category of a cell's text.

    Args:
        text: Committed or draft cell text

    Returns:
        OFF for the day-off marker, EMPTY for blank text, SHIFT otherwise

    Examples:
        >>> categorize(' off ')
        <CellCategory.OFF: 'off'>
        >>> categorize('7AM-3PM')
        <CellCategory.SHIFT: 'shift'>
        >>> categorize('   ')
        <CellCategory.EMPTY: 'empty'>
    """
    normalized = (text or '').strip()
    if normalized.upper() == OFF_MARKER:
        return CellCategory.OFF
    if normalized:
        return CellCategory.SHIFT
    return CellCategory.EMPTY


class ErrorCause(Enum):
    """Why an import was rejected."""
    STRUCTURE = 'structure'
    MISSING_EMPLOYEE = 'missing-employee'
    READ_FAILURE = 'read-failure'


@dataclass(frozen=True)
class ImportValidationError:
    """
    One reason an import was rejected.

    Attributes:
        message: Human-readable description
        cause: Category of the problem
    """
    message: str
    cause: ErrorCause

    def __str__(self) -> str:
        return self.message


@dataclass
class ImportSummary:
    """
    Outcome of committing a staged import.

    Attributes:
        rows_applied: Data rows matched to a roster employee
        cells_written: Cells set in the store (7 per applied row)
        ignored_names: Names in column 0 with no roster match
    """
    rows_applied: int = 0
    cells_written: int = 0
    ignored_names: List[str] = field(default_factory=list)

    def format_summary(self) -> str:
        """
        Format the summary as a human-readable string.

        Returns:
            Formatted summary text
        """
        lines = [
            "\n" + "=" * 60,
            "IMPORT SUMMARY",
            "=" * 60,
            f"  Rows applied: {self.rows_applied}",
            f"  Cells written: {self.cells_written}",
            f"  Rows ignored: {len(self.ignored_names)}",
        ]

        if self.ignored_names:
            lines.append("\nNames not on the roster:")
            for name in self.ignored_names:
                lines.append(f"  - {name}")

        lines.append("=" * 60 + "\n")
        return "\n".join(lines)
