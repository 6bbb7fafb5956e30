"""
Configuration for the shift grid.

This module centralizes tunable values such as the set of employees an
imported file must contain and the cell input limit.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

DEFAULT_REQUIRED_EMPLOYEES = ['Frank Gmelin', 'Patrica Garden', 'Dawn Waddel']


@dataclass
class Config:
    """
    Application configuration.

    Attributes:
        required_employees: Names every imported CSV must list in column 0
        max_cell_length: Longest text a cell editor accepts
        roster_path: Optional roster CSV (defaults to the built-in roster)
        csv_path: CSV file to import
        output_path: Where an export is written
        week: Saturday that starts the visible week (None = current week)
        include_header: Whether exports start with the header row
        force: Whether an export may overwrite an existing file
        verbose: Whether to enable debug logging
    """
    required_employees: List[str] = field(
        default_factory=lambda: list(DEFAULT_REQUIRED_EMPLOYEES)
    )
    max_cell_length: int = 50

    # Data options
    roster_path: Optional[str] = None
    csv_path: Optional[str] = None
    output_path: Optional[str] = None
    week: Optional[date] = None

    # CLI options
    include_header: bool = True
    force: bool = False
    verbose: bool = False

    def validate(self):
        """
        Validate configuration.

        Raises:
            ValueError: If configuration is invalid
        """
        if self.max_cell_length < 1:
            raise ValueError(
                f"max_cell_length must be at least 1, got: {self.max_cell_length}"
            )

        for name in self.required_employees:
            if not name or not name.strip():
                raise ValueError("Required employee names cannot be empty")

        # date.weekday(): Monday=0 ... Saturday=5
        if self.week is not None and self.week.weekday() != 5:
            raise ValueError(
                f"Week must start on a Saturday, got: {self.week.isoformat()}"
            )


# Default configuration instance
DEFAULT_CONFIG = Config()
