"""
Session state of one open shift grid.

A ScheduleSession owns everything that changes while the grid is open: the
visible week, the shift store, the edit state, keyboard focus, the import
in progress and the change history. It is created when the grid opens and
discarded when it closes; nothing is kept between sessions.
"""

from datetime import date
from typing import List, Optional

from .config import Config
from .csv_export import ExportOptions, export_csv, export_filename
from .csv_import import CsvImportPipeline, ImportResult
from .edit_session import CellEditSession
from .history import SOURCE_EDIT, SOURCE_IMPORT, ChangeHistory
from .logging_utils import get_logger
from .models import DAYS_PER_WEEK, CellCategory, ImportSummary
from .navigator import GridController
from .roster import Roster, default_roster
from .shift_store import ShiftStore
from .week_utils import current_week_start, format_week_range, shift_week, week_start_for

logger = get_logger('session')


class ScheduleSession:
    """
    One grid session.

    Args:
        roster: Employees shown as rows (defaults to the built-in roster)
        config: Configuration (defaults to Config())
        week: Any date in the week to show first (defaults to today)
    """

    def __init__(
        self,
        roster: Optional[Roster] = None,
        config: Optional[Config] = None,
        week: Optional[date] = None,
    ):
        self.config = config if config is not None else Config()
        self.config.validate()

        self.roster = roster if roster is not None else default_roster()
        self.week_anchor = week_start_for(week) if week else current_week_start()

        self.store = ShiftStore(self.roster)
        self.history = ChangeHistory(self.roster)
        self.store.on_change(self.history.record_cell)

        self.edit_session = CellEditSession(self.store, max_length=self.config.max_cell_length)
        self.controller = GridController(self.roster, self.edit_session)
        self.importer = CsvImportPipeline(self.config.required_employees)

    # Week navigation

    @property
    def week_label(self) -> str:
        return format_week_range(self.week_anchor)

    def previous_week(self) -> date:
        return self._move_to(shift_week(self.week_anchor, -1))

    def next_week(self) -> date:
        return self._move_to(shift_week(self.week_anchor, 1))

    def current_week(self, today: Optional[date] = None) -> date:
        return self._move_to(current_week_start(today))

    def new_week(self) -> date:
        """
        Start an empty grid for the week after the visible one.
        """
        anchor = self._move_to(shift_week(self.week_anchor, 1))
        self.store.clear()
        self.history.record_new_week(f"Week of {anchor.strftime('%m/%d')}")
        logger.info(f"Created new week starting {anchor.isoformat()}")
        return anchor

    def _move_to(self, anchor: date) -> date:
        self.edit_session.commit()
        self.week_anchor = anchor
        logger.debug(f"Showing week of {anchor.isoformat()}")
        return anchor

    # Import / export

    def import_file(self, file_path: str) -> ImportResult:
        """Read and validate a CSV file, staging it for confirmation."""
        return self.importer.load_path(file_path)

    def confirm_import(self) -> ImportSummary:
        """
        Commit the staged import.

        A live edit is committed first so that imported values win.
        """
        self.edit_session.commit()
        self.history.source = SOURCE_IMPORT
        try:
            return self.importer.confirm(self.store, self.roster)
        finally:
            self.history.source = SOURCE_EDIT

    def cancel_import(self):
        self.importer.cancel()

    def export(self, options: Optional[ExportOptions] = None) -> str:
        """Export the visible week as CSV text (committed values only)."""
        return export_csv(self.roster, self.week_anchor, self.store, options)

    def export_filename(self) -> str:
        return export_filename(self.week_anchor)

    # Grid content

    def grid(self) -> List[List[str]]:
        """Committed text of every cell, one row per employee in roster order."""
        return [
            [self.store.get(employee.employee_id, day) for day in range(DAYS_PER_WEEK)]
            for employee in self.roster
        ]

    def categories(self) -> List[List[CellCategory]]:
        """Display category of every cell, reflecting a live draft."""
        return [
            [self.edit_session.display_category((employee.employee_id, day))
             for day in range(DAYS_PER_WEEK)]
            for employee in self.roster
        ]

    def close(self):
        """
        End the session. A live edit is discarded and all state released.
        """
        self.edit_session.cancel()
        self.importer.cancel()
        self.store.clear()
        logger.debug("Session closed")
