"""
Change history of a session.

Every effective change to the store is recorded with the cell it touched,
the old and new text, and where it came from (a cell edit or an import).
The history lives in memory only and ends with the session.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional

from .models import CellCategory, ShiftKey, categorize
from .roster import Roster
from .week_utils import DAY_NAMES

SOURCE_EDIT = 'edit'
SOURCE_IMPORT = 'import'
SOURCE_WEEK = 'week'


@dataclass(frozen=True)
class ChangeRecord:
    """
    One entry of the change history.

    Attributes:
        action: Short description, e.g. "Set OFF"
        employee_id: Employee whose cell changed (None for whole-week actions)
        employee_name: Display name, or "All" for whole-week actions
        day: Day name or week label
        old_value: Text before the change
        new_value: Text after the change
        source: 'edit', 'import' or 'week'
        timestamp: When the change was applied
    """
    action: str
    employee_id: Optional[str]
    employee_name: str
    day: str
    old_value: str
    new_value: str
    source: str
    timestamp: datetime


def describe_change(new_value: str) -> str:
    """Action label for a cell change, based on the new text."""
    category = categorize(new_value)
    if category == CellCategory.OFF:
        return 'Set OFF'
    if category == CellCategory.EMPTY:
        return 'Cleared shift'
    return 'Updated shift'


class ChangeHistory:
    """
    Append-only list of ChangeRecord, newest last.

    Attributes:
        source: Source stamped on cell changes until changed
    """

    def __init__(self, roster: Roster, clock: Callable[[], datetime] = datetime.now):
        self.roster = roster
        self.clock = clock
        self.source = SOURCE_EDIT
        self._records: List[ChangeRecord] = []

    @property
    def records(self) -> List[ChangeRecord]:
        return list(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def record_cell(self, key: ShiftKey, old: str, new: str):
        """Store listener: record one cell change."""
        employee = self.roster.get(key.employee_id)
        self._records.append(ChangeRecord(
            action=describe_change(new),
            employee_id=key.employee_id,
            employee_name=employee.name if employee else key.employee_id,
            day=DAY_NAMES[key.day],
            old_value=old,
            new_value=new,
            source=self.source,
            timestamp=self.clock(),
        ))

    def record_new_week(self, week_label: str):
        self._records.append(ChangeRecord(
            action='Created new week',
            employee_id=None,
            employee_name='All',
            day=week_label,
            old_value='',
            new_value='New week template',
            source=SOURCE_WEEK,
            timestamp=self.clock(),
        ))

    def for_employee(self, employee_id: str) -> List[ChangeRecord]:
        return [r for r in self._records if r.employee_id == employee_id]

    def format_history(self) -> str:
        """
        Format the history as a human-readable string, newest first.
        """
        if not self._records:
            return "No changes recorded."

        lines = []
        for record in reversed(self._records):
            change = f"'{record.old_value}' -> '{record.new_value}'"
            lines.append(
                f"{record.timestamp:%Y-%m-%d %H:%M:%S}  {record.action:<16} "
                f"{record.employee_name} ({record.day}): {change} [{record.source}]"
            )
        return "\n".join(lines)
