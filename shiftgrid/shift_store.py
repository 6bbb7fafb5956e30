"""
In-memory store of shift text, keyed by employee and day.

The store is the single source of truth for grid content during a session.
Nothing is persisted.
"""

from typing import Callable, Dict, Iterable, Iterator, List, Optional, Tuple

from .logging_utils import get_logger
from .models import ShiftKey
from .roster import Roster
from .week_utils import validate_day_index

logger = get_logger('shift_store')

ChangeListener = Callable[[ShiftKey, str, str], None]


class UnknownEmployeeError(KeyError):
    """Raised when a shift key references an employee not on the roster."""
    pass


class ShiftStore:
    """
    Mapping of ShiftKey to shift text.

    When bound to a roster, every key must reference a roster employee.
    Iteration order carries no meaning; the grid is laid out by roster order
    and day index.
    """

    def __init__(self, roster: Optional[Roster] = None):
        self.roster = roster
        self._shifts: Dict[ShiftKey, str] = {}
        self._listeners: List[ChangeListener] = []

    def on_change(self, listener: ChangeListener):
        """
        Register a callback invoked as listener(key, old, new) on every
        effective change.
        """
        self._listeners.append(listener)

    def get(self, employee_id: str, day: int) -> str:
        """Shift text of a cell, or "" when none was set."""
        return self._shifts.get(ShiftKey(employee_id, day), '')

    def set(self, employee_id: str, day: int, text: str) -> str:
        """
        Insert or overwrite the text of a cell.

        Args:
            employee_id: Roster employee id
            day: Day index (0=Saturday ... 6=Friday)
            text: Shift text; stored as given

        Returns:
            The previous text of the cell ("" if it was unset)

        Raises:
            ValueError: If the day index is out of range
            UnknownEmployeeError: If the store has a roster and the
                employee is not on it
        """
        validate_day_index(day)
        if self.roster is not None and not self.roster.contains(employee_id):
            raise UnknownEmployeeError(employee_id)

        key = ShiftKey(employee_id, day)
        old = self._shifts.get(key, '')
        self._shifts[key] = text

        if old != text:
            logger.debug(f"Set {employee_id}/{day}: '{old}' -> '{text}'")
            for listener in self._listeners:
                listener(key, old, text)

        return old

    def bulk_replace(self, entries: Iterable[Tuple[str, int, str]]) -> int:
        """
        Apply a batch of (employee_id, day, text) entries in order.

        Entries for employees not on the roster are skipped. Cells not in
        the batch keep their current text.

        Returns:
            Number of entries applied
        """
        applied = 0
        for employee_id, day, text in entries:
            if self.roster is not None and not self.roster.contains(employee_id):
                logger.debug(f"Skipping entry for unknown employee '{employee_id}'")
                continue
            self.set(employee_id, day, text)
            applied += 1
        return applied

    def clear(self):
        """Remove every entry. Listeners are not notified."""
        self._shifts.clear()

    def snapshot(self) -> Dict[ShiftKey, str]:
        """Copy of the current contents."""
        return dict(self._shifts)

    def items(self) -> Iterator[Tuple[ShiftKey, str]]:
        return iter(list(self._shifts.items()))

    def __len__(self) -> int:
        return len(self._shifts)

    def __contains__(self, key) -> bool:
        return ShiftKey(*key) in self._shifts
