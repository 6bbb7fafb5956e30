"""
Per-cell edit state machine.

At most one cell of the grid is being edited at a time. While editing, the
typed text lives in a draft; the store only changes when the edit commits.

States:
    Idle                 no cell is being edited
    Editing(key, draft)  one cell is being edited

Transitions:
    start_edit(key)  Idle -> Editing(key, stored text)
    type(text)       Editing -> Editing(key, text)
    commit()         Editing -> Idle, stored text = draft
    cancel()         Editing -> Idle, store untouched
"""

from enum import Enum
from typing import Optional

from .logging_utils import get_logger
from .models import CellCategory, ShiftKey, categorize
from .shift_store import ShiftStore, UnknownEmployeeError

logger = get_logger('edit_session')


class EditState(Enum):
    IDLE = 'idle'
    EDITING = 'editing'


class EditStateError(Exception):
    """Raised when an edit operation is not valid in the current state."""
    pass


class CellEditSession:
    """
    Edit state of the grid.

    Attributes:
        store: Store that edits commit into
        max_length: Longest draft accepted; longer input is truncated
    """

    def __init__(self, store: ShiftStore, max_length: int = 50):
        self.store = store
        self.max_length = max_length
        self._key: Optional[ShiftKey] = None
        self._draft = ''
        self._original = ''

    @property
    def state(self) -> EditState:
        return EditState.IDLE if self._key is None else EditState.EDITING

    @property
    def is_editing(self) -> bool:
        return self._key is not None

    @property
    def editing_key(self) -> Optional[ShiftKey]:
        return self._key

    @property
    def draft(self) -> str:
        """In-progress text of the editing cell ("" when idle)."""
        return self._draft

    @property
    def original(self) -> str:
        """Stored text of the editing cell when the edit started."""
        return self._original

    @property
    def is_dirty(self) -> bool:
        return self.is_editing and self._draft != self._original

    def start_edit(self, key: ShiftKey):
        """
        Start editing a cell.

        Does nothing if that cell is already being edited. An edit in
        progress on another cell is committed first.

        Raises:
            UnknownEmployeeError: If the key's employee is not on the roster
        """
        key = ShiftKey(*key)
        if self._key == key:
            return

        roster = self.store.roster
        if roster is not None and not roster.contains(key.employee_id):
            raise UnknownEmployeeError(key.employee_id)

        if self._key is not None:
            self.commit()

        self._key = key
        self._original = self.store.get(key.employee_id, key.day)
        self._draft = self._original
        logger.debug(f"Editing {key.employee_id}/{key.day}")

    def type(self, text: str):
        """
        Replace the draft. The store is not touched.

        A cell holds a single line: line breaks are replaced by spaces
        before the text is cut to max_length.

        Raises:
            EditStateError: If no cell is being edited
        """
        if self._key is None:
            raise EditStateError("No cell is being edited")
        single_line = ' '.join((text or '').splitlines())
        self._draft = single_line[:self.max_length]

    def commit(self) -> Optional[ShiftKey]:
        """
        Write the draft into the store and return to idle.

        Returns:
            The committed key, or None if nothing was being edited
        """
        if self._key is None:
            return None

        key, draft = self._key, self._draft
        self._reset()
        self.store.set(key.employee_id, key.day, draft)
        return key

    def cancel(self) -> Optional[str]:
        """
        Discard the draft and return to idle. The store is untouched.

        Returns:
            The text the cell reverts to (its value when the edit started),
            or None if nothing was being edited
        """
        if self._key is None:
            return None

        logger.debug(f"Cancelled edit of {self._key.employee_id}/{self._key.day}")
        restored = self._original
        self._reset()
        return restored

    def _reset(self):
        self._key = None
        self._draft = ''
        self._original = ''

    def committed_value(self, key: ShiftKey) -> str:
        key = ShiftKey(*key)
        return self.store.get(key.employee_id, key.day)

    def display_text(self, key: ShiftKey) -> str:
        """Text a cell shows: the draft while editing it, otherwise the stored text."""
        key = ShiftKey(*key)
        if key == self._key:
            return self._draft
        return self.committed_value(key)

    def category(self) -> CellCategory:
        """
        Category of the draft.

        Raises:
            EditStateError: If no cell is being edited
        """
        if self._key is None:
            raise EditStateError("No cell is being edited")
        return categorize(self._draft)

    def display_category(self, key: ShiftKey) -> CellCategory:
        return categorize(self.display_text(key))
