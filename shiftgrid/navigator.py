"""
Keyboard navigation over the shift grid.

next_focus() is the pure movement rule. GridController applies it to a
live grid: it owns the focused cell and routes commands to either the
navigator or the edit session.
"""

from enum import Enum
from typing import NamedTuple, Optional

from .edit_session import CellEditSession
from .logging_utils import get_logger
from .models import DAYS_PER_WEEK, ShiftKey
from .roster import Roster

logger = get_logger('navigator')


class NavCommand(Enum):
    UP = 'up'
    DOWN = 'down'
    LEFT = 'left'
    RIGHT = 'right'
    ADVANCE = 'advance'  # Tab
    ENTER = 'enter'


# Key names as reported by browsers and by Qt (Qt.Key_* without the prefix)
KEY_COMMANDS = {
    'arrowup': NavCommand.UP,
    'up': NavCommand.UP,
    'arrowdown': NavCommand.DOWN,
    'down': NavCommand.DOWN,
    'arrowleft': NavCommand.LEFT,
    'left': NavCommand.LEFT,
    'arrowright': NavCommand.RIGHT,
    'right': NavCommand.RIGHT,
    'tab': NavCommand.ADVANCE,
    'enter': NavCommand.ENTER,
    'return': NavCommand.ENTER,
}


def key_to_command(key_name: str) -> Optional[NavCommand]:
    """
    Map a key name to a navigation command.

    Returns:
        The command, or None for keys the grid does not handle

    Examples:
        >>> key_to_command('ArrowLeft')
        <NavCommand.LEFT: 'left'>
        >>> key_to_command('Tab')
        <NavCommand.ADVANCE: 'advance'>
    """
    return KEY_COMMANDS.get((key_name or '').strip().lower())


class GridBounds(NamedTuple):
    employee_count: int
    day_count: int = DAYS_PER_WEEK


class Focus(NamedTuple):
    employee_index: int
    day: int


def next_focus(current: Focus, command: NavCommand, bounds: GridBounds) -> Focus:
    """
    Compute the cell focused after a command.

    Moves clamp at the grid edges; there is no wraparound. ENTER does not
    move focus.

    Args:
        current: Focused (employee_index, day)
        command: Navigation command
        bounds: Grid size

    Returns:
        Newly focused (employee_index, day)
    """
    employee_index, day = current
    last_row = max(0, bounds.employee_count - 1)
    last_day = bounds.day_count - 1

    if command == NavCommand.UP:
        employee_index = max(0, employee_index - 1)
    elif command == NavCommand.DOWN:
        employee_index = min(last_row, employee_index + 1)
    elif command == NavCommand.LEFT:
        day = max(0, day - 1)
    elif command in (NavCommand.RIGHT, NavCommand.ADVANCE):
        day = min(last_day, day + 1)

    return Focus(employee_index, day)


class GridController:
    """
    Focus and keyboard handling for one grid.

    While a cell is being edited the editor captures the keyboard: only
    ADVANCE (commit, then move right) and ENTER (commit) are acted on.
    """

    def __init__(self, roster: Roster, edit_session: CellEditSession):
        self.roster = roster
        self.edit_session = edit_session
        self.focus = Focus(0, 0)

    @property
    def bounds(self) -> GridBounds:
        return GridBounds(len(self.roster))

    def focused_key(self) -> Optional[ShiftKey]:
        """Key of the focused cell, or None when the roster is empty."""
        if len(self.roster) == 0:
            return None
        employee = self.roster.by_index(self.focus.employee_index)
        return ShiftKey(employee.employee_id, self.focus.day)

    def handle(self, command: NavCommand) -> Focus:
        """
        Apply a navigation command.

        Returns:
            The focused cell after the command
        """
        if self.edit_session.is_editing:
            if command == NavCommand.ADVANCE:
                self.edit_session.commit()
                self.focus = next_focus(self.focus, command, self.bounds)
            elif command == NavCommand.ENTER:
                self.edit_session.commit()
            else:
                logger.debug(f"Ignoring {command.value} while editing")
            return self.focus

        if command == NavCommand.ENTER:
            key = self.focused_key()
            if key is not None:
                self.edit_session.start_edit(key)
            return self.focus

        self.focus = next_focus(self.focus, command, self.bounds)
        return self.focus

    def handle_key(self, key_name: str) -> bool:
        """
        Apply a key press by name.

        Returns:
            True if the key was handled by the grid
        """
        command = key_to_command(key_name)
        if command is None:
            return False
        self.handle(command)
        return True

    def escape(self) -> Optional[str]:
        """Cancel the edit in progress, if any."""
        return self.edit_session.cancel()

    def focus_cell(self, employee_index: int, day: int) -> Focus:
        """
        Move focus to a cell, e.g. on click.

        An edit on another cell loses focus and is committed.
        """
        target = Focus(
            max(0, min(employee_index, len(self.roster) - 1)),
            max(0, min(day, DAYS_PER_WEEK - 1)),
        )
        self.focus = target
        if self.edit_session.is_editing and self.edit_session.editing_key != self.focused_key():
            self.edit_session.commit()
        return self.focus

    def double_activate(self, employee_index: int, day: int) -> Optional[ShiftKey]:
        """Focus a cell and start editing it (double-click)."""
        self.focus_cell(employee_index, day)
        key = self.focused_key()
        if key is not None:
            self.edit_session.start_edit(key)
        return key
