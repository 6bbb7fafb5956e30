"""
Tests for keyboard navigation.
"""

import itertools

import pytest

from shiftgrid.edit_session import CellEditSession
from shiftgrid.navigator import (
    Focus,
    GridBounds,
    GridController,
    NavCommand,
    key_to_command,
    next_focus,
)
from shiftgrid.roster import Roster, default_roster
from shiftgrid.shift_store import ShiftStore

BOUNDS = GridBounds(employee_count=6)


class TestNextFocus:
    """Tests for the pure next_focus function."""

    def test_moves(self):
        """Test each direction from the middle of the grid."""
        start = Focus(2, 3)
        assert next_focus(start, NavCommand.UP, BOUNDS) == Focus(1, 3)
        assert next_focus(start, NavCommand.DOWN, BOUNDS) == Focus(3, 3)
        assert next_focus(start, NavCommand.LEFT, BOUNDS) == Focus(2, 2)
        assert next_focus(start, NavCommand.RIGHT, BOUNDS) == Focus(2, 4)
        assert next_focus(start, NavCommand.ADVANCE, BOUNDS) == Focus(2, 4)

    def test_enter_does_not_move(self):
        """Test that Enter keeps focus in place."""
        assert next_focus(Focus(2, 3), NavCommand.ENTER, BOUNDS) == Focus(2, 3)

    def test_clamps_at_edges(self):
        """Test that moves stop at the grid edges without wrapping."""
        assert next_focus(Focus(0, 0), NavCommand.UP, BOUNDS) == Focus(0, 0)
        assert next_focus(Focus(0, 0), NavCommand.LEFT, BOUNDS) == Focus(0, 0)
        assert next_focus(Focus(5, 6), NavCommand.DOWN, BOUNDS) == Focus(5, 6)
        assert next_focus(Focus(5, 6), NavCommand.RIGHT, BOUNDS) == Focus(5, 6)
        assert next_focus(Focus(5, 6), NavCommand.ADVANCE, BOUNDS) == Focus(5, 6)

    def test_right_seven_times_clamps_at_friday(self):
        """Test that the 6th Right reaches day 6 and the 7th is a no-op."""
        focus = Focus(0, 0)
        positions = []
        for _ in range(7):
            focus = next_focus(focus, NavCommand.RIGHT, BOUNDS)
            positions.append(focus.day)

        assert positions == [1, 2, 3, 4, 5, 6, 6]

    def test_never_leaves_grid(self):
        """Test every command from every cell stays within bounds."""
        for row, day, command in itertools.product(range(6), range(7), NavCommand):
            result = next_focus(Focus(row, day), command, BOUNDS)
            assert 0 <= result.employee_index <= 5
            assert 0 <= result.day <= 6

    def test_single_row_grid(self):
        """Test that a one-employee grid never moves vertically."""
        bounds = GridBounds(employee_count=1)
        assert next_focus(Focus(0, 2), NavCommand.DOWN, bounds) == Focus(0, 2)


class TestKeyToCommand:
    """Tests for key name mapping."""

    @pytest.mark.parametrize("key,command", [
        ("ArrowUp", NavCommand.UP),
        ("Down", NavCommand.DOWN),
        ("ArrowLeft", NavCommand.LEFT),
        ("Right", NavCommand.RIGHT),
        ("Tab", NavCommand.ADVANCE),
        ("Enter", NavCommand.ENTER),
        ("Return", NavCommand.ENTER),
    ])
    def test_known_keys(self, key, command):
        """Test supported key names."""
        assert key_to_command(key) == command

    def test_unknown_key(self):
        """Test that other keys are not handled."""
        assert key_to_command("Escape") is None
        assert key_to_command("") is None


@pytest.fixture
def store():
    return ShiftStore(default_roster())


@pytest.fixture
def controller(store):
    roster = store.roster
    return GridController(roster, CellEditSession(store))


class TestGridController:
    """Tests for GridController."""

    def test_arrow_moves_focus(self, controller):
        """Test that arrows move focus while idle."""
        controller.handle(NavCommand.DOWN)
        controller.handle(NavCommand.RIGHT)
        assert controller.focus == Focus(1, 1)
        assert controller.focused_key() == ("2", 1)

    def test_enter_starts_edit(self, controller):
        """Test that Enter edits the focused cell without moving."""
        controller.handle(NavCommand.DOWN)
        controller.handle(NavCommand.ENTER)

        assert controller.focus == Focus(1, 0)
        assert controller.edit_session.editing_key == ("2", 0)

    def test_navigation_ignored_while_editing(self, controller):
        """Test that arrows do nothing while a cell is being edited."""
        controller.handle(NavCommand.ENTER)
        for command in (NavCommand.UP, NavCommand.DOWN, NavCommand.LEFT, NavCommand.RIGHT):
            controller.handle(command)

        assert controller.focus == Focus(0, 0)
        assert controller.edit_session.is_editing

    def test_tab_commits_then_moves(self, controller, store):
        """Test that Tab from an edit commits the draft, then moves right."""
        controller.handle(NavCommand.ENTER)
        controller.edit_session.type("OFF")
        controller.handle(NavCommand.ADVANCE)

        assert store.get("1", 0) == "OFF"
        assert not controller.edit_session.is_editing
        assert controller.focus == Focus(0, 1)

    def test_enter_while_editing_confirms(self, controller, store):
        """Test that Enter commits an edit in place."""
        controller.handle(NavCommand.ENTER)
        controller.edit_session.type("7AM-3PM")
        controller.handle(NavCommand.ENTER)

        assert store.get("1", 0) == "7AM-3PM"
        assert controller.focus == Focus(0, 0)
        assert not controller.edit_session.is_editing

    def test_escape_cancels(self, controller, store):
        """Test that Escape discards the draft."""
        store.set("1", 0, "9AM-5PM")
        controller.handle(NavCommand.ENTER)
        controller.edit_session.type("OFF")

        assert controller.escape() == "9AM-5PM"
        assert store.get("1", 0) == "9AM-5PM"

    def test_focus_change_commits_edit(self, controller, store):
        """Test that clicking another cell commits the edit (focus loss)."""
        controller.handle(NavCommand.ENTER)
        controller.edit_session.type("OFF")
        controller.focus_cell(3, 4)

        assert store.get("1", 0) == "OFF"
        assert controller.focus == Focus(3, 4)

    def test_focus_cell_clamps(self, controller):
        """Test that out-of-range clicks are clamped to the grid."""
        assert controller.focus_cell(40, -2) == Focus(5, 0)

    def test_double_activate(self, controller):
        """Test that double-click focuses and edits a cell."""
        key = controller.double_activate(2, 5)

        assert key == ("3", 5)
        assert controller.focus == Focus(2, 5)
        assert controller.edit_session.editing_key == ("3", 5)

    def test_empty_roster(self):
        """Test that a grid without employees has no focused cell to edit."""
        controller = GridController(Roster([]), CellEditSession(ShiftStore(Roster([]))))

        assert controller.focused_key() is None
        assert controller.handle(NavCommand.ENTER) == Focus(0, 0)
        assert controller.handle(NavCommand.DOWN) == Focus(0, 0)
        assert controller.double_activate(2, 3) is None
        assert not controller.edit_session.is_editing

    def test_handle_key(self, controller):
        """Test key name handling."""
        assert controller.handle_key("ArrowRight") is True
        assert controller.handle_key("Escape") is False
        assert controller.focus == Focus(0, 1)
