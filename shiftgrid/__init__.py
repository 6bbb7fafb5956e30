"""
Shift Grid - weekly employee shift grid with CSV exchange.

This package provides the editing engine behind a weekly shift grid: an
in-memory shift store, a per-cell edit state machine, keyboard navigation,
and CSV import/validation/export.
"""

__version__ = '1.0.0'
__author__ = 'Shift Grid'

from .models import Employee, ShiftKey, CellCategory, categorize
from .roster import Roster, RosterError, default_roster, load_roster
from .shift_store import ShiftStore, UnknownEmployeeError
from .edit_session import CellEditSession, EditStateError
from .navigator import GridController, NavCommand, next_focus
from .csv_import import CsvImportPipeline, ImportStateError
from .csv_export import ExportOptions, ExportOptionsError, export_csv
from .config import Config
from .session import ScheduleSession

__all__ = [
    'Employee',
    'ShiftKey',
    'CellCategory',
    'categorize',
    'Roster',
    'RosterError',
    'default_roster',
    'load_roster',
    'ShiftStore',
    'UnknownEmployeeError',
    'CellEditSession',
    'EditStateError',
    'GridController',
    'NavCommand',
    'next_focus',
    'CsvImportPipeline',
    'ImportStateError',
    'ExportOptions',
    'ExportOptionsError',
    'export_csv',
    'Config',
    'ScheduleSession',
]
