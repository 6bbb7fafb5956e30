"""
Command-line interface for the shift grid.

This module provides the CLI using argparse: validating a CSV file,
converting an imported file into a normalized export, printing a week's
grid, and opening the desktop grid.
"""

import argparse
import sys
from pathlib import Path
from typing import Optional

from .config import Config, DEFAULT_REQUIRED_EMPLOYEES
from .csv_export import CSVExportError, ExportOptions, ExportOptionsError, save_export
from .logging_utils import (
    get_logger,
    log_error,
    log_errors,
    log_section,
    log_success,
    setup_logging,
)
from .models import CellCategory
from .roster import RosterError, default_roster, load_roster
from .session import ScheduleSession
from .week_utils import DAY_NAMES, WeekParseError, parse_week_anchor

CATEGORY_MARKS = {
    CellCategory.OFF: '-',
    CellCategory.SHIFT: '*',
    CellCategory.EMPTY: ' ',
}


def create_parser() -> argparse.ArgumentParser:
    """
    Create and configure the argument parser.

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        prog='shiftgrid',
        description='Weekly shift grid: CSV validation, import and export',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Check a CSV file before importing it
  python -m shiftgrid validate --csv data/week.csv

  # Import a CSV file and write the normalized export for a week
  python -m shiftgrid export --csv data/week.csv --output out/week.csv --week 2024-01-13

  # Print the grid an import would produce
  python -m shiftgrid show --csv data/week.csv

  # Open the desktop grid
  python -m shiftgrid gui data/week.csv
        """
    )

    parser.add_argument(
        '--verbose',
        '-v',
        action='store_true',
        help='Enable verbose logging (debug level)'
    )

    subparsers = parser.add_subparsers(dest='command', help='Command to execute')

    # Options shared by the file-based commands
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        '--csv',
        type=str,
        required=True,
        metavar='PATH',
        help='Path to CSV file with a week of shifts'
    )
    common.add_argument(
        '--roster',
        type=str,
        metavar='PATH',
        help='Roster CSV (employee_id,name,order,static); defaults to the built-in roster'
    )
    common.add_argument(
        '--required',
        nargs='*',
        metavar='NAME',
        help='Employees the CSV must contain (default: %s)' % ', '.join(DEFAULT_REQUIRED_EMPLOYEES)
    )
    common.add_argument(
        '--week',
        type=str,
        metavar='YYYY-MM-DD',
        help='Any date in the week to use (default: current week)'
    )

    subparsers.add_parser(
        'validate',
        parents=[common],
        help='Validate a CSV file without importing it'
    )

    export_parser = subparsers.add_parser(
        'export',
        parents=[common],
        help='Import a CSV file and write the week as a normalized CSV export'
    )
    export_parser.add_argument(
        '--output',
        '-o',
        type=str,
        required=True,
        metavar='PATH',
        help='Where to write the export'
    )
    export_parser.add_argument(
        '--no-header',
        action='store_true',
        help='Omit the header row'
    )
    export_parser.add_argument(
        '--force',
        action='store_true',
        help='Overwrite the output file if it exists'
    )

    subparsers.add_parser(
        'show',
        parents=[common],
        help='Import a CSV file and print the resulting grid'
    )

    gui_parser = subparsers.add_parser(
        'gui',
        help='Open the desktop grid'
    )
    gui_parser.add_argument(
        'csv',
        nargs='?',
        help='CSV file to import on startup'
    )

    return parser


def validate_args(args: argparse.Namespace) -> bool:
    """
    Validate command-line arguments.

    Adds `parsed_week` to args on success.

    Args:
        args: Parsed arguments

    Returns:
        True if valid, False otherwise
    """
    logger = get_logger()

    args.parsed_week = None
    if getattr(args, 'week', None) is not None:
        try:
            args.parsed_week = parse_week_anchor(args.week)
        except WeekParseError as e:
            log_error(str(e), logger)
            return False

    csv_path = getattr(args, 'csv', None)
    if csv_path and not Path(csv_path).exists():
        log_error(f"CSV file not found: {csv_path}", logger)
        return False

    roster_path = getattr(args, 'roster', None)
    if roster_path and not Path(roster_path).exists():
        log_error(f"Roster file not found: {roster_path}", logger)
        return False

    return True


def build_config(args: argparse.Namespace) -> Config:
    """Create configuration from parsed arguments."""
    config = Config(
        roster_path=getattr(args, 'roster', None),
        csv_path=getattr(args, 'csv', None),
        output_path=getattr(args, 'output', None),
        week=getattr(args, 'parsed_week', None),
        include_header=not getattr(args, 'no_header', False),
        force=getattr(args, 'force', False),
        verbose=getattr(args, 'verbose', False),
    )
    if getattr(args, 'required', None) is not None:
        config.required_employees = list(args.required)
    return config


def load_session(config: Config) -> ScheduleSession:
    """
    Build a session for the configured roster and week.

    Raises:
        RosterError: If the roster file cannot be loaded
        ValueError: If the configuration is invalid
    """
    roster = load_roster(config.roster_path) if config.roster_path else default_roster()
    return ScheduleSession(roster=roster, config=config, week=config.week)


def _import(session: ScheduleSession, config: Config) -> bool:
    logger = get_logger()

    log_section("Validating CSV Data", logger)
    result = session.import_file(config.csv_path)
    if not result.ok:
        log_error(f"{config.csv_path} was rejected:", logger)
        log_errors(result.messages(), logger)
        return False

    logger.info(f"{len(result.data_rows)} data row(s) in {config.csv_path}")
    return True


def cmd_validate(config: Config) -> int:
    """
    Execute the validate command.

    Returns:
        Exit code (0 if the file is importable)
    """
    session = load_session(config)
    if not _import(session, config):
        return 1

    log_success("CSV file is valid and ready to import")
    return 0


def cmd_export(config: Config) -> int:
    """
    Execute the export command.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    logger = get_logger()

    session = load_session(config)
    if not _import(session, config):
        return 1

    summary = session.confirm_import()
    logger.info(summary.format_summary())

    log_section("Exporting Week", logger)
    text = session.export(ExportOptions(include_header=config.include_header))
    path = save_export(text, config.output_path, force=config.force)
    log_success(f"Wrote {len(session.roster)} employee row(s) to {path}")
    return 0


def format_grid(session: ScheduleSession) -> str:
    """
    Render the committed grid as fixed-width text.

    Each cell is prefixed with its category mark: '-' off, '*' shift.
    """
    name_width = max([len('Name')] + [len(e.name) for e in session.roster])
    cell_width = 14

    header = 'Name'.ljust(name_width) + ' | ' + ' | '.join(
        name[:3].ljust(cell_width) for name in DAY_NAMES
    )
    lines = [session.week_label, header, '-' * len(header)]

    for employee, texts, categories in zip(session.roster, session.grid(), session.categories()):
        cells = [
            f"{CATEGORY_MARKS[category]}{text}"[:cell_width].ljust(cell_width)
            for text, category in zip(texts, categories)
        ]
        lines.append(employee.name.ljust(name_width) + ' | ' + ' | '.join(cells))

    return "\n".join(lines)


def cmd_show(config: Config) -> int:
    """
    Execute the show command.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    session = load_session(config)
    if not _import(session, config):
        return 1

    summary = session.confirm_import()
    print(format_grid(session))
    if summary.ignored_names:
        get_logger().info(f"Ignored {len(summary.ignored_names)} row(s) not on the roster")
    return 0


def cmd_gui(csv_path: Optional[str]) -> int:
    """Open the desktop grid."""
    # Imported lazily so the other commands work without a display
    from .gui import main as gui_main
    return gui_main(csv_path)


def main(argv=None):
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv)

    Returns:
        Exit code
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging(verbose=args.verbose)
    logger = get_logger()

    if not args.command:
        parser.print_help()
        return 1

    if args.command == 'gui':
        return cmd_gui(args.csv)

    if not validate_args(args):
        return 1

    config = build_config(args)

    try:
        config.validate()
    except ValueError as e:
        log_error(f"Configuration error: {e}", logger)
        return 1

    commands = {
        'validate': cmd_validate,
        'export': cmd_export,
        'show': cmd_show,
    }

    try:
        return commands[args.command](config)
    except RosterError as e:
        log_error(f"Roster loading failed: {e}", logger)
        return 1
    except (CSVExportError, ExportOptionsError) as e:
        log_error(f"Export failed: {e}", logger)
        return 1


if __name__ == '__main__':
    sys.exit(main())
