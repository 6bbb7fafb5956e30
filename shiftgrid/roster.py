"""
Roster of employees shown as grid rows.

The roster is configured outside the grid: either the built-in default
list or a CSV file with employee_id, name, order and static columns.
"""

import csv
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional

from .models import Employee


class RosterError(Exception):
    """Raised when a roster cannot be built or loaded."""
    pass


class Roster:
    """
    Fixed, ordered set of employees.

    Rows are ordered by Employee.order; ties keep their input order.
    """

    def __init__(self, employees: Iterable[Employee]):
        ordered = sorted(employees, key=lambda e: e.order)

        self._by_id: Dict[str, Employee] = {}
        for employee in ordered:
            if employee.employee_id in self._by_id:
                raise RosterError(f"Duplicate employee id: {employee.employee_id}")
            self._by_id[employee.employee_id] = employee

        self._employees: List[Employee] = ordered
        self._index = {e.employee_id: i for i, e in enumerate(ordered)}

    @property
    def employees(self) -> List[Employee]:
        """Employees in row order."""
        return list(self._employees)

    def __len__(self) -> int:
        return len(self._employees)

    def __iter__(self) -> Iterator[Employee]:
        return iter(self._employees)

    def contains(self, employee_id: str) -> bool:
        return employee_id in self._by_id

    def get(self, employee_id: str) -> Optional[Employee]:
        return self._by_id.get(employee_id)

    def by_index(self, index: int) -> Employee:
        """Employee at a row index."""
        return self._employees[index]

    def index_of(self, employee_id: str) -> int:
        """
        Row index of an employee.

        Raises:
            KeyError: If the employee is not on the roster
        """
        return self._index[employee_id]

    def find_by_name(self, name: str) -> Optional[Employee]:
        """
        Find an employee by exact name.

        Matching is exact string equality; imports rely on this to decide
        which rows apply.
        """
        for employee in self._employees:
            if employee.name == name:
                return employee
        return None


def default_roster() -> Roster:
    """Roster used when no roster file is configured."""
    return Roster([
        Employee('1', 'Frank Gmelin', 1),
        Employee('2', 'Patrica Garden', 2),
        Employee('3', 'Dawn Mitchell', 3),
        Employee('4', 'Sarah Johnson', 4),
        Employee('5', 'Mike Rodriguez', 5),
        Employee('6', 'Lisa Chen', 6),
    ])


class RosterLoader:
    """
    Loads a roster from a CSV file.

    Expected CSV format:
        employee_id,name,order,static
        1,Frank Gmelin,1,true
        2,Patrica Garden,2,true
    """

    REQUIRED_HEADERS = ['employee_id', 'name', 'order']
    TRUE_VALUES = {'1', 'true', 'yes', 'y'}

    def __init__(self, file_path: str):
        """
        Args:
            file_path: Path to the roster CSV

        Raises:
            RosterError: If the file doesn't exist
        """
        self.file_path = Path(file_path)
        if not self.file_path.exists():
            raise RosterError(f"Roster file not found: {file_path}")

    def load(self) -> Roster:
        """
        Load the roster.

        Raises:
            RosterError: If headers are missing or a row is malformed
        """
        try:
            with open(self.file_path, 'r', encoding='utf-8-sig', newline='') as f:
                reader = csv.DictReader(f)
                self._validate_headers(reader.fieldnames)
                employees = self._parse_rows(reader)
        except RosterError:
            raise
        except (OSError, csv.Error, UnicodeDecodeError) as e:
            raise RosterError(f"Failed to load roster: {e}")

        if not employees:
            raise RosterError("Roster file contains no employees")

        return Roster(employees)

    def _validate_headers(self, headers: Optional[List[str]]):
        if not headers:
            raise RosterError("Roster file is empty or has no headers")

        normalized = [h.strip().lower() for h in headers]
        missing = [h for h in self.REQUIRED_HEADERS if h not in normalized]
        if missing:
            raise RosterError(f"Roster missing required headers: {', '.join(missing)}")

    def _parse_rows(self, reader: csv.DictReader) -> List[Employee]:
        employees = []
        for line_num, row_dict in enumerate(reader, start=2):  # header is line 1
            row = {k.strip().lower(): (v or '').strip() for k, v in row_dict.items() if k}
            if not any(row.values()):
                continue

            try:
                order = int(row.get('order', ''))
            except ValueError:
                raise RosterError(
                    f"Error on line {line_num}: order must be an integer, "
                    f"got '{row.get('order', '')}'"
                )

            try:
                employees.append(Employee(
                    employee_id=row.get('employee_id', ''),
                    name=row.get('name', ''),
                    order=order,
                    is_static=row.get('static', 'true').lower() in self.TRUE_VALUES,
                ))
            except ValueError as e:
                raise RosterError(f"Error on line {line_num}: {e}")

        return employees


def load_roster(file_path: str) -> Roster:
    """
    Convenience function to load a roster CSV.

    Raises:
        RosterError: If loading fails
    """
    return RosterLoader(file_path).load()
