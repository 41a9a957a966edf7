"""Integration test for the SQLite-backed workflow.

Covers: loading a query result, auto and manual mapping, value and
instance enumeration, and editing rows through a binder.
"""

from __future__ import annotations

import sqlite3
from collections.abc import Iterator
from dataclasses import dataclass

import pytest

from row_bind.core.binder import RowBinder
from row_bind.core.enums import MappingMode
from row_bind.core.exceptions import UnresolvedColumnError
from row_bind.dataset.sqlite import load_query
from row_bind.mapping.builder import mapping, row_mapping

# --- Test models ---


@dataclass
class Employee:
    EmpNo: int
    LastName: str
    FirstName: str
    HireDate: str
    Salary: float


@row_mapping(mode=MappingMode.MANUAL, columns={"name": "LastName"})
class NameOnly:
    name: str
    Salary: float

    def __init__(self) -> None:
        self.name = ""
        self.Salary = -1.0


# --- Fixtures ---


@pytest.fixture
def connection() -> Iterator[sqlite3.Connection]:
    conn = sqlite3.connect(":memory:")
    conn.execute(
        "CREATE TABLE employee (EmpNo INTEGER PRIMARY KEY, LastName TEXT NOT NULL, "
        "FirstName TEXT NOT NULL, HireDate TEXT, Salary REAL, Notes TEXT)"
    )
    conn.executemany(
        "INSERT INTO employee VALUES (?, ?, ?, ?, ?, ?)",
        [
            (1, "Smith", "Ann", "1989-05-01", 45000.0, None),
            (2, "Lee", "Bob", "1995-02-01", 50000.0, None),
        ],
    )
    conn.commit()
    yield conn
    conn.close()


# --- Tests ---


class TestLoadQuery:
    def test_column_types_inferred(self, connection: sqlite3.Connection) -> None:
        dataset = load_query(connection, "SELECT * FROM employee ORDER BY EmpNo")
        assert dataset.column_type("EmpNo") is int
        assert dataset.column_type("Salary") is float
        assert dataset.column_type("Notes") is object
        assert len(dataset) == 2

    def test_params(self, connection: sqlite3.Connection) -> None:
        dataset = load_query(
            connection, "SELECT * FROM employee WHERE EmpNo = :emp_no", {"emp_no": 2}
        )
        assert dataset.to_dicts()[0]["LastName"] == "Lee"

    def test_statement_without_result(self, connection: sqlite3.Connection) -> None:
        dataset = load_query(connection, "UPDATE employee SET Notes = 'x'")
        assert dataset.column_names == []
        assert dataset.at_end


class TestEmployeeWorkflow:
    def test_enumerate_employees(self, connection: sqlite3.Connection) -> None:
        binder = RowBinder()
        dataset = load_query(connection, "SELECT * FROM employee ORDER BY EmpNo")

        with binder.rows(dataset, Employee) as rows:
            result = list(rows)

        assert result == [
            Employee(1, "Smith", "Ann", "1989-05-01", 45000.0),
            Employee(2, "Lee", "Bob", "1995-02-01", 50000.0),
        ]

    def test_manual_mapping_over_query(self, connection: sqlite3.Connection) -> None:
        binder = RowBinder()
        dataset = load_query(connection, "SELECT * FROM employee ORDER BY EmpNo")

        target = NameOnly()
        names = [row.name for row in binder.rows_into(dataset, target)]

        assert names == ["Smith", "Lee"]
        assert target.Salary == -1.0

    def test_raise_on_each_row(self, connection: sqlite3.Connection) -> None:
        binder = RowBinder()
        dataset = load_query(connection, "SELECT * FROM employee ORDER BY EmpNo")

        for emp in binder.rows(dataset, Employee):
            emp.Salary = round(emp.Salary * 1.1, 2)
            with binder.edit(dataset):
                binder.write(dataset, emp)

        assert [row["Salary"] for row in dataset.to_dicts()] == [49500.0, 55000.0]
        # the database itself is untouched
        salaries = connection.execute("SELECT Salary FROM employee ORDER BY EmpNo").fetchall()
        assert salaries == [(45000.0,), (50000.0,)]

    def test_unresolved_column_at_first_use(self, connection: sqlite3.Connection) -> None:
        binder = RowBinder()
        binder.register(mapping(Employee).column("Salary", "AnnualSalary").build())
        dataset = load_query(connection, "SELECT * FROM employee")

        with pytest.raises(UnresolvedColumnError, match="AnnualSalary"):
            binder.rows(dataset, Employee)
