"""Shared test fixtures."""

from __future__ import annotations

from datetime import datetime

import pytest

from row_bind.core.binder import RowBinder
from row_bind.dataset.memory import FieldDef, MemoryDataset

EMPLOYEE_FIELDS = [
    FieldDef("EmpNo", int),
    FieldDef("LastName", str),
    FieldDef("FirstName", str),
    FieldDef("PhoneExt", str),
    FieldDef("HireDate", datetime),
    FieldDef("Salary", float),
]

EMPLOYEE_ROWS = [
    (1, "Smith", "Ann", "250", datetime(1989, 5, 1), 45000.0),
    (2, "Lee", "Bob", "251", datetime(1995, 2, 1), 50000.0),
    (3, "Young", "Kim", "252", datetime(1998, 7, 15), 41000.0),
]


@pytest.fixture
def binder() -> RowBinder:
    """A fresh binder with its own metadata cache."""
    return RowBinder()


@pytest.fixture
def employees() -> MemoryDataset:
    """Employee dataset with three rows, positioned on the first."""
    return MemoryDataset(EMPLOYEE_FIELDS, EMPLOYEE_ROWS)


@pytest.fixture
def empty_employees() -> MemoryDataset:
    """Employee dataset with no rows."""
    return MemoryDataset(EMPLOYEE_FIELDS)
