"""
Example 01: Basic Mapping

This example demonstrates reading the current row of a dataset into a
dataclass, a Pydantic model and a plain class, and writing a change back.
"""

from dataclasses import dataclass
from datetime import datetime

from pydantic import BaseModel

from row_bind import FieldDef, MemoryDataset, RowBinder


@dataclass
class Employee:
    """Employee as a value record"""
    EmpNo: int
    LastName: str
    FirstName: str
    HireDate: datetime
    Salary: float


class EmployeeModel(BaseModel):
    """Employee as a Pydantic model"""
    EmpNo: int
    LastName: str
    Salary: float


class EmployeeRecord:
    """Employee as a plain class, filled in place"""
    EmpNo: int
    LastName: str

    def __init__(self):
        self.EmpNo = 0
        self.LastName = ""


def main():
    dataset = MemoryDataset(
        [
            FieldDef("EmpNo", int),
            FieldDef("LastName", str),
            FieldDef("FirstName", str),
            FieldDef("HireDate", datetime),
            FieldDef("Salary", float),
        ],
        [
            (1, "Smith", "Ann", datetime(1989, 5, 1), 45000.0),
            (2, "Lee", "Bob", datetime(1995, 2, 1), 50000.0),
        ],
    )
    binder = RowBinder()

    print("=== Basic Mapping ===\n")

    print("1. Dataclass:")
    emp = binder.read(dataset, Employee)
    print(f"   {emp}\n")

    print("2. Pydantic model:")
    model = binder.read(dataset, EmployeeModel)
    print(f"   {model!r}\n")

    print("3. Plain class, filled in place:")
    record = EmployeeRecord()
    binder.read_into(dataset, record)
    print(f"   EmpNo={record.EmpNo} LastName={record.LastName}\n")

    print("4. Write back:")
    emp.Salary = 47500.0
    with binder.edit(dataset):
        binder.write(dataset, emp)
    print(f"   Salary now {dataset.get_value('Salary')}\n")

    print("5. Resolved columns:")
    metadata = binder.metadata(Employee, dataset)
    for member, column in metadata.resolved_columns.items():
        print(f"   {member} -> {column}")


if __name__ == "__main__":
    main()
