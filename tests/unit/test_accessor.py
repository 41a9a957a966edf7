"""Unit tests for ValueRowAccessor and InstanceRowAccessor."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import NamedTuple

import pytest
from pydantic import BaseModel

from row_bind.core.binder import RowBinder
from row_bind.core.exceptions import (
    ColumnMismatchError,
    InvalidCursorStateError,
    TypeMismatchError,
)
from row_bind.dataset.memory import FieldDef, MemoryDataset
from row_bind.mapping.accessor import InstanceRowAccessor, ValueRowAccessor
from row_bind.mapping.builder import mapping


@dataclass
class Employee:
    EmpNo: int
    LastName: str
    FirstName: str
    HireDate: datetime
    Salary: float


@dataclass(frozen=True)
class EmployeeName:
    LastName: str
    FirstName: str


class EmployeeTuple(NamedTuple):
    EmpNo: int
    LastName: str


class EmployeeModel(BaseModel):
    EmpNo: int
    LastName: str
    Salary: float


class EmployeeRecord:
    EmpNo: int
    LastName: str

    def __init__(self) -> None:
        self.EmpNo = 0
        self.LastName = ""
        self._salary = 0.0

    @property
    def Salary(self) -> float:
        return self._salary

    @Salary.setter
    def Salary(self, value: float) -> None:
        self._salary = value


class Customer:
    Company: str

    def __init__(self) -> None:
        self.Company = ""
        self._custno = 0
        self.custno_value = 0.0

    @property
    def CustNo(self) -> int:
        return self._custno

    @CustNo.setter
    def CustNo(self, value: int) -> None:
        self._custno = value


class Contact:
    surname: str
    PhoneExt: str
    FirstName: str

    def __init__(self) -> None:
        self.surname = ""
        self.PhoneExt = "none"
        self.FirstName = "none"


@pytest.fixture
def customers() -> MemoryDataset:
    return MemoryDataset(
        [FieldDef("CustNo", float), FieldDef("Company", str)],
        [(42.0, "Kauai Dive Shoppe")],
    )


class TestValueRead:
    def test_read_dataclass(self, binder: RowBinder, employees: MemoryDataset) -> None:
        emp = binder.read(employees, Employee)
        assert emp == Employee(1, "Smith", "Ann", datetime(1989, 5, 1), 45000.0)

    def test_each_read_is_a_new_instance(
        self, binder: RowBinder, employees: MemoryDataset
    ) -> None:
        first = binder.read(employees, Employee)
        second = binder.read(employees, Employee)
        assert first == second
        assert first is not second

    def test_read_frozen_dataclass(self, binder: RowBinder, employees: MemoryDataset) -> None:
        assert binder.read(employees, EmployeeName) == EmployeeName("Smith", "Ann")

    def test_read_namedtuple(self, binder: RowBinder, employees: MemoryDataset) -> None:
        assert binder.read(employees, EmployeeTuple) == EmployeeTuple(1, "Smith")

    def test_read_pydantic(self, binder: RowBinder, employees: MemoryDataset) -> None:
        emp = binder.read(employees, EmployeeModel)
        assert isinstance(emp, EmployeeModel)
        assert emp.Salary == 45000.0

    def test_read_plain_class_with_property(
        self, binder: RowBinder, employees: MemoryDataset
    ) -> None:
        emp = binder.read(employees, EmployeeRecord)
        assert emp.EmpNo == 1
        assert emp.LastName == "Smith"
        assert emp.Salary == 45000.0

    def test_unmapped_required_field(self, binder: RowBinder, employees: MemoryDataset) -> None:
        @dataclass
        class Assignment:
            EmpNo: int
            project: str

        with pytest.raises(ColumnMismatchError, match="Assignment"):
            binder.read(employees, Assignment)

    def test_read_at_end(self, binder: RowBinder, empty_employees: MemoryDataset) -> None:
        with pytest.raises(InvalidCursorStateError, match="at end"):
            binder.read(empty_employees, Employee)

    def test_null_passes_through(self, binder: RowBinder) -> None:
        dataset = MemoryDataset(
            [FieldDef("EmpNo", int), FieldDef("LastName", str)], [(None, "Smith")]
        )

        @dataclass
        class Partial:
            EmpNo: int | None
            LastName: str

        assert binder.read(dataset, Partial) == Partial(None, "Smith")


class TestConversion:
    def test_int_column_widens_to_float_and_decimal(self, binder: RowBinder) -> None:
        @dataclass
        class Amounts:
            total: float
            exact: Decimal

        dataset = MemoryDataset([FieldDef("total", int), FieldDef("exact", int)], [(3, 4)])
        result = binder.read(dataset, Amounts)
        assert result.total == 3.0
        assert isinstance(result.total, float)
        assert result.exact == Decimal(4)
        assert isinstance(result.exact, Decimal)

    def test_untyped_column_value_checked_at_read(self, binder: RowBinder) -> None:
        @dataclass
        class Counter:
            count: int

        dataset = MemoryDataset([FieldDef("count", object)], [("many",)])
        with pytest.raises(TypeMismatchError) as exc_info:
            binder.read(dataset, Counter)
        assert exc_info.value.source_type is str

    def test_write_widens_to_column_type(self, binder: RowBinder) -> None:
        @dataclass
        class Score:
            value: float

        dataset = MemoryDataset([FieldDef("value", float)], [(1.5,)])
        with binder.edit(dataset):
            binder.write(dataset, Score(5))
        stored = dataset.get_value("value")
        assert stored == 5.0
        assert isinstance(stored, float)

    def test_write_incompatible_value(self, binder: RowBinder, employees: MemoryDataset) -> None:
        record = EmployeeRecord()
        record.EmpNo = "seven"  # type: ignore[assignment]
        employees.begin_edit()
        with pytest.raises(TypeMismatchError, match="EmpNo"):
            binder.write(employees, record)
        employees.cancel_edit()


class TestInstanceRead:
    def test_read_into_mutates_supplied_instance(
        self, binder: RowBinder, employees: MemoryDataset
    ) -> None:
        record = EmployeeRecord()
        result = binder.read_into(employees, record)
        assert result is record
        assert record.EmpNo == 1
        assert record.Salary == 45000.0

    def test_instance_type_checked(self, binder: RowBinder, employees: MemoryDataset) -> None:
        metadata = binder.metadata(EmployeeRecord, employees)
        with pytest.raises(TypeError, match="EmployeeRecord"):
            InstanceRowAccessor(metadata, Contact())

    def test_skipped_member_keeps_default(
        self, binder: RowBinder, customers: MemoryDataset
    ) -> None:
        binder.register(
            mapping(Customer)
            .skip("CustNo")
            .column("custno_value", "CustNo", member_type=float)
            .build()
        )
        customer = binder.read_into(customers, Customer())
        assert customer.custno_value == 42.0
        assert customer.CustNo == 0
        assert customer.Company == "Kauai Dive Shoppe"

    def test_manual_mapping_touches_one_column(
        self, binder: RowBinder, employees: MemoryDataset
    ) -> None:
        binder.register(mapping(Contact).manual().column("surname", "LastName").build())
        contact = binder.read_into(employees, Contact())
        assert contact.surname == "Smith"
        assert contact.PhoneExt == "none"
        assert contact.FirstName == "none"

        assert len(binder.metadata(Contact, employees).bindings) == 1

        contact.surname = "Smythe"
        contact.PhoneExt = "999"
        with binder.edit(employees):
            binder.write(employees, contact)
        assert employees.get_value("LastName") == "Smythe"
        assert employees.get_value("PhoneExt") == "250"
        assert employees.get_value("FirstName") == "Ann"


class TestWrite:
    def test_write_requires_edit(self, binder: RowBinder, employees: MemoryDataset) -> None:
        emp = binder.read(employees, Employee)
        with pytest.raises(InvalidCursorStateError, match="browsing"):
            binder.write(employees, emp)

    def test_write_at_end(self, binder: RowBinder, employees: MemoryDataset) -> None:
        emp = binder.read(employees, Employee)
        for _ in range(len(employees)):
            employees.move_next()
        with pytest.raises(InvalidCursorStateError, match="at end"):
            binder.write(employees, emp)

    def test_write_then_commit(self, binder: RowBinder, employees: MemoryDataset) -> None:
        emp = binder.read(employees, Employee)
        emp.Salary = 47000.0
        with binder.edit(employees):
            binder.write(employees, emp)
        assert employees.to_dicts()[0]["Salary"] == 47000.0

    def test_read_then_write_is_idempotent(
        self, binder: RowBinder, employees: MemoryDataset
    ) -> None:
        before = employees.to_dicts()
        for cls in (Employee, EmployeeRecord, EmployeeModel):
            employees.move_first()
            while not employees.at_end:
                instance = binder.read(employees, cls)
                with binder.edit(employees):
                    binder.write(employees, instance)
                employees.move_next()
        assert employees.to_dicts() == before

    def test_widened_member_round_trips(self, binder: RowBinder) -> None:
        @dataclass
        class Widened:
            EmpNo: float
            Budget: Decimal

        dataset = MemoryDataset(
            [FieldDef("EmpNo", int), FieldDef("Budget", int)], [(1, 250), (2, 300)]
        )
        before = dataset.to_dicts()
        dataset.move_first()
        while not dataset.at_end:
            instance = binder.read(dataset, Widened)
            assert isinstance(instance.EmpNo, float)
            with binder.edit(dataset):
                binder.write(dataset, instance)
            dataset.move_next()

        assert dataset.to_dicts() == before
        assert all(type(row["EmpNo"]) is int for row in dataset.to_dicts())
        assert all(type(row["Budget"]) is int for row in dataset.to_dicts())

    def test_fractional_value_not_written_to_int_column(self, binder: RowBinder) -> None:
        @dataclass
        class Widened:
            EmpNo: float

        dataset = MemoryDataset([FieldDef("EmpNo", int)], [(1,)])
        instance = binder.read(dataset, Widened)
        instance.EmpNo = 1.5
        dataset.begin_edit()
        with pytest.raises(TypeMismatchError, match="Cannot convert float to int"):
            binder.write(dataset, instance)
        dataset.cancel_edit()
        assert dataset.to_dicts() == [{"EmpNo": 1}]

    def test_accessors_share_metadata(self, binder: RowBinder, employees: MemoryDataset) -> None:
        metadata = binder.metadata(EmployeeRecord, employees)
        value = ValueRowAccessor(metadata)
        instance = InstanceRowAccessor(metadata, EmployeeRecord())
        assert value.metadata is instance.metadata
