"""
Example 02: Enumeration

This example demonstrates iterating a SQLite query result as typed
instances, both as fresh values and by refilling a single instance.
"""

import sqlite3
from dataclasses import dataclass

from row_bind import MappingMode, RowBinder, mapping
from row_bind.dataset import load_query


@dataclass
class Employee:
    EmpNo: int
    LastName: str
    Salary: float


class Customer:
    Company: str

    def __init__(self):
        self.Company = ""
        self.cust_no = 0.0


def main():
    conn = sqlite3.connect(":memory:")
    conn.execute("CREATE TABLE employee (EmpNo INTEGER, LastName TEXT, Salary REAL)")
    conn.executemany(
        "INSERT INTO employee VALUES (?, ?, ?)",
        [(1, "Smith", 45000.0), (2, "Lee", 50000.0), (3, "Young", 41000.0)],
    )
    conn.execute("CREATE TABLE customer (CustNo REAL, Company TEXT, City TEXT)")
    conn.executemany(
        "INSERT INTO customer VALUES (?, ?, ?)",
        [(1221.0, "Kauai Dive Shoppe", "Kapaa Kauai"), (1231.0, "Unisco", "Freeport")],
    )
    binder = RowBinder()

    print("=== Enumeration ===\n")

    print("1. Value enumeration (a new instance per row):")
    employees = load_query(conn, "SELECT * FROM employee ORDER BY EmpNo")
    with binder.rows(employees, Employee) as rows:
        for emp in rows:
            print(f"   {emp}")
    print()

    print("2. Instance enumeration (one instance, refilled per row):")
    binder.register(
        mapping(Customer)
        .mode(MappingMode.MANUAL)
        .column("Company")
        .column("cust_no", "CustNo", member_type=float)
        .build()
    )
    customers = load_query(conn, "SELECT * FROM customer ORDER BY CustNo")
    customer = Customer()
    for row in binder.rows_into(customers, customer):
        print(f"   {row.cust_no:.0f}: {row.Company} (same object: {row is customer})")
    print()

    print("3. Editing while iterating:")
    for emp in binder.rows(employees, Employee):
        emp.Salary *= 1.05
        with binder.edit(employees):
            binder.write(employees, emp)
    for row in employees.to_dicts():
        print(f"   {row['LastName']}: {row['Salary']:.2f}")

    conn.close()


if __name__ == "__main__":
    main()
