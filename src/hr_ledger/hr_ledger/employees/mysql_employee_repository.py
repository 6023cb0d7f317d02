from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

import mysql.connector

from ..core.enums import EmployeeStatus
from ..core.exceptions import RepositoryError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import (
    db_cursor,
    fetchall,
    fetchone,
    is_duplicate_key,
    map_row,
    map_rows,
    to_datetime,
    to_decimal,
)
from .model import Employee, EmployeeProfile
from .repository import EmployeeRepository

_COLUMNS = """
    employee_id, user_id, employee_code, first_name, last_name, email, phone,
    department, position, status, start_date, salary, location, company_id, created_at
"""


def _to_employee(r: Dict[str, Any]) -> Employee:
    return Employee(
        employee_id=int(r["employee_id"]),
        user_id=int(r["user_id"]) if r.get("user_id") is not None else None,
        employee_code=r["employee_code"],
        first_name=r["first_name"],
        last_name=r["last_name"],
        email=r["email"],
        phone=r.get("phone"),
        department=r["department"],
        position=r["position"],
        status=EmployeeStatus(r["status"]),
        start_date=r["start_date"],
        salary=to_decimal(r["salary"]) if r.get("salary") is not None else None,
        location=r.get("location"),
        company_id=int(r["company_id"]),
        created_at=to_datetime(r.get("created_at")),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int, *, company_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM employees WHERE employee_id=%s AND company_id=%s",
                (int(employee_id), int(company_id)),
            )
            row = fetchone(cur)
            return map_row(row, _to_employee) if row else None

    def get_by_user_id(self, user_id: int, *, company_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM employees WHERE user_id=%s AND company_id=%s",
                (int(user_id), int(company_id)),
            )
            row = fetchone(cur)
            return map_row(row, _to_employee) if row else None

    def list_for_company(self, company_id: int) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM employees WHERE company_id=%s ORDER BY created_at DESC, employee_id DESC",
                (int(company_id),),
            )
            return map_rows(fetchall(cur), _to_employee)

    def last_employee_code(self, company_id: int) -> Optional[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT employee_code FROM employees WHERE company_id=%s ORDER BY employee_id DESC LIMIT 1",
                (int(company_id),),
            )
            row = fetchone(cur)
            return row["employee_code"] if row else None

    def insert_employee(self, *, company_id: int, employee_code: str, profile: EmployeeProfile) -> Optional[int]:
        try:
            return self._insert(company_id=company_id, employee_code=employee_code, profile=profile)
        except mysql.connector.IntegrityError as exc:
            if is_duplicate_key(exc):
                return None
            raise RepositoryError(f"cannot insert employee: {exc}") from exc

    def _insert(self, *, company_id: int, employee_code: str, profile: EmployeeProfile) -> int:
        with db_cursor(self._conn_factory, passthrough_integrity=True) as (_, cur):
            cur.execute(
                """
                INSERT INTO employees(
                    user_id, employee_code, first_name, last_name, email, phone,
                    department, position, status, start_date, salary, location, company_id
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    profile.user_id,
                    employee_code,
                    profile.first_name,
                    profile.last_name,
                    profile.email,
                    profile.phone,
                    profile.department,
                    profile.position,
                    EmployeeStatus.ACTIVE.value,
                    profile.start_date,
                    profile.salary,
                    profile.location,
                    int(company_id),
                ),
            )
            return int(cur.lastrowid)

    def update_profile(self, employee_id: int, *, company_id: int, profile: EmployeeProfile) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE employees
                SET user_id=%s, first_name=%s, last_name=%s, email=%s, phone=%s,
                    department=%s, position=%s, start_date=%s, salary=%s, location=%s
                WHERE employee_id=%s AND company_id=%s
                """,
                (
                    profile.user_id,
                    profile.first_name,
                    profile.last_name,
                    profile.email,
                    profile.phone,
                    profile.department,
                    profile.position,
                    profile.start_date,
                    profile.salary,
                    profile.location,
                    int(employee_id),
                    int(company_id),
                ),
            )
            return cur.rowcount > 0

    def set_status(self, employee_id: int, *, company_id: int, status: EmployeeStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE employees SET status=%s WHERE employee_id=%s AND company_id=%s",
                (status.value, int(employee_id), int(company_id)),
            )
            return cur.rowcount > 0
