from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Optional, Sequence

import mysql.connector

from ..core.enums import PayrollStatus
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
from .model import PayrollAmounts, PayrollRecord
from .repository import PayrollRepository

_SELECT = """
    SELECT p.payroll_id, p.employee_id, p.pay_period_start, p.pay_period_end,
           p.base_salary, p.bonus, p.deductions, p.net_pay, p.status,
           p.processed_at, p.idempotency_key, p.created_at
    FROM payroll p
"""

_ORDER = "ORDER BY p.pay_period_start DESC, p.payroll_id DESC"


def _to_payroll(r: Dict[str, Any]) -> PayrollRecord:
    return PayrollRecord(
        payroll_id=int(r["payroll_id"]),
        employee_id=int(r["employee_id"]),
        pay_period_start=r["pay_period_start"],
        pay_period_end=r["pay_period_end"],
        base_salary=to_decimal(r["base_salary"]),
        bonus=to_decimal(r["bonus"]),
        deductions=to_decimal(r["deductions"]),
        net_pay=to_decimal(r["net_pay"]),
        status=PayrollStatus(r["status"]),
        created_at=to_datetime(r["created_at"]),
        processed_at=to_datetime(r.get("processed_at")),
        idempotency_key=r.get("idempotency_key"),
    )


class MySQLPayrollRepository(PayrollRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def insert_payroll(
        self,
        *,
        employee_id: int,
        period_start: date,
        period_end: date,
        amounts: PayrollAmounts,
        status: PayrollStatus,
        processed_at: Optional[datetime] = None,
        idempotency_key: Optional[str] = None,
    ) -> Optional[int]:
        try:
            with db_cursor(self._conn_factory, passthrough_integrity=True) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO payroll(
                        employee_id, pay_period_start, pay_period_end,
                        base_salary, bonus, deductions, net_pay, status, processed_at, idempotency_key
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        int(employee_id),
                        period_start,
                        period_end,
                        amounts.base_salary,
                        amounts.bonus,
                        amounts.deductions,
                        amounts.net_pay,
                        status.value,
                        processed_at,
                        idempotency_key,
                    ),
                )
                return int(cur.lastrowid)
        except mysql.connector.IntegrityError as exc:
            if idempotency_key is not None and is_duplicate_key(exc):
                return None
            raise RepositoryError(f"cannot insert payroll: {exc}") from exc

    def find_by_idempotency_key(self, employee_id: int, idempotency_key: str) -> Optional[PayrollRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{_SELECT} WHERE p.employee_id=%s AND p.idempotency_key=%s",
                (int(employee_id), idempotency_key),
            )
            row = fetchone(cur)
            return map_row(row, _to_payroll) if row else None

    def get_payroll(self, payroll_id: int, *, company_id: int) -> Optional[PayrollRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                {_SELECT}
                JOIN employees e ON e.employee_id = p.employee_id
                WHERE p.payroll_id=%s AND e.company_id=%s
                """,
                (int(payroll_id), int(company_id)),
            )
            row = fetchone(cur)
            return map_row(row, _to_payroll) if row else None

    def transition_status(
        self,
        *,
        payroll_id: int,
        company_id: int,
        from_status: PayrollStatus,
        to_status: PayrollStatus,
        processed_at: Optional[datetime] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE payroll p
                JOIN employees e ON e.employee_id = p.employee_id
                SET p.status=%s, p.processed_at=COALESCE(%s, p.processed_at)
                WHERE p.payroll_id=%s AND e.company_id=%s AND p.status=%s
                """,
                (to_status.value, processed_at, int(payroll_id), int(company_id), from_status.value),
            )
            return cur.rowcount > 0

    def update_amounts_if_pending(
        self,
        *,
        payroll_id: int,
        company_id: int,
        period_start: date,
        period_end: date,
        amounts: PayrollAmounts,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE payroll p
                JOIN employees e ON e.employee_id = p.employee_id
                SET p.pay_period_start=%s, p.pay_period_end=%s,
                    p.base_salary=%s, p.bonus=%s, p.deductions=%s, p.net_pay=%s
                WHERE p.payroll_id=%s AND e.company_id=%s AND p.status=%s
                """,
                (
                    period_start,
                    period_end,
                    amounts.base_salary,
                    amounts.bonus,
                    amounts.deductions,
                    amounts.net_pay,
                    int(payroll_id),
                    int(company_id),
                    PayrollStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0

    def list_for_employee(self, employee_id: int) -> Sequence[PayrollRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE p.employee_id=%s {_ORDER}", (int(employee_id),))
            return map_rows(fetchall(cur), _to_payroll)

    def list_for_company(self, company_id: int) -> Sequence[PayrollRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                {_SELECT}
                JOIN employees e ON e.employee_id = p.employee_id
                WHERE e.company_id=%s
                {_ORDER}
                """,
                (int(company_id),),
            )
            return map_rows(fetchall(cur), _to_payroll)
