from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Optional, Sequence

from ..core.enums import LeaveStatus, LeaveType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, map_row, map_rows, to_datetime
from .model import LeaveRequest
from .repository import LeaveRepository

_SELECT = """
    SELECT lr.leave_id, lr.employee_id, lr.leave_type, lr.start_date, lr.end_date, lr.days,
           lr.status, lr.reason, lr.approved_by, lr.approved_at, lr.admin_comments, lr.created_at
    FROM leave_requests lr
    JOIN employees e ON e.employee_id = lr.employee_id
"""


def _to_leave(r: Dict[str, Any]) -> LeaveRequest:
    return LeaveRequest(
        leave_id=int(r["leave_id"]),
        employee_id=int(r["employee_id"]),
        leave_type=LeaveType(r["leave_type"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        days=int(r["days"]),
        status=LeaveStatus(r["status"]),
        reason=r["reason"],
        created_at=to_datetime(r["created_at"]),
        approved_by=int(r["approved_by"]) if r.get("approved_by") is not None else None,
        approved_at=to_datetime(r.get("approved_at")),
        admin_comments=r.get("admin_comments"),
    )


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def insert_leave(
        self,
        *,
        employee_id: int,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        days: int,
        reason: str,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(employee_id, leave_type, start_date, end_date, days, status, reason)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(employee_id),
                    leave_type.value,
                    start_date,
                    end_date,
                    int(days),
                    LeaveStatus.PENDING.value,
                    reason,
                ),
            )
            return int(cur.lastrowid)

    def get_leave(self, leave_id: int, *, company_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{_SELECT} WHERE lr.leave_id=%s AND e.company_id=%s",
                (int(leave_id), int(company_id)),
            )
            row = fetchone(cur)
            return map_row(row, _to_leave) if row else None

    def update_leave_status_if_pending(
        self,
        *,
        leave_id: int,
        company_id: int,
        status: LeaveStatus,
        approved_by: Optional[int],
        approved_at: datetime,
        admin_comments: Optional[str],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests lr
                JOIN employees e ON e.employee_id = lr.employee_id
                SET lr.status=%s, lr.approved_by=%s, lr.approved_at=%s, lr.admin_comments=%s
                WHERE lr.leave_id=%s AND e.company_id=%s AND lr.status=%s
                """,
                (
                    status.value,
                    approved_by,
                    approved_at,
                    admin_comments,
                    int(leave_id),
                    int(company_id),
                    LeaveStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0

    def list_for_employee(self, employee_id: int) -> Sequence[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{_SELECT} WHERE lr.employee_id=%s ORDER BY lr.created_at DESC, lr.leave_id DESC",
                (int(employee_id),),
            )
            return map_rows(fetchall(cur), _to_leave)

    def list_for_company(self, company_id: int, *, status: Optional[LeaveStatus] = None) -> Sequence[LeaveRequest]:
        clauses = ["e.company_id=%s"]
        params: list[object] = [int(company_id)]

        if status is not None:
            clauses.append("lr.status=%s")
            params.append(status.value)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{_SELECT} WHERE {where} ORDER BY lr.created_at DESC, lr.leave_id DESC",
                tuple(params),
            )
            return map_rows(fetchall(cur), _to_leave)
