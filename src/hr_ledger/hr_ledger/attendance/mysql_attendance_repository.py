from __future__ import annotations

from datetime import date, time
from typing import Any, Dict, Optional, Sequence

import mysql.connector

from ..core.enums import AttendanceStatus
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
    to_time,
)
from .model import AttendanceRecord
from .repository import AttendanceRepository

_SELECT = """
    SELECT a.attendance_id, a.employee_id, a.work_date, a.check_in, a.check_out,
           a.total_hours, a.status, a.notes, a.created_at
    FROM attendance a
"""

_ORDER = "ORDER BY a.work_date DESC, a.created_at DESC, a.attendance_id DESC"


def _to_record(r: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        check_in=to_time(r.get("check_in")),
        check_out=to_time(r.get("check_out")),
        total_hours=float(r.get("total_hours") or 0),
        status=AttendanceStatus(r["status"]),
        notes=r.get("notes"),
        created_at=to_datetime(r.get("created_at")),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _one(self, sql: str, params: tuple) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            row = fetchone(cur)
            return map_row(row, _to_record) if row else None

    def _guarded_write(self, sql: str, params: tuple) -> Optional[int]:
        """Run an INSERT/UPDATE that the open-session unique index may refuse.

        Returns lastrowid for inserts / rowcount for updates, None on a clash.
        """

        try:
            with db_cursor(self._conn_factory, passthrough_integrity=True) as (_, cur):
                cur.execute(sql, params)
                return int(cur.lastrowid) if sql.lstrip().upper().startswith("INSERT") else int(cur.rowcount)
        except mysql.connector.IntegrityError as exc:
            if is_duplicate_key(exc):
                return None
            raise RepositoryError(f"attendance write rejected: {exc}") from exc

    def find_open_session(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        return self._one(
            f"""
            {_SELECT}
            WHERE a.employee_id=%s AND a.work_date=%s
              AND a.check_in IS NOT NULL AND a.check_out IS NULL
            ORDER BY a.created_at DESC, a.attendance_id DESC
            LIMIT 1
            """,
            (int(employee_id), work_date),
        )

    def find_latest_for_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        return self._one(
            f"""
            {_SELECT}
            WHERE a.employee_id=%s AND a.work_date=%s
            ORDER BY a.created_at DESC, a.attendance_id DESC
            LIMIT 1
            """,
            (int(employee_id), work_date),
        )

    def insert_open_session(
        self,
        *,
        employee_id: int,
        work_date: date,
        check_in: time,
        status: AttendanceStatus,
    ) -> Optional[int]:
        return self._guarded_write(
            """
            INSERT INTO attendance(employee_id, work_date, check_in, check_out, total_hours, status)
            VALUES(%s,%s,%s,NULL,0,%s)
            """,
            (int(employee_id), work_date, check_in, status.value),
        )

    def start_session(self, *, attendance_id: int, check_in: time, status: AttendanceStatus) -> bool:
        updated = self._guarded_write(
            """
            UPDATE attendance
            SET check_in=%s, status=%s
            WHERE attendance_id=%s AND check_in IS NULL
            """,
            (check_in, status.value, int(attendance_id)),
        )
        return bool(updated)

    def close_session(self, *, attendance_id: int, check_out: time, total_hours: float) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance
                SET check_out=%s, total_hours=%s
                WHERE attendance_id=%s AND check_in IS NOT NULL AND check_out IS NULL
                """,
                (check_out, float(total_hours), int(attendance_id)),
            )
            return cur.rowcount > 0

    def get_by_id(self, attendance_id: int, *, company_id: int) -> Optional[AttendanceRecord]:
        return self._one(
            f"""
            {_SELECT}
            JOIN employees e ON e.employee_id = a.employee_id
            WHERE a.attendance_id=%s AND e.company_id=%s
            """,
            (int(attendance_id), int(company_id)),
        )

    def insert_manual(
        self,
        *,
        employee_id: int,
        work_date: date,
        check_in: Optional[time],
        check_out: Optional[time],
        total_hours: float,
        status: AttendanceStatus,
        notes: Optional[str],
    ) -> Optional[int]:
        return self._guarded_write(
            """
            INSERT INTO attendance(employee_id, work_date, check_in, check_out, total_hours, status, notes)
            VALUES(%s,%s,%s,%s,%s,%s,%s)
            """,
            (int(employee_id), work_date, check_in, check_out, float(total_hours), status.value, notes),
        )

    def update_manual(
        self,
        *,
        attendance_id: int,
        company_id: int,
        work_date: date,
        check_in: Optional[time],
        check_out: Optional[time],
        total_hours: float,
        status: AttendanceStatus,
        notes: Optional[str],
    ) -> Optional[bool]:
        updated = self._guarded_write(
            """
            UPDATE attendance a
            JOIN employees e ON e.employee_id = a.employee_id
            SET a.work_date=%s, a.check_in=%s, a.check_out=%s, a.total_hours=%s, a.status=%s, a.notes=%s
            WHERE a.attendance_id=%s AND e.company_id=%s
            """,
            (
                work_date,
                check_in,
                check_out,
                float(total_hours),
                status.value,
                notes,
                int(attendance_id),
                int(company_id),
            ),
        )
        if updated is None:
            return None
        return updated > 0

    def delete(self, attendance_id: int, *, company_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                DELETE a FROM attendance a
                JOIN employees e ON e.employee_id = a.employee_id
                WHERE a.attendance_id=%s AND e.company_id=%s
                """,
                (int(attendance_id), int(company_id)),
            )
            return cur.rowcount > 0

    def list_for_employee(
        self,
        employee_id: int,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        clauses = ["a.employee_id=%s"]
        params: list[object] = [int(employee_id)]

        if start_date is not None:
            clauses.append("a.work_date >= %s")
            params.append(start_date)
        if end_date is not None:
            clauses.append("a.work_date <= %s")
            params.append(end_date)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE {where} {_ORDER}", tuple(params))
            return map_rows(fetchall(cur), _to_record)

    def list_for_company(self, company_id: int, *, work_date: Optional[date] = None) -> Sequence[AttendanceRecord]:
        clauses = ["e.company_id=%s"]
        params: list[object] = [int(company_id)]

        if work_date is not None:
            clauses.append("a.work_date=%s")
            params.append(work_date)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                {_SELECT}
                JOIN employees e ON e.employee_id = a.employee_id
                WHERE {where}
                {_ORDER}
                """,
                tuple(params),
            )
            return map_rows(fetchall(cur), _to_record)
