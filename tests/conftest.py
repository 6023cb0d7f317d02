from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

import pytest

from src.hr_ledger.hr_ledger.attendance.model import AttendanceRecord
from src.hr_ledger.hr_ledger.container import assemble
from src.hr_ledger.hr_ledger.core.context import Caller
from src.hr_ledger.hr_ledger.core.enums import EmployeeStatus, LeaveStatus, PayrollStatus, Role
from src.hr_ledger.hr_ledger.employees.model import Employee
from src.hr_ledger.hr_ledger.leaves.model import LeaveRequest
from src.hr_ledger.hr_ledger.payroll.model import PayrollRecord


class FixedClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class InMemoryEmployees:
    def __init__(self, employees=()):
        self._by_id: dict[int, Employee] = {e.employee_id: e for e in employees}
        self._next_id = max(self._by_id, default=0) + 1

    def company_of(self, employee_id: int) -> Optional[int]:
        e = self._by_id.get(int(employee_id))
        return e.company_id if e else None

    def get_by_id(self, employee_id, *, company_id):
        e = self._by_id.get(int(employee_id))
        return e if e and e.company_id == company_id else None

    def get_by_user_id(self, user_id, *, company_id):
        for e in self._by_id.values():
            if e.user_id == user_id and e.company_id == company_id:
                return e
        return None

    def list_for_company(self, company_id):
        return [e for e in sorted(self._by_id.values(), key=lambda e: e.employee_code) if e.company_id == company_id]

    def last_employee_code(self, company_id):
        codes = [e.employee_code for e in self._by_id.values() if e.company_id == company_id]
        return max(codes) if codes else None

    def insert_employee(self, *, company_id, employee_code, profile):
        if any(e.company_id == company_id and e.employee_code == employee_code for e in self._by_id.values()):
            return None
        employee_id = self._next_id
        self._next_id += 1
        self._by_id[employee_id] = Employee(
            employee_id=employee_id,
            employee_code=employee_code,
            first_name=profile.first_name,
            last_name=profile.last_name,
            email=profile.email,
            department=profile.department,
            position=profile.position,
            status=EmployeeStatus.ACTIVE,
            start_date=profile.start_date,
            company_id=company_id,
            user_id=profile.user_id,
            phone=profile.phone,
            salary=profile.salary,
            location=profile.location,
        )
        return employee_id

    def update_profile(self, employee_id, *, company_id, profile):
        e = self.get_by_id(employee_id, company_id=company_id)
        if e is None:
            return False
        self._by_id[e.employee_id] = replace(
            e,
            first_name=profile.first_name,
            last_name=profile.last_name,
            email=profile.email,
            department=profile.department,
            position=profile.position,
            start_date=profile.start_date,
            user_id=profile.user_id,
            phone=profile.phone,
            salary=profile.salary,
            location=profile.location,
        )
        return True

    def set_status(self, employee_id, *, company_id, status):
        e = self.get_by_id(employee_id, company_id=company_id)
        if e is None:
            return False
        self._by_id[e.employee_id] = replace(e, status=status)
        return True


class InMemoryAttendance:
    """Mirrors the store: one open session per employee and date, conditional writes."""

    def __init__(self, employees: InMemoryEmployees):
        self._employees = employees
        self._rows: dict[int, AttendanceRecord] = {}
        self._next_id = 1

    def _has_open(self, employee_id, work_date, *, exclude=None):
        return any(
            r.is_open and r.employee_id == employee_id and r.work_date == work_date and r.attendance_id != exclude
            for r in self._rows.values()
        )

    def _add(self, **fields):
        attendance_id = self._next_id
        self._next_id += 1
        self._rows[attendance_id] = AttendanceRecord(
            attendance_id=attendance_id,
            created_at=datetime(2024, 1, 1, 0, 0, 0, attendance_id),
            **fields,
        )
        return attendance_id

    def find_open_session(self, employee_id, work_date):
        for r in self._rows.values():
            if r.employee_id == employee_id and r.work_date == work_date and r.is_open:
                return r
        return None

    def find_latest_for_date(self, employee_id, work_date):
        rows = [r for r in self._rows.values() if r.employee_id == employee_id and r.work_date == work_date]
        return max(rows, key=lambda r: r.attendance_id) if rows else None

    def insert_open_session(self, *, employee_id, work_date, check_in, status):
        if self._has_open(employee_id, work_date):
            return None
        return self._add(
            employee_id=employee_id,
            work_date=work_date,
            check_in=check_in,
            check_out=None,
            total_hours=0.0,
            status=status,
        )

    def start_session(self, *, attendance_id, check_in, status):
        r = self._rows.get(attendance_id)
        if r is None or r.check_in is not None:
            return False
        if self._has_open(r.employee_id, r.work_date, exclude=attendance_id):
            return False
        self._rows[attendance_id] = replace(r, check_in=check_in, status=status)
        return True

    def close_session(self, *, attendance_id, check_out, total_hours):
        r = self._rows.get(attendance_id)
        if r is None or r.check_in is None or r.check_out is not None:
            return False
        self._rows[attendance_id] = replace(r, check_out=check_out, total_hours=total_hours)
        return True

    def get_by_id(self, attendance_id, *, company_id):
        r = self._rows.get(int(attendance_id))
        if r is None or self._employees.company_of(r.employee_id) != company_id:
            return None
        return r

    def insert_manual(self, *, employee_id, work_date, check_in, check_out, total_hours, status, notes):
        if check_in is not None and check_out is None and self._has_open(employee_id, work_date):
            return None
        return self._add(
            employee_id=employee_id,
            work_date=work_date,
            check_in=check_in,
            check_out=check_out,
            total_hours=total_hours,
            status=status,
            notes=notes,
        )

    def update_manual(self, *, attendance_id, company_id, work_date, check_in, check_out, total_hours, status, notes):
        r = self.get_by_id(attendance_id, company_id=company_id)
        if r is None:
            return False
        if check_in is not None and check_out is None and self._has_open(r.employee_id, work_date, exclude=r.attendance_id):
            return None
        self._rows[r.attendance_id] = replace(
            r,
            work_date=work_date,
            check_in=check_in,
            check_out=check_out,
            total_hours=total_hours,
            status=status,
            notes=notes,
        )
        return True

    def delete(self, attendance_id, *, company_id):
        if self.get_by_id(attendance_id, company_id=company_id) is None:
            return False
        del self._rows[int(attendance_id)]
        return True

    def list_for_employee(self, employee_id, *, start_date=None, end_date=None):
        rows = [
            r
            for r in self._rows.values()
            if r.employee_id == employee_id
            and (start_date is None or r.work_date >= start_date)
            and (end_date is None or r.work_date <= end_date)
        ]
        return sorted(rows, key=lambda r: (r.work_date, r.attendance_id), reverse=True)

    def list_for_company(self, company_id, *, work_date=None):
        rows = [
            r
            for r in self._rows.values()
            if self._employees.company_of(r.employee_id) == company_id and (work_date is None or r.work_date == work_date)
        ]
        return sorted(rows, key=lambda r: (r.work_date, r.attendance_id), reverse=True)


class InMemoryLeaves:
    def __init__(self, employees: InMemoryEmployees):
        self._employees = employees
        self._rows: dict[int, LeaveRequest] = {}
        self._next_id = 1

    def insert_leave(self, *, employee_id, leave_type, start_date, end_date, days, reason):
        leave_id = self._next_id
        self._next_id += 1
        self._rows[leave_id] = LeaveRequest(
            leave_id=leave_id,
            employee_id=employee_id,
            leave_type=leave_type,
            start_date=start_date,
            end_date=end_date,
            days=days,
            status=LeaveStatus.PENDING,
            reason=reason,
            created_at=datetime(2024, 1, 1, 9, 0, 0),
        )
        return leave_id

    def get_leave(self, leave_id, *, company_id):
        r = self._rows.get(int(leave_id))
        if r is None or self._employees.company_of(r.employee_id) != company_id:
            return None
        return r

    def update_leave_status_if_pending(self, *, leave_id, company_id, status, approved_by, approved_at, admin_comments):
        r = self.get_leave(leave_id, company_id=company_id)
        if r is None or r.status != LeaveStatus.PENDING:
            return False
        self._rows[r.leave_id] = replace(
            r,
            status=status,
            approved_by=approved_by,
            approved_at=approved_at,
            admin_comments=admin_comments,
        )
        return True

    def list_for_employee(self, employee_id):
        return [r for r in reversed(list(self._rows.values())) if r.employee_id == employee_id]

    def list_for_company(self, company_id, *, status=None):
        return [
            r
            for r in reversed(list(self._rows.values()))
            if self._employees.company_of(r.employee_id) == company_id and (status is None or r.status == status)
        ]


class InMemoryPayroll:
    def __init__(self, employees: InMemoryEmployees):
        self._employees = employees
        self._rows: dict[int, PayrollRecord] = {}
        self._next_id = 1
        self.inserts = 0

    def insert_payroll(self, *, employee_id, period_start, period_end, amounts, status, processed_at=None, idempotency_key=None):
        if idempotency_key is not None and self.find_by_idempotency_key(employee_id, idempotency_key):
            return None
        self.inserts += 1
        payroll_id = self._next_id
        self._next_id += 1
        self._rows[payroll_id] = PayrollRecord(
            payroll_id=payroll_id,
            employee_id=employee_id,
            pay_period_start=period_start,
            pay_period_end=period_end,
            base_salary=amounts.base_salary,
            bonus=amounts.bonus,
            deductions=amounts.deductions,
            net_pay=amounts.net_pay,
            status=status,
            created_at=datetime(2024, 1, 31, 12, 0, 0),
            processed_at=processed_at,
            idempotency_key=idempotency_key,
        )
        return payroll_id

    def find_by_idempotency_key(self, employee_id, idempotency_key):
        for r in self._rows.values():
            if r.employee_id == employee_id and r.idempotency_key == idempotency_key:
                return r
        return None

    def get_payroll(self, payroll_id, *, company_id):
        r = self._rows.get(int(payroll_id))
        if r is None or self._employees.company_of(r.employee_id) != company_id:
            return None
        return r

    def transition_status(self, *, payroll_id, company_id, from_status, to_status, processed_at=None):
        r = self.get_payroll(payroll_id, company_id=company_id)
        if r is None or r.status != from_status:
            return False
        self._rows[r.payroll_id] = replace(
            r,
            status=to_status,
            processed_at=processed_at if processed_at is not None else r.processed_at,
        )
        return True

    def update_amounts_if_pending(self, *, payroll_id, company_id, period_start, period_end, amounts):
        r = self.get_payroll(payroll_id, company_id=company_id)
        if r is None or r.status != PayrollStatus.PENDING:
            return False
        self._rows[r.payroll_id] = replace(
            r,
            pay_period_start=period_start,
            pay_period_end=period_end,
            base_salary=amounts.base_salary,
            bonus=amounts.bonus,
            deductions=amounts.deductions,
            net_pay=amounts.net_pay,
        )
        return True

    def _newest_period_first(self, rows):
        return sorted(rows, key=lambda r: (r.pay_period_start, r.payroll_id), reverse=True)

    def list_for_employee(self, employee_id):
        return self._newest_period_first(r for r in self._rows.values() if r.employee_id == employee_id)

    def list_for_company(self, company_id):
        return self._newest_period_first(
            r for r in self._rows.values() if self._employees.company_of(r.employee_id) == company_id
        )


def make_employee(employee_id, code, first, *, company_id=1, user_id=None, status=EmployeeStatus.ACTIVE):
    return Employee(
        employee_id=employee_id,
        employee_code=code,
        first_name=first,
        last_name="Tester",
        email=f"{first.lower()}@example.com",
        department="Engineering",
        position="Developer",
        status=status,
        start_date=date(2023, 1, 2),
        company_id=company_id,
        user_id=user_id,
        salary=Decimal("3000.00"),
    )


@pytest.fixture
def clock():
    return FixedClock(datetime(2024, 3, 4, 9, 0, 0))


@pytest.fixture
def employees_repo():
    return InMemoryEmployees(
        [
            make_employee(7, "EMP001", "Alice", user_id=107),
            make_employee(42, "EMP002", "Bob", user_id=142),
            make_employee(9, "EMP003", "Carol", user_id=109, status=EmployeeStatus.INACTIVE),
            make_employee(3, "EMP004", "Dan", user_id=103),
            make_employee(50, "EMP001", "Gina", company_id=2, user_id=150),
        ]
    )


@pytest.fixture
def attendance_repo(employees_repo):
    return InMemoryAttendance(employees_repo)


@pytest.fixture
def leaves_repo(employees_repo):
    return InMemoryLeaves(employees_repo)


@pytest.fixture
def payroll_repo(employees_repo):
    return InMemoryPayroll(employees_repo)


@pytest.fixture
def container(employees_repo, attendance_repo, leaves_repo, payroll_repo, clock):
    return assemble(
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        leaves_repo=leaves_repo,
        payroll_repo=payroll_repo,
        clock=clock,
    )


@pytest.fixture
def admin():
    return Caller(user_id=1, role=Role.ADMIN, company_id=1)


@pytest.fixture
def hr_manager():
    return Caller(user_id=103, role=Role.HR_MANAGER, company_id=1, employee_id=3)


@pytest.fixture
def alice():
    return Caller(user_id=107, role=Role.EMPLOYEE, company_id=1, employee_id=7)


@pytest.fixture
def bob():
    return Caller(user_id=142, role=Role.EMPLOYEE, company_id=1, employee_id=42)


@pytest.fixture
def other_admin():
    return Caller(user_id=3, role=Role.ADMIN, company_id=2)
