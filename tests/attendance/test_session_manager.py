from __future__ import annotations

from datetime import date, datetime, time

import pytest

from src.hr_ledger.hr_ledger.attendance.model import ManualAttendanceEntry
from src.hr_ledger.hr_ledger.core.enums import AttendanceStatus
from src.hr_ledger.hr_ledger.core.exceptions import (
    AlreadyCheckedIn,
    AlreadyCheckedOut,
    AuthorizationError,
    EmployeeInactive,
    NotCheckedIn,
    NotFoundError,
    ValidationError,
)


def test_full_day_session_totals_hours(container, alice, clock):
    svc = container.attendance_service

    clock.now = datetime(2024, 3, 4, 9, 0, 0)
    opened = svc.check_in(alice, 7)
    assert opened.is_open
    assert opened.check_in == time(9, 0)
    assert opened.status == AttendanceStatus.PRESENT
    assert svc.is_checked_in(alice, 7) is True

    clock.now = datetime(2024, 3, 4, 17, 30, 0)
    closed = svc.check_out(alice, 7)
    assert closed.attendance_id == opened.attendance_id
    assert closed.check_out == time(17, 30)
    assert closed.total_hours == 8.5
    assert not closed.is_open
    assert svc.is_checked_in(alice, 7) is False


def test_total_hours_rounded_to_two_decimals(container, alice):
    svc = container.attendance_service

    svc.check_in(alice, 7, at=datetime(2024, 3, 4, 8, 55, 0))
    closed = svc.check_out(alice, 7, at=datetime(2024, 3, 4, 17, 5, 0))

    assert closed.total_hours == 8.17


def test_second_check_in_while_open_is_rejected(container, alice, attendance_repo):
    svc = container.attendance_service
    svc.check_in(alice, 7, at=datetime(2024, 3, 4, 9, 0, 0))

    with pytest.raises(AlreadyCheckedIn):
        svc.check_in(alice, 7, at=datetime(2024, 3, 4, 9, 5, 0))

    assert len(attendance_repo.list_for_employee(7)) == 1


def test_check_out_without_session(container, alice):
    with pytest.raises(NotCheckedIn):
        container.attendance_service.check_out(alice, 7, at=datetime(2024, 3, 4, 17, 0, 0))


def test_check_out_twice(container, alice):
    svc = container.attendance_service
    svc.check_in(alice, 7, at=datetime(2024, 3, 4, 9, 0, 0))
    svc.check_out(alice, 7, at=datetime(2024, 3, 4, 12, 0, 0))

    with pytest.raises(AlreadyCheckedOut):
        svc.check_out(alice, 7, at=datetime(2024, 3, 4, 13, 0, 0))


def test_check_in_after_closed_session_opens_a_new_one(container, alice):
    svc = container.attendance_service
    first = svc.check_in(alice, 7, at=datetime(2024, 3, 4, 8, 0, 0))
    svc.check_out(alice, 7, at=datetime(2024, 3, 4, 12, 0, 0))

    second = svc.check_in(alice, 7, at=datetime(2024, 3, 4, 13, 0, 0))
    assert second.attendance_id != first.attendance_id
    assert second.is_open

    closed = svc.check_out(alice, 7, at=datetime(2024, 3, 4, 17, 0, 0))
    assert closed.attendance_id == second.attendance_id
    assert closed.total_hours == 4.0


def test_open_session_from_previous_day_does_not_block_today(container, alice):
    svc = container.attendance_service
    stale = svc.check_in(alice, 7, at=datetime(2024, 3, 3, 9, 0, 0))

    today = svc.check_in(alice, 7, at=datetime(2024, 3, 4, 9, 0, 0))

    assert today.attendance_id != stale.attendance_id
    assert svc.is_checked_in(alice, 7, on=date(2024, 3, 3)) is True
    assert svc.is_checked_in(alice, 7, on=date(2024, 3, 4)) is True


def test_negative_span_is_clamped_and_flagged(container, alice):
    svc = container.attendance_service
    svc.check_in(alice, 7, at=datetime(2024, 3, 4, 22, 0, 0))

    closed = svc.check_out(alice, 7, at=datetime(2024, 3, 4, 6, 0, 0))

    assert closed.total_hours == 0.0
    assert closed.needs_review is True
    assert closed.check_in == time(22, 0)
    assert closed.check_out == time(6, 0)


def test_inactive_employee_cannot_check_in(container, admin):
    with pytest.raises(EmployeeInactive):
        container.attendance_service.check_in(admin, 9, at=datetime(2024, 3, 4, 9, 0, 0))


def test_employee_cannot_act_for_someone_else(container, alice):
    with pytest.raises(AuthorizationError):
        container.attendance_service.check_in(alice, 42, at=datetime(2024, 3, 4, 9, 0, 0))


def test_manager_may_check_in_on_behalf(container, admin):
    record = container.attendance_service.check_in(admin, 42, at=datetime(2024, 3, 4, 9, 0, 0))
    assert record.employee_id == 42


def test_other_company_sees_not_found(container, alice, other_admin):
    svc = container.attendance_service
    record = svc.check_in(alice, 7, at=datetime(2024, 3, 4, 9, 0, 0))

    with pytest.raises(NotFoundError) as foreign:
        svc.get(other_admin, record.attendance_id)
    with pytest.raises(NotFoundError) as unknown:
        svc.get(other_admin, 9999)
    assert str(foreign.value) == str(unknown.value)

    with pytest.raises(NotFoundError):
        svc.check_in(other_admin, 7, at=datetime(2024, 3, 4, 9, 0, 0))
    assert svc.list_for_company(other_admin) == []


def test_manual_entry_computes_hours(container, admin):
    record = container.attendance_service.manual_upsert(
        admin,
        ManualAttendanceEntry(
            employee_id=7,
            work_date=date(2024, 2, 28),
            status=AttendanceStatus.LATE,
            check_in=time(9, 45),
            check_out=time(18, 0),
            notes="badge reader down",
        ),
    )

    assert record.total_hours == 8.25
    assert record.status == AttendanceStatus.LATE
    assert record.notes == "badge reader down"


def test_manual_entry_rejects_reversed_times(container, admin):
    with pytest.raises(ValidationError) as exc:
        container.attendance_service.manual_upsert(
            admin,
            ManualAttendanceEntry(
                employee_id=7,
                work_date=date(2024, 2, 28),
                status="present",
                check_in=time(18, 0),
                check_out=time(9, 0),
            ),
        )
    assert exc.value.field == "check_out"


def test_manual_entry_requires_manager(container, alice):
    with pytest.raises(AuthorizationError):
        container.attendance_service.manual_upsert(
            alice,
            ManualAttendanceEntry(employee_id=7, work_date=date(2024, 2, 28), status="absent"),
        )


def test_manual_edit_and_delete(container, admin, alice):
    svc = container.attendance_service
    svc.check_in(alice, 7, at=datetime(2024, 3, 4, 9, 0, 0))
    record = svc.check_out(alice, 7, at=datetime(2024, 3, 4, 17, 0, 0))

    edited = svc.manual_upsert(
        admin,
        ManualAttendanceEntry(
            employee_id=7,
            work_date=record.work_date,
            status="half_day",
            check_in=time(9, 0),
            check_out=time(13, 0),
            attendance_id=record.attendance_id,
        ),
    )
    assert edited.total_hours == 4.0
    assert edited.status == AttendanceStatus.HALF_DAY

    svc.delete(admin, record.attendance_id)
    with pytest.raises(NotFoundError):
        svc.get(admin, record.attendance_id)
    with pytest.raises(NotFoundError):
        svc.delete(admin, record.attendance_id)


def test_check_in_fills_a_prepared_absent_row(container, admin, alice):
    svc = container.attendance_service
    prepared = svc.manual_upsert(
        admin,
        ManualAttendanceEntry(employee_id=7, work_date=date(2024, 3, 4), status="absent"),
    )

    opened = svc.check_in(alice, 7, at=datetime(2024, 3, 4, 10, 15, 0))

    assert opened.attendance_id == prepared.attendance_id
    assert opened.status == AttendanceStatus.PRESENT
    assert opened.is_open


def test_history_filters_by_range(container, alice):
    svc = container.attendance_service
    for day in (1, 2, 3):
        svc.check_in(alice, 7, at=datetime(2024, 3, day, 9, 0, 0))
        svc.check_out(alice, 7, at=datetime(2024, 3, day, 17, 0, 0))

    rows = svc.list_for_employee(alice, 7, start=date(2024, 3, 2), end=date(2024, 3, 3))
    assert [r.work_date for r in rows] == [date(2024, 3, 3), date(2024, 3, 2)]

    with pytest.raises(ValidationError):
        svc.list_for_employee(alice, 7, start=date(2024, 3, 3), end=date(2024, 3, 1))


def test_later_admin_row_does_not_hide_the_open_session(container, admin, alice):
    svc = container.attendance_service
    opened = svc.manual_upsert(
        admin,
        ManualAttendanceEntry(employee_id=7, work_date=date(2024, 3, 4), status="present", check_in=time(8, 0)),
    )
    svc.manual_upsert(admin, ManualAttendanceEntry(employee_id=7, work_date=date(2024, 3, 4), status="absent"))

    assert svc.is_checked_in(alice, 7, on=date(2024, 3, 4)) is True
    with pytest.raises(AlreadyCheckedIn):
        svc.check_in(alice, 7, at=datetime(2024, 3, 4, 9, 0, 0))

    closed = svc.check_out(alice, 7, at=datetime(2024, 3, 4, 17, 0, 0))
    assert closed.attendance_id == opened.attendance_id
    assert closed.total_hours == 9.0
    assert svc.is_checked_in(alice, 7, on=date(2024, 3, 4)) is False


def test_prepared_row_is_not_filled_while_a_session_is_open(container, admin, alice, attendance_repo):
    svc = container.attendance_service
    svc.manual_upsert(admin, ManualAttendanceEntry(employee_id=7, work_date=date(2024, 3, 4), status="absent"))
    svc.check_in(alice, 7, at=datetime(2024, 3, 4, 8, 0, 0))

    with pytest.raises(AlreadyCheckedIn):
        svc.check_in(alice, 7, at=datetime(2024, 3, 4, 8, 1, 0))

    assert [r.is_open for r in attendance_repo.list_for_employee(7)].count(True) == 1


def test_open_row_cannot_be_started_twice_in_store(container, admin, attendance_repo):
    svc = container.attendance_service
    prepared = svc.manual_upsert(
        admin, ManualAttendanceEntry(employee_id=7, work_date=date(2024, 3, 4), status="absent")
    )
    attendance_repo.insert_open_session(
        employee_id=7, work_date=date(2024, 3, 4), check_in=time(8, 0), status=AttendanceStatus.PRESENT
    )

    started = attendance_repo.start_session(
        attendance_id=prepared.attendance_id, check_in=time(8, 5), status=AttendanceStatus.PRESENT
    )

    assert started is False
    assert svc.get(admin, prepared.attendance_id).check_in is None


def test_losing_the_insert_race_reports_already_checked_in(container, alice, attendance_repo, monkeypatch):
    monkeypatch.setattr(attendance_repo, "insert_open_session", lambda **_: None)

    with pytest.raises(AlreadyCheckedIn):
        container.attendance_service.check_in(alice, 7, at=datetime(2024, 3, 4, 9, 0, 0))


def test_losing_the_fill_race_reports_already_checked_in(container, admin, alice, attendance_repo, monkeypatch):
    svc = container.attendance_service
    svc.manual_upsert(admin, ManualAttendanceEntry(employee_id=7, work_date=date(2024, 3, 4), status="absent"))
    monkeypatch.setattr(attendance_repo, "start_session", lambda **_: False)

    with pytest.raises(AlreadyCheckedIn):
        svc.check_in(alice, 7, at=datetime(2024, 3, 4, 9, 0, 0))


def test_losing_the_close_race_reports_already_checked_out(container, alice, attendance_repo, monkeypatch):
    svc = container.attendance_service
    svc.check_in(alice, 7, at=datetime(2024, 3, 4, 9, 0, 0))
    monkeypatch.setattr(attendance_repo, "close_session", lambda **_: False)

    with pytest.raises(AlreadyCheckedOut):
        svc.check_out(alice, 7, at=datetime(2024, 3, 4, 17, 0, 0))


def test_company_listing_is_newest_day_first(container, admin, alice, bob):
    svc = container.attendance_service
    svc.check_in(alice, 7, at=datetime(2024, 3, 1, 9, 0, 0))
    svc.check_in(bob, 42, at=datetime(2024, 3, 2, 9, 0, 0))
    svc.check_in(alice, 7, at=datetime(2024, 3, 2, 9, 5, 0))

    rows = svc.list_for_company(admin)

    assert [(r.work_date.day, r.employee_id) for r in rows] == [(2, 7), (2, 42), (1, 7)]
    assert [r.employee_id for r in svc.list_for_company(admin, work_date=date(2024, 3, 1))] == [7]
