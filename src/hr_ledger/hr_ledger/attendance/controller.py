from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import parse_clock_time, parse_iso_date, parse_optional_date
from ..common.http import (
    error_response,
    internal_error,
    json_body,
    login_required,
    manager_required,
    ok,
    own_employee_id,
)
from ..common.validators import require_int
from ..core.exceptions import DomainError
from ..container import Container
from .model import ManualAttendanceEntry


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    def _entry_from(data: dict, attendance_id=None) -> ManualAttendanceEntry:
        return ManualAttendanceEntry(
            employee_id=require_int(data.get("employeeId"), "employee_id"),
            work_date=parse_iso_date(data.get("date", ""), "date"),
            status=data.get("status", "present"),
            check_in=parse_clock_time(data.get("checkIn"), "check_in"),
            check_out=parse_clock_time(data.get("checkOut"), "check_out"),
            notes=data.get("notes"),
            attendance_id=attendance_id,
        )

    @app.route("/api/attendance/check-in", methods=["POST"], endpoint="attendance_check_in")
    @login_required
    def attendance_check_in(caller):
        try:
            return ok(service.check_in(caller, own_employee_id(caller)), 201)
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error()

    @app.route("/api/attendance/check-out", methods=["POST"], endpoint="attendance_check_out")
    @login_required
    def attendance_check_out(caller):
        try:
            return ok(service.check_out(caller, own_employee_id(caller)))
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error()

    @app.route("/api/attendance/status", methods=["GET"], endpoint="attendance_status")
    @login_required
    def attendance_status(caller):
        try:
            employee_id = request.args.get("employeeId")
            employee_id = require_int(employee_id, "employee_id") if employee_id else own_employee_id(caller)
            day = parse_optional_date(request.args.get("date"), "date")
            return ok({"employee_id": employee_id, "checked_in": service.is_checked_in(caller, employee_id, on=day)})
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error()

    @app.route("/api/attendance/me", methods=["GET"], endpoint="attendance_mine")
    @login_required
    def attendance_mine(caller):
        try:
            return ok(
                service.list_for_employee(
                    caller,
                    own_employee_id(caller),
                    start=parse_optional_date(request.args.get("start"), "start"),
                    end=parse_optional_date(request.args.get("end"), "end"),
                )
            )
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error()

    @app.route("/api/attendance", methods=["GET"], endpoint="attendance_list")
    @manager_required
    def attendance_list(caller):
        try:
            work_date = parse_optional_date(request.args.get("date"), "date")
            return ok(service.list_for_company(caller, work_date=work_date))
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error()

    @app.route("/api/attendance", methods=["POST"], endpoint="attendance_create")
    @manager_required
    def attendance_create(caller):
        try:
            return ok(service.manual_upsert(caller, _entry_from(json_body())), 201)
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error()

    @app.route("/api/attendance/<int:attendance_id>", methods=["PUT"], endpoint="attendance_edit")
    @manager_required
    def attendance_edit(caller, attendance_id: int):
        try:
            return ok(service.manual_upsert(caller, _entry_from(json_body(), attendance_id)))
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error()

    @app.route("/api/attendance/<int:attendance_id>", methods=["DELETE"], endpoint="attendance_delete")
    @manager_required
    def attendance_delete(caller, attendance_id: int):
        try:
            service.delete(caller, attendance_id)
            return ok({"deleted": attendance_id})
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error()
