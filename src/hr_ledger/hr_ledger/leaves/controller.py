from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import parse_iso_date
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


def register(app: Flask, container: Container) -> None:
    service = container.leave_service

    @app.route("/api/leaves", methods=["GET"], endpoint="leaves_list")
    @manager_required
    def leaves_list(caller):
        try:
            return ok(service.list_for_company(caller, status=request.args.get("status") or None))
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error()

    @app.route("/api/leaves", methods=["POST"], endpoint="leaves_submit")
    @login_required
    def leaves_submit(caller):
        try:
            data = json_body()
            employee_id = data.get("employeeId")
            employee_id = require_int(employee_id, "employee_id") if employee_id is not None else own_employee_id(caller)
            leave = service.submit(
                caller,
                employee_id=employee_id,
                leave_type=data.get("leaveType"),
                start_date=parse_iso_date(data.get("startDate", ""), "start_date"),
                end_date=parse_iso_date(data.get("endDate", ""), "end_date"),
                reason=data.get("reason"),
            )
            return ok(leave, 201)
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error()

    @app.route("/api/leaves/me", methods=["GET"], endpoint="leaves_mine")
    @login_required
    def leaves_mine(caller):
        try:
            return ok(service.list_for_employee(caller, own_employee_id(caller)))
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error()

    @app.route("/api/leaves/<int:leave_id>", methods=["GET"], endpoint="leaves_get")
    @login_required
    def leaves_get(caller, leave_id: int):
        try:
            return ok(service.get(caller, leave_id))
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error()

    @app.route("/api/leaves/<int:leave_id>/adjudicate", methods=["POST"], endpoint="leaves_adjudicate")
    @manager_required
    def leaves_adjudicate(caller, leave_id: int):
        try:
            data = json_body()
            return ok(service.adjudicate(caller, leave_id, data.get("decision"), comments=data.get("comments")))
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error()
