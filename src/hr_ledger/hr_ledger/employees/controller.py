from __future__ import annotations

from flask import Flask

from ..common.datetime_utils import parse_iso_date
from ..common.http import error_response, internal_error, json_body, login_required, manager_required, ok
from ..core.exceptions import DomainError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.employee_service

    def _profile_from(data: dict):
        return service.build_profile(
            first_name=data.get("firstName", ""),
            last_name=data.get("lastName", ""),
            email=data.get("email", ""),
            department=data.get("department", ""),
            position=data.get("position", ""),
            start_date=parse_iso_date(data.get("startDate", ""), "start_date"),
            user_id=data.get("userId"),
            phone=data.get("phone"),
            salary=data.get("salary"),
            location=data.get("location"),
        )

    @app.route("/api/employees", methods=["GET"], endpoint="employees_list")
    @manager_required
    def employees_list(caller):
        try:
            return ok(service.list_for_company(caller))
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error()

    @app.route("/api/employees", methods=["POST"], endpoint="employees_onboard")
    @manager_required
    def employees_onboard(caller):
        try:
            return ok(service.onboard(caller, _profile_from(json_body())), 201)
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error()

    @app.route("/api/employees/me", methods=["GET"], endpoint="employees_me")
    @login_required
    def employees_me(caller):
        try:
            return ok(service.get_for_user(caller))
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error()

    @app.route("/api/employees/<int:employee_id>", methods=["GET"], endpoint="employees_get")
    @login_required
    def employees_get(caller, employee_id: int):
        try:
            return ok(service.get(caller, employee_id))
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error()

    @app.route("/api/employees/<int:employee_id>", methods=["PUT"], endpoint="employees_update")
    @manager_required
    def employees_update(caller, employee_id: int):
        try:
            return ok(service.update_profile(caller, employee_id, _profile_from(json_body())))
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error()

    @app.route("/api/employees/<int:employee_id>/status", methods=["POST"], endpoint="employees_status")
    @manager_required
    def employees_status(caller, employee_id: int):
        try:
            return ok(service.set_status(caller, employee_id, json_body().get("status")))
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error()
