from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import parse_iso_date, parse_optional_date
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
    service = container.payroll_service

    @app.route("/api/payroll", methods=["GET"], endpoint="payroll_list")
    @manager_required
    def payroll_list(caller):
        try:
            return ok(service.list_for_company(caller))
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error()

    @app.route("/api/payroll", methods=["POST"], endpoint="payroll_create")
    @manager_required
    def payroll_create(caller):
        try:
            data = json_body()
            record = service.create(
                caller,
                employee_id=require_int(data.get("employeeId"), "employee_id"),
                period_start=parse_iso_date(data.get("payPeriodStart", ""), "pay_period_start"),
                period_end=parse_iso_date(data.get("payPeriodEnd", ""), "pay_period_end"),
                base_salary=data.get("baseSalary"),
                bonus=data.get("bonus", 0),
                deductions=data.get("deductions", 0),
                status=data.get("status") or "pending",
                idempotency_key=data.get("idempotencyKey") or request.headers.get("Idempotency-Key"),
            )
            return ok(record, 201)
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error()

    @app.route("/api/payroll/me", methods=["GET"], endpoint="payroll_mine")
    @login_required
    def payroll_mine(caller):
        try:
            return ok(service.list_for_employee(caller, own_employee_id(caller)))
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error()

    @app.route("/api/payroll/<int:payroll_id>", methods=["GET"], endpoint="payroll_get")
    @login_required
    def payroll_get(caller, payroll_id: int):
        try:
            return ok(service.get(caller, payroll_id))
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error()

    @app.route("/api/payroll/<int:payroll_id>", methods=["PUT"], endpoint="payroll_update")
    @manager_required
    def payroll_update(caller, payroll_id: int):
        try:
            data = json_body()
            record = service.update_amounts(
                caller,
                payroll_id,
                base_salary=data.get("baseSalary"),
                bonus=data.get("bonus", 0),
                deductions=data.get("deductions", 0),
                period_start=parse_optional_date(data.get("payPeriodStart"), "pay_period_start"),
                period_end=parse_optional_date(data.get("payPeriodEnd"), "pay_period_end"),
            )
            return ok(record)
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error()

    @app.route("/api/payroll/<int:payroll_id>/process", methods=["POST"], endpoint="payroll_process")
    @manager_required
    def payroll_process(caller, payroll_id: int):
        try:
            return ok(service.process(caller, payroll_id))
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error()

    @app.route("/api/payroll/<int:payroll_id>/pay", methods=["POST"], endpoint="payroll_pay")
    @manager_required
    def payroll_pay(caller, payroll_id: int):
        try:
            return ok(service.mark_paid(caller, payroll_id))
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error()
