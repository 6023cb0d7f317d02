"""Helpers shared by the Flask controllers.

Controllers stay thin: resolve the caller from the session, parse the request,
call one service operation and serialize the result.
"""

from __future__ import annotations

import dataclasses
import logging
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from functools import wraps
from typing import Any, Optional

from flask import jsonify, request, session

from ..core.context import Caller
from ..core.enums import Role
from ..core.exceptions import (
    AuthorizationError,
    ConflictError,
    DomainError,
    NotFoundError,
    RepositoryError,
    ValidationError,
)

logger = logging.getLogger(__name__)

SESSION_KEYS = ("user_id", "role", "company_id")


def current_caller() -> Optional[Caller]:
    """Build the caller from the session filled in by the identity provider."""

    if any(k not in session for k in SESSION_KEYS):
        return None
    try:
        role = Role(session["role"])
    except ValueError:
        return None
    employee_id = session.get("employee_id")
    return Caller(
        user_id=int(session["user_id"]),
        role=role,
        company_id=int(session["company_id"]),
        employee_id=int(employee_id) if employee_id is not None else None,
    )


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        caller = current_caller()
        if caller is None:
            return jsonify({"error": "Unauthorized"}), 401
        return view(caller, *args, **kwargs)

    return wrapper


def manager_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        caller = current_caller()
        if caller is None:
            return jsonify({"error": "Unauthorized"}), 401
        if not caller.is_manager:
            return jsonify({"error": "Forbidden"}), 403
        return view(caller, *args, **kwargs)

    return wrapper


def own_employee_id(caller: Caller) -> int:
    """Employee profile linked to the caller's account; 404 when there is none."""

    if caller.employee_id is None:
        raise NotFoundError("Employee")
    return caller.employee_id


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def to_jsonable(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        out = {f.name: to_jsonable(getattr(value, f.name)) for f in dataclasses.fields(value)}
        # Derived flags are part of the read model.
        for name in getattr(value, "__json_extra__", ()):
            out[name] = to_jsonable(getattr(value, name))
        return out
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    if isinstance(value, dict):
        return {k: to_jsonable(v) for k, v in value.items()}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d %H:%M:%S")
    if isinstance(value, date):
        return value.strftime("%Y-%m-%d")
    if isinstance(value, time):
        return value.strftime("%H:%M")
    return value


def ok(value: Any, status: int = 200):
    return jsonify(to_jsonable(value)), status


def error_response(exc: DomainError):
    """Map the ledger error taxonomy onto HTTP status codes."""

    if isinstance(exc, ValidationError):
        return jsonify({"error": str(exc), "field": exc.field}), 400
    if isinstance(exc, AuthorizationError):
        return jsonify({"error": str(exc)}), 403
    if isinstance(exc, NotFoundError):
        return jsonify({"error": str(exc)}), 404
    if isinstance(exc, ConflictError):
        return jsonify({"error": str(exc), "code": exc.code}), 409
    if isinstance(exc, RepositoryError):
        logger.error("repository failure: %s", exc)
        return jsonify({"error": "Storage unavailable"}), 503
    return jsonify({"error": str(exc)}), 400


def internal_error():
    logger.exception("unhandled error in %s %s", request.method, request.path)
    return jsonify({"error": "Internal server error"}), 500
