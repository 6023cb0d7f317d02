from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is malformed. Always names the offending field."""

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class AuthorizationError(DomainError):
    """Raised when a caller lacks permission for an action."""


class NotFoundError(DomainError):
    """Entity id does not resolve within the caller's company.

    Ids that exist in another company raise the same error with the same text.
    """

    def __init__(self, entity: str):
        super().__init__(f"{entity} not found")
        self.entity = entity


class ConflictError(DomainError):
    """Operation is not allowed in the entity's current state."""

    code = "Conflict"
    default_message = "conflicting state"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message)


class AlreadyCheckedIn(ConflictError):
    code = "AlreadyCheckedIn"
    default_message = "already checked in today"


class AlreadyCheckedOut(ConflictError):
    code = "AlreadyCheckedOut"
    default_message = "already checked out today"


class NotCheckedIn(ConflictError):
    code = "NotCheckedIn"
    default_message = "must check in first"


class NotPending(ConflictError):
    code = "NotPending"
    default_message = "leave request has already been processed"


class EmployeeInactive(ConflictError):
    code = "EmployeeInactive"
    default_message = "employee is inactive"


class PayrollLocked(ConflictError):
    code = "PayrollLocked"
    default_message = "payroll record is no longer pending"


class PayrollNotProcessed(ConflictError):
    code = "PayrollNotProcessed"
    default_message = "payroll record must be processed before it is paid"


class RepositoryError(DomainError):
    """The store is unavailable or returned data of an unexpected shape.

    The only error kind a caller may reasonably retry with backoff.
    """
