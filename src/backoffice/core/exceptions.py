from __future__ import annotations

from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base exception for business rule violations.

    Every error carries a machine-readable ``kind`` and a human-readable message,
    which is what the HTTP layer exposes to callers.
    """

    kind = "domain_error"

    def __init__(self, message: str = "", *, error_data: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_data = error_data or {}

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"error": self.kind, "message": self.message}
        out.update(self.error_data)
        return out


class ValidationError(DomainError):
    """Raised when input data is malformed or missing."""

    kind = "validation_error"

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, error_data={"field": field} if field else None)
        self.field = field


class NotFoundError(DomainError):
    """Referenced entity is absent or not owned by the caller's business."""

    kind = "not_found"


class ConflictError(DomainError):
    """Uniqueness violation."""

    kind = "conflict"


class InvalidStateError(DomainError):
    """Operation not permitted given the current status of a record."""

    kind = "invalid_state"


class InternalError(DomainError):
    """Data-store failure or unexpected exception."""

    kind = "internal_error"


class AuthenticationError(DomainError):
    """Raised when the request carries no business identity."""

    kind = "authentication_error"


class EmployeeNotFoundError(NotFoundError):
    def __init__(self, employee_id: int):
        super().__init__(f"Employee {employee_id} not found", error_data={"employee_id": employee_id})
        self.employee_id = employee_id


class AlreadyClockedInError(ConflictError):
    def __init__(self, message: str = "Already clocked in today"):
        super().__init__(message)


class DuplicateAttendanceError(ConflictError):
    def __init__(self, message: str = "Attendance record already exists for this date"):
        super().__init__(message)


class NoOpenClockInError(InvalidStateError):
    def __init__(self, message: str = "No clock-in record found for today"):
        super().__init__(message)


class AlreadyClockedOutError(InvalidStateError):
    def __init__(self, message: str = "Already clocked out today"):
        super().__init__(message)


class DuplicatePayrollError(ConflictError):
    def __init__(self, message: str = "Payroll already exists for this period"):
        super().__init__(message)


class InvalidTransitionError(InvalidStateError):
    pass


class PayrollLockedError(InvalidStateError):
    def __init__(self, message: str = "Payroll has already been paid"):
        super().__init__(message)


class ExceedsBalanceError(InvalidStateError):
    pass
