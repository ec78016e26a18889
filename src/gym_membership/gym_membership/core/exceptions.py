from __future__ import annotations

from .enums import ErrorKind


class DomainError(Exception):
    """Base exception for business rule violations.

    Every subclass carries a stable ``kind`` (error family) and ``code`` so the
    calling layer can map it to a response without parsing the message.
    """

    kind: ErrorKind = ErrorKind.CONFLICT
    code: str = "DomainError"
    default_message: str = "Operation rejected"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)

    @property
    def reason(self) -> str:
        return str(self)


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    kind = ErrorKind.INVALID_INPUT
    code = "InvalidInput"
    default_message = "Invalid input"


class InvalidStartDate(ValidationError):
    code = "InvalidStartDate"
    default_message = "Past dates are not allowed"


class InvalidPage(ValidationError):
    code = "InvalidPage"
    default_message = "Page must be a positive integer"


class NotFoundError(DomainError):
    kind = ErrorKind.NOT_FOUND
    code = "NotFound"
    default_message = "Not found"


class UnknownStudent(NotFoundError):
    code = "UnknownStudent"
    default_message = "Student not found"


class PlanNotFound(NotFoundError):
    code = "PlanNotFound"
    default_message = "Plan not found"


class MembershipNotFound(NotFoundError):
    code = "MembershipNotFound"
    default_message = "Membership not found"


class ConflictError(DomainError):
    kind = ErrorKind.CONFLICT
    code = "Conflict"


class NotEnrolled(ConflictError):
    code = "NotEnrolled"
    default_message = "Student has no membership"


class ConflictActiveMembership(ConflictError):
    code = "ConflictActiveMembership"
    default_message = "Student already has an active membership"


class MembershipInactive(ConflictError):
    code = "MembershipInactive"
    default_message = "Membership must be active to check in"


class CannotModifyActiveMembership(ConflictError):
    code = "CannotModifyActiveMembership"
    default_message = "Only inactive memberships can be updated"


class MembershipAlreadyActive(ConflictError):
    code = "MembershipAlreadyActive"
    default_message = "Membership is already active"


class PlanTitleTaken(ConflictError):
    code = "PlanTitleTaken"
    default_message = "A plan with this title already exists"


class ConcurrentUpdateConflict(ConflictError):
    """A store conflict that survived the facade's retry."""

    code = "StoreConflict"
    default_message = "Another request changed this student's data, try again"


class RateLimitedError(DomainError):
    kind = ErrorKind.RATE_LIMITED
    code = "RateLimited"


class AlreadyCheckedInToday(RateLimitedError):
    code = "AlreadyCheckedInToday"
    default_message = "You already checked in today"


class WeeklyLimitExceeded(RateLimitedError):
    code = "WeeklyLimitExceeded"
    default_message = "Access denied, weekly check-in limit reached"


class StoreConflictError(DomainError):
    """Raised by a store when a racing write is detected at commit time.

    Examples: unique-constraint violation, deadlock, lock wait timeout.
    """

    kind = ErrorKind.STORE_CONFLICT
    code = "StoreConflict"
    default_message = "Concurrent modification detected"
