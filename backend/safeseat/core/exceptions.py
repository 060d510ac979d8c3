# backend/safeseat/core/exceptions.py
"""
Domain-specific exceptions for the SafeSeat platform.

Every error carries a human-readable message and a stable code so the API
layer can return it to the caller as a structured value.
"""

from typing import Any, Dict, NoReturn, Optional

from fastapi import HTTPException, status

HTTP_422_UNPROCESSABLE: int = getattr(status, "HTTP_422_UNPROCESSABLE_CONTENT", 422)


class DomainException(Exception):
    """Base exception for all domain-specific errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"message": self.message, "code": self.code, "details": self.details}

    def to_http_exception(self) -> HTTPException:
        return HTTPException(status_code=self.status_code, detail=self.to_dict())


class ValidationException(DomainException):
    """Raised when business validation fails."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundException(DomainException):
    """Raised when a requested resource is not found."""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictException(DomainException):
    """Raised when there's a conflict with existing data."""

    status_code = status.HTTP_409_CONFLICT


class BusinessRuleException(DomainException):
    """Raised when a business rule is violated."""

    status_code = HTTP_422_UNPROCESSABLE


class UnauthorizedException(DomainException):
    """Raised when the caller is not authenticated."""

    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenException(DomainException):
    """Raised when the caller lacks permission for an action."""

    status_code = status.HTTP_403_FORBIDDEN


class ServiceException(DomainException):
    """Raised when a service operation fails."""

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": self.message or "An error occurred processing your request",
                "code": self.code,
                "details": self.details if self.details else {},
            },
        )


# Specific business exceptions


class SlotConflictException(ConflictException):
    """Raised when the requested slot is already occupied."""

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message or "This time slot is already booked. Please pick another slot.",
            code="SLOT_CONFLICT",
            details=details or {},
        )


class InvalidTransitionException(ConflictException):
    """Raised when a status change is not a legal edge of the booking state machine."""

    def __init__(self, current_status: str, target_status: str):
        super().__init__(
            message=(
                f"Cannot change booking status from {current_status} to {target_status}. "
                "Please refresh and try again."
            ),
            code="INVALID_TRANSITION",
            details={"current_status": current_status, "target_status": target_status},
        )


class StorageUnavailableException(ServiceException):
    """Raised when persistence fails; callers should retry with backoff."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    retry_after_seconds = 2

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message or "Storage is temporarily unavailable. Please retry.",
            code="STORAGE_UNAVAILABLE",
            details=details or {},
        )

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=self.status_code,
            detail=self.to_dict(),
            headers={"Retry-After": str(self.retry_after_seconds)},
        )


class AuthorizationDeniedException(ForbiddenException):
    """Raised when the actor does not own the booking or organization."""

    def __init__(self, message: Optional[str] = None, *, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message or "You are not allowed to perform this action",
            code="AUTHORIZATION_DENIED",
            details=details or {},
        )


class InvalidSlotException(ValidationException):
    """Raised when a scheduled time does not fall on the daily slot grid."""

    def __init__(self, requested: str, allowed: tuple[str, ...]):
        super().__init__(
            message=f"{requested} is not a bookable slot. Allowed slots: {', '.join(allowed)}",
            code="INVALID_SLOT",
            details={"requested": requested, "allowed": list(allowed)},
        )


class InsufficientBalanceException(BusinessRuleException):
    """Raised when a payout request exceeds the organization's balance."""

    def __init__(self, requested: str, available: str):
        super().__init__(
            message="Insufficient balance for this payout request",
            code="INSUFFICIENT_BALANCE",
            details={"requested": requested, "available": available},
        )


class RepositoryException(Exception):
    """
    Exception raised for repository layer errors.

    This exception is used when data access operations fail,
    such as database connection issues, query failures, or
    constraint violations.
    """


class UniqueSlotViolation(RepositoryException):
    """Raised by repositories when the active-slot unique index rejects a write."""


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    raise exc.to_http_exception()
