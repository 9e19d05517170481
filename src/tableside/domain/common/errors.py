from __future__ import annotations

from typing import Any


class DomainError(Exception):
    code = "DOMAIN_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.details = details or {}


class NotFoundError(DomainError):
    code = "NOT_FOUND"


class InvalidTableError(NotFoundError):
    code = "INVALID_TABLE"


class ValidationError(DomainError):
    code = "VALIDATION_ERROR"


class OrderRejectedError(DomainError):
    code = "ORDER_REJECTED"

    def __init__(self, message: str, reason: str) -> None:
        super().__init__(message, details={"reason": reason})
        self.reason = reason


class DuplicateRequestError(DomainError):
    code = "DUPLICATE_REQUEST"


class AlreadyInactiveError(DomainError):
    code = "ALREADY_INACTIVE"


class InvalidStatusError(DomainError):
    code = "INVALID_STATUS"
