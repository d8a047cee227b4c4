"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Authentication errors (401)
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_TOKEN = "INVALID_TOKEN"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"

    # Authorization errors (403)
    FORBIDDEN = "FORBIDDEN"

    # Not found errors (404)
    PROFILE_NOT_FOUND = "PROFILE_NOT_FOUND"
    HANDLE_NOT_FOUND = "HANDLE_NOT_FOUND"

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    HANDLE_TOO_SHORT = "HANDLE_TOO_SHORT"
    HANDLE_TOO_LONG = "HANDLE_TOO_LONG"
    HANDLE_INVALID_CHARACTERS = "HANDLE_INVALID_CHARACTERS"
    EMPTY_CONTENT_POINTER = "EMPTY_CONTENT_POINTER"

    # Pagination errors (400)
    OFFSET_OUT_OF_RANGE = "OFFSET_OUT_OF_RANGE"
    LIMIT_OUT_OF_RANGE = "LIMIT_OUT_OF_RANGE"

    # Conflict errors (409)
    PROFILE_ALREADY_EXISTS = "PROFILE_ALREADY_EXISTS"
    HANDLE_TAKEN = "HANDLE_TAKEN"

    # Rate limiting (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Server errors (500)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"
    REGISTRY_INCONSISTENT = "REGISTRY_INCONSISTENT"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class AuthenticationError(AppException):
    """Authentication failed."""

    def __init__(
        self,
        message: str = "Authentication required",
        error_code: ErrorCode = ErrorCode.UNAUTHORIZED,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=401,
        )


class AuthorizationError(AppException):
    """Authorization failed."""

    def __init__(self, message: str = "Access denied", details: Any | None = None) -> None:
        super().__init__(
            error_code=ErrorCode.FORBIDDEN,
            message=message,
            status_code=403,
            details=details,
        )


# --- Error kinds ---


class NotFoundError(AppException):
    """A profile or handle is absent."""

    def __init__(self, error_code: ErrorCode, message: str, details: Any | None = None) -> None:
        super().__init__(error_code, message, 404, details)


class AlreadyExistsError(AppException):
    """A profile or handle is already registered."""

    def __init__(self, error_code: ErrorCode, message: str, details: Any | None = None) -> None:
        super().__init__(error_code, message, 409, details)


class InvalidInputError(AppException):
    """Malformed handle or empty content pointer."""

    def __init__(self, error_code: ErrorCode, message: str, details: Any | None = None) -> None:
        super().__init__(error_code, message, 400, details)


class OutOfRangeError(AppException):
    """Pagination offset or limit outside the roster."""

    def __init__(self, error_code: ErrorCode, message: str, details: Any | None = None) -> None:
        super().__init__(error_code, message, 400, details)


# --- Concrete errors ---


class ProfileNotFoundError(NotFoundError):
    """Profile not found."""

    def __init__(self, identity: str) -> None:
        super().__init__(
            ErrorCode.PROFILE_NOT_FOUND,
            f"Profile not found: {identity}",
            {"identity": identity},
        )


class HandleNotFoundError(NotFoundError):
    """Handle is not registered."""

    def __init__(self, handle: str) -> None:
        super().__init__(
            ErrorCode.HANDLE_NOT_FOUND,
            f"Handle not found: {handle}",
            {"handle": handle},
        )


class ProfileAlreadyExistsError(AlreadyExistsError):
    """Identity already owns a profile."""

    def __init__(self, identity: str) -> None:
        super().__init__(
            ErrorCode.PROFILE_ALREADY_EXISTS,
            "Profile already exists for this identity",
            {"identity": identity},
        )


class HandleTakenError(AlreadyExistsError):
    """Handle is already claimed by another identity."""

    def __init__(self, handle: str) -> None:
        super().__init__(
            ErrorCode.HANDLE_TAKEN,
            f"Handle already taken: {handle}",
            {"handle": handle},
        )


class HandleTooShortError(InvalidInputError):
    """Handle is shorter than the minimum length."""

    def __init__(self, handle: str, min_length: int) -> None:
        super().__init__(
            ErrorCode.HANDLE_TOO_SHORT,
            f"Handle must be at least {min_length} characters",
            {"handle": handle, "min_length": min_length},
        )


class HandleTooLongError(InvalidInputError):
    """Handle is longer than the maximum length."""

    def __init__(self, handle: str, max_length: int) -> None:
        super().__init__(
            ErrorCode.HANDLE_TOO_LONG,
            f"Handle must be at most {max_length} characters",
            {"handle": handle, "max_length": max_length},
        )


class InvalidHandleCharactersError(InvalidInputError):
    """Handle contains characters outside [A-Za-z0-9_-]."""

    def __init__(self, handle: str) -> None:
        super().__init__(
            ErrorCode.HANDLE_INVALID_CHARACTERS,
            "Handle may only contain letters, digits, '_' and '-'",
            {"handle": handle},
        )


class EmptyContentPointerError(InvalidInputError):
    """Content pointer is empty."""

    def __init__(self) -> None:
        super().__init__(
            ErrorCode.EMPTY_CONTENT_POINTER,
            "Content pointer cannot be empty",
        )


class OffsetOutOfRangeError(OutOfRangeError):
    """Pagination offset does not address a roster entry."""

    def __init__(self, offset: int, roster_size: int) -> None:
        super().__init__(
            ErrorCode.OFFSET_OUT_OF_RANGE,
            f"Offset {offset} is out of range",
            {"offset": offset, "roster_size": roster_size},
        )


class LimitOutOfRangeError(OutOfRangeError):
    """Requested limit is negative or exceeds the roster size."""

    def __init__(self, limit: int, roster_size: int) -> None:
        super().__init__(
            ErrorCode.LIMIT_OUT_OF_RANGE,
            f"Limit {limit} is out of range",
            {"limit": limit, "roster_size": roster_size},
        )


class RegistryConsistencyError(AppException):
    """Registry indexes disagree with each other."""

    def __init__(self, message: str, details: Any | None = None) -> None:
        super().__init__(
            error_code=ErrorCode.REGISTRY_INCONSISTENT,
            message=message,
            status_code=500,
            details=details,
        )
