"""
Authentication Error Taxonomy

Every failure that leaves the core is an AuthError tagged with one ErrorKind.
The API layer maps kinds to HTTP responses; use cases never pick status codes.
"""

from enum import Enum
from typing import Dict, List, Optional

from libs.result import Error


class ErrorKind(str, Enum):
    """Closed set of failure classes exposed to callers"""

    validation = "ValidationError"
    authentication = "AuthenticationError"
    conflict = "ConflictError"
    not_found = "NotFoundError"
    internal = "InternalError"


FieldErrors = Dict[str, List[str]]


class AuthError(Error):
    """
    Error with a kind and, for validation failures, per-field messages.

    Use the named constructors below so codes and messages stay stable;
    authentication messages are deliberately vague about the precise cause.
    """

    def __init__(
        self,
        kind: ErrorKind,
        code: str,
        message: str,
        field_errors: Optional[FieldErrors] = None,
    ):
        super().__init__(code, message)
        self.kind = kind
        self.field_errors = field_errors or {}

    @classmethod
    def validation(cls, field_errors: FieldErrors) -> "AuthError":
        return cls(
            ErrorKind.validation,
            "VALIDATION_FAILED",
            "The request contains invalid data",
            field_errors,
        )

    @classmethod
    def email_already_exists(cls) -> "AuthError":
        return cls(
            ErrorKind.conflict,
            "EMAIL_ALREADY_EXISTS",
            "User with this email already exists",
        )

    @classmethod
    def invalid_credentials(cls) -> "AuthError":
        return cls(
            ErrorKind.authentication,
            "INVALID_CREDENTIALS",
            "Invalid email or password",
        )

    @classmethod
    def invalid_refresh_token(cls) -> "AuthError":
        return cls(
            ErrorKind.authentication,
            "INVALID_TOKEN",
            "Invalid or expired refresh token",
        )

    @classmethod
    def invalid_access_token(cls) -> "AuthError":
        return cls(
            ErrorKind.authentication,
            "INVALID_ACCESS_TOKEN",
            "Invalid or expired access token",
        )

    @classmethod
    def invalid_current_password(cls) -> "AuthError":
        return cls(
            ErrorKind.authentication,
            "INVALID_CURRENT_PASSWORD",
            "Current password is incorrect",
        )

    @classmethod
    def identity_not_found(cls) -> "AuthError":
        return cls(ErrorKind.not_found, "USER_NOT_FOUND", "User not found")

    @classmethod
    def storage_unavailable(cls) -> "AuthError":
        return cls(
            ErrorKind.internal,
            "STORAGE_UNAVAILABLE",
            "Credential storage is temporarily unavailable",
        )

    @classmethod
    def storage_timeout(cls) -> "AuthError":
        return cls(
            ErrorKind.internal,
            "STORAGE_TIMEOUT",
            "Credential storage did not respond in time",
        )

    @classmethod
    def internal(cls, message: str = "Internal server error") -> "AuthError":
        return cls(ErrorKind.internal, "INTERNAL_ERROR", message)
