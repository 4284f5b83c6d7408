from datetime import UTC, datetime
from typing import Dict, NoReturn, Optional

from fastapi import status

from libs.result import Error
from src.domain.errors import AuthError, ErrorKind, FieldErrors

_STATUS_BY_KIND: Dict[ErrorKind, int] = {
    ErrorKind.validation: status.HTTP_422_UNPROCESSABLE_CONTENT,
    ErrorKind.authentication: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.conflict: status.HTTP_409_CONFLICT,
    ErrorKind.not_found: status.HTTP_404_NOT_FOUND,
    ErrorKind.internal: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

_TITLE_BY_KIND: Dict[ErrorKind, str] = {
    ErrorKind.validation: "One or more validation errors occurred.",
    ErrorKind.authentication: "Authentication required",
    ErrorKind.conflict: "Resource conflict",
    ErrorKind.not_found: "Resource not found",
    ErrorKind.internal: "An error occurred while processing your request.",
}

_SLUG_BY_KIND: Dict[ErrorKind, str] = {
    ErrorKind.validation: "validation-error",
    ErrorKind.authentication: "authentication-error",
    ErrorKind.conflict: "conflict",
    ErrorKind.not_found: "not-found",
    ErrorKind.internal: "internal-error",
}

GENERIC_INTERNAL_DETAIL = "An unexpected error occurred. Please try again later."


class ClientError(Exception):
    def __init__(self, base_error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        self.base_error = base_error
        self.status_code = status_code
        super().__init__(base_error.message)


class ServerError(Exception):
    def __init__(self, base_error: Error):
        self.base_error = base_error
        super().__init__(base_error.message)


def kind_of(error: Error) -> ErrorKind:
    """Errors without a kind (plain Error) are treated as internal"""
    return getattr(error, "kind", ErrorKind.internal)


def status_for(kind: ErrorKind) -> int:
    return _STATUS_BY_KIND[kind]


def raise_for_error(error: Error) -> NoReturn:
    """Route-edge translation of a failed Result into an HTTP exception"""
    kind = kind_of(error)
    if kind is ErrorKind.internal:
        raise ServerError(error)
    raise ClientError(error, status_code=status_for(kind))


def problem_details(
    kind: ErrorKind,
    code: str,
    detail: str,
    instance: str,
    trace_id: Optional[str],
    type_base_uri: str,
    field_errors: Optional[FieldErrors] = None,
) -> dict:
    """
    Build the problem+json body shared by every non-2xx response.

    Internal errors never expose their detail; callers log it instead.
    """
    body = {
        "type": f"{type_base_uri.rstrip('/')}/{_SLUG_BY_KIND[kind]}",
        "kind": kind.value,
        "code": code,
        "title": _TITLE_BY_KIND[kind],
        "status": _STATUS_BY_KIND[kind],
        "detail": GENERIC_INTERNAL_DETAIL if kind is ErrorKind.internal else detail,
        "instance": instance,
        "timestamp": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
        "traceId": trace_id,
    }
    if field_errors:
        body["errors"] = field_errors
    return body


def error_fields(error: Error) -> FieldErrors:
    if isinstance(error, AuthError):
        return error.field_errors
    return {}
