from fastapi import status
from .base import build_response


def bad_request_error(message: str = "Bad request", error: str = "bad_request"):
    return build_response(
        status.HTTP_400_BAD_REQUEST,
        False,
        error=error,
        message=message,
    )


def not_found_error(message: str = "Resource not found"):
    return build_response(
        status.HTTP_404_NOT_FOUND,
        False,
        error="not_found",
        message=message,
    )


def unauthorized_error(message: str = "Invalid credentials"):
    return build_response(
        status.HTTP_401_UNAUTHORIZED,
        False,
        error="unauthorized",
        message=message,
    )


def forbidden_error(message: str = "Access denied"):
    return build_response(
        status.HTTP_403_FORBIDDEN,
        False,
        error="forbidden",
        message=message,
    )


def internal_server_error(message: str = "Internal server error", error: str = None):
    return build_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        False,
        error=error or "internal_server_error",
        message=message,
    )


def error_for_status(status_code: int, message: str):
    """Envelope for an arbitrary HTTP error status."""
    return build_response(status_code, False, error=_ERROR_CODES.get(status_code, "error"), message=message)


_ERROR_CODES = {
    400: "bad_request",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
    409: "conflict",
    500: "internal_server_error",
}
