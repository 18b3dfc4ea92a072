"""
Standardized error response utilities for the webhook endpoint.

Webhook senders only look at the status code, but operators read the body, so
every error response is a flat JSON object:
{
    "error": "User-facing message",
    "code": "ERROR_CODE",
    ...extra context such as the topic
}

Usage:
    from loyalty_sync.utils.errors import error_response, ErrorCode

    return error_response("Invalid HMAC", ErrorCode.INVALID_SIGNATURE, 401)
"""
import logging
from enum import Enum
from flask import jsonify

logger = logging.getLogger(__name__)


class ErrorCode(str, Enum):
    """Standardized error codes for API responses."""

    # Authentication (401)
    INVALID_SIGNATURE = "INVALID_SIGNATURE"

    # Validation Errors (400)
    INVALID_REQUEST = "INVALID_REQUEST"
    MISSING_IDENTITY = "MISSING_IDENTITY"

    # Not Found / Method (404, 405)
    NOT_FOUND = "NOT_FOUND"
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"

    # External Service Errors
    SHOPIFY_ERROR = "SHOPIFY_ERROR"
    HUBSPOT_ERROR = "HUBSPOT_ERROR"

    # Server Errors (500)
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


def error_body(message: str, code=ErrorCode.INTERNAL_ERROR, **fields) -> dict:
    """Build the flat error payload without wrapping it in a response."""
    body = {
        "error": message,
        "code": code.value if isinstance(code, ErrorCode) else code,
    }
    body.update({k: v for k, v in fields.items() if v is not None})
    return body


def error_response(
    message: str,
    code=ErrorCode.INTERNAL_ERROR,
    status_code: int = 500,
    log_error: bool = True,
    **fields
) -> tuple:
    """
    Create a standardized error response.

    Args:
        message: Error message shown to the caller
        code: Error code from ErrorCode enum (or a raw code string)
        status_code: HTTP status code
        log_error: Whether to log the error
        **fields: Extra context merged into the body (e.g. topic)

    Returns:
        Tuple of (response, status_code) for Flask
    """
    if log_error and status_code >= 500:
        logger.error(f"API Error [{code}]: {message}")
    elif log_error and status_code >= 400:
        logger.warning(f"API Error [{code}]: {message}")

    return jsonify(error_body(message, code, **fields)), status_code


def unauthorized(message: str = "Invalid HMAC", code=ErrorCode.INVALID_SIGNATURE) -> tuple:
    """401 Unauthorized error."""
    return error_response(message, code, 401, log_error=False)


def internal_error(message: str = "An unexpected error occurred", code=ErrorCode.INTERNAL_ERROR, **fields) -> tuple:
    """500 Internal Server Error."""
    return error_response(message, code, 500, **fields)
