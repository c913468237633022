"""Mapping of domain errors to HTTP responses."""

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from sanctuary.domain.errors import (
    DomainError,
    ErrorCode,
    RateLimitedError,
    ValidationFailedError,
)

logger = logging.getLogger(__name__)

STATUS_CODES = {
    ErrorCode.VALIDATION_FAILED: status.HTTP_400_BAD_REQUEST,
    ErrorCode.PERMISSION_DENIED: status.HTTP_403_FORBIDDEN,
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.CAPACITY_EXCEEDED: status.HTTP_409_CONFLICT,
    ErrorCode.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorCode.RATE_LIMITED: status.HTTP_429_TOO_MANY_REQUESTS,
    ErrorCode.UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def error_response(error: DomainError, anonymous: bool = False) -> Response:
    status_code = STATUS_CODES[error.code]
    if error.code is ErrorCode.PERMISSION_DENIED and anonymous:
        status_code = status.HTTP_401_UNAUTHORIZED
    body = {"code": error.code.value, "message": error.message}
    if isinstance(error, ValidationFailedError) and error.errors:
        body["errors"] = error.errors
    response = Response(body, status=status_code)
    if isinstance(error, RateLimitedError) and error.retry_after is not None:
        response["Retry-After"] = str(error.retry_after)
    return response


def exception_handler(exc, context):
    """DRF exception handler: domain errors first, then DRF's defaults."""
    if isinstance(exc, DomainError):
        request = context.get("request")
        anonymous = request is not None and request.user is None
        if exc.code is ErrorCode.UNAVAILABLE:
            logger.warning("Request failed: %s", exc)
        return error_response(exc, anonymous=anonymous)
    return drf_exception_handler(exc, context)
