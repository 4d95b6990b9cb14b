"""
Map exchange engine errors to HTTP responses.

Every error body has the shape:

    {"error": {"code": "...", "message": "...", "field": "..."}}

`field` is present only for field-attributed errors. Unexpected failures
return a generic 500; their detail is included only when DEBUG is on.
"""

import logging

from django.conf import settings
from rest_framework import status
from rest_framework.response import Response

from apps.backend.core.domain.errors import (
    AccountNotConfigured,
    AlreadyApproved,
    ExchangeError,
    MissingProof,
    NotFound,
    PersistenceFailure,
    ValidationError,
    VerificationRequired,
)

logger = logging.getLogger(__name__)

GENERIC_MESSAGE = 'An unexpected error occurred. Please try again later.'

STATUS_BY_ERROR = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (VerificationRequired, status.HTTP_400_BAD_REQUEST),
    (AccountNotConfigured, status.HTTP_400_BAD_REQUEST),
    (MissingProof, status.HTTP_400_BAD_REQUEST),
    (NotFound, status.HTTP_404_NOT_FOUND),
    (AlreadyApproved, status.HTTP_409_CONFLICT),
)


def status_for(exc: ExchangeError) -> int:
    for error_cls, code in STATUS_BY_ERROR:
        if isinstance(exc, error_cls):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def error_body(code, message, field=None):
    error = {'code': code, 'message': message}
    if field:
        error['field'] = field
    return {'error': error}


def validation_response(serializer_errors):
    """400 for DRF serializer errors, attributed to the first failing field."""
    field, messages = next(iter(serializer_errors.items()))
    message = messages[0] if isinstance(messages, list) and messages else messages
    return Response(
        error_body(ValidationError.code, str(message), None if field == 'non_field_errors' else field),
        status=status.HTTP_400_BAD_REQUEST,
    )


def error_response(exc: Exception) -> Response:
    """
    Convert an exception raised by a use case into a Response.

    ExchangeErrors other than PersistenceFailure are expected outcomes and
    are returned with their own message. Everything else is logged with a
    traceback and reported generically.
    """
    if isinstance(exc, ExchangeError) and not isinstance(exc, PersistenceFailure):
        return Response({'error': exc.to_dict()}, status=status_for(exc))

    logger.error(f"Unhandled error: {exc}", exc_info=True)
    body = error_body(getattr(exc, 'code', 'INTERNAL_ERROR'), GENERIC_MESSAGE)
    if settings.DEBUG:
        body['error']['detail'] = str(exc)
    return Response(body, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
