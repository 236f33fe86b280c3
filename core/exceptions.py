"""
Core — Exception Handling

Custom exceptions and DRF exception handler for consistent API
error envelopes.

@file core/exceptions.py
"""

import logging

from django.core.exceptions import PermissionDenied, ValidationError
from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.exceptions import ValidationError as DRFValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger('bananatrack')

VALIDATION_ERROR_CODE = 'VALIDATION_ERROR'
UNEXPECTED_ERROR_CODE = 'UNEXPECTED_ERROR'


# ---------------------------------------------------------------------------
# Domain exceptions
# ---------------------------------------------------------------------------

class DuplicateResourceError(APIException):
    """Raised when a record already exists for a unique key (e.g. a ledger date)."""
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Resource already exists.'
    default_code = 'CONFLICT'


class ResourceNotFoundError(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Resource not found.'
    default_code = 'NOT_FOUND'


class PermissionDeniedError(APIException):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'Permission denied.'
    default_code = 'PERMISSION_DENIED'


# ---------------------------------------------------------------------------
# Standard exception handler
# ---------------------------------------------------------------------------

def _error_envelope(code, message, details=None):
    error = {'code': code, 'message': message}
    if details is not None:
        error['details'] = details
    return {'success': False, 'error': error}


def _detail_message(detail):
    if isinstance(detail, (list, tuple)) and detail:
        return _detail_message(detail[0])
    if isinstance(detail, dict) and detail:
        return _detail_message(next(iter(detail.values())))
    return str(detail)


def standard_exception_handler(exc, context):
    """
    Wraps every error response in the standard envelope:
      { "success": false, "error": {"code": ..., "message": ..., "details": ...} }
    """
    if isinstance(exc, Http404):
        exc = ResourceNotFoundError()
    elif isinstance(exc, PermissionDenied):
        exc = PermissionDeniedError()
    elif isinstance(exc, ValidationError):
        details = exc.message_dict if hasattr(exc, 'error_dict') else {'detail': exc.messages}
        return Response(
            _error_envelope(VALIDATION_ERROR_CODE, 'Validation failed.', details),
            status=status.HTTP_400_BAD_REQUEST,
        )

    response = exception_handler(exc, context)

    if response is None:
        logger.exception('Unhandled exception in view: %s', exc)
        return Response(
            _error_envelope(UNEXPECTED_ERROR_CODE, 'Internal server error.'),
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    if isinstance(exc, DRFValidationError):
        response.data = _error_envelope(
            VALIDATION_ERROR_CODE, 'Validation failed.', response.data,
        )
    else:
        code = str(getattr(exc, 'default_code', 'ERROR')).upper()
        response.data = _error_envelope(code, _detail_message(exc.detail))

    return response
