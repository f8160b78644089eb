"""
Core — Exception Handling

Custom exceptions and DRF exception handler for consistent API
error envelopes. Ledger rejections carry a structured ``context`` (ids,
requested vs. available quantities) that the handler copies into the
envelope so clients can render an actionable message.

@file core/exceptions.py
"""

import logging

from django.core.exceptions import PermissionDenied, ValidationError
from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger('backoffice')


# ---------------------------------------------------------------------------
# Domain exceptions
# ---------------------------------------------------------------------------

class DomainError(APIException):
    """APIException that also carries a JSON-safe context dict."""

    def __init__(self, detail=None, code=None, **context):
        super().__init__(detail=detail, code=code)
        self.context = context


class BusinessRuleViolation(DomainError):
    """Raised when a business rule is violated at the service layer."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Business rule violation.'
    default_code = 'BUSINESS_RULE_VIOLATION'


class InvalidAmountError(BusinessRuleViolation):
    """Non-positive or non-integer quantity supplied."""
    default_detail = 'Quantity must be a positive integer.'
    default_code = 'INVALID_AMOUNT'


class InvalidTargetError(BusinessRuleViolation):
    """Distribution targets are malformed (duplicate, zero-sum, negative)."""
    default_detail = 'Invalid distribution targets.'
    default_code = 'INVALID_TARGET'


class InvalidTransferError(BusinessRuleViolation):
    """Transfer source and destination are the same location."""
    default_detail = 'Source and destination locations must differ.'
    default_code = 'INVALID_TRANSFER'


class QuantityShortfallError(DomainError):
    """Base for requests exceeding what is on hand; reports both sides."""
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, *, available: int, requested: int, detail=None, **context):
        self.available = available
        self.requested = requested
        if detail is None:
            detail = f'{self.default_detail} available={available}, requested={requested}.'
        super().__init__(detail=detail, available=available, requested=requested, **context)


class InsufficientStockError(QuantityShortfallError):
    """Raised when a transfer or sale exceeds the quantity at the source location."""
    default_detail = 'Insufficient stock for this operation.'
    default_code = 'INSUFFICIENT_STOCK'


class InsufficientAvailableError(QuantityShortfallError):
    """Raised when a distribution exceeds the pool's available quantity."""
    default_detail = 'Insufficient available pool quantity.'
    default_code = 'INSUFFICIENT_AVAILABLE'


class ConcurrencyConflict(DomainError):
    """A concurrent write won the row; retry the whole operation from a fresh read."""
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'The record was modified concurrently. Retry the operation.'
    default_code = 'CONCURRENCY_CONFLICT'


class StorageFailure(DomainError):
    """The underlying transaction could not commit (timeout, connectivity)."""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = 'The operation could not be committed. No changes were made.'
    default_code = 'STORAGE_FAILURE'


class ResourceNotFoundError(DomainError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Resource not found.'
    default_code = 'RESOURCE_NOT_FOUND'


# ---------------------------------------------------------------------------
# Standard exception handler
# ---------------------------------------------------------------------------

def standard_exception_handler(exc, context):
    """
    Wraps every error response in the standard envelope:
      { "success": false, "errors": {...}, "code": "ERROR_CODE", "context": {...} }

    ``context`` is only present for domain errors that carry one.
    """
    if isinstance(exc, Http404):
        exc = ResourceNotFoundError()
    elif isinstance(exc, PermissionDenied):
        exc = APIException(detail='Permission denied.', code='PERMISSION_DENIED')
        exc.status_code = status.HTTP_403_FORBIDDEN
    elif isinstance(exc, ValidationError):
        data = {
            'success': False,
            'errors': exc.message_dict if hasattr(exc, 'message_dict') else {'detail': exc.messages},
            'code': 'VALIDATION_ERROR',
        }
        return Response(data, status=status.HTTP_400_BAD_REQUEST)

    response = exception_handler(exc, context)

    if response is not None:
        errors = {}
        code = getattr(exc, 'default_code', 'ERROR')

        if isinstance(response.data, dict):
            errors = response.data
            code = response.data.pop('code', code) if 'code' in response.data else code
        elif isinstance(response.data, list):
            errors = {'detail': response.data}
        else:
            errors = {'detail': [str(response.data)]}

        response.data = {
            'success': False,
            'errors': errors,
            'code': code,
        }
        extra = getattr(exc, 'context', None)
        if extra:
            response.data['context'] = extra

    if response is None:
        logger.exception('Unhandled exception in view: %s', exc)
        return Response(
            {'success': False, 'errors': {'detail': ['Internal server error.']}, 'code': 'INTERNAL_ERROR'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    return response
