# community/exceptions.py
"""
Domain errors raised by the community services, and the REST framework
handler that turns them into the JSON envelope the clients expect.
"""

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class DonationError(Exception):
    """Base class for every error the core surfaces to a caller."""

    code = 'error'
    status_code = status.HTTP_400_BAD_REQUEST
    retryable = False
    default_message = 'Request could not be completed.'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFound(DonationError):
    code = 'not_found'
    status_code = status.HTTP_404_NOT_FOUND
    default_message = 'Not found.'


class Unauthorized(DonationError):
    code = 'unauthorized'
    status_code = status.HTTP_403_FORBIDDEN
    default_message = 'You are not allowed to perform this action.'


class InvalidTransition(DonationError):
    code = 'invalid_transition'

    def __init__(self, current, requested, message=None):
        self.current = current
        self.requested = requested
        super().__init__(message or f"Cannot move donation from '{current}' to '{requested}'.")


class InvalidState(DonationError):
    code = 'invalid_state'
    default_message = 'Donation is not in a state that allows this action.'


class Conflict(DonationError):
    code = 'conflict'
    status_code = status.HTTP_409_CONFLICT
    retryable = True
    default_message = 'Donation was changed by someone else. Reload and try again.'


class AlreadyReferred(DonationError):
    code = 'already_referred'
    status_code = status.HTTP_409_CONFLICT
    default_message = 'This user has already been referred.'


class InvalidReferral(DonationError):
    code = 'invalid_referral'
    default_message = 'Referral is not valid.'


class ValidationFailed(DonationError):
    code = 'validation_failed'
    default_message = 'Invalid data.'

    def __init__(self, errors, message=None):
        self.errors = errors
        super().__init__(message)


def api_exception_handler(exc, context):
    if isinstance(exc, DonationError):
        payload = {'success': False, 'message': exc.message, 'code': exc.code}
        if exc.retryable:
            payload['retryable'] = True
        if isinstance(exc, InvalidTransition):
            payload['current_status'] = exc.current
            payload['requested_status'] = exc.requested
        if isinstance(exc, ValidationFailed):
            payload['errors'] = exc.errors
        return Response(payload, status=exc.status_code)

    response = exception_handler(exc, context)
    if response is not None:
        detail = response.data.get('detail') if isinstance(response.data, dict) else None
        response.data = {
            'success': False,
            'message': str(detail) if detail else 'Invalid request.',
            'errors': response.data,
        }
    return response
