import logging

from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)


class InvalidRequest(exceptions.APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Missing required fields'
    default_code = 'invalid_request'


class StoreUnavailable(exceptions.APIException):
    """The Redis store could not be reached or rejected the command."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'Internal server error'
    default_code = 'store_unavailable'


class NotFound(exceptions.NotFound):
    default_detail = 'Notification not found'


class WorkerIterationError(Exception):
    """A single worker iteration failed.

    ``entry`` is the raw popped value, if any, and ``notification_id`` the
    id parsed from it, if parsing got that far.
    """

    def __init__(self, message, entry=None, notification_id=None):
        super().__init__(message)
        self.entry = entry
        self.notification_id = notification_id


def api_exception_handler(exc, context):
    resp = drf_exception_handler(exc, context)
    if resp is None:
        logger.exception('Unhandled error in %s', context.get('view'), exc_info=exc)
        return Response({'error': 'Internal server error'}, status=500)
    if isinstance(exc, StoreUnavailable):
        logger.error('Store unavailable: %s', exc.__cause__ or exc)
    # normalize response
    if isinstance(resp.data, dict) and 'detail' in resp.data:
        message = str(resp.data['detail'])
    else:
        message = str(resp.data)
    return Response({'error': message}, status=resp.status_code)
