# exceptions.py
from rest_framework.views import exception_handler
from rest_framework.response import Response
from rest_framework.exceptions import APIException
from rest_framework import status
import logging
from django.conf import settings

logger = logging.getLogger(__name__)


# =============== BACKEND ERRORS ===============

class BackendError(Exception):
    """A request to the remote content backend failed"""


class NoRowsError(BackendError):
    """A single-row fetch matched nothing"""


class MultipleRowsError(BackendError):
    """A single-row fetch matched more than one row"""


class StorageError(BackendError):
    """Object storage rejected an upload or delete"""


class StorageAuthError(StorageError):
    """Object storage rejected the caller's credentials"""


class StoragePermissionError(StorageError):
    """Object storage policies do not allow the operation"""


class AuthError(BackendError):
    """Session issuance or refresh failed"""


# =============== API ERRORS ===============

class SessionResolving(APIException):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = 'Verifying session, retry shortly.'
    default_code = 'session_resolving'


def custom_exception_handler(exc, context):
    """
    Custom exception handler for the content API
    """
    # Call REST framework's default exception handler first
    response = exception_handler(exc, context)

    if response is not None:
        custom_response_data = {
            'error': True,
            'message': 'An error occurred',
            'details': response.data,
            'status_code': response.status_code
        }

        if response.status_code == 400:
            custom_response_data['message'] = 'Validation error'
        elif response.status_code == 401:
            custom_response_data['message'] = 'Authentication required'
        elif response.status_code == 403:
            custom_response_data['message'] = 'Permission denied'
        elif response.status_code == 404:
            custom_response_data['message'] = 'Resource not found'
        elif response.status_code == 503:
            custom_response_data['message'] = 'Verifying session'

        response.data = custom_response_data

    # Backend failures that escaped the store
    elif isinstance(exc, BackendError):
        logger.error(f"Backend Error: {exc}")
        response = Response({
            'error': True,
            'message': 'Content backend unavailable',
            'details': {'error': str(exc)} if settings.DEBUG else {},
            'status_code': 502
        }, status=status.HTTP_502_BAD_GATEWAY)

    else:
        logger.error(f"Unexpected Error: {exc}")
        response = Response({
            'error': True,
            'message': 'An unexpected error occurred',
            'details': {'error': str(exc)} if settings.DEBUG else {},
            'status_code': 500
        }, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return response
