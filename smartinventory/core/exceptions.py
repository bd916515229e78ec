"""
Service errors and the API exception handler.

Every error response has the shape ``{"error": ...}``.
"""
import logging

from django.db.models import ProtectedError
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class ServiceError(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Request could not be processed'
    default_code = 'service_error'


class BusinessRuleError(ServiceError):
    """A request that breaks a domain rule, e.g. removing more stock than exists"""
    default_code = 'business_rule'


class ResourceNotFound(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Not found'
    default_code = 'not_found'


class InvalidCredentials(ServiceError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = 'Invalid credentials'
    default_code = 'invalid_credentials'


def api_exception_handler(exc, context):
    if isinstance(exc, ProtectedError):
        exc = BusinessRuleError('Record is still referenced and cannot be deleted')

    response = exception_handler(exc, context)
    view = context.get('view')
    view_name = view.__class__.__name__ if view else 'unknown'

    if response is None:
        logger.error(f"Unhandled error in {view_name}: {exc}", exc_info=exc)
        return None

    data = response.data
    if isinstance(data, dict) and set(data) == {'detail'}:
        data = str(data['detail'])
    response.data = {'error': data}

    if response.status_code >= 500:
        logger.error(f"Server error in {view_name}: {exc}", exc_info=exc)
    else:
        logger.info(f"{response.status_code} from {view_name}: {data}")
    return response
