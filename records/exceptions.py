"""
Error kinds and the project-wide DRF exception handler.

Every failure leaves the API as ``{"success": false, "msg": ...}`` with the
status code of its kind:

* Unauthenticated: 401 (DRF ``NotAuthenticated``/``AuthenticationFailed``, or
  ``InvalidCredentials`` for a bad login)
* Forbidden: 403 (DRF ``PermissionDenied``)
* Conflict: 400
* NotFound: 404 (DRF ``NotFound``)
* ServerFault: 500 (anything unexpected, including storage errors)
"""
from __future__ import annotations

import logging

from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)


class Conflict(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'identifier already exists'
    default_code = 'conflict'


class InvalidCredentials(APIException):
    """Rejected login; always 401, also on views without authenticators."""
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = 'invalid credentials'
    default_code = 'invalid_credentials'


class ServerFault(APIException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'server error'
    default_code = 'server_error'


def _message(detail) -> str:
    """Flatten DRF error detail (str, list or field dict) to one line."""
    if isinstance(detail, dict):
        if 'detail' in detail:
            return _message(detail['detail'])
        parts = []
        for field, value in detail.items():
            text = _message(value)
            parts.append(text if field == 'non_field_errors' else f'{field}: {text}')
        return '; '.join(parts)
    if isinstance(detail, (list, tuple)):
        return _message(detail[0]) if detail else ''
    return str(detail)


def api_exception_handler(exc, context):
    resp = drf_exception_handler(exc, context)
    if resp is None:
        request = context.get('request')
        logger.error('unhandled error on %s', getattr(request, 'path', '?'),
                     exc_info=(type(exc), exc, exc.__traceback__))
        return Response({'success': False, 'msg': ServerFault.default_detail},
                        status=status.HTTP_500_INTERNAL_SERVER_ERROR)
    resp.data = {'success': False, 'msg': _message(resp.data)}
    return resp
