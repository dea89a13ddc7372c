"""
Project-wide DRF exception handler.

DRF only knows about its own APIException family and Http404 /
PermissionDenied. Database constraint errors that escape the service layer
would otherwise turn into a bare 500, so they are mapped to a 400 with the
same ``{'error': ...}`` body the views return for domain errors.
"""

import logging

from django.db import IntegrityError
from django.db.models import ProtectedError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


def _describe_protected(exc):
    names = sorted({obj._meta.verbose_name_plural for obj in exc.protected_objects})
    if not names:
        return 'This record is still referenced and cannot be deleted.'
    return f"This record is still referenced by {', '.join(names)} and cannot be deleted."


def _describe_integrity(exc):
    message = str(exc).lower()
    if 'unique' in message or 'duplicate' in message:
        return 'A record with this value already exists.'
    if 'foreign key' in message:
        return 'A referenced record does not exist.'
    if 'not null' in message:
        return 'A required value is missing.'
    if 'check constraint' in message:
        return 'A value is outside the allowed range.'
    return 'The request conflicts with existing data.'


def api_exception_handler(exc, context):
    """Delegate to DRF, then cover database errors DRF does not know about."""
    response = exception_handler(exc, context)
    if response is not None:
        return response

    if isinstance(exc, ProtectedError):
        return Response(
            {'error': _describe_protected(exc)},
            status=status.HTTP_400_BAD_REQUEST
        )

    if isinstance(exc, IntegrityError):
        logger.warning("Integrity error in %s: %s", context.get('view').__class__.__name__, exc)
        return Response(
            {'error': _describe_integrity(exc)},
            status=status.HTTP_400_BAD_REQUEST
        )

    return None
