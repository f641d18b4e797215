"""
Custom decorators for views.

This module provides:
- handle_service_errors: Map service-layer exceptions to API responses

Usage:
    from core.decorators import handle_service_errors

    class MessageSearchView(APIView):
        @handle_service_errors("search messages")
        def get(self, request):
            ...

Note:
    DRF's own exceptions (NotAuthenticated, serializer ValidationError)
    pass through untouched so DRF renders them as usual.
"""

from __future__ import annotations

import functools
import logging
from typing import Callable

from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response

from core.exceptions import BaseApplicationError

logger = logging.getLogger(__name__)


def handle_service_errors(operation: str):
    """
    Translate exceptions raised inside a view method into responses.

    - BaseApplicationError subclasses: their to_dict() with http_status
    - Anything else: logged with traceback, generic 500 body

    Args:
        operation: Human-readable operation name for the 500 message,
            e.g. "mark messages as read"

    Returns:
        Decorator function

    HTTP 500 Response:
        {"error": "Failed to <operation>"}
    """

    def decorator(func: Callable):
        @functools.wraps(func)
        def wrapper(view, request, *args, **kwargs):
            try:
                return func(view, request, *args, **kwargs)
            except APIException:
                raise
            except BaseApplicationError as e:
                return Response(e.to_dict(), status=e.http_status)
            except Exception as e:
                logger.error(
                    f"Unexpected error while trying to {operation}: {type(e).__name__}",
                    extra={"user_id": getattr(request.user, "pk", None)},
                    exc_info=True,
                )
                return Response(
                    {"error": f"Failed to {operation}"},
                    status=status.HTTP_500_INTERNAL_SERVER_ERROR,
                )

        return wrapper

    return decorator
