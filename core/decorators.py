# core/decorators.py

import json
import logging
from functools import wraps

from django.http import JsonResponse

from .exceptions import RoleNotPermitted, WorkflowError
from .identity import resolve_caller

logger = logging.getLogger(__name__)

_LOG_PARSE_ERROR = "Decorator error while parsing request body"


def json_workflow_view(view_func):
    """Resolve the caller and translate workflow errors into JSON responses.

    The wrapped view receives the resolved :class:`~core.identity.Caller` as
    ``request.caller``.
    """

    @wraps(view_func)
    def _wrapped_view(request, *args, **kwargs):
        try:
            request.caller = resolve_caller(request.user)
            return view_func(request, *args, **kwargs)
        except WorkflowError as exc:
            return JsonResponse(exc.as_dict(), status=exc.http_status)

    return _wrapped_view


def role_required(*roles):
    """Allow only callers whose profile role is one of ``roles``."""

    def decorator(view_func):
        @wraps(view_func)
        @json_workflow_view
        def _wrapped_view(request, *args, **kwargs):
            if request.caller.role not in roles:
                raise RoleNotPermitted()
            return view_func(request, *args, **kwargs)

        return _wrapped_view

    return decorator


def admin_required(view_func):
    """Decorator that requires user to be a superuser or have admin role."""

    @wraps(view_func)
    @json_workflow_view
    def _wrapped_view(request, *args, **kwargs):
        if not request.caller.is_admin:
            raise RoleNotPermitted("Admin access required")
        return view_func(request, *args, **kwargs)

    return _wrapped_view


def parse_json_body(request):
    """Return the decoded JSON object of a request body or ``None`` when malformed."""
    try:
        payload = json.loads(request.body or b"{}")
    except (ValueError, UnicodeDecodeError):
        logger.info(_LOG_PARSE_ERROR)
        return None
    if not isinstance(payload, dict):
        return None
    return payload
