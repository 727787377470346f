from django.http import JsonResponse
from django.views.decorators.http import require_GET

from .decorators import json_workflow_view


@require_GET
@json_workflow_view
def api_me(request):
    """Return the caller as the workflow sees them."""
    return JsonResponse({"ok": True, "caller": request.caller.as_dict()})
