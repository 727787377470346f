import logging

from django.http import JsonResponse
from django.utils.dateparse import parse_date
from django.views.decorators.http import require_GET, require_POST

from core.decorators import json_workflow_view, parse_json_body, role_required
from core.exceptions import InvalidRequest
from core.models import Profile

from . import queries
from .engine import apply_transition, submit_event
from .report_client import generate_report_text

logger = logging.getLogger(__name__)


def _invalid_json():
    return JsonResponse({"ok": False, "error": "Invalid JSON"}, status=400)


# ────────────────────────────────────────────────────────────────
#  Proposals
# ────────────────────────────────────────────────────────────────

@require_POST
@role_required(Profile.Role.COORDINATOR)
def create_event(request):
    data = parse_json_body(request)
    if data is None:
        return _invalid_json()
    event = submit_event(request.user, data)
    return JsonResponse({"ok": True, "event": event.as_dict()}, status=201)


@require_GET
@json_workflow_view
def event_detail(request, event_id):
    event = queries.visible_event(request.caller, event_id)
    return JsonResponse({"ok": True, "event": event.as_dict()})


@require_GET
@json_workflow_view
def event_history(request, event_id):
    event = queries.visible_event(request.caller, event_id)
    return JsonResponse(
        {"ok": True, "history": [entry.as_dict() for entry in event.history.all()]}
    )


@require_POST
@json_workflow_view
def request_transition(request, event_id):
    """Approve, return, reject, resubmit, cancel or revoke an event."""
    data = parse_json_body(request)
    if data is None:
        return _invalid_json()
    action = data.get("action")
    if not action or not isinstance(action, str):
        raise InvalidRequest("action is required.", field="action")
    reason = data.get("reason")
    if reason is not None and not isinstance(reason, str):
        raise InvalidRequest("reason must be a string.", field="reason")
    result = apply_transition(event_id, request.user, action, reason)
    return JsonResponse(result.as_dict())


# ────────────────────────────────────────────────────────────────
#  Read-only projections
# ────────────────────────────────────────────────────────────────

@require_GET
@json_workflow_view
def approval_queue(request):
    events = queries.approval_queue(request.caller)
    return JsonResponse({"ok": True, "events": [event.as_dict() for event in events]})


@require_GET
@json_workflow_view
def approved_events(request):
    start = request.GET.get("start")
    end = request.GET.get("end")
    try:
        start_date = parse_date(start) if start else None
        end_date = parse_date(end) if end else None
    except ValueError:
        start_date = end_date = None
    if (start and start_date is None) or (end and end_date is None):
        raise InvalidRequest("start and end must be YYYY-MM-DD.")
    events = queries.approved_calendar(start_date, end_date)
    return JsonResponse(
        {
            "ok": True,
            "events": [
                {
                    "id": event.id,
                    "title": event.title,
                    "date": event.event_date.isoformat(),
                    "start_time": event.start_time.isoformat() if event.start_time else None,
                    "end_time": event.end_time.isoformat() if event.end_time else None,
                    "venue": event.venue,
                }
                for event in events
            ],
        }
    )


@require_POST
@json_workflow_view
def generate_report(request, event_id):
    event = queries.visible_event(request.caller, event_id)
    context = queries.report_context(event)
    text = generate_report_text(context)
    logger.info("Generated report text for event %s", event.pk)
    return JsonResponse({"ok": True, "event_id": event.pk, "report": text})
