"""Read-only projections over events: approval queues, calendar and report context."""
from django.db.models import Q

from core.exceptions import InvalidState, NotFound, RoleNotPermitted
from core.models import Profile

from .models import Event

# Statuses each approver role acts on.
QUEUE_STATUSES = {
    Profile.Role.HOD: [Event.Status.PENDING_HOD, Event.Status.RETURNED_TO_HOD],
    Profile.Role.DEAN: [Event.Status.PENDING_DEAN, Event.Status.RETURNED_TO_DEAN],
    Profile.Role.PRINCIPAL: [Event.Status.PENDING_PRINCIPAL],
}

APPROVER_ROLES = set(QUEUE_STATUSES)


def approval_queue(caller):
    """Events the caller is expected to act on.

    Coordinators see their own events. A HOD sees their department's events
    plus events with no department; deans and principals see every event at
    their level.
    """
    qs = Event.objects.select_related("department", "club", "professional_society")
    if caller.role == Profile.Role.COORDINATOR:
        return qs.filter(submitted_by_id=caller.user_id)
    if caller.role not in QUEUE_STATUSES:
        return qs.none()
    qs = qs.filter(status__in=QUEUE_STATUSES[caller.role])
    if caller.role == Profile.Role.HOD:
        qs = qs.filter(Q(department_id=caller.department_id) | Q(department__isnull=True))
    return qs.order_by("event_date", "id")


def approved_calendar(start=None, end=None):
    """Approved events ordered by date, optionally bounded to ``[start, end]``."""
    qs = Event.objects.filter(status=Event.Status.APPROVED)
    if start:
        qs = qs.filter(event_date__gte=start)
    if end:
        qs = qs.filter(event_date__lte=end)
    return qs.order_by("event_date", "start_time", "id")


def visible_event(caller, event_id):
    """Return an event the caller may read: owners, approvers and admins."""
    try:
        event = Event.objects.get(pk=event_id)
    except Event.DoesNotExist:
        raise NotFound(f"Event {event_id} not found.") from None
    if caller.is_admin or caller.role in APPROVER_ROLES:
        return event
    if event.submitted_by_id == caller.user_id:
        return event
    raise RoleNotPermitted("You may only view your own events.")


def report_context(event):
    """Snapshot handed to the report generator; only approved events qualify."""
    if event.status != Event.Status.APPROVED:
        raise InvalidState("Event must be approved to generate a report.")
    data = event.as_dict()
    return {
        key: data[key]
        for key in (
            "id",
            "title",
            "objective",
            "description",
            "event_date",
            "start_time",
            "end_time",
            "venue",
            "department_club",
        )
    }
