"""Approval engine: drives events through the status state machine.

Each call is a self-contained unit of work: it re-reads the event and the
caller's profile, asks :func:`emt.authorization.authorize` for a decision and
applies the allowed mutation with a single conditional update that also
checks the status has not moved since the read. The engine never retries; a
``ConcurrentModification`` or ``StoreUnavailable`` is handed back to the caller
to retry from a fresh read.
"""
import logging
from dataclasses import dataclass

from django.conf import settings
from django.db import DatabaseError, transaction
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_time

from core.exceptions import (ConcurrentModification, InvalidRequest,
                             NotFound, RoleNotPermitted, StoreUnavailable)
from core.identity import resolve_caller
from core.models import Profile

from .authorization import EventSnapshot, authorize
from .models import Event, EventHistory

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransitionResult:
    event_id: int
    action: str
    previous_status: str
    status: str

    def as_dict(self):
        return {
            "ok": True,
            "event_id": self.event_id,
            "action": self.action,
            "previous_status": self.previous_status,
            "status": self.status,
        }


def _load_event(event_id):
    try:
        return Event.objects.get(pk=event_id)
    except Event.DoesNotExist:
        raise NotFound(f"Event {event_id} not found.") from None


def apply_transition(event_id, user, action, reason=None, *, today=None):
    """Apply ``action`` to the event on behalf of ``user``.

    Returns a :class:`TransitionResult`; raises a
    :class:`~core.exceptions.WorkflowError` subclass on any failure.
    """
    try:
        event = _load_event(event_id)
        caller = resolve_caller(user)
        decision = authorize(
            caller,
            EventSnapshot.from_event(event),
            action,
            reason,
            today=today or timezone.localdate(),
            min_reason_length=settings.EVENT_CANCELLATION_MIN_REASON_LENGTH,
        )
        if not decision.allowed:
            logger.warning(
                "Denied %s on event %s for user %s (%s): %s",
                action, event.pk, caller.user_id, decision.kind, decision.reason,
            )
            raise decision.as_error()

        mutation = decision.mutation
        now = timezone.now()
        with transaction.atomic():
            updated = Event.objects.filter(
                pk=event.pk, status=mutation.source_status
            ).update(updated_at=now, **mutation.as_update(now))
            if updated != 1:
                logger.warning(
                    "Event %s moved away from %s before %s could be applied",
                    event.pk, mutation.source_status, mutation.action.value,
                )
                raise ConcurrentModification()
            EventHistory.objects.create(
                event_id=event.pk,
                action=mutation.action.value,
                old_status=mutation.source_status,
                new_status=mutation.target_status,
                remarks=mutation.remarks if mutation.remarks is not None else event.remarks,
                changed_by_id=caller.user_id,
            )
    except DatabaseError as exc:
        logger.exception("Store failure while applying %s to event %s", action, event_id)
        raise StoreUnavailable() from exc

    logger.info(
        "Event %s: %s → %s by user %s (%s)",
        event.pk, mutation.source_status, mutation.target_status,
        caller.user_id, mutation.action.value,
    )
    return TransitionResult(
        event_id=event.pk,
        action=mutation.action.value,
        previous_status=mutation.source_status,
        status=mutation.target_status,
    )


def _parse(parser, raw):
    # Django parsers return None for bad formats and raise for impossible values.
    if not raw:
        return None
    try:
        return parser(str(raw))
    except ValueError:
        return None


def submit_event(user, data):
    """Create a new proposal owned by the calling coordinator in ``pending_hod``."""
    caller = resolve_caller(user)
    if caller.role != Profile.Role.COORDINATOR:
        raise RoleNotPermitted("Only coordinators can submit events.")

    title = (data.get("title") or "").strip()
    if not title:
        raise InvalidRequest("Event title is required.", field="title")
    event_date = _parse(parse_date, data.get("event_date"))
    if event_date is None:
        raise InvalidRequest("A valid event_date (YYYY-MM-DD) is required.", field="event_date")
    times = {}
    for name in ("start_time", "end_time"):
        raw = data.get(name)
        times[name] = _parse(parse_time, raw)
        if raw and times[name] is None:
            raise InvalidRequest(f"{name} must be HH:MM.", field=name)

    try:
        event = Event.objects.create(
            title=title,
            description=(data.get("description") or "").strip(),
            objective=(data.get("objective") or "").strip(),
            event_date=event_date,
            venue=(data.get("venue") or "").strip(),
            submitted_by_id=caller.user_id,
            department_id=caller.department_id,
            club_id=caller.club_id,
            professional_society_id=caller.professional_society_id,
            status=Event.Status.PENDING_HOD,
            **times,
        )
    except DatabaseError as exc:
        logger.exception("Store failure while submitting event for user %s", caller.user_id)
        raise StoreUnavailable() from exc
    return event
