"""Transition authorization.

:func:`authorize` is a pure decision: given who is asking, a snapshot of the
event and the requested action it either allows the transition, returning the
exact field mutation to apply, or denies it with a typed reason. It never
touches the database, so the engine stays the only place that writes.
"""
import datetime
from dataclasses import dataclass
from typing import Optional, Tuple, Type, Union

from core.exceptions import (InvalidState, NotOwner, ReasonTooShort,
                             RevocationWindowClosed, RoleNotPermitted,
                             Unauthenticated, UnknownAction, WorkflowError)

from .state_machine import (STATUS_LABELS, Action, Level, approved_levels,
                            is_terminal, parse_status, roles_for, rules_for)

DEFAULT_MIN_REASON_LENGTH = 10


@dataclass(frozen=True)
class EventSnapshot:
    id: int
    status: str
    submitted_by_id: int
    event_date: Optional[datetime.date] = None
    department_id: Optional[int] = None

    @classmethod
    def from_event(cls, event):
        return cls(
            id=event.pk,
            status=event.status,
            submitted_by_id=event.submitted_by_id,
            event_date=event.event_date,
            department_id=event.department_id,
        )


@dataclass(frozen=True)
class Mutation:
    """Field-level change implied by an allowed transition.

    ``remarks`` of ``None`` leaves the stored remarks untouched.
    """

    action: Action
    source_status: str
    target_status: str
    set_timestamps: Tuple[str, ...] = ()
    clear_timestamps: Tuple[str, ...] = ()
    remarks: Optional[str] = None

    def as_update(self, now):
        fields = {"status": self.target_status}
        for name in self.clear_timestamps:
            fields[name] = None
        for name in self.set_timestamps:
            fields[name] = now
        if self.remarks is not None:
            fields["remarks"] = self.remarks
        return fields


@dataclass(frozen=True)
class Allow:
    mutation: Mutation
    allowed = True


@dataclass(frozen=True)
class Deny:
    error_class: Type[WorkflowError]
    reason: str
    allowed = False

    @property
    def kind(self):
        return self.error_class.kind

    def as_error(self):
        return self.error_class(self.reason)


Decision = Union[Allow, Deny]


def _level_for(role):
    return next((level for level in Level if level.role == role), None)


def _remarks_for(action, rule, reason):
    text = (reason or "").strip()
    if action in (Action.RETURN, Action.REJECT, Action.CANCEL):
        return text
    if action == Action.RESUBMIT:
        return ""
    if action == Action.REVOKE:
        level = Level[rule.role.upper()]
        return (
            f"Approval revoked by {level.label.upper()}. "
            f"Status reverted to {STATUS_LABELS[rule.target.status]}."
        )
    return None


def authorize(
    caller,
    event: EventSnapshot,
    action,
    reason: Optional[str] = None,
    *,
    today: Optional[datetime.date] = None,
    min_reason_length: int = DEFAULT_MIN_REASON_LENGTH,
) -> Decision:
    """Decide whether ``caller`` may apply ``action`` to ``event``.

    Checks run in a fixed order and stop at the first failure: identity,
    role permitted for the action at all, action valid from the current
    status, role matching the rule for that status, the HOD's department,
    ownership for owner-only actions, cancellation reason length and the
    revocation window. An approver whose level the event has already passed
    gets ``InvalidState`` rather than ``RoleNotPermitted``, so a repeated
    approve or reject reads as a stale request.
    """
    if caller is None:
        return Deny(Unauthenticated, "User not authenticated.")

    if not isinstance(action, Action):
        parsed = Action.parse(action)
        if parsed is None:
            return Deny(UnknownAction, f"Unknown action: {action!r}.")
        action = parsed

    if caller.role not in roles_for(action):
        return Deny(
            RoleNotPermitted,
            f"Role '{caller.role}' is not permitted to {action.value} events.",
        )

    state = parse_status(event.status)
    rules = rules_for(action, state)
    if not rules:
        return Deny(
            InvalidState,
            f"Cannot {action.value} an event that is {STATUS_LABELS[event.status].lower()}.",
        )

    rule = next((r for r in rules if r.role == caller.role), None)
    if rule is None:
        level = _level_for(caller.role)
        if is_terminal(state) or (level is not None and level in approved_levels(state)):
            return Deny(
                InvalidState,
                f"Cannot {action.value} an event that is {STATUS_LABELS[event.status].lower()}.",
            )
        allowed_roles = ", ".join(sorted({r.role for r in rules}))
        return Deny(
            RoleNotPermitted,
            f"Only {allowed_roles} may {action.value} an event that is "
            f"{STATUS_LABELS[event.status].lower()}.",
        )

    if (
        caller.role == Level.HOD.role
        and event.department_id is not None
        and event.department_id != caller.department_id
    ):
        return Deny(RoleNotPermitted, "Event belongs to another department.")

    if rule.owner_only and event.submitted_by_id != caller.user_id:
        return Deny(NotOwner, "Event does not belong to this coordinator.")

    if action == Action.CANCEL and len((reason or "").strip()) < min_reason_length:
        return Deny(
            ReasonTooShort,
            f"Cancellation reason must be at least {min_reason_length} characters.",
        )

    if action == Action.REVOKE:
        today = today or datetime.date.today()
        if event.event_date is not None and event.event_date <= today:
            return Deny(
                RevocationWindowClosed,
                "Approval can only be revoked before the event date.",
            )

    return Allow(
        Mutation(
            action=action,
            source_status=event.status,
            target_status=rule.target.status,
            set_timestamps=(rule.stamp,) if rule.stamp else (),
            clear_timestamps=rule.clear,
            remarks=_remarks_for(action, rule, reason),
        )
    )
