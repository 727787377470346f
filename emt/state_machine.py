"""
Event status state machine.

A proposal climbs three approval levels before it is public:

    pending_hod ──approve──▶ pending_dean ──approve──▶ pending_principal ──approve──▶ approved
        │ return                 │ return                   │ return
        ▼                        ▼                          ▼
    returned_to_coordinator  returned_to_hod           returned_to_dean
        │ resubmit               │ resubmit                 │ resubmit
        └──▶ pending_hod         └──▶ pending_dean          └──▶ pending_principal

Every pending level may also reject. The owner may cancel from any state
except ``rejected`` and ``cancelled``. An approver may revoke an approval they
already gave while the event date is still ahead.

Statuses are values of a small sum type (:class:`Pending`, :class:`Returned`,
:class:`Approved`, :class:`Rejected`, :class:`Cancelled`); the flat strings
stored in the database are derived from it. The transition table is generated
from :class:`Level` so the three levels stay symmetric.
"""
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Optional, Tuple, Union

COORDINATOR = "coordinator"


class Level(IntEnum):
    HOD = 1
    DEAN = 2
    PRINCIPAL = 3

    @property
    def role(self) -> str:
        return self.name.lower()

    @property
    def timestamp_field(self) -> str:
        return f"{self.role}_approval_at"

    @property
    def label(self) -> str:
        return "HOD" if self is Level.HOD else self.name.title()

    @property
    def next(self) -> Optional["Level"]:
        return Level(self + 1) if self < Level.PRINCIPAL else None

    @property
    def previous(self) -> Optional["Level"]:
        return Level(self - 1) if self > Level.HOD else None

    @property
    def submitter_role(self) -> str:
        """Role that hands a proposal up to this level (and resubmits it after a return)."""
        return self.previous.role if self.previous else COORDINATOR


# ────────────────────────────────────────────────────────────────
#  States
# ────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Pending:
    level: Level

    @property
    def status(self) -> str:
        return f"pending_{self.level.role}"


@dataclass(frozen=True)
class Returned:
    """Sent back by ``from_level`` to whoever submitted it to that level."""

    from_level: Level

    @property
    def status(self) -> str:
        return f"returned_to_{self.from_level.submitter_role}"


@dataclass(frozen=True)
class Approved:
    status = "approved"


@dataclass(frozen=True)
class Rejected:
    status = "rejected"


@dataclass(frozen=True)
class Cancelled:
    status = "cancelled"


EventState = Union[Pending, Returned, Approved, Rejected, Cancelled]

APPROVED = Approved()
REJECTED = Rejected()
CANCELLED = Cancelled()

ALL_STATES: Tuple[EventState, ...] = (
    *(state for level in Level for state in (Pending(level), Returned(level))),
    APPROVED,
    REJECTED,
    CANCELLED,
)
TERMINAL_STATES = frozenset({APPROVED, REJECTED, CANCELLED})

_STATES_BY_STATUS = {state.status: state for state in ALL_STATES}

STATUS_LABELS = {
    "pending_hod": "Pending HOD",
    "returned_to_coordinator": "Returned to Coordinator",
    "pending_dean": "Pending Dean",
    "returned_to_hod": "Returned to HOD",
    "pending_principal": "Pending Principal",
    "returned_to_dean": "Returned to Dean",
    "approved": "Approved",
    "rejected": "Rejected",
    "cancelled": "Cancelled",
}


def parse_status(value: str) -> EventState:
    try:
        return _STATES_BY_STATUS[value]
    except KeyError:
        raise ValueError(f"Unknown event status: {value!r}") from None


def is_terminal(state: EventState) -> bool:
    return state in TERMINAL_STATES


def approved_levels(state: EventState) -> Tuple[Level, ...]:
    """Levels whose approval a proposal in ``state`` has already collected."""
    if isinstance(state, Pending):
        return tuple(level for level in Level if level < state.level)
    if isinstance(state, Returned):
        return tuple(level for level in Level if level < state.from_level)
    if state == APPROVED:
        return tuple(Level)
    return ()


# ────────────────────────────────────────────────────────────────
#  Actions and rules
# ────────────────────────────────────────────────────────────────

class Action(str, Enum):
    APPROVE = "approve"
    RETURN = "return"
    REJECT = "reject"
    RESUBMIT = "resubmit"
    CANCEL = "cancel"
    REVOKE = "revoke"

    @classmethod
    def parse(cls, value):
        try:
            return cls(value)
        except ValueError:
            return None


@dataclass(frozen=True)
class TransitionRule:
    action: Action
    source: EventState
    role: str
    target: EventState
    owner_only: bool = False
    stamp: Optional[str] = None
    clear: Tuple[str, ...] = field(default_factory=tuple)


def _build_rules():
    rules = []
    for level in Level:
        pending = Pending(level)
        approve_target = Pending(level.next) if level.next else APPROVED
        rules.append(
            TransitionRule(Action.APPROVE, pending, level.role, approve_target, stamp=level.timestamp_field)
        )
        rules.append(
            TransitionRule(
                Action.RETURN, pending, level.role, Returned(level), clear=(level.timestamp_field,)
            )
        )
        rules.append(TransitionRule(Action.REJECT, pending, level.role, REJECTED))
        rules.append(
            TransitionRule(
                Action.RESUBMIT,
                Returned(level),
                level.submitter_role,
                pending,
                owner_only=level.submitter_role == COORDINATOR,
            )
        )

    for state in ALL_STATES:
        if state not in (REJECTED, CANCELLED):
            rules.append(TransitionRule(Action.CANCEL, state, COORDINATOR, CANCELLED, owner_only=True))

    for level in Level:
        # A principal's revocation goes back to the dean, not to a new principal review.
        revert_to = Pending(min(level, Level.DEAN))
        cleared = tuple(lvl.timestamp_field for lvl in Level if lvl >= revert_to.level)
        for state in ALL_STATES:
            if level in approved_levels(state):
                rules.append(TransitionRule(Action.REVOKE, state, level.role, revert_to, clear=cleared))
    return tuple(rules)


TRANSITION_RULES: Tuple[TransitionRule, ...] = _build_rules()


def rules_for(action: Action, state: EventState):
    return [rule for rule in TRANSITION_RULES if rule.action == action and rule.source == state]


def roles_for(action: Action):
    return {rule.role for rule in TRANSITION_RULES if rule.action == action}


def source_states(action: Action):
    return {rule.source for rule in TRANSITION_RULES if rule.action == action}
