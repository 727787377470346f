"""Coordinator roster reconciliation.

Given a unit (club, professional society or department) and the profiles
that should coordinate it, work out the minimal set of profile changes and
apply them:

* a current coordinator missing from the desired set is unassigned: the
  affiliation is cleared but the profile stays a coordinator;
* a desired profile not yet assigned becomes ``role=coordinator`` with the
  unit as its only affiliation.

Departments additionally carry a single HOD slot. A replaced HOD is demoted to
an unassigned coordinator; the new HOD gets ``role=hod`` and the department.

Everything runs in one transaction with the unit row locked, so two rosters
of the same unit applied concurrently serialise and the last one wins. Each
profile update runs in its own savepoint so every outcome is collected; any
failure rolls the whole batch back and is reported as
:class:`~core.exceptions.PartialReconciliationFailure`. The diff is always
computed from current state, so re-running a roster is a no-op.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set, Tuple

from django.db import DatabaseError, IntegrityError, transaction

from core.exceptions import (InvalidAssignment, InvalidRequest, NotFound,
                             PartialReconciliationFailure, StoreUnavailable)
from core.models import ActivityLog, Club, Department, ProfessionalSociety, Profile

logger = logging.getLogger(__name__)

AFFILIATION_FIELDS = ("department", "club", "professional_society")

UNIT_FIELDS = {
    Club: "club",
    ProfessionalSociety: "professional_society",
    Department: "department",
}


@dataclass(frozen=True)
class ProfileMutation:
    profile_id: int
    kind: str  # "assign" or "clear"
    fields: Dict[str, Optional[object]] = field(hash=False)


@dataclass(frozen=True)
class ReconciliationResult:
    unit_type: str
    unit_id: int
    assigned: Tuple[int, ...]
    cleared: Tuple[int, ...]

    def as_dict(self):
        return {
            "ok": True,
            "unit_type": self.unit_type,
            "unit_id": self.unit_id,
            "assigned": len(self.assigned),
            "cleared": len(self.cleared),
            "assigned_ids": list(self.assigned),
            "cleared_ids": list(self.cleared),
        }


def diff(current: Iterable[int], desired: Iterable[int]) -> Tuple[Set[int], Set[int]]:
    """Return ``(to_clear, to_assign)`` as ``current - desired`` and ``desired - current``."""
    current, desired = set(current), set(desired)
    return current - desired, desired - current


def _assign(profile_id, unit_field, unit, role=Profile.Role.COORDINATOR):
    fields = {f"{name}_id": None for name in AFFILIATION_FIELDS}
    fields[f"{unit_field}_id"] = unit.pk
    fields["role"] = role
    return ProfileMutation(profile_id, "assign", fields)


def _clear(profile_id, unit_field, demote_to=None):
    fields = {f"{unit_field}_id": None}
    if demote_to:
        fields["role"] = demote_to
    return ProfileMutation(profile_id, "clear", fields)


def _current_ids(role, unit_field, unit):
    return set(
        Profile.objects.select_for_update()
        .filter(role=role, **{unit_field: unit})
        .values_list("pk", flat=True)
    )


def _coordinator_mutations(unit_field, unit, desired: Set[int]) -> List[ProfileMutation]:
    to_clear, to_assign = diff(_current_ids(Profile.Role.COORDINATOR, unit_field, unit), desired)
    return [_clear(pid, unit_field) for pid in sorted(to_clear)] + [
        _assign(pid, unit_field, unit) for pid in sorted(to_assign)
    ]


def _lock_unit(model, unit_id):
    try:
        return model.objects.select_for_update().get(pk=unit_id)
    except model.DoesNotExist:
        raise NotFound(f"{model._meta.verbose_name.title()} {unit_id} not found.") from None


def _normalise_ids(ids, name):
    try:
        return {int(pid) for pid in ids}
    except (TypeError, ValueError):
        raise InvalidRequest(f"{name} must be a list of profile ids.", field=name) from None


def _ensure_profiles_exist(ids: Set[int]):
    found = set(Profile.objects.filter(pk__in=ids).values_list("pk", flat=True))
    missing = sorted(ids - found)
    if missing:
        raise NotFound(f"Profiles not found: {missing}.", missing_ids=missing)


def _apply(mutation: ProfileMutation):
    updated = Profile.objects.filter(pk=mutation.profile_id).update(**mutation.fields)
    if updated != 1:
        raise Profile.DoesNotExist(f"Profile {mutation.profile_id} no longer exists.")


def _run(unit, mutations: List[ProfileMutation], actor=None) -> ReconciliationResult:
    """Apply ``mutations`` inside the caller's transaction, collecting every outcome."""
    # A profile both cleared and assigned in one batch only needs the assignment.
    assigned_ids = {m.profile_id for m in mutations if m.kind == "assign"}
    mutations = [m for m in mutations if m.kind == "assign" or m.profile_id not in assigned_ids]

    applied, failed = [], {}
    for mutation in mutations:
        try:
            with transaction.atomic():
                _apply(mutation)
        except (DatabaseError, Profile.DoesNotExist) as exc:
            failed[mutation.profile_id] = str(exc)
        else:
            applied.append(mutation.profile_id)

    unit_field = UNIT_FIELDS[type(unit)]
    if failed:
        logger.error(
            "Roster update for %s %s failed for profiles %s; rolling back %s",
            unit_field, unit.pk, sorted(failed), sorted(applied),
        )
        raise PartialReconciliationFailure(failed=failed, rolled_back=applied)

    result = ReconciliationResult(
        unit_type=unit_field,
        unit_id=unit.pk,
        assigned=tuple(m.profile_id for m in mutations if m.kind == "assign"),
        cleared=tuple(m.profile_id for m in mutations if m.kind == "clear"),
    )
    if mutations:
        ActivityLog.objects.create(
            user=actor,
            action="coordinators_reconciled",
            metadata={
                "unit_type": unit_field,
                "unit_id": unit.pk,
                "unit_name": str(unit),
                "assigned": list(result.assigned),
                "cleared": list(result.cleared),
            },
        )
    logger.info(
        "Reconciled %s %s: assigned %d, cleared %d",
        unit_field, unit.pk, len(result.assigned), len(result.cleared),
    )
    return result


def _reconcile_coordinators(model, unit_id, coordinator_ids, actor=None):
    desired = _normalise_ids(coordinator_ids, "coordinator_ids")
    try:
        with transaction.atomic():
            unit = _lock_unit(model, unit_id)
            _ensure_profiles_exist(desired)
            mutations = _coordinator_mutations(UNIT_FIELDS[model], unit, desired)
            return _run(unit, mutations, actor)
    except DatabaseError as exc:
        logger.exception("Store failure while reconciling %s %s", model.__name__, unit_id)
        raise StoreUnavailable() from exc


def reconcile_club_coordinators(club_id, coordinator_ids, actor=None):
    """Make exactly ``coordinator_ids`` the coordinators of the club."""
    return _reconcile_coordinators(Club, club_id, coordinator_ids, actor)


def reconcile_society_coordinators(society_id, coordinator_ids, actor=None):
    """Make exactly ``coordinator_ids`` the coordinators of the professional society."""
    return _reconcile_coordinators(ProfessionalSociety, society_id, coordinator_ids, actor)


def reconcile_department(department_id, coordinator_ids, hod_id=None, actor=None):
    """Set the department's HOD (``None`` for none) and coordinators in one step."""
    desired = _normalise_ids(coordinator_ids, "coordinator_ids")
    if hod_id is not None:
        hod_id = next(iter(_normalise_ids([hod_id], "hod_id")))
        if hod_id in desired:
            raise InvalidAssignment(
                "A profile cannot be both HOD and coordinator of a department.",
                profile_id=hod_id,
            )
    try:
        with transaction.atomic():
            department = _lock_unit(Department, department_id)
            _ensure_profiles_exist(desired | ({hod_id} if hod_id is not None else set()))

            current_hods = _current_ids(Profile.Role.HOD, "department", department)
            mutations = [
                _clear(pid, "department", demote_to=Profile.Role.COORDINATOR)
                for pid in sorted(current_hods - {hod_id})
            ]
            mutations += _coordinator_mutations("department", department, desired)
            if hod_id is not None and hod_id not in current_hods:
                mutations.append(_assign(hod_id, "department", department, role=Profile.Role.HOD))
            return _run(department, mutations, actor)
    except DatabaseError as exc:
        logger.exception("Store failure while reconciling department %s", department_id)
        raise StoreUnavailable() from exc


def rename_unit(model, unit_id, name, actor=None):
    """Rename a club, society or department.

    Profiles reference units by id, so no profile is touched.
    """
    name = (name or "").strip()
    if not name:
        raise InvalidRequest("name is required.", field="name")
    try:
        with transaction.atomic():
            unit = _lock_unit(model, unit_id)
            old_name = unit.name
            unit.name = name
            try:
                with transaction.atomic():
                    unit.save(update_fields=["name"])
            except IntegrityError:
                raise InvalidRequest(f"A {model._meta.verbose_name} named '{name}' already exists.") from None
            ActivityLog.objects.create(
                user=actor,
                action="unit_renamed",
                metadata={
                    "unit_type": UNIT_FIELDS[model],
                    "unit_id": unit.pk,
                    "unit_name": name,
                    "old_name": old_name,
                },
            )
    except DatabaseError as exc:
        logger.exception("Store failure while renaming %s %s", model.__name__, unit_id)
        raise StoreUnavailable() from exc
    logger.info("Renamed %s %s from %r to %r", UNIT_FIELDS[model], unit.pk, old_name, name)
    return unit
