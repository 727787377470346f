import datetime

from django.test import SimpleTestCase

from core.exceptions import (InvalidState, NotOwner, ReasonTooShort,
                             RevocationWindowClosed, RoleNotPermitted,
                             Unauthenticated, UnknownAction)
from core.identity import Caller
from core.models import Profile
from emt.authorization import Allow, Deny, EventSnapshot, Mutation, authorize
from emt.state_machine import ALL_STATES, Action

TODAY = datetime.date(2025, 3, 1)
NEXT_WEEK = TODAY + datetime.timedelta(days=7)

OWNER_ID = 10


def caller(role, user_id=None):
    user_id = user_id if user_id is not None else {"coordinator": OWNER_ID}.get(role, 20)
    return Caller(user_id=user_id, profile_id=user_id, role=role)


def event(status, event_date=NEXT_WEEK):
    return EventSnapshot(id=1, status=status, submitted_by_id=OWNER_ID, event_date=event_date)


class AuthorizeTests(SimpleTestCase):
    def check(self, who, status, action, reason=None, **kwargs):
        kwargs.setdefault("today", TODAY)
        return authorize(who, event(status), action, reason, **kwargs)

    def assertDenied(self, decision, error_class):
        self.assertIsInstance(decision, Deny)
        self.assertIs(decision.error_class, error_class)
        self.assertIsInstance(decision.as_error(), error_class)

    def test_hod_approves_pending_hod(self):
        decision = self.check(caller("hod"), "pending_hod", "approve")
        self.assertIsInstance(decision, Allow)
        self.assertEqual(decision.mutation.target_status, "pending_dean")
        self.assertEqual(decision.mutation.set_timestamps, ("hod_approval_at",))
        self.assertIsNone(decision.mutation.remarks)

    def test_approve_reject_return_only_at_own_level(self):
        for role in Profile.Role.values:
            for state in ALL_STATES:
                for action in (Action.APPROVE, Action.RETURN, Action.REJECT):
                    decision = self.check(caller(role), state.status, action, "Needs a budget breakdown")
                    self.assertEqual(
                        decision.allowed,
                        state.status == f"pending_{role}",
                        f"{role} {action.value} at {state.status}",
                    )

    def test_coordinator_cannot_approve(self):
        self.assertDenied(self.check(caller("coordinator"), "pending_hod", "approve"), RoleNotPermitted)

    def test_dean_cannot_approve_hod_level(self):
        self.assertDenied(self.check(caller("dean"), "pending_hod", "approve"), RoleNotPermitted)

    def test_level_already_passed_is_invalid_state(self):
        self.assertDenied(self.check(caller("hod"), "pending_dean", "approve"), InvalidState)
        self.assertDenied(self.check(caller("dean"), "pending_principal", "approve"), InvalidState)
        self.assertDenied(
            self.check(caller("hod"), "pending_principal", "reject", "Too late"), InvalidState
        )
        self.assertDenied(self.check(caller("dean"), "returned_to_dean", "approve"), InvalidState)

    def test_hod_limited_to_own_department(self):
        snapshot = EventSnapshot(
            id=1, status="pending_hod", submitted_by_id=OWNER_ID, event_date=NEXT_WEEK, department_id=5
        )
        own = Caller(user_id=20, profile_id=20, role="hod", department_id=5)
        other = Caller(user_id=21, profile_id=21, role="hod", department_id=6)
        self.assertIsInstance(authorize(own, snapshot, "approve", today=TODAY), Allow)
        self.assertDenied(authorize(other, snapshot, "approve", today=TODAY), RoleNotPermitted)

    def test_approve_on_approved_is_invalid_state(self):
        self.assertDenied(self.check(caller("hod"), "approved", "approve"), InvalidState)

    def test_admin_cannot_transition(self):
        for action in Action:
            self.assertDenied(self.check(caller("admin"), "pending_hod", action), RoleNotPermitted)

    def test_unauthenticated(self):
        self.assertDenied(self.check(None, "pending_hod", "approve"), Unauthenticated)

    def test_unknown_action(self):
        self.assertDenied(self.check(caller("hod"), "pending_hod", "escalate"), UnknownAction)

    def test_return_keeps_reason_as_remarks(self):
        decision = self.check(caller("hod"), "pending_hod", "return", "  Add the venue booking  ")
        self.assertEqual(decision.mutation.target_status, "returned_to_coordinator")
        self.assertEqual(decision.mutation.remarks, "Add the venue booking")
        self.assertEqual(decision.mutation.clear_timestamps, ("hod_approval_at",))

    def test_reject_without_reason(self):
        decision = self.check(caller("principal"), "pending_principal", "reject")
        self.assertEqual(decision.mutation.target_status, "rejected")
        self.assertEqual(decision.mutation.remarks, "")

    def test_owner_resubmits(self):
        decision = self.check(caller("coordinator"), "returned_to_coordinator", "resubmit")
        self.assertEqual(decision.mutation.target_status, "pending_hod")
        self.assertEqual(decision.mutation.remarks, "")

    def test_other_coordinator_cannot_resubmit(self):
        self.assertDenied(
            self.check(caller("coordinator", user_id=99), "returned_to_coordinator", "resubmit"),
            NotOwner,
        )

    def test_hod_resubmits_returned_to_hod(self):
        decision = self.check(caller("hod"), "returned_to_hod", "resubmit")
        self.assertEqual(decision.mutation.target_status, "pending_dean")
        self.assertDenied(
            self.check(caller("coordinator"), "returned_to_hod", "resubmit"), RoleNotPermitted
        )

    def test_dean_resubmits_returned_to_dean(self):
        decision = self.check(caller("dean"), "returned_to_dean", "resubmit")
        self.assertEqual(decision.mutation.target_status, "pending_principal")

    def test_cancel_requires_reason(self):
        self.assertDenied(
            self.check(caller("coordinator"), "pending_dean", "cancel", "   too short "),
            ReasonTooShort,
        )
        self.assertDenied(self.check(caller("coordinator"), "pending_dean", "cancel"), ReasonTooShort)

    def test_cancel_reason_length_is_configurable(self):
        decision = self.check(
            caller("coordinator"), "pending_dean", "cancel", "Rain", min_reason_length=3
        )
        self.assertIsInstance(decision, Allow)

    def test_owner_cancels_approved_event(self):
        decision = self.check(caller("coordinator"), "approved", "cancel", " Speaker unavailable ")
        self.assertEqual(decision.mutation.target_status, "cancelled")
        self.assertEqual(decision.mutation.remarks, "Speaker unavailable")

    def test_non_owner_cannot_cancel(self):
        self.assertDenied(
            self.check(caller("coordinator", user_id=99), "pending_hod", "cancel", "Speaker unavailable"),
            NotOwner,
        )

    def test_state_checked_before_ownership(self):
        self.assertDenied(
            self.check(caller("coordinator", user_id=99), "cancelled", "cancel", "Speaker unavailable"),
            InvalidState,
        )

    def test_approver_cannot_cancel(self):
        self.assertDenied(
            self.check(caller("hod"), "pending_hod", "cancel", "Speaker unavailable"), RoleNotPermitted
        )

    def test_dean_revokes_approved_event(self):
        decision = self.check(caller("dean"), "approved", "revoke")
        mutation = decision.mutation
        self.assertEqual(mutation.target_status, "pending_dean")
        self.assertEqual(mutation.clear_timestamps, ("dean_approval_at", "principal_approval_at"))
        self.assertEqual(
            mutation.remarks, "Approval revoked by DEAN. Status reverted to Pending Dean."
        )

    def test_principal_revocation_returns_to_dean(self):
        decision = self.check(caller("principal"), "approved", "revoke")
        self.assertEqual(decision.mutation.target_status, "pending_dean")
        self.assertEqual(
            decision.mutation.clear_timestamps, ("dean_approval_at", "principal_approval_at")
        )

    def test_hod_revokes_while_dean_reviews(self):
        decision = self.check(caller("hod"), "pending_principal", "revoke")
        self.assertEqual(decision.mutation.target_status, "pending_hod")
        self.assertEqual(
            decision.mutation.clear_timestamps,
            ("hod_approval_at", "dean_approval_at", "principal_approval_at"),
        )

    def test_revoke_needs_prior_approval(self):
        self.assertDenied(self.check(caller("hod"), "pending_hod", "revoke"), InvalidState)

    def test_revoke_window_closes_on_event_day(self):
        decision = authorize(caller("dean"), event("approved", event_date=TODAY), "revoke", today=TODAY)
        self.assertDenied(decision, RevocationWindowClosed)


class MutationTests(SimpleTestCase):
    def test_as_update(self):
        now = datetime.datetime(2025, 3, 1, 10, 0)
        mutation = Mutation(
            action=Action.APPROVE,
            source_status="pending_dean",
            target_status="pending_principal",
            set_timestamps=("dean_approval_at",),
        )
        self.assertEqual(
            mutation.as_update(now), {"status": "pending_principal", "dean_approval_at": now}
        )

    def test_as_update_clears_and_sets_remarks(self):
        mutation = Mutation(
            action=Action.RETURN,
            source_status="pending_hod",
            target_status="returned_to_coordinator",
            clear_timestamps=("hod_approval_at",),
            remarks="Fix dates",
        )
        self.assertEqual(
            mutation.as_update(None),
            {"status": "returned_to_coordinator", "hod_approval_at": None, "remarks": "Fix dates"},
        )
