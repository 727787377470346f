from django.test import SimpleTestCase

from emt.models import Event
from emt.state_machine import (ALL_STATES, APPROVED, CANCELLED, REJECTED,
                               TRANSITION_RULES, Action, Level, Pending,
                               Returned, approved_levels, is_terminal, parse_status,
                               rules_for, source_states)


class StatusSetTests(SimpleTestCase):
    def test_nine_distinct_statuses(self):
        statuses = [state.status for state in ALL_STATES]
        self.assertEqual(len(statuses), 9)
        self.assertEqual(len(set(statuses)), 9)

    def test_model_choices_match_states(self):
        self.assertEqual(set(Event.Status.values), {state.status for state in ALL_STATES})

    def test_returned_status_names_the_recipient(self):
        self.assertEqual(Returned(Level.HOD).status, "returned_to_coordinator")
        self.assertEqual(Returned(Level.DEAN).status, "returned_to_hod")
        self.assertEqual(Returned(Level.PRINCIPAL).status, "returned_to_dean")

    def test_terminal_states(self):
        self.assertEqual(
            {state.status for state in ALL_STATES if is_terminal(state)},
            {"approved", "rejected", "cancelled"},
        )

    def test_parse_status(self):
        for state in ALL_STATES:
            self.assertEqual(parse_status(state.status), state)
        with self.assertRaises(ValueError):
            parse_status("pending_registrar")


class TransitionTableTests(SimpleTestCase):
    def _single(self, action, state):
        rules = rules_for(action, state)
        self.assertEqual(len(rules), 1, f"{action} from {state}")
        return rules[0]

    def test_levels_are_symmetric(self):
        for level in Level:
            pending = Pending(level)
            for action in (Action.APPROVE, Action.RETURN, Action.REJECT):
                self.assertEqual(self._single(action, pending).role, level.role)
            self.assertEqual(self._single(Action.RETURN, pending).target, Returned(level))
            self.assertEqual(self._single(Action.REJECT, pending).target, REJECTED)
            resubmit = self._single(Action.RESUBMIT, Returned(level))
            self.assertEqual(resubmit.target, pending)

    def test_approval_chain(self):
        self.assertEqual(self._single(Action.APPROVE, Pending(Level.HOD)).target, Pending(Level.DEAN))
        self.assertEqual(self._single(Action.APPROVE, Pending(Level.DEAN)).target, Pending(Level.PRINCIPAL))
        self.assertEqual(self._single(Action.APPROVE, Pending(Level.PRINCIPAL)).target, APPROVED)

    def test_approve_stamps_own_level(self):
        for level in Level:
            rule = self._single(Action.APPROVE, Pending(level))
            self.assertEqual(rule.stamp, level.timestamp_field)

    def test_resubmission_actors(self):
        coordinator = self._single(Action.RESUBMIT, Returned(Level.HOD))
        self.assertEqual(coordinator.role, "coordinator")
        self.assertTrue(coordinator.owner_only)
        self.assertEqual(self._single(Action.RESUBMIT, Returned(Level.DEAN)).role, "hod")
        self.assertEqual(self._single(Action.RESUBMIT, Returned(Level.PRINCIPAL)).role, "dean")

    def test_rejected_and_cancelled_are_dead_ends(self):
        for rule in TRANSITION_RULES:
            self.assertNotIn(rule.source, (REJECTED, CANCELLED))

    def test_approved_only_leaves_by_cancel_or_revoke(self):
        actions = {rule.action for rule in TRANSITION_RULES if rule.source == APPROVED}
        self.assertEqual(actions, {Action.CANCEL, Action.REVOKE})

    def test_cancel_sources(self):
        expected = set(ALL_STATES) - {REJECTED, CANCELLED}
        self.assertEqual(source_states(Action.CANCEL), expected)
        for state in expected:
            rule = self._single(Action.CANCEL, state)
            self.assertTrue(rule.owner_only)
            self.assertEqual(rule.target, CANCELLED)

    def test_revoke_targets(self):
        self.assertEqual(
            {rule.target for rule in TRANSITION_RULES if rule.action == Action.REVOKE and rule.role == "hod"},
            {Pending(Level.HOD)},
        )
        self.assertEqual(
            {rule.target for rule in TRANSITION_RULES if rule.action == Action.REVOKE and rule.role == "principal"},
            {Pending(Level.DEAN)},
        )

    def test_revoke_clears_from_reverted_level_up(self):
        cleared = {
            rule.role: rule.clear for rule in TRANSITION_RULES if rule.action == Action.REVOKE
        }
        self.assertEqual(
            cleared["hod"], ("hod_approval_at", "dean_approval_at", "principal_approval_at")
        )
        self.assertEqual(cleared["dean"], ("dean_approval_at", "principal_approval_at"))
        self.assertEqual(cleared["principal"], ("dean_approval_at", "principal_approval_at"))

    def test_revoke_requires_prior_approval(self):
        self.assertEqual(approved_levels(Pending(Level.HOD)), ())
        self.assertEqual(approved_levels(Pending(Level.PRINCIPAL)), (Level.HOD, Level.DEAN))
        self.assertEqual(approved_levels(APPROVED), tuple(Level))
        self.assertEqual(rules_for(Action.REVOKE, Pending(Level.HOD)), [])
        principal_sources = {
            rule.source for rule in TRANSITION_RULES
            if rule.action == Action.REVOKE and rule.role == "principal"
        }
        self.assertEqual(principal_sources, {APPROVED})
