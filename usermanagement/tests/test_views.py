import json
from unittest.mock import patch

from django.contrib.auth.models import User
from django.db import DatabaseError
from django.test import TestCase
from django.urls import reverse

from core.models import Club, Department, Profile


class RosterViewTests(TestCase):
    def setUp(self):
        self.admin = User.objects.create_superuser(
            username="root", email="root@example.com", password="pass"
        )
        self.club = Club.objects.create(name="Photography")
        self.dept = Department.objects.create(name="Mathematics", degree="MCA")
        self.profiles = [
            User.objects.create_user(username=f"u{i}", password="pass").profile for i in range(3)
        ]

    def _post(self, name, payload, **kwargs):
        return self.client.post(
            reverse(f"usermanagement:{name}", kwargs=kwargs),
            data=json.dumps(payload),
            content_type="application/json",
        )

    def test_requires_admin(self):
        self.client.force_login(User.objects.get(username="u0"))
        resp = self._post("club_coordinators", {"coordinator_ids": []}, club_id=self.club.pk)
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(resp.json()["error"], "Admin access required")

    def test_requires_login(self):
        resp = self._post("club_coordinators", {"coordinator_ids": []}, club_id=self.club.pk)
        self.assertEqual(resp.status_code, 401)

    def test_assigns_club_coordinators(self):
        self.client.force_login(self.admin)
        ids = [p.pk for p in self.profiles[:2]]
        resp = self._post("club_coordinators", {"coordinator_ids": ids}, club_id=self.club.pk)
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual((data["assigned"], data["cleared"]), (2, 0))
        self.assertEqual(sorted(data["assigned_ids"]), sorted(ids))
        self.assertEqual(Profile.objects.filter(club=self.club).count(), 2)

    def test_department_roster(self):
        self.client.force_login(self.admin)
        resp = self._post(
            "department_roster",
            {"coordinator_ids": [self.profiles[0].pk], "hod_id": self.profiles[1].pk},
            department_id=self.dept.pk,
        )
        self.assertEqual(resp.status_code, 200)
        hod = Profile.objects.get(pk=self.profiles[1].pk)
        self.assertEqual((hod.role, hod.department), (Profile.Role.HOD, self.dept))

    def test_hod_in_coordinators_is_rejected(self):
        self.client.force_login(self.admin)
        pid = self.profiles[0].pk
        resp = self._post(
            "department_roster",
            {"coordinator_ids": [pid], "hod_id": pid},
            department_id=self.dept.pk,
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error_kind"], "InvalidAssignment")

    def test_ids_must_be_a_list(self):
        self.client.force_login(self.admin)
        resp = self._post("club_coordinators", {"coordinator_ids": "1,2"}, club_id=self.club.pk)
        self.assertEqual(resp.status_code, 400)

    def test_invalid_json(self):
        self.client.force_login(self.admin)
        resp = self.client.post(
            reverse("usermanagement:club_coordinators", args=[self.club.pk]),
            data="[",
            content_type="application/json",
        )
        self.assertEqual(resp.json(), {"ok": False, "error": "Invalid JSON"})

    def test_partial_failure_is_reported(self):
        self.client.force_login(self.admin)
        with patch("usermanagement.reconcile._apply", side_effect=DatabaseError("locked")):
            resp = self._post(
                "club_coordinators", {"coordinator_ids": [self.profiles[0].pk]}, club_id=self.club.pk
            )
        self.assertEqual(resp.status_code, 500)
        data = resp.json()
        self.assertEqual(data["error_kind"], "PartialReconciliationFailure")
        self.assertTrue(data["retryable"])
        self.assertIn(str(self.profiles[0].pk), data["failed"])
        self.assertFalse(Profile.objects.filter(club=self.club).exists())

    def test_rename_club(self):
        self.client.force_login(self.admin)
        resp = self._post("rename_club", {"name": "Photo Society"}, unit_id=self.club.pk)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["name"], "Photo Society")

    def test_rename_unknown_department(self):
        self.client.force_login(self.admin)
        resp = self._post("rename_department", {"name": "Maths"}, unit_id=self.dept.pk + 50)
        self.assertEqual(resp.status_code, 404)
