from django.conf import settings
from django.db import models

from core.models import Club, Department, ProfessionalSociety

from .state_machine import STATUS_LABELS


# ────────────────────────────────────────────────────────────────
#  MAIN EVENT
# ────────────────────────────────────────────────────────────────
class Event(models.Model):
    """An event proposal moving through the HOD → Dean → Principal chain.

    ``status`` only changes through :func:`emt.engine.apply_transition`.
    Events are never deleted; cancellation is a terminal status.
    """

    class Status(models.TextChoices):
        PENDING_HOD = "pending_hod", STATUS_LABELS["pending_hod"]
        RETURNED_TO_COORDINATOR = "returned_to_coordinator", STATUS_LABELS["returned_to_coordinator"]
        PENDING_DEAN = "pending_dean", STATUS_LABELS["pending_dean"]
        RETURNED_TO_HOD = "returned_to_hod", STATUS_LABELS["returned_to_hod"]
        PENDING_PRINCIPAL = "pending_principal", STATUS_LABELS["pending_principal"]
        RETURNED_TO_DEAN = "returned_to_dean", STATUS_LABELS["returned_to_dean"]
        APPROVED = "approved", STATUS_LABELS["approved"]
        REJECTED = "rejected", STATUS_LABELS["rejected"]
        CANCELLED = "cancelled", STATUS_LABELS["cancelled"]

    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    objective = models.TextField(blank=True)
    event_date = models.DateField()
    start_time = models.TimeField(null=True, blank=True)
    end_time = models.TimeField(null=True, blank=True)
    venue = models.CharField(max_length=200, blank=True)

    submitted_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="submitted_events"
    )
    # Organising unit, copied from the submitter's affiliation at submission.
    department = models.ForeignKey(
        Department, null=True, blank=True, on_delete=models.SET_NULL, related_name="events"
    )
    club = models.ForeignKey(
        Club, null=True, blank=True, on_delete=models.SET_NULL, related_name="events"
    )
    professional_society = models.ForeignKey(
        ProfessionalSociety,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="events",
    )

    status = models.CharField(
        max_length=32, choices=Status.choices, default=Status.PENDING_HOD, db_index=True
    )
    remarks = models.TextField(blank=True)

    # Approval timestamps
    hod_approval_at = models.DateTimeField(null=True, blank=True)
    dean_approval_at = models.DateTimeField(null=True, blank=True)
    principal_approval_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Event"
        verbose_name_plural = "Events"
        ordering = ["-created_at"]

    def __str__(self):
        return self.title or f"Event #{self.id}"

    @property
    def organizing_unit(self):
        return self.department or self.club or self.professional_society

    def as_dict(self):
        unit = self.organizing_unit
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "objective": self.objective,
            "event_date": self.event_date.isoformat() if self.event_date else None,
            "start_time": self.start_time.isoformat() if self.start_time else None,
            "end_time": self.end_time.isoformat() if self.end_time else None,
            "venue": self.venue,
            "submitted_by": self.submitted_by_id,
            "department_club": str(unit) if unit else "",
            "status": self.status,
            "status_display": self.get_status_display(),
            "remarks": self.remarks,
            "hod_approval_at": self.hod_approval_at.isoformat() if self.hod_approval_at else None,
            "dean_approval_at": self.dean_approval_at.isoformat() if self.dean_approval_at else None,
            "principal_approval_at": (
                self.principal_approval_at.isoformat() if self.principal_approval_at else None
            ),
        }


# ────────────────────────────────────────────────────────────────
#  Status history
# ────────────────────────────────────────────────────────────────
class EventHistory(models.Model):
    """One row per applied status transition."""

    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="history")
    action = models.CharField(max_length=20)
    old_status = models.CharField(max_length=32, choices=Event.Status.choices)
    new_status = models.CharField(max_length=32, choices=Event.Status.choices)
    remarks = models.TextField(blank=True)
    changed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="event_status_changes",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        verbose_name = "Event History"
        verbose_name_plural = "Event History"

    def __str__(self):
        return f"{self.event_id}: {self.old_status} → {self.new_status}"

    def as_dict(self):
        return {
            "action": self.action,
            "old_status": self.old_status,
            "new_status": self.new_status,
            "remarks": self.remarks,
            "changed_by": self.changed_by_id,
            "created_at": self.created_at.isoformat(),
        }
