from django.conf import settings
from django.contrib.auth.models import User
from django.db import models
from django.db.models import Q


# ───────────────────────────────
#  Organisational units
# ───────────────────────────────

class Department(models.Model):
    DEGREE_CHOICES = [
        ("B.E", "B.E"),
        ("B.Tech", "B.Tech"),
        ("MCA", "MCA"),
        ("MBA", "MBA"),
    ]
    name = models.CharField(max_length=150)
    degree = models.CharField(max_length=16, choices=DEGREE_CHOICES, blank=True)

    class Meta:
        ordering = ["name", "degree"]
        constraints = [
            models.UniqueConstraint(
                fields=["name", "degree"], name="unique_department_name_degree"
            )
        ]

    def __str__(self):
        return f"{self.name} ({self.degree})" if self.degree else self.name


class Club(models.Model):
    name = models.CharField(max_length=150, unique=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name


class ProfessionalSociety(models.Model):
    name = models.CharField(max_length=150, unique=True)

    class Meta:
        ordering = ["name"]
        verbose_name_plural = "Professional Societies"

    def __str__(self):
        return self.name


# ───────────────────────────────
#  User Profile
# ───────────────────────────────

class Profile(models.Model):
    """Role and affiliation of a user.

    A profile holds at most one affiliation at a time. ``club`` and
    ``professional_society`` are only meaningful for coordinators;
    ``department`` for coordinators and HODs. The database enforces both rules.
    """

    class Role(models.TextChoices):
        COORDINATOR = "coordinator", "Coordinator"
        HOD = "hod", "HOD"
        DEAN = "dean", "Dean"
        PRINCIPAL = "principal", "Principal"
        ADMIN = "admin", "Admin"

    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE)
    role = models.CharField(max_length=32, choices=Role.choices, default=Role.COORDINATOR)
    department = models.ForeignKey(
        Department, null=True, blank=True, on_delete=models.SET_NULL, related_name="profiles"
    )
    club = models.ForeignKey(
        Club, null=True, blank=True, on_delete=models.SET_NULL, related_name="profiles"
    )
    professional_society = models.ForeignKey(
        ProfessionalSociety,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="profiles",
    )

    class Meta:
        constraints = [
            models.CheckConstraint(
                condition=Q(club__isnull=True) | Q(role="coordinator"),
                name="profile_club_requires_coordinator",
            ),
            models.CheckConstraint(
                condition=Q(professional_society__isnull=True) | Q(role="coordinator"),
                name="profile_society_requires_coordinator",
            ),
            models.CheckConstraint(
                condition=Q(department__isnull=True) | Q(role__in=["coordinator", "hod"]),
                name="profile_department_requires_coordinator_or_hod",
            ),
            models.CheckConstraint(
                condition=(
                    (Q(department__isnull=True) & Q(club__isnull=True))
                    | (Q(department__isnull=True) & Q(professional_society__isnull=True))
                    | (Q(club__isnull=True) & Q(professional_society__isnull=True))
                ),
                name="profile_single_affiliation",
            ),
        ]

    def __str__(self):
        return f"{self.user.username} ({self.role})"

    @property
    def affiliation(self):
        """Return the organisational unit this profile is assigned to, if any."""
        return self.department or self.club or self.professional_society


# ───────────────────────────────
#  Activity log
# ───────────────────────────────

class ActivityLog(models.Model):
    """Generic activity log for auditing administrative actions"""
    user = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="activity_logs",
    )
    action = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    timestamp = models.DateTimeField(auto_now_add=True)
    metadata = models.JSONField(null=True, blank=True)

    class Meta:
        ordering = ["-timestamp"]

    def __str__(self):
        return f"{self.timestamp} - {self.user} - {self.action}"

    def generate_description(self):
        """Build a concise plain-language description when none is provided."""
        params = self.metadata if isinstance(self.metadata, dict) else {}

        username = "someone"
        if self.user:
            username = self.user.get_full_name() or self.user.username

        verb = (self.action or "").replace("_", " ").strip() or "acted"
        description = f"{username}: {verb}"
        unit = params.get("unit_name")
        if unit:
            description += f' "{unit}"'
        return description

    def save(self, *args, **kwargs):
        if not self.description:
            self.description = self.generate_description()
        super().save(*args, **kwargs)
