# Generated manually for the event workflow models
from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


STATUS_CHOICES = [
    ("pending_hod", "Pending HOD"),
    ("returned_to_coordinator", "Returned to Coordinator"),
    ("pending_dean", "Pending Dean"),
    ("returned_to_hod", "Returned to HOD"),
    ("pending_principal", "Pending Principal"),
    ("returned_to_dean", "Returned to Dean"),
    ("approved", "Approved"),
    ("rejected", "Rejected"),
    ("cancelled", "Cancelled"),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ("core", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Event",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=200)),
                ("description", models.TextField(blank=True)),
                ("objective", models.TextField(blank=True)),
                ("event_date", models.DateField()),
                ("start_time", models.TimeField(blank=True, null=True)),
                ("end_time", models.TimeField(blank=True, null=True)),
                ("venue", models.CharField(blank=True, max_length=200)),
                ("status", models.CharField(choices=STATUS_CHOICES, db_index=True, default="pending_hod", max_length=32)),
                ("remarks", models.TextField(blank=True)),
                ("hod_approval_at", models.DateTimeField(blank=True, null=True)),
                ("dean_approval_at", models.DateTimeField(blank=True, null=True)),
                ("principal_approval_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("submitted_by", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="submitted_events", to=settings.AUTH_USER_MODEL)),
                ("department", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="events", to="core.department")),
                ("club", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="events", to="core.club")),
                ("professional_society", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="events", to="core.professionalsociety")),
            ],
            options={
                "verbose_name": "Event",
                "verbose_name_plural": "Events",
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="EventHistory",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("action", models.CharField(max_length=20)),
                ("old_status", models.CharField(choices=STATUS_CHOICES, max_length=32)),
                ("new_status", models.CharField(choices=STATUS_CHOICES, max_length=32)),
                ("remarks", models.TextField(blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("event", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="history", to="emt.event")),
                ("changed_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="event_status_changes", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "verbose_name": "Event History",
                "verbose_name_plural": "Event History",
                "ordering": ["-created_at", "-id"],
            },
        ),
    ]
