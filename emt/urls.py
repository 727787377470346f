from django.urls import path

from . import views

app_name = "emt"

urlpatterns = [
    path("events/", views.create_event, name="create_event"),
    path("events/approved/", views.approved_events, name="approved_events"),
    path("events/<int:event_id>/", views.event_detail, name="event_detail"),
    path("events/<int:event_id>/history/", views.event_history, name="event_history"),
    path(
        "events/<int:event_id>/transition/",
        views.request_transition,
        name="request_transition",
    ),
    path("events/<int:event_id>/report/", views.generate_report, name="generate_report"),
    path("approvals/", views.approval_queue, name="approval_queue"),
]
