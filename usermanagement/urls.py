from django.urls import path

from . import views

app_name = "usermanagement"

urlpatterns = [
    path("clubs/<int:club_id>/coordinators/", views.club_coordinators, name="club_coordinators"),
    path("clubs/<int:unit_id>/rename/", views.rename_club, name="rename_club"),
    path(
        "societies/<int:society_id>/coordinators/",
        views.society_coordinators,
        name="society_coordinators",
    ),
    path("societies/<int:unit_id>/rename/", views.rename_society, name="rename_society"),
    path(
        "departments/<int:department_id>/roster/",
        views.department_roster,
        name="department_roster",
    ),
    path(
        "departments/<int:unit_id>/rename/",
        views.rename_department,
        name="rename_department",
    ),
]
