from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),  # Built-in Django admin
    path("", include("core.urls")),  # core: caller profile
    path("accounts/", include("allauth.urls")),  # login/logout
    path("", include(("emt.urls", "emt"), namespace="emt")),  # event workflow
    path(
        "usermanagement/",
        include(("usermanagement.urls", "usermanagement"), namespace="usermanagement"),
    ),
]
