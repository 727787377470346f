from django.contrib import admin

from .models import ActivityLog, Club, Department, ProfessionalSociety, Profile


@admin.register(Department)
class DepartmentAdmin(admin.ModelAdmin):
    list_display = ("name", "degree")
    search_fields = ("name",)


@admin.register(Club)
class ClubAdmin(admin.ModelAdmin):
    search_fields = ("name",)


@admin.register(ProfessionalSociety)
class ProfessionalSocietyAdmin(admin.ModelAdmin):
    search_fields = ("name",)


@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    list_display = ("user", "role", "department", "club", "professional_society")
    list_filter = ("role", "department", "club", "professional_society")
    search_fields = ("user__username", "user__email")
    # Affiliations change through the roster endpoints so exclusivity holds.
    readonly_fields = ("department", "club", "professional_society")


@admin.register(ActivityLog)
class ActivityLogAdmin(admin.ModelAdmin):
    list_display = ("timestamp", "user", "action", "description")
    list_filter = ("action",)
    readonly_fields = ("timestamp", "user", "action", "description", "metadata")
