from django.contrib import admin

from .models import Event, EventHistory


class EventHistoryInline(admin.TabularInline):
    model = EventHistory
    extra = 0
    can_delete = False
    readonly_fields = ("action", "old_status", "new_status", "remarks", "changed_by", "created_at")


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ("title", "event_date", "status", "submitted_by", "department", "club")
    list_filter = ("status", "department", "club", "professional_society")
    search_fields = ("title", "submitted_by__username")
    # Status and approval stamps only move through the approval engine.
    readonly_fields = (
        "status",
        "remarks",
        "hod_approval_at",
        "dean_approval_at",
        "principal_approval_at",
        "submitted_by",
    )
    inlines = [EventHistoryInline]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
