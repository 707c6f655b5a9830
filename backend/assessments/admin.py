from django.contrib import admin

from .models import AssessmentHistory, StatusChangeLog


class AppendOnlyAdmin(admin.ModelAdmin):

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(AssessmentHistory)
class AssessmentHistoryAdmin(AppendOnlyAdmin):
    list_display = ("content_type", "object_id", "previous_danger_level",
                    "new_danger_level", "assessed_by_name", "assessed_by_role",
                    "created_at")
    list_filter = ("content_type", "assessed_by_role")


@admin.register(StatusChangeLog)
class StatusChangeLogAdmin(AppendOnlyAdmin):
    list_display = ("content_type", "object_id", "from_status", "to_status",
                    "changed_by_name", "created_at")
    list_filter = ("content_type", "to_status")
