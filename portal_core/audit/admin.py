# portal_core/audit/admin.py
from django.contrib import admin

from portal_core.audit.models import PatientAccessLog


@admin.register(PatientAccessLog)
class PatientAccessLogAdmin(admin.ModelAdmin):
    list_display = (
        "ts",
        "patient_user_id",
        "resource_type",
        "resource_id",
        "clinic_id",
    )
    list_filter = ("resource_type",)
    search_fields = ("patient_user_id", "resource_id", "clinic_id")
    readonly_fields = ("patient_user_id", "resource_type", "resource_id", "clinic_id", "ts")
    ordering = ("-ts",)

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
