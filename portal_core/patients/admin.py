# portal_core/patients/admin.py
from django.contrib import admin

from portal_core.patients.models import Patient


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = (
        "full_name",
        "mrn",
        "contact",
        "clinic",
        "created_at",
    )
    list_filter = ("clinic",)
    search_fields = ("full_name", "mrn", "contact")
    readonly_fields = ("created_at", "updated_at")
    ordering = ("-created_at",)
