from django.contrib import admin

from portal_core.clinics.models import Clinic


@admin.register(Clinic)
class ClinicAdmin(admin.ModelAdmin):
    list_display = ("name", "code", "status", "enabled_for_patient_portal", "created_at")
    list_filter = ("status", "enabled_for_patient_portal")
    search_fields = ("name", "code")
    readonly_fields = ("created_at", "updated_at")
