# portal_core/consent/admin.py
from django.contrib import admin

from portal_core.consent.models import PatientConsent


@admin.register(PatientConsent)
class PatientConsentAdmin(admin.ModelAdmin):
    list_display = ("global_patient", "clinic", "scope", "status", "updated_at")
    list_filter = ("scope", "status", "clinic")
    search_fields = ("global_patient__id", "global_patient__primary_phone")
    readonly_fields = ("updated_at",)
