# portal_core/identity/admin.py
from django.contrib import admin

from portal_core.identity.models import GlobalPatient, PatientLink, PatientUser


class PatientLinkInline(admin.TabularInline):
    model = PatientLink
    extra = 0
    readonly_fields = ("clinic", "patient", "verified_at")


@admin.register(GlobalPatient)
class GlobalPatientAdmin(admin.ModelAdmin):
    list_display = ("id", "full_name", "primary_phone", "created_at", "updated_at")
    search_fields = ("id", "full_name", "primary_phone")
    readonly_fields = ("created_at", "updated_at")
    inlines = [PatientLinkInline]


@admin.register(PatientUser)
class PatientUserAdmin(admin.ModelAdmin):
    list_display = ("id", "login_phone", "login_email", "global_patient", "last_login_at")
    search_fields = ("id", "login_phone", "login_email")
    readonly_fields = ("created_at", "last_login_at")
