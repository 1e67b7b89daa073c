# portal_core/patient_auth/admin.py
from django.contrib import admin

from portal_core.patient_auth.models import PasscodeRequest


@admin.register(PasscodeRequest)
class PasscodeRequestAdmin(admin.ModelAdmin):
    list_display = ("contact", "created_at", "expires_at", "attempts", "verified_at", "device_id", "request_ip")
    list_filter = ("verified_at",)
    search_fields = ("contact", "device_id", "request_ip")
    # code_hash is never shown
    exclude = ("code_hash",)
    readonly_fields = ("contact", "created_at", "expires_at", "attempts", "verified_at", "device_id", "request_ip")
    ordering = ("-created_at",)
