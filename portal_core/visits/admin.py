# portal_core/visits/admin.py
from __future__ import annotations

from django.contrib import admin

from portal_core.visits.models import Diagnosis, Doctor, DoctorNote, Visit


class DiagnosisInline(admin.TabularInline):
    model = Diagnosis
    extra = 0


@admin.register(Visit)
class VisitAdmin(admin.ModelAdmin):
    list_display = ("id", "clinic", "patient", "doctor", "visit_date", "created_at")
    list_filter = ("clinic",)
    search_fields = ("id", "patient__id", "patient__mrn", "patient__full_name")
    readonly_fields = ("created_at", "updated_at")
    inlines = [DiagnosisInline]


@admin.register(Doctor)
class DoctorAdmin(admin.ModelAdmin):
    list_display = ("name", "department", "clinic")
    list_filter = ("clinic",)
    search_fields = ("name",)


@admin.register(DoctorNote)
class DoctorNoteAdmin(admin.ModelAdmin):
    list_display = ("id", "file_name", "content_type", "size", "visit", "clinic", "created_at")
    list_filter = ("clinic", "content_type")
    readonly_fields = ("created_at", "updated_at")
