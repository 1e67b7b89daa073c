# portal_core/visits/models.py
from django.db import models

from portal_core.common.models import ClinicScopedModel
from portal_core.patients.models import Patient


class Doctor(ClinicScopedModel):
    name = models.CharField(max_length=255)
    department = models.CharField(max_length=128, blank=True, default="")

    class Meta:
        db_table = "visits_doctor"

    def __str__(self) -> str:
        return self.name


class Visit(ClinicScopedModel):
    """
    Clinic-side visit record. The portal history reader consumes these,
    always filtered by (clinic, patient) pairs the caller is allowed to see.
    """
    patient = models.ForeignKey(Patient, on_delete=models.PROTECT, related_name="visits")
    doctor = models.ForeignKey(Doctor, on_delete=models.SET_NULL, null=True, blank=True, related_name="visits")

    visit_date = models.DateTimeField(db_index=True)
    reason = models.CharField(max_length=255, blank=True, default="")

    class Meta:
        db_table = "visits_visit"
        indexes = [
            models.Index(fields=["clinic", "patient", "visit_date"]),
            models.Index(fields=["visit_date", "id"]),
        ]

    def __str__(self) -> str:
        return f"Visit({self.patient_id}, {self.visit_date:%Y-%m-%d})"


class Diagnosis(ClinicScopedModel):
    visit = models.ForeignKey(Visit, on_delete=models.CASCADE, related_name="diagnoses")
    diagnosis = models.CharField(max_length=255)

    class Meta:
        db_table = "visits_diagnosis"
        ordering = ["created_at"]


class Medication(ClinicScopedModel):
    visit = models.ForeignKey(Visit, on_delete=models.CASCADE, related_name="medications")
    drug_name = models.CharField(max_length=255)
    dosage = models.CharField(max_length=128, blank=True, default="")
    instructions = models.TextField(blank=True, default="")

    class Meta:
        db_table = "visits_medication"
        ordering = ["created_at"]


class LabResult(ClinicScopedModel):
    visit = models.ForeignKey(Visit, on_delete=models.CASCADE, related_name="lab_results")
    test_name = models.CharField(max_length=255)
    result_value = models.CharField(max_length=128, blank=True, default="")
    unit = models.CharField(max_length=32, blank=True, default="")
    reference_range = models.CharField(max_length=64, blank=True, default="")
    test_date = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "visits_lab_result"
        ordering = ["-test_date"]


class Observation(ClinicScopedModel):
    visit = models.ForeignKey(Visit, on_delete=models.CASCADE, related_name="observations")
    note_text = models.TextField(blank=True, default="")

    bp_systolic = models.PositiveSmallIntegerField(null=True, blank=True)
    bp_diastolic = models.PositiveSmallIntegerField(null=True, blank=True)
    heart_rate = models.PositiveSmallIntegerField(null=True, blank=True)
    temperature_c = models.DecimalField(max_digits=4, decimal_places=1, null=True, blank=True)
    spo2 = models.PositiveSmallIntegerField(null=True, blank=True)
    bmi = models.DecimalField(max_digits=5, decimal_places=2, null=True, blank=True)

    class Meta:
        db_table = "visits_observation"
        ordering = ["-created_at"]


class DoctorNote(ClinicScopedModel):
    """
    Doctor-authored document attached to a visit.
    The blob lives in the configured Django storage (the document store).
    """
    patient = models.ForeignKey(Patient, on_delete=models.PROTECT, related_name="doctor_notes")
    visit = models.ForeignKey(Visit, on_delete=models.CASCADE, related_name="doctor_notes")

    file = models.FileField(upload_to="doctor_notes/%Y/%m/")
    file_name = models.CharField(max_length=255, blank=True, default="")
    content_type = models.CharField(max_length=128, blank=True, default="")
    size = models.PositiveIntegerField(default=0)
    extracted_text = models.TextField(null=True, blank=True)

    class Meta:
        db_table = "visits_doctor_note"
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["visit", "created_at"]),
        ]

    def __str__(self) -> str:
        return self.file_name or str(self.id)
