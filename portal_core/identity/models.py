# portal_core/identity/models.py
import uuid

from django.db import models

from portal_core.clinics.models import Clinic
from portal_core.common.models import TimeStampedModel
from portal_core.patients.models import Patient


class GlobalPatient(TimeStampedModel):
    """
    The single cross-clinic identity for a human.
    Owned by no clinic; every linked clinic-local record points here.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    primary_phone = models.CharField(max_length=64, null=True, blank=True, unique=True)

    # best-effort, derived from linked clinic records
    full_name = models.CharField(max_length=255, null=True, blank=True)
    date_of_birth = models.DateField(null=True, blank=True)
    gender = models.CharField(max_length=32, blank=True, default="")

    class Meta:
        db_table = "identity_global_patient"

    def __str__(self) -> str:
        return self.full_name or self.primary_phone or str(self.id)


class PatientUser(models.Model):
    """
    Portal login account. Its id is the session `sub` claim.
    One account per login phone and one per login email.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    global_patient = models.ForeignKey(GlobalPatient, on_delete=models.CASCADE, related_name="users")

    login_phone = models.CharField(max_length=64, null=True, blank=True, unique=True)
    login_email = models.CharField(max_length=254, null=True, blank=True, unique=True)

    last_login_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "identity_patient_user"

    def __str__(self) -> str:
        return self.login_phone or self.login_email or str(self.id)


class PatientLink(models.Model):
    """
    Ties one clinic-local patient record to one global identity.
    At most one link per (clinic, patient); re-pointed on rematch, never
    duplicated, never deleted automatically.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    global_patient = models.ForeignKey(GlobalPatient, on_delete=models.CASCADE, related_name="links")
    clinic = models.ForeignKey(Clinic, on_delete=models.CASCADE, related_name="patient_links")
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name="portal_links")

    verified_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "identity_patient_link"
        constraints = [
            models.UniqueConstraint(fields=["clinic", "patient"], name="uq_patient_link_clinic_patient"),
        ]
        indexes = [
            models.Index(fields=["global_patient"]),
        ]

    def __str__(self) -> str:
        return f"{self.clinic_id}:{self.patient_id} -> {self.global_patient_id}"
