# portal_core/patients/models.py
from django.db import models

from portal_core.common.models import ClinicScopedModel


class Patient(ClinicScopedModel):
    """
    Clinic-local patient record, owned by one clinic tenant.
    The portal core reads these for contact matching and never writes them.
    """
    full_name = models.CharField(max_length=255, null=True, blank=True)

    # free text as typed by clinic staff; normalized at match time
    contact = models.CharField(max_length=64, blank=True, default="")

    date_of_birth = models.DateField(null=True, blank=True)
    gender = models.CharField(max_length=32, blank=True)

    # clinic-local medical record number
    mrn = models.CharField(max_length=64)

    class Meta:
        db_table = "patients_patient"
        constraints = [
            models.UniqueConstraint(
                fields=["clinic", "mrn"],
                name="uq_patient_clinic_mrn",
            ),
        ]
        indexes = [
            models.Index(fields=["clinic", "full_name"]),
        ]

    def __str__(self) -> str:
        return f"{self.full_name or '-'} ({self.mrn})"
