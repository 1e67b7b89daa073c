# portal_core/consent/models.py
import uuid

from django.db import models

from portal_core.clinics.models import Clinic
from portal_core.identity.models import GlobalPatient


class ConsentScope(models.TextChoices):
    VISITS = "VISITS", "Visits"
    LAB = "LAB", "Lab results"
    MEDS = "MEDS", "Medications"
    BILLING = "BILLING", "Billing"
    ALL = "ALL", "All data"


class ConsentStatus(models.TextChoices):
    GRANTED = "GRANTED", "Granted"
    REVOKED = "REVOKED", "Revoked"


class PatientConsent(models.Model):
    """
    Per-(clinic, identity, scope) consent decision.

    Opt-out model: no row means visible. Written by the consent management
    surface; the portal read path only reads it.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    global_patient = models.ForeignKey(GlobalPatient, on_delete=models.CASCADE, related_name="consents")
    clinic = models.ForeignKey(Clinic, on_delete=models.CASCADE, related_name="patient_consents")

    scope = models.CharField(max_length=16, choices=ConsentScope.choices)
    status = models.CharField(max_length=16, choices=ConsentStatus.choices, default=ConsentStatus.GRANTED)

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "consent_patient_consent"
        constraints = [
            models.UniqueConstraint(
                fields=["global_patient", "clinic", "scope"],
                name="uq_patient_consent_gp_clinic_scope",
            ),
        ]
        indexes = [
            models.Index(fields=["global_patient", "clinic"]),
        ]

    def __str__(self) -> str:
        return f"{self.clinic_id}:{self.scope}={self.status}"
