# portal_core/clinics/models.py
import uuid
from django.db import models


class ClinicStatus(models.TextChoices):
    ACTIVE = "ACTIVE", "Active"
    INACTIVE = "INACTIVE", "Inactive"
    SUSPENDED = "SUSPENDED", "Suspended"


class Clinic(models.Model):
    """
    Clinic tenant. Root of all clinic-side scoping.
    Also the clinic directory the portal core consults for
    `enabled_for_patient_portal`.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=255)
    code = models.SlugField(max_length=64, unique=True)

    status = models.CharField(
        max_length=16,
        choices=ClinicStatus.choices,
        default=ClinicStatus.ACTIVE,
        db_index=True,
    )

    # patient portal opt-in, owned by clinic administration
    enabled_for_patient_portal = models.BooleanField(default=False, db_index=True)
    portal_branding = models.JSONField(default=dict, blank=True)

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "clinics_clinic"
        indexes = [
            models.Index(fields=["code"]),
            models.Index(fields=["status"]),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.code})"
