# portal_core/audit/models.py
import uuid

from django.core.exceptions import ValidationError
from django.db import models


class AccessResourceType(models.TextChoices):
    VISIT_SUMMARY = "visit_summary", "Visit summary"
    VISIT_DETAIL = "visit_detail", "Visit detail"
    DOCTOR_NOTE = "doctor_note", "Doctor note"


class PatientAccessLog(models.Model):
    """
    Immutable record of one portal read of sensitive data.
    Append-only compliance trail; ids are stored raw so log rows outlive
    the records they describe.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    patient_user_id = models.UUIDField(db_index=True)
    resource_type = models.CharField(max_length=32, choices=AccessResourceType.choices)
    resource_id = models.UUIDField()
    clinic_id = models.UUIDField(null=True, blank=True)

    ts = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        db_table = "audit_patient_access_log"
        indexes = [
            models.Index(fields=["patient_user_id", "ts"]),
            models.Index(fields=["resource_type", "resource_id"]),
        ]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("PatientAccessLog is immutable and cannot be modified once created.")
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("PatientAccessLog is immutable and cannot be deleted.")
