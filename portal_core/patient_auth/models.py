# portal_core/patient_auth/models.py
import uuid

from django.db import models


class PasscodeRequest(models.Model):
    """
    One issued login passcode. Only the hash is stored.

    Rows are never deleted: superseded requests stay for the rate-limit
    window and for audit.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    contact = models.CharField(max_length=128, db_index=True)  # normalized
    code_hash = models.CharField(max_length=255)

    request_ip = models.GenericIPAddressField(null=True, blank=True)
    device_id = models.CharField(max_length=128, null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    expires_at = models.DateTimeField()
    attempts = models.PositiveIntegerField(default=0)
    verified_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "patient_auth_passcode_request"
        indexes = [
            models.Index(fields=["contact", "created_at"]),
            models.Index(fields=["contact", "verified_at"]),
        ]

    def __str__(self) -> str:
        return f"{self.contact} @ {self.created_at:%Y-%m-%d %H:%M}"

    @property
    def is_pending(self) -> bool:
        return self.verified_at is None
