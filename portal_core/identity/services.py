# portal_core/identity/services.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple
from uuid import UUID

from django.db import transaction
from django.utils import timezone

from portal_core.common.contacts import is_email_contact
from portal_core.identity.models import GlobalPatient, PatientLink
from portal_core.patients.selectors import portal_patients_with_contact

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolutionResult:
    global_patient_id: UUID
    linked: Tuple[Tuple[UUID, UUID], ...]  # (clinic_id, patient_id)
    display_name: Optional[str]


class IdentityResolver:
    """
    Links clinic-local patient records to a global identity after a
    successful phone login.

    Runs inside the caller's transaction (passcode verify). Any failure
    here must roll back the verification as a whole.
    """

    @staticmethod
    @transaction.atomic
    def resolve(*, contact: str, global_patient: GlobalPatient) -> ResolutionResult:
        gp = GlobalPatient.objects.select_for_update().get(pk=global_patient.pk)

        # Clinics store phones only; email logins are never matched.
        if is_email_contact(contact):
            gp.save(update_fields=["updated_at"])
            return ResolutionResult(global_patient_id=gp.id, linked=(), display_name=gp.full_name)

        matches = list(portal_patients_with_contact(contact=contact))

        if not matches:
            if gp.primary_phone != contact:
                gp.primary_phone = contact
                gp.save(update_fields=["primary_phone", "updated_at"])
            return ResolutionResult(global_patient_id=gp.id, linked=(), display_name=gp.full_name)

        # Deterministic tie-break for the display name.
        matches.sort(key=lambda p: (str(p.clinic_id), str(p.id)))

        verified_at = timezone.now()
        linked: List[Tuple[UUID, UUID]] = []
        for patient in matches:
            PatientLink.objects.update_or_create(
                clinic_id=patient.clinic_id,
                patient_id=patient.id,
                defaults={"global_patient": gp, "verified_at": verified_at},
            )
            linked.append((patient.clinic_id, patient.id))

        update_fields = ["updated_at"]

        name = next((p.full_name.strip() for p in matches if (p.full_name or "").strip()), None)
        if name and gp.full_name != name:
            gp.full_name = name
            update_fields.append("full_name")

        if gp.primary_phone != contact:
            gp.primary_phone = contact
            update_fields.append("primary_phone")

        gp.save(update_fields=update_fields)

        logger.info(
            "identity resolved global_patient=%s links=%d",
            gp.id,
            len(linked),
        )
        return ResolutionResult(global_patient_id=gp.id, linked=tuple(linked), display_name=gp.full_name)
