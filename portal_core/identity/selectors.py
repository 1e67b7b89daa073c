# portal_core/identity/selectors.py
from __future__ import annotations

from uuid import UUID

from portal_core.identity.models import PatientLink


def linked_clinic_ids(*, global_patient_id: UUID) -> set[UUID]:
    """Linked clinics that still have the patient portal switched on."""
    return set(
        PatientLink.objects.filter(
            global_patient_id=global_patient_id,
            clinic__enabled_for_patient_portal=True,
        ).values_list("clinic_id", flat=True)
    )
