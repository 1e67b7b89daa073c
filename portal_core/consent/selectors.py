# portal_core/consent/selectors.py
from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, FrozenSet, List, Optional
from uuid import UUID

from portal_core.clinics.models import Clinic
from portal_core.consent.models import ConsentScope, ConsentStatus, PatientConsent
from portal_core.identity.models import PatientLink


@dataclass(frozen=True)
class ClinicAccess:
    clinic_id: UUID
    clinic_name: str
    patient_ids: FrozenSet[UUID]


def is_visible(*, global_patient_id: UUID, clinic_id: UUID, category: str) -> bool:
    """
    ALL=REVOKED hides every category regardless of category rows.
    Otherwise the category row decides; no row means visible.
    """
    category = str(category)
    statuses = dict(
        PatientConsent.objects.filter(
            global_patient_id=global_patient_id,
            clinic_id=clinic_id,
            scope__in=[ConsentScope.ALL, category],
        ).values_list("scope", "status")
    )

    if statuses.get(ConsentScope.ALL) == ConsentStatus.REVOKED:
        return False
    return statuses.get(category) != ConsentStatus.REVOKED


def resolve_clinic_access(*, global_patient_id: UUID) -> Dict[UUID, ClinicAccess]:
    """
    Clinic id -> linked clinic-local patient ids, for every portal-enabled
    clinic where neither ALL nor VISITS is revoked.

    Must be recomputed on every read; revocations apply immediately.
    """
    links = (
        PatientLink.objects.filter(
            global_patient_id=global_patient_id,
            clinic__enabled_for_patient_portal=True,
        )
        .select_related("clinic")
        .order_by("clinic_id", "patient_id")
    )

    names: Dict[UUID, str] = {}
    patient_ids: Dict[UUID, set] = defaultdict(set)
    for link in links:
        names[link.clinic_id] = link.clinic.name
        patient_ids[link.clinic_id].add(link.patient_id)

    if not names:
        return {}

    hidden = set(
        PatientConsent.objects.filter(
            global_patient_id=global_patient_id,
            clinic_id__in=list(names),
            scope__in=[ConsentScope.ALL, ConsentScope.VISITS],
            status=ConsentStatus.REVOKED,
        ).values_list("clinic_id", flat=True)
    )

    return {
        clinic_id: ClinicAccess(
            clinic_id=clinic_id,
            clinic_name=name,
            patient_ids=frozenset(patient_ids[clinic_id]),
        )
        for clinic_id, name in names.items()
        if clinic_id not in hidden
    }


def consent_overview(*, global_patient_id: UUID) -> List[dict]:
    """
    Per linked clinic: status of every scope. Missing rows read as GRANTED.
    """
    clinic_ids = PatientLink.objects.filter(global_patient_id=global_patient_id).values_list(
        "clinic_id", flat=True
    )
    clinics = Clinic.objects.filter(id__in=clinic_ids, enabled_for_patient_portal=True).order_by("name", "id")

    rows = PatientConsent.objects.filter(global_patient_id=global_patient_id, clinic__in=clinics)
    by_clinic: Dict[UUID, Dict[str, PatientConsent]] = defaultdict(dict)
    for row in rows:
        by_clinic[row.clinic_id][row.scope] = row

    out: List[dict] = []
    for clinic in clinics:
        entries = by_clinic.get(clinic.id, {})
        scopes = []
        last_updated: Optional[datetime] = None
        for scope in ConsentScope.values:
            row = entries.get(scope)
            if row is not None and (last_updated is None or row.updated_at > last_updated):
                last_updated = row.updated_at
            scopes.append(
                {
                    "scope": scope,
                    "status": row.status if row is not None else ConsentStatus.GRANTED,
                    "updated_at": row.updated_at if row is not None else None,
                }
            )
        out.append(
            {
                "clinic_id": clinic.id,
                "clinic_name": clinic.name,
                "branding": clinic.portal_branding or {},
                "scopes": scopes,
                "last_updated": last_updated,
            }
        )
    return out
