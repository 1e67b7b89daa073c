# portal_core/history/selectors.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from functools import reduce
from operator import or_
from typing import Any, Dict, List, Optional
from uuid import UUID

from django.conf import settings
from django.db.models import Exists, OuterRef, Q, QuerySet, Subquery

from portal_core.audit.models import AccessResourceType
from portal_core.audit.services import AccessAuditor
from portal_core.common.api.exceptions import InvalidCursor, ResourceNotFound
from portal_core.consent.models import ConsentScope
from portal_core.consent.selectors import ClinicAccess, is_visible, resolve_clinic_access
from portal_core.history.cursor import decode_cursor, encode_cursor
from portal_core.visits.models import DoctorNote, Visit


def _page_size(limit: Any) -> int:
    cfg = getattr(settings, "PATIENT_HISTORY", {}) or {}
    default = int(cfg.get("DEFAULT_PAGE_SIZE", 20))
    maximum = int(cfg.get("MAX_PAGE_SIZE", 50))
    try:
        value = int(limit)
    except (TypeError, ValueError):
        return default
    return max(1, min(maximum, value))


@dataclass(frozen=True)
class VisitPage:
    visits: List[Visit]
    next_cursor: Optional[str]


@dataclass(frozen=True)
class VisitDetail:
    visit: Visit
    diagnoses: list
    medications: list
    labs: list
    observations: list
    doctor_notes: list
    next_visit_date: Optional[datetime]
    labs_visible: bool = True
    meds_visible: bool = True


@dataclass
class DocumentContent:
    note: DoctorNote
    file: Any
    content_type: str
    size: int
    file_name: Optional[str] = field(default=None)


def _visible_pairs_q(access: Dict[UUID, ClinicAccess]) -> Q:
    return reduce(
        or_,
        (Q(clinic_id=a.clinic_id, patient_id__in=list(a.patient_ids)) for a in access.values()),
    )


def _next_visit_date_subquery() -> Subquery:
    later = Visit.objects.filter(
        clinic_id=OuterRef("clinic_id"),
        patient_id=OuterRef("patient_id"),
        visit_date__gt=OuterRef("visit_date"),
    ).order_by("visit_date")
    return Subquery(later.values("visit_date")[:1])


def _is_linked(access: Dict[UUID, ClinicAccess], *, clinic_id: UUID, patient_id: UUID) -> bool:
    clinic = access.get(clinic_id)
    return clinic is not None and patient_id in clinic.patient_ids


def _visits_for(access: Dict[UUID, ClinicAccess]) -> QuerySet[Visit]:
    return Visit.objects.filter(_visible_pairs_q(access))


def list_visits(*, principal, cursor: Optional[str] = None, limit: Any = None) -> VisitPage:
    """
    Merged cross-clinic timeline, newest first.

    Total order (-visit_date, -id); the cursor carries the last visit id of
    the previous page and must name a visit the caller can still see.
    """
    size = _page_size(limit)

    access = resolve_clinic_access(global_patient_id=principal.global_patient_id)
    if not access:
        return VisitPage(visits=[], next_cursor=None)

    after_id = decode_cursor(cursor)

    qs = _visits_for(access)

    if after_id is not None:
        anchor = qs.filter(id=after_id).values("visit_date", "id").first()
        if anchor is None:
            raise InvalidCursor()
        qs = qs.filter(
            Q(visit_date__lt=anchor["visit_date"]) | Q(visit_date=anchor["visit_date"], id__lt=anchor["id"])
        )

    rows = list(
        qs.select_related("clinic", "doctor")
        .prefetch_related("diagnoses")
        .annotate(
            next_visit_date=_next_visit_date_subquery(),
            has_doctor_note=Exists(DoctorNote.objects.filter(visit_id=OuterRef("pk"))),
        )
        .order_by("-visit_date", "-id")[: size + 1]
    )

    has_more = len(rows) > size
    visits = rows[:size]

    for visit in visits:
        AccessAuditor.record(
            patient_user_id=principal.id,
            resource_type=AccessResourceType.VISIT_SUMMARY,
            resource_id=visit.id,
            clinic_id=visit.clinic_id,
        )

    next_cursor = encode_cursor(visit_id=visits[-1].id) if has_more else None
    return VisitPage(visits=visits, next_cursor=next_cursor)


def get_visit_detail(*, principal, visit_id: UUID) -> VisitDetail:
    access = resolve_clinic_access(global_patient_id=principal.global_patient_id)
    if not access:
        raise ResourceNotFound()

    visit = (
        Visit.objects.select_related("clinic", "doctor", "patient")
        .annotate(next_visit_date=_next_visit_date_subquery())
        .filter(id=visit_id)
        .first()
    )
    # absent and hidden look the same
    if visit is None or not _is_linked(access, clinic_id=visit.clinic_id, patient_id=visit.patient_id):
        raise ResourceNotFound()

    gp_id = principal.global_patient_id
    labs_visible = is_visible(global_patient_id=gp_id, clinic_id=visit.clinic_id, category=ConsentScope.LAB)
    meds_visible = is_visible(global_patient_id=gp_id, clinic_id=visit.clinic_id, category=ConsentScope.MEDS)

    detail = VisitDetail(
        visit=visit,
        diagnoses=list(visit.diagnoses.all()),
        medications=list(visit.medications.all()) if meds_visible else [],
        labs=list(visit.lab_results.all()) if labs_visible else [],
        observations=list(visit.observations.all()),
        doctor_notes=list(visit.doctor_notes.all()),
        next_visit_date=visit.next_visit_date,
        labs_visible=labs_visible,
        meds_visible=meds_visible,
    )

    AccessAuditor.record(
        patient_user_id=principal.id,
        resource_type=AccessResourceType.VISIT_DETAIL,
        resource_id=visit.id,
        clinic_id=visit.clinic_id,
    )
    return detail


def get_document(*, principal, document_id: UUID) -> DocumentContent:
    """
    Open a doctor note for streaming. Missing note, hidden note and missing
    blob all raise ResourceNotFound.
    """
    note = DoctorNote.objects.filter(id=document_id).first()
    if note is None:
        raise ResourceNotFound()

    access = resolve_clinic_access(global_patient_id=principal.global_patient_id)
    if not _is_linked(access, clinic_id=note.clinic_id, patient_id=note.patient_id):
        raise ResourceNotFound()

    if not note.file:
        raise ResourceNotFound()
    try:
        fh = note.file.open("rb")
        size = note.size or note.file.size
    except (FileNotFoundError, OSError):
        raise ResourceNotFound()

    AccessAuditor.record(
        patient_user_id=principal.id,
        resource_type=AccessResourceType.DOCTOR_NOTE,
        resource_id=note.id,
        clinic_id=note.clinic_id,
    )
    return DocumentContent(
        note=note,
        file=fh,
        content_type=note.content_type or "application/octet-stream",
        size=size,
        file_name=note.file_name or None,
    )
