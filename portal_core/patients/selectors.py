# portal_core/patients/selectors.py
from __future__ import annotations

from django.db.models import CharField, F, Func, QuerySet, Value

from portal_core.common.contacts import is_email_contact
from portal_core.patients.models import Patient


def normalized_phone(field: str = "contact") -> Func:
    """
    SQL twin of normalize_contact() for phones: strip everything but digits and "+".
    Evaluated in the query so rows written without save() still match.
    """
    return Func(
        F(field),
        Value("[^0-9+]"),
        Value(""),
        Value("g"),
        function="REGEXP_REPLACE",
        output_field=CharField(),
    )


def portal_patients_with_contact(*, contact: str) -> QuerySet[Patient]:
    """
    Clinic-local patient records whose normalized contact equals `contact`
    (already normalized phone), restricted to clinics that enabled the patient portal.

    Ordered by (clinic_id, id) so callers get a stable iteration order.
    """
    if not contact or is_email_contact(contact):
        return Patient.objects.none()

    return (
        Patient.objects.filter(clinic__enabled_for_patient_portal=True)
        .annotate(contact_key=normalized_phone())
        .filter(contact_key=contact)
        .select_related("clinic")
        .order_by("clinic_id", "id")
    )
