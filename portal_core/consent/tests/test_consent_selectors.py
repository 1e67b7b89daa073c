# portal_core/consent/tests/test_consent_selectors.py
import pytest

from portal_core.consent.models import ConsentScope, ConsentStatus, PatientConsent
from portal_core.consent.selectors import consent_overview, is_visible, resolve_clinic_access

pytestmark = pytest.mark.django_db


def _set(gp, clinic, scope, status):
    PatientConsent.objects.update_or_create(
        global_patient=gp, clinic=clinic, scope=scope, defaults={"status": status}
    )


def test_no_entries_means_visible(global_patient, clinic):
    for scope in ConsentScope.values:
        assert is_visible(global_patient_id=global_patient.id, clinic_id=clinic.id, category=scope)


def test_all_revoked_overrides_category_grant(global_patient, clinic):
    _set(global_patient, clinic, ConsentScope.ALL, ConsentStatus.REVOKED)
    _set(global_patient, clinic, ConsentScope.LAB, ConsentStatus.GRANTED)

    for scope in ConsentScope.values:
        assert not is_visible(global_patient_id=global_patient.id, clinic_id=clinic.id, category=scope)


def test_category_revocation_is_scoped(global_patient, clinic, other_clinic):
    _set(global_patient, clinic, ConsentScope.LAB, ConsentStatus.REVOKED)

    assert not is_visible(global_patient_id=global_patient.id, clinic_id=clinic.id, category=ConsentScope.LAB)
    assert is_visible(global_patient_id=global_patient.id, clinic_id=clinic.id, category=ConsentScope.MEDS)
    assert is_visible(global_patient_id=global_patient.id, clinic_id=other_clinic.id, category=ConsentScope.LAB)


def test_resolve_clinic_access_groups_linked_patients(global_patient, clinic, other_clinic, make_patient, link):
    a1 = make_patient(clinic)
    a2 = make_patient(clinic)
    b = make_patient(other_clinic)
    for p in (a1, a2, b):
        link(p)

    access = resolve_clinic_access(global_patient_id=global_patient.id)

    assert set(access) == {clinic.id, other_clinic.id}
    assert access[clinic.id].clinic_name == "North Clinic"
    assert access[clinic.id].patient_ids == frozenset({a1.id, a2.id})
    assert access[other_clinic.id].patient_ids == frozenset({b.id})


@pytest.mark.parametrize("scope", [ConsentScope.ALL, ConsentScope.VISITS])
def test_resolve_clinic_access_drops_revoked_clinics(global_patient, clinic, other_clinic, make_patient, link, scope):
    link(make_patient(clinic))
    link(make_patient(other_clinic))
    _set(global_patient, clinic, scope, ConsentStatus.REVOKED)

    access = resolve_clinic_access(global_patient_id=global_patient.id)

    assert set(access) == {other_clinic.id}


def test_resolve_clinic_access_ignores_lab_revocation(global_patient, clinic, make_patient, link):
    link(make_patient(clinic))
    _set(global_patient, clinic, ConsentScope.LAB, ConsentStatus.REVOKED)

    assert clinic.id in resolve_clinic_access(global_patient_id=global_patient.id)


def test_resolve_clinic_access_skips_portal_disabled(global_patient, disabled_clinic, make_patient, link):
    link(make_patient(disabled_clinic))

    assert resolve_clinic_access(global_patient_id=global_patient.id) == {}


def test_regrant_takes_effect_immediately(global_patient, clinic, make_patient, link):
    link(make_patient(clinic))
    _set(global_patient, clinic, ConsentScope.ALL, ConsentStatus.REVOKED)
    assert resolve_clinic_access(global_patient_id=global_patient.id) == {}

    _set(global_patient, clinic, ConsentScope.ALL, ConsentStatus.GRANTED)
    assert clinic.id in resolve_clinic_access(global_patient_id=global_patient.id)


def test_consent_overview_defaults_to_granted(global_patient, clinic, make_patient, link):
    link(make_patient(clinic))
    _set(global_patient, clinic, ConsentScope.MEDS, ConsentStatus.REVOKED)

    overview = consent_overview(global_patient_id=global_patient.id)

    assert len(overview) == 1
    row = overview[0]
    assert row["clinic_id"] == clinic.id
    statuses = {s["scope"]: s["status"] for s in row["scopes"]}
    assert statuses["MEDS"] == ConsentStatus.REVOKED
    assert statuses["VISITS"] == ConsentStatus.GRANTED
    assert row["last_updated"] is not None


def test_consent_overview_carries_clinic_branding(global_patient, clinic, make_patient, link):
    clinic.portal_branding = {"logo_url": "https://cdn.example/north.png", "primary_color": "#0a7"}
    clinic.save(update_fields=["portal_branding"])
    link(make_patient(clinic))

    row, = consent_overview(global_patient_id=global_patient.id)

    assert row["branding"] == {"logo_url": "https://cdn.example/north.png", "primary_color": "#0a7"}
