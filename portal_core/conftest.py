# portal_core/conftest.py
from datetime import timedelta

import pytest
from django.utils import timezone
from rest_framework.test import APIClient

from portal_core.clinics.models import Clinic
from portal_core.identity.models import GlobalPatient, PatientLink, PatientUser
from portal_core.patient_auth.tokens import PatientPrincipal, issue_session
from portal_core.patients.models import Patient
from portal_core.visits.models import Doctor, Visit

PHONE = "+95912345678"


@pytest.fixture(autouse=True)
def _media_root(settings, tmp_path):
    settings.MEDIA_ROOT = tmp_path / "media"


@pytest.fixture
def clinic(db):
    return Clinic.objects.create(code="north", name="North Clinic", enabled_for_patient_portal=True)


@pytest.fixture
def other_clinic(db):
    return Clinic.objects.create(code="south", name="South Clinic", enabled_for_patient_portal=True)


@pytest.fixture
def disabled_clinic(db):
    return Clinic.objects.create(code="closed", name="Closed Clinic", enabled_for_patient_portal=False)


@pytest.fixture
def make_patient(db):
    counter = {"n": 0}

    def _make(clinic, *, contact=PHONE, full_name="Aung Aung", mrn=None):
        counter["n"] += 1
        return Patient.objects.create(
            clinic=clinic,
            contact=contact,
            full_name=full_name,
            mrn=mrn or f"MRN-{counter['n']:04d}",
        )

    return _make


@pytest.fixture
def global_patient(db):
    return GlobalPatient.objects.create(primary_phone=PHONE)


@pytest.fixture
def patient_user(global_patient):
    return PatientUser.objects.create(global_patient=global_patient, login_phone=PHONE)


@pytest.fixture
def principal(patient_user):
    return PatientPrincipal(
        id=patient_user.id,
        global_patient_id=patient_user.global_patient_id,
        login_phone=patient_user.login_phone,
    )


@pytest.fixture
def link(global_patient):
    def _link(patient):
        return PatientLink.objects.create(
            global_patient=global_patient,
            clinic=patient.clinic,
            patient=patient,
            verified_at=timezone.now(),
        )

    return _link


@pytest.fixture
def make_visit(db):
    def _make(patient, *, days_ago=0, at=None, doctor=None, reason="Checkup"):
        return Visit.objects.create(
            clinic=patient.clinic,
            patient=patient,
            doctor=doctor,
            visit_date=at or (timezone.now() - timedelta(days=days_ago)),
            reason=reason,
        )

    return _make


@pytest.fixture
def doctor(clinic):
    return Doctor.objects.create(clinic=clinic, name="Dr. Khin", department="General Medicine")


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def auth_client(patient_user):
    """
    Client carrying a real patient access token (Bearer).
    """
    tokens = issue_session(patient_user)
    c = APIClient()
    c.credentials(HTTP_AUTHORIZATION=f"Bearer {tokens.access}")
    return c
