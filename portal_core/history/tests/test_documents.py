# portal_core/history/tests/test_documents.py
import uuid

import pytest
from django.core.files.base import ContentFile

from portal_core.audit.models import PatientAccessLog
from portal_core.consent.models import ConsentScope, ConsentStatus, PatientConsent
from portal_core.visits.models import DoctorNote

pytestmark = pytest.mark.django_db

BODY = b"%PDF-1.4 discharge summary"


@pytest.fixture
def visit(clinic, make_patient, make_visit, link):
    p = make_patient(clinic)
    link(p)
    return make_visit(p, days_ago=1)


def _note(visit, *, content=BODY, name="summary note.pdf"):
    return DoctorNote.objects.create(
        clinic=visit.clinic,
        patient=visit.patient,
        visit=visit,
        file=ContentFile(content, name="note.pdf"),
        file_name=name,
        content_type="application/pdf",
        size=len(content),
    )


def test_document_streams_with_headers(auth_client, principal, visit):
    note = _note(visit)

    r = auth_client.get(f"/api/v1/patient/docs/{note.id}/")

    assert r.status_code == 200
    assert b"".join(r.streaming_content) == BODY
    assert r["Content-Type"] == "application/pdf"
    assert r["Content-Length"] == str(len(BODY))
    assert r["Content-Disposition"] == 'inline; filename="summary%20note.pdf"'

    log = PatientAccessLog.objects.get(resource_type="doctor_note")
    assert log.resource_id == note.id
    assert log.patient_user_id == principal.id
    assert log.clinic_id == visit.clinic_id


def test_unknown_document_is_404(auth_client, visit):
    r = auth_client.get(f"/api/v1/patient/docs/{uuid.uuid4()}/")
    assert r.status_code == 404


def test_document_of_unlinked_patient_is_404(auth_client, clinic, make_patient, make_visit):
    other_visit = make_visit(make_patient(clinic, contact="+95911111111"))
    note = _note(other_visit)

    r = auth_client.get(f"/api/v1/patient/docs/{note.id}/")

    assert r.status_code == 404
    assert not PatientAccessLog.objects.exists()


def test_document_hidden_by_consent_is_404(auth_client, global_patient, clinic, visit):
    note = _note(visit)
    PatientConsent.objects.create(
        global_patient=global_patient, clinic=clinic, scope=ConsentScope.ALL, status=ConsentStatus.REVOKED
    )

    r = auth_client.get(f"/api/v1/patient/docs/{note.id}/")
    assert r.status_code == 404


def test_document_with_missing_blob_is_404(auth_client, visit):
    note = _note(visit)
    note.file.storage.delete(note.file.name)

    r = auth_client.get(f"/api/v1/patient/docs/{note.id}/")
    assert r.status_code == 404
