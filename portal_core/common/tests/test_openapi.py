# portal_core/common/tests/test_openapi.py
import pytest

from portal_core.common.openapi import preprocess_primary_api_only

pytestmark = pytest.mark.django_db


def test_alias_paths_are_dropped():
    endpoints = [
        ("/api/v1/patient/me/", None, "GET", None),
        ("/api/patient/me/", None, "GET", None),
    ]

    assert [e[0] for e in preprocess_primary_api_only(endpoints)] == ["/api/v1/patient/me/"]


def test_schema_endpoint_documents_patient_routes(api_client):
    r = api_client.get("/api/schema/", HTTP_ACCEPT="application/vnd.oai.openapi+json")

    assert r.status_code == 200
    paths = r.json()["paths"]
    assert "/api/v1/patient/auth/verify/" in paths
    assert "/api/v1/patient/history/visits/{visit_id}/" in paths
    assert not any(p.startswith("/api/patient/") for p in paths)
