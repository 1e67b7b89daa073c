# portal_core/common/tests/test_error_envelope.py
import pytest

pytestmark = pytest.mark.django_db


def test_validation_error_uses_envelope(api_client):
    r = api_client.post("/api/v1/patient/auth/start/", {"phone_or_email": "1"}, format="json")

    assert r.status_code == 400
    body = r.json()
    assert body["error"]["code"] == "validation_error"
    assert "phone_or_email" in body["error"]["details"]
    assert body["error"]["request_id"]


def test_request_id_is_echoed(api_client):
    r = api_client.get("/api/v1/patient/me/", HTTP_X_REQUEST_ID="req-123")

    assert r.status_code == 401
    assert r["X-Request-Id"] == "req-123"
    assert r.json()["error"]["request_id"] == "req-123"
    assert r.json()["error"]["code"] == "not_authenticated"


def test_unhandled_error_is_500_envelope(api_client, monkeypatch):
    from portal_core.patient_auth import services

    def boom(**kwargs):
        raise RuntimeError("db down")

    monkeypatch.setattr(services.PasscodeService, "start", staticmethod(boom))

    r = api_client.post("/api/v1/patient/auth/start/", {"phone_or_email": "+95912345678"}, format="json")

    assert r.status_code == 500
    assert r.json()["error"]["code"] == "server_error"
    assert "db down" not in r.content.decode()
