# portal_core/api/urls.py
from __future__ import annotations

from django.urls import path

from portal_core.consent.api.views import ConsentOverviewView
from portal_core.history.api.views import DocumentDownloadView, VisitDetailView, VisitListView
from portal_core.patient_auth.api.views import (
    PasscodeStartView,
    PasscodeVerifyView,
    PatientLogoutView,
    PatientMeView,
    PatientRefreshView,
)

urlpatterns = [
    # 🔐 Passcode login + session
    path("patient/auth/start/", PasscodeStartView.as_view(), name="patient-auth-start"),
    path("patient/auth/verify/", PasscodeVerifyView.as_view(), name="patient-auth-verify"),
    path("patient/auth/refresh/", PatientRefreshView.as_view(), name="patient-auth-refresh"),
    path("patient/auth/logout/", PatientLogoutView.as_view(), name="patient-auth-logout"),
    path("patient/me/", PatientMeView.as_view(), name="patient-me"),

    # Consent (read-only)
    path("patient/consent/", ConsentOverviewView.as_view(), name="patient-consent"),

    # Cross-clinic history
    path("patient/history/visits/", VisitListView.as_view(), name="patient-visits"),
    path("patient/history/visits/<uuid:visit_id>/", VisitDetailView.as_view(), name="patient-visit-detail"),
    path("patient/docs/<uuid:document_id>/", DocumentDownloadView.as_view(), name="patient-doc"),
]
