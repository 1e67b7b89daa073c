# portal_core/consent/api/views.py
from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from portal_core.consent.api.serializers import ConsentOverviewResponseSerializer
from portal_core.consent.selectors import consent_overview


class ConsentOverviewView(APIView):
    """
    GET /api/v1/patient/consent/
    Read-only: consent writes belong to the consent management surface.
    """
    permission_classes = [IsAuthenticated]

    @extend_schema(
        responses={200: ConsentOverviewResponseSerializer},
        tags=["Patient Consent"],
    )
    def get(self, request):
        clinics = consent_overview(global_patient_id=request.user.global_patient_id)
        data = ConsentOverviewResponseSerializer({"clinics": clinics}).data
        return Response(data, status=status.HTTP_200_OK)
