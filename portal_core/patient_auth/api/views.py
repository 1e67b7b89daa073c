# portal_core/patient_auth/api/views.py
from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from portal_core.identity.models import GlobalPatient
from portal_core.identity.selectors import linked_clinic_ids
from portal_core.patient_auth.api.serializers import (
    PasscodeStartRequestSerializer,
    PasscodeVerifyRequestSerializer,
    PasscodeVerifyResponseSerializer,
    PatientMeResponseSerializer,
    StatusResponseSerializer,
)
from portal_core.patient_auth.cookies import clear_patient_cookies, set_patient_cookies
from portal_core.patient_auth.services import PasscodeService
from portal_core.patient_auth.tokens import jwt_config, refresh_session


def _client_ip(request):
    return request.META.get("REMOTE_ADDR") or None


def _device_id(request):
    return (request.headers.get("X-Device-Id") or "").strip() or None


class PasscodeStartView(APIView):
    authentication_classes = []
    permission_classes = [AllowAny]

    @extend_schema(
        request=PasscodeStartRequestSerializer,
        responses={200: StatusResponseSerializer},
        tags=["Patient Auth"],
    )
    def post(self, request):
        serializer = PasscodeStartRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        PasscodeService.start(
            contact=serializer.validated_data["phone_or_email"],
            request_ip=_client_ip(request),
            device_id=_device_id(request),
        )
        return Response({"status": "ok"}, status=status.HTTP_200_OK)


class PasscodeVerifyView(APIView):
    authentication_classes = []
    permission_classes = [AllowAny]

    @extend_schema(
        request=PasscodeVerifyRequestSerializer,
        responses={200: PasscodeVerifyResponseSerializer},
        tags=["Patient Auth"],
    )
    def post(self, request):
        serializer = PasscodeVerifyRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        login = PasscodeService.verify(
            contact=serializer.validated_data["phone_or_email"],
            code=serializer.validated_data["code"],
        )

        res = Response(
            {
                "status": "ok",
                "patient_user_id": str(login.patient_user.id),
                "global_patient_id": str(login.global_patient.id),
            },
            status=status.HTTP_200_OK,
        )
        set_patient_cookies(res, tokens=login.tokens)
        return res


class PatientRefreshView(APIView):
    # the access cookie may already be expired; only the refresh cookie counts here
    authentication_classes = []
    permission_classes = [AllowAny]

    def get_authenticate_header(self, request):
        return 'Bearer realm="api"'

    @extend_schema(
        request=None,
        responses={200: StatusResponseSerializer},
        tags=["Patient Auth"],
    )
    def post(self, request):
        raw = request.COOKIES.get(jwt_config()["AUTH_COOKIE_REFRESH"])
        tokens = refresh_session(raw)

        res = Response({"status": "ok"}, status=status.HTTP_200_OK)
        set_patient_cookies(res, tokens=tokens)
        return res


class PatientLogoutView(APIView):
    authentication_classes = []
    permission_classes = [AllowAny]

    @extend_schema(
        request=None,
        responses={200: StatusResponseSerializer},
        tags=["Patient Auth"],
    )
    def post(self, request):
        res = Response({"status": "ok"}, status=status.HTTP_200_OK)
        clear_patient_cookies(res)
        return res


class PatientMeView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        responses={200: PatientMeResponseSerializer},
        tags=["Patient Auth"],
    )
    def get(self, request):
        principal = request.user
        full_name = (
            GlobalPatient.objects.filter(id=principal.global_patient_id).values_list("full_name", flat=True).first()
        )
        return Response(
            {
                "patient_user_id": str(principal.id),
                "global_patient_id": str(principal.global_patient_id),
                "login_phone": principal.login_phone,
                "login_email": principal.login_email,
                "full_name": full_name,
                "linked_clinics": len(linked_clinic_ids(global_patient_id=principal.global_patient_id)),
            },
            status=status.HTTP_200_OK,
        )
