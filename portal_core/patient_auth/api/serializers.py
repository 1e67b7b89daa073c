# portal_core/patient_auth/api/serializers.py
from __future__ import annotations

from rest_framework import serializers


class PasscodeStartRequestSerializer(serializers.Serializer):
    phone_or_email = serializers.CharField(min_length=3, max_length=128, trim_whitespace=True)


class PasscodeVerifyRequestSerializer(serializers.Serializer):
    phone_or_email = serializers.CharField(min_length=3, max_length=128, trim_whitespace=True)
    code = serializers.RegexField(r"^\d{6}$", error_messages={"invalid": "Code must be 6 digits."})


class StatusResponseSerializer(serializers.Serializer):
    status = serializers.CharField()


class PasscodeVerifyResponseSerializer(serializers.Serializer):
    status = serializers.CharField()
    patient_user_id = serializers.UUIDField()
    global_patient_id = serializers.UUIDField()


class PatientMeResponseSerializer(serializers.Serializer):
    patient_user_id = serializers.UUIDField()
    global_patient_id = serializers.UUIDField()
    login_phone = serializers.CharField(allow_null=True)
    login_email = serializers.CharField(allow_null=True)
    full_name = serializers.CharField(allow_null=True)
    linked_clinics = serializers.IntegerField()
