# portal_core/consent/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from portal_core.consent.models import ConsentScope, ConsentStatus


class ConsentScopeStatusSerializer(serializers.Serializer):
    scope = serializers.ChoiceField(choices=ConsentScope.choices)
    status = serializers.ChoiceField(choices=ConsentStatus.choices)
    updated_at = serializers.DateTimeField(allow_null=True)


class ClinicConsentSerializer(serializers.Serializer):
    clinic_id = serializers.UUIDField()
    clinic_name = serializers.CharField()
    branding = serializers.JSONField()
    scopes = ConsentScopeStatusSerializer(many=True)
    last_updated = serializers.DateTimeField(allow_null=True)


class ConsentOverviewResponseSerializer(serializers.Serializer):
    clinics = ClinicConsentSerializer(many=True)
