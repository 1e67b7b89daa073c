# portal_core/history/api/serializers.py
from __future__ import annotations

from rest_framework import serializers


class ClinicRefSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    name = serializers.CharField()


class DoctorRefSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    name = serializers.CharField()
    department = serializers.CharField(allow_blank=True)


class PatientRefSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    name = serializers.CharField(source="full_name", allow_null=True)


class VisitSummarySerializer(serializers.Serializer):
    id = serializers.UUIDField()
    visit_date = serializers.DateTimeField()
    clinic = ClinicRefSerializer()
    doctor = DoctorRefSerializer(allow_null=True)
    diagnosis_summary = serializers.SerializerMethodField()
    next_visit_date = serializers.DateTimeField(allow_null=True)
    has_doctor_note = serializers.BooleanField()

    def get_diagnosis_summary(self, obj) -> str:
        names = [d.diagnosis for d in obj.diagnoses.all() if d.diagnosis]
        return "; ".join(names[:3])


class VisitPageSerializer(serializers.Serializer):
    visits = VisitSummarySerializer(many=True)
    next_cursor = serializers.CharField(allow_null=True)


class DiagnosisSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    diagnosis = serializers.CharField()


class MedicationSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    drug_name = serializers.CharField()
    dosage = serializers.CharField(allow_blank=True)
    instructions = serializers.CharField(allow_blank=True)


class LabResultSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    test_name = serializers.CharField()
    result_value = serializers.CharField(allow_blank=True)
    unit = serializers.CharField(allow_blank=True)
    reference_range = serializers.CharField(allow_blank=True)
    test_date = serializers.DateTimeField(allow_null=True)


class ObservationSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    note_text = serializers.CharField(allow_blank=True)
    bp_systolic = serializers.IntegerField(allow_null=True)
    bp_diastolic = serializers.IntegerField(allow_null=True)
    heart_rate = serializers.IntegerField(allow_null=True)
    temperature_c = serializers.DecimalField(max_digits=4, decimal_places=1, allow_null=True)
    spo2 = serializers.IntegerField(allow_null=True)
    bmi = serializers.DecimalField(max_digits=5, decimal_places=2, allow_null=True)
    created_at = serializers.DateTimeField()


class DoctorNoteSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    file_name = serializers.CharField(allow_blank=True)
    content_type = serializers.CharField(allow_blank=True)
    size = serializers.IntegerField()
    created_at = serializers.DateTimeField()
    extracted_text = serializers.CharField(allow_null=True)


class VisitDetailSerializer(serializers.Serializer):
    id = serializers.UUIDField(source="visit.id")
    visit_date = serializers.DateTimeField(source="visit.visit_date")
    clinic = ClinicRefSerializer(source="visit.clinic")
    doctor = DoctorRefSerializer(source="visit.doctor", allow_null=True)
    patient = PatientRefSerializer(source="visit.patient")
    reason = serializers.CharField(source="visit.reason", allow_blank=True)
    diagnoses = DiagnosisSerializer(many=True)
    medications = MedicationSerializer(many=True)
    labs = LabResultSerializer(many=True)
    observations = ObservationSerializer(many=True)
    doctor_notes = DoctorNoteSerializer(many=True)
    next_visit_date = serializers.DateTimeField(allow_null=True)
