from rest_framework import serializers

from .auth import IDENTIFIER_MAX_LENGTH, strip_markup


class DeleteAccountSerializer(serializers.Serializer):
    patientId = serializers.CharField(max_length=IDENTIFIER_MAX_LENGTH)


class UpdatePatientSerializer(serializers.Serializer):
    patientId = serializers.CharField(max_length=IDENTIFIER_MAX_LENGTH)
    medicalInfo = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    notification = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=2000)

    def validate_notification(self, v):
        if not v:
            return None
        return strip_markup(v) or None

    def validate_medicalInfo(self, v):
        return v or None
