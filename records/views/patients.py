"""
Patient record endpoints.

The doctor lists, updates and deletes patients; a patient reads only their
own record, identified by the token's subject.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from records.permissions import IsDoctorRole, IsPatientRole
from records.serializers.patient import DeleteAccountSerializer, UpdatePatientSerializer
from records.services import records as record_service


@api_view(['POST'])
@permission_classes([IsDoctorRole])
def delete_account(request):
    """Delete a patient account.

    Unknown ids and doctor accounts are skipped silently; the call still
    reports success.
    """
    s = DeleteAccountSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    record_service.delete_patient(s.validated_data['patientId'])
    return Response({'success': True, 'msg': 'account deleted'})


@api_view(['GET'])
@permission_classes([IsDoctorRole])
def list_patients(request):
    return Response({'success': True, 'patients': record_service.list_patients()})


@api_view(['GET'])
@permission_classes([IsPatientRole])
def patient_info(request):
    record = record_service.own_record(request.user.subject_id)
    return Response({'success': True, **record})


@api_view(['POST'])
@permission_classes([IsDoctorRole])
def update_patient(request):
    """Update a patient's medical note and/or push a notification.

    Accepts ``patientId`` plus optional ``medicalInfo`` (replaces the note)
    and ``notification`` (appended and broadcast to connected clients).
    Empty values are treated as absent.
    """
    s = UpdatePatientSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    record_service.update_patient(
        vd['patientId'],
        medical_info=vd.get('medicalInfo'),
        notification=vd.get('notification'),
    )
    return Response({'success': True})
