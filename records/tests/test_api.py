"""
API tests for login, signup and the role-gated record endpoints.

Run with ``pytest records/tests``.
"""
import pytest
from django.db import DatabaseError
from django.urls import reverse
from rest_framework.test import APIClient

from records.models import DEFAULT_MEDICAL_INFO, Notification, Role, User
from records.services import records as record_service
from records.tokens import verify_token

pytestmark = pytest.mark.django_db


def login(client, id, password, role):
    return client.post(reverse('login_view'), {'id': id, 'password': password, 'role': role}, format='json')


def signup(client, id, password, name):
    return client.post(reverse('signup_view'), {'id': id, 'password': password, 'name': name}, format='json')


# ---------------------------------------------------------------------
# Login / signup
# ---------------------------------------------------------------------
def test_doctor_login_returns_token_for_same_identity(doctor):
    r = login(APIClient(), 'admin', 'admin123', 'doctor')
    assert r.status_code == 200
    assert r.data['success'] is True
    assert r.data['name'] == 'Dr. Boukhatem'
    assert r.data['role'] == 'doctor'
    claim = verify_token(r.data['token'])
    assert (claim.subject_id, claim.role) == ('admin', Role.DOCTOR)


@pytest.mark.parametrize('id,password,role', [
    ('P001', 'wrong', 'patient'),     # wrong password
    ('P001', '123456', 'doctor'),     # wrong role
    ('P999', '123456', 'patient'),    # unknown id
    ('P001', '123456', 'super'),      # role outside the two variants
    ('P001', '', 'patient'),          # blank password
    ('', '123456', 'patient'),        # blank id
    ('P001', '123456', 'x' * 40),     # oversized role
])
def test_login_mismatch_is_unauthenticated(patient, id, password, role):
    r = login(APIClient(), id, password, role)
    assert r.status_code == 401
    assert r.data['success'] is False
    assert 'token' not in r.data


@pytest.mark.parametrize('id,role', [
    (' admin ', 'doctor'),
    ('admin', 'doctor '),
    (' admin', ' doctor'),
])
def test_login_padded_credentials_do_not_match(doctor, id, role):
    r = login(APIClient(), id, 'admin123', role)
    assert r.status_code == 401
    assert r.data['success'] is False


def test_login_ignores_stale_authorization_header(doctor):
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION='Bearer expired-or-garbage')
    r = login(client, 'admin', 'admin123', 'doctor')
    assert r.status_code == 200
    assert login(client, 'admin', 'nope', 'doctor').status_code == 401


def test_login_missing_fields_is_bad_request():
    r = APIClient().post(reverse('login_view'), {'id': 'P001'}, format='json')
    assert r.status_code == 400
    assert r.data['success'] is False
    assert 'password' in r.data['msg']


def test_signup_then_duplicate_conflicts():
    client = APIClient()
    first = signup(client, 'P099', 'pw', 'Ali')
    assert first.status_code == 200
    assert first.data['success'] is True

    second = signup(client, 'P099', 'other', 'Someone Else')
    assert second.status_code == 400
    assert second.data['success'] is False

    assert User.objects.filter(id='P099').count() == 1
    user = User.objects.get(id='P099')
    assert user.role == Role.PATIENT
    assert user.name == 'Ali'
    assert user.medical_info == DEFAULT_MEDICAL_INFO
    assert user.notifications.count() == 0
    assert user.password_hash != 'pw'


def test_signup_name_keeps_text_but_drops_markup():
    assert signup(APIClient(), 'P100', 'pw', 'Tom & Jerry').status_code == 200
    assert signup(APIClient(), 'P101', 'pw', '<b>Tom</b> & "Jerry"').status_code == 200
    assert User.objects.get(id='P100').name == 'Tom & Jerry'
    assert User.objects.get(id='P101').name == 'Tom & "Jerry"'


def test_signup_cannot_reuse_doctor_identifier(doctor):
    r = signup(APIClient(), 'admin', 'pw', 'Impostor')
    assert r.status_code == 400
    assert User.objects.get(id='admin').role == Role.DOCTOR


def test_signup_insert_race_maps_to_conflict(monkeypatch):
    """A duplicate that slips past the existence check still conflicts."""
    User.objects.create(id='P050', role=Role.PATIENT, password_hash='x', name='First')

    class Missing:
        def exists(self):
            return False

    with monkeypatch.context() as m:
        m.setattr(User.objects, 'filter', lambda *a, **kw: Missing())
        r = signup(APIClient(), 'P050', 'pw', 'Second')
    assert r.status_code == 400
    assert User.objects.get(id='P050').name == 'First'


def test_signup_example_flow(doctor):
    client = APIClient()
    assert login(client, 'admin', 'admin123', 'doctor').status_code == 200
    assert signup(client, 'P099', 'pw', 'Ali').status_code == 200
    assert login(client, 'P099', 'wrongpw', 'patient').status_code == 401
    assert login(client, 'P099', 'pw', 'patient').status_code == 200


# ---------------------------------------------------------------------
# Access control gate
# ---------------------------------------------------------------------
@pytest.mark.parametrize('method,name,payload', [
    ('get', 'list_patients', None),
    ('post', 'delete_account', {'patientId': 'P001'}),
    ('post', 'delete_account', {'patientId': 'P001', 'role': 'doctor'}),
    ('post', 'update_patient', {'patientId': 'P001', 'notification': 'hi'}),
])
def test_patient_token_is_forbidden_on_doctor_endpoints(patient_client, method, name, payload):
    r = getattr(patient_client, method)(reverse(name), payload, format='json')
    assert r.status_code == 403
    assert r.data['success'] is False
    assert User.objects.filter(id='P001').exists()


def test_doctor_token_is_forbidden_on_patient_endpoint(doctor_client):
    r = doctor_client.get(reverse('patient_info'))
    assert r.status_code == 403


@pytest.mark.parametrize('header', [
    None,
    'Bearer not-a-token',
    'Token abc',
    'Bearer',
])
def test_missing_or_invalid_token_is_unauthenticated(patient, header):
    client = APIClient()
    if header is not None:
        client.credentials(HTTP_AUTHORIZATION=header)
    r = client.get(reverse('list_patients'))
    assert r.status_code == 401
    assert r.data['success'] is False


# ---------------------------------------------------------------------
# Doctor operations
# ---------------------------------------------------------------------
def test_list_patients_excludes_doctor_and_passwords(doctor_client, make_user, patient):
    make_user('P002', name='Sara')
    Notification.objects.create(user=patient, message='Welcome!')

    r = doctor_client.get(reverse('list_patients'))
    assert r.status_code == 200
    assert r.data['success'] is True
    patients = r.data['patients']
    assert [p['id'] for p in patients] == ['P001', 'P002']
    assert set(patients[0]) == {'id', 'name', 'medicalInfo', 'notifications'}
    assert patients[0]['medicalInfo'] == 'Stable condition'
    assert [n['message'] for n in patients[0]['notifications']] == ['Welcome!']
    assert patients[1]['medicalInfo'] == DEFAULT_MEDICAL_INFO


def test_delete_account_removes_patient(doctor_client, patient):
    Notification.objects.create(user=patient, message='bye')
    r = doctor_client.post(reverse('delete_account'), {'patientId': 'P001'}, format='json')
    assert r.status_code == 200
    assert r.data['success'] is True
    assert not User.objects.filter(id='P001').exists()
    assert not Notification.objects.exists()


def test_delete_account_never_removes_doctor(doctor_client, doctor):
    r = doctor_client.post(reverse('delete_account'), {'patientId': 'admin'}, format='json')
    assert r.status_code == 200
    assert r.data['success'] is True
    assert User.objects.filter(id='admin', role=Role.DOCTOR).exists()


def test_delete_unknown_account_still_succeeds(doctor_client):
    r = doctor_client.post(reverse('delete_account'), {'patientId': 'nobody'}, format='json')
    assert r.status_code == 200
    assert r.data['success'] is True


def test_update_with_notification_appends_and_broadcasts_once(doctor_client, patient, published):
    r = doctor_client.post(
        reverse('update_patient'),
        {'patientId': 'P001', 'notification': 'Take your medicine'},
        format='json',
    )
    assert r.status_code == 200
    assert r.data == {'success': True}
    assert list(patient.notifications.values_list('message', flat=True)) == ['Take your medicine']
    assert published == [('P001', 'Take your medicine')]


def test_notification_text_is_stored_and_broadcast_verbatim(doctor_client, patient_client, published):
    message = 'BP < 120 & "stable"'
    r = doctor_client.post(
        reverse('update_patient'),
        {'patientId': 'P001', 'notification': '<i>' + message + '</i>'},
        format='json',
    )
    assert r.status_code == 200
    assert published == [('P001', message)]

    info = patient_client.get(reverse('patient_info'))
    assert [n['message'] for n in info.data['notifications']] == [message]


def test_update_without_notification_does_not_broadcast(doctor_client, patient, published):
    r = doctor_client.post(
        reverse('update_patient'),
        {'patientId': 'P001', 'medicalInfo': 'Recovering well', 'notification': ''},
        format='json',
    )
    assert r.status_code == 200
    patient.refresh_from_db()
    assert patient.medical_info == 'Recovering well'
    assert patient.notifications.count() == 0
    assert published == []


def test_update_empty_medical_info_keeps_note(doctor_client, patient, published):
    r = doctor_client.post(reverse('update_patient'), {'patientId': 'P001', 'medicalInfo': ''}, format='json')
    assert r.status_code == 200
    patient.refresh_from_db()
    assert patient.medical_info == 'Stable condition'


def test_update_unknown_patient_is_not_found(doctor_client, published):
    r = doctor_client.post(
        reverse('update_patient'), {'patientId': 'P404', 'notification': 'hello'}, format='json'
    )
    assert r.status_code == 404
    assert r.data['success'] is False
    assert published == []


def test_broadcast_failure_does_not_fail_update(doctor_client, patient, monkeypatch):
    from records.realtime import broadcast

    def broken_layer():
        raise RuntimeError('channel layer down')

    monkeypatch.setattr(broadcast, 'get_channel_layer', broken_layer)
    r = doctor_client.post(
        reverse('update_patient'), {'patientId': 'P001', 'notification': 'still stored'}, format='json'
    )
    assert r.status_code == 200
    assert patient.notifications.get().message == 'still stored'


# ---------------------------------------------------------------------
# Patient operations
# ---------------------------------------------------------------------
def test_patient_reads_update_in_order(doctor_client, patient_client, published):
    url = reverse('update_patient')
    doctor_client.post(url, {'patientId': 'P001', 'notification': 'first'}, format='json')
    doctor_client.post(
        url, {'patientId': 'P001', 'medicalInfo': 'Discharged', 'notification': 'second'}, format='json'
    )

    r = patient_client.get(reverse('patient_info'))
    assert r.status_code == 200
    assert r.data['success'] is True
    assert r.data['medicalInfo'] == 'Discharged'
    assert [n['message'] for n in r.data['notifications']] == ['first', 'second']
    assert all('timestamp' in n for n in r.data['notifications'])
    assert len(published) == 2


def test_patient_reads_only_own_record(make_user, patient_client):
    other = make_user('P002', medical_info='Private note')
    r = patient_client.get(reverse('patient_info'), {'id': 'P002'})
    assert r.status_code == 200
    assert r.data['medicalInfo'] == 'Stable condition'
    assert r.data['medicalInfo'] != other.medical_info


def test_deleted_patient_token_reads_not_found(patient_client, patient):
    patient.delete()
    r = patient_client.get(reverse('patient_info'))
    assert r.status_code == 404
    assert r.data['success'] is False


# ---------------------------------------------------------------------
# Faults
# ---------------------------------------------------------------------
def test_store_failure_is_structured_server_fault(doctor_client, monkeypatch):
    def broken():
        raise DatabaseError('connection lost')

    monkeypatch.setattr(record_service, 'list_patients', broken)
    r = doctor_client.get(reverse('list_patients'))
    assert r.status_code == 500
    assert r.data == {'success': False, 'msg': 'server error'}


def test_healthz_reports_database():
    r = APIClient().get(reverse('healthz'))
    assert r.status_code == 200
    assert r.json() == {'success': True, 'db': True}


def test_healthz_failure_hides_details(monkeypatch):
    from records.views import health

    class BrokenConnection:
        def cursor(self):
            raise DatabaseError('password authentication failed for user "clinic"')

    monkeypatch.setattr(health, 'connections', {'default': BrokenConnection()})
    r = APIClient().get(reverse('healthz'))
    assert r.status_code == 500
    assert r.json() == {'success': False, 'msg': 'server error'}
