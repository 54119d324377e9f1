import pytest
from django.core.cache import cache
from rest_framework.test import APIClient

from records.hashers import hash_password
from records.models import Role, User
from records.realtime.broadcast import notifications
from records.tokens import issue_token


@pytest.fixture(autouse=True)
def fast_hashing(settings):
    # bcrypt's minimum cost keeps the suite quick
    settings.PASSWORD_HASH_ROUNDS = 4


@pytest.fixture(autouse=True)
def reset_throttles():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def make_user(db):
    def _make(id, password='P@ssw0rd1', role=Role.PATIENT, name=None, **extra):
        return User.objects.create(
            id=id, role=role, password_hash=hash_password(password), name=name or id, **extra
        )
    return _make


@pytest.fixture
def doctor(make_user):
    return make_user('admin', 'admin123', role=Role.DOCTOR, name='Dr. Boukhatem')


@pytest.fixture
def patient(make_user):
    return make_user('P001', '123456', name='Mohamed Ali', medical_info='Stable condition')


def client_for(user) -> APIClient:
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {issue_token(user.id, user.role)}')
    return client


@pytest.fixture
def doctor_client(doctor):
    return client_for(doctor)


@pytest.fixture
def patient_client(patient):
    return client_for(patient)


@pytest.fixture
def published(monkeypatch):
    """Record broadcast events instead of sending them."""
    events = []

    def fake_publish(patient_id, message):
        events.append((patient_id, message))
        return True

    monkeypatch.setattr(notifications, 'publish', fake_publish)
    return events
