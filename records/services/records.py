"""
Record service: the six account and record operations.

Views validate input and pick the required role; everything that touches
the store lives here.  Failures are raised as DRF exceptions and turned into
``{"success": false}`` responses by :mod:`records.exceptions`.
"""
from __future__ import annotations

import logging
from typing import Optional

from django.db import IntegrityError, transaction
from rest_framework.exceptions import NotFound

from records.exceptions import Conflict, InvalidCredentials
from records.hashers import dummy_verify, hash_password, verify_password
from records.models import Notification, Role, User
from records.realtime.broadcast import notifications
from records.tokens import issue_token

logger = logging.getLogger(__name__)


def serialize_patient(user: User) -> dict:
    return {
        'id': user.id,
        'name': user.name,
        'medicalInfo': user.medical_info,
        'notifications': [n.as_dict() for n in user.notifications.all()],
    }


def login(identifier: str, password: str, role: str) -> tuple[User, str]:
    """Check credentials for ``identifier`` logging in as ``role``.

    The record must exist with exactly that role; a patient cannot log in
    as the doctor or the other way round.  Returns the user and a fresh
    access token.
    """
    user = None
    if role in Role.values:
        user = User.objects.filter(id=identifier, role=role).first()
    if user is None:
        dummy_verify(password)
        logger.info("login rejected for %s as %s", identifier, role)
        raise InvalidCredentials()
    if not verify_password(password, user.password_hash):
        logger.info("login rejected for %s as %s", identifier, role)
        raise InvalidCredentials()
    return user, issue_token(user.id, user.role)


def signup(identifier: str, password: str, name: str) -> User:
    """Create a patient account.  The identifier must be new across all roles."""
    if User.objects.filter(id=identifier).exists():
        raise Conflict()
    password_hash = hash_password(password)
    try:
        # objects.create() forces an INSERT, so a concurrent signup for the
        # same id hits the primary key constraint instead of overwriting.
        with transaction.atomic():
            user = User.objects.create(
                id=identifier, role=Role.PATIENT, password_hash=password_hash, name=name,
            )
    except IntegrityError:
        raise Conflict()
    logger.info("patient %s signed up", user.id)
    return user


def delete_patient(patient_id: str) -> int:
    """Delete a patient account; doctor accounts and unknown ids are left alone.

    Returns the number of accounts removed (0 or 1).
    """
    deleted = User.objects.filter(id=patient_id, role=Role.PATIENT).delete()[1].get(User._meta.label, 0)
    logger.info("delete account %s: %d removed", patient_id, deleted)
    return deleted


def list_patients() -> list[dict]:
    qs = User.objects.filter(role=Role.PATIENT).prefetch_related('notifications').order_by('id')
    return [serialize_patient(user) for user in qs]


def own_record(subject_id: str) -> dict:
    user = User.objects.prefetch_related('notifications').filter(id=subject_id).first()
    if user is None:
        raise NotFound('record not found')
    return {
        'medicalInfo': user.medical_info,
        'notifications': [n.as_dict() for n in user.notifications.all()],
    }


def update_patient(patient_id: str, *, medical_info: Optional[str] = None,
                   notification: Optional[str] = None) -> Optional[Notification]:
    """Overwrite the medical note and/or append a notification.

    The row is locked for the duration of the change so concurrent updates
    to one patient apply one after the other.  A notification is broadcast
    only after it has been committed.  Returns the appended notification,
    if any.
    """
    with transaction.atomic():
        user = User.objects.select_for_update().filter(id=patient_id).first()
        if user is None:
            raise NotFound('patient not found')
        if medical_info:
            user.medical_info = medical_info
            user.save(update_fields=['medical_info'])
        note = None
        if notification:
            note = Notification.objects.create(user=user, message=notification)
    logger.info("patient %s updated (medical info: %s, notification: %s)",
                patient_id, bool(medical_info), note is not None)

    if note is not None:
        notifications.publish(patient_id, note.message)
    return note
