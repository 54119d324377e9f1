"""
Database models for the clinic records service.

A single ``User`` table holds both the practitioner and the patients.  The
string ``id`` is the login name and the key other records point at.
Notifications are kept in their own table so appending one never rewrites
the patient row.
"""
from __future__ import annotations

from django.db import models
from django.utils import timezone

DEFAULT_MEDICAL_INFO = "no medical information"


class Role(models.TextChoices):
    DOCTOR = 'doctor', 'Doctor'
    PATIENT = 'patient', 'Patient'


class User(models.Model):
    """An account: the doctor or one patient.

    ``medical_info`` and ``notifications`` are only meaningful for
    patients; the doctor row keeps the defaults.
    """
    id = models.CharField(
        max_length=64,
        primary_key=True,
        help_text="Login identifier, unique across all roles (e.g. 'P001')",
    )
    role = models.CharField(max_length=10, choices=Role.choices, db_index=True)
    password_hash = models.CharField(max_length=128)
    name = models.CharField(max_length=255)
    medical_info = models.TextField(default=DEFAULT_MEDICAL_INFO)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['id']

    def __str__(self) -> str:
        return f"{self.id} ({self.role})"


class Notification(models.Model):
    """A message the doctor pushed to a patient.  Append-only."""
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='notifications')
    message = models.TextField()
    timestamp = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ['timestamp', 'id']

    def __str__(self) -> str:
        return f"{self.user_id}: {self.message[:40]}"

    def as_dict(self) -> dict:
        return {'message': self.message, 'timestamp': self.timestamp.isoformat()}
