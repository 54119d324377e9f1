"""
Access tokens.

Tokens are simplejwt access tokens carrying the subject id and role.  They
expire 24 hours after issue (``SIMPLE_JWT['ACCESS_TOKEN_LIFETIME']``) and are
signed with ``settings.TOKEN_SIGNING_KEY``.  There is no revocation list.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.tokens import AccessToken

from .models import Role

ROLE_CLAIM = 'role'


@dataclass(frozen=True)
class Claim:
    """Identity resolved from a verified token; attached as ``request.user``."""
    subject_id: str
    role: Role

    is_authenticated = True
    is_anonymous = False

    @property
    def pk(self) -> str:
        return self.subject_id

    @property
    def is_doctor(self) -> bool:
        return self.role == Role.DOCTOR

    @property
    def is_patient(self) -> bool:
        return self.role == Role.PATIENT


def issue_token(subject_id: str, role: Union[Role, str]) -> str:
    token = AccessToken()
    token[api_settings.USER_ID_CLAIM] = subject_id
    token[ROLE_CLAIM] = Role(role).value
    return str(token)


def claim_from_token(token: AccessToken) -> Claim:
    """Build a :class:`Claim` from an already verified token.

    Raises ``KeyError``/``ValueError`` if the payload lacks a subject or
    carries an unknown role.
    """
    subject_id = token[api_settings.USER_ID_CLAIM]
    if not isinstance(subject_id, str) or not subject_id:
        raise ValueError('token subject must be a non-empty string')
    return Claim(subject_id=subject_id, role=Role(token[ROLE_CLAIM]))


def verify_token(raw: Union[str, bytes]) -> Optional[Claim]:
    """Return the claim of a valid token, or ``None``.

    Bad signatures, a different signing key, expiry and malformed payloads
    all yield ``None``.
    """
    try:
        token = AccessToken(raw)
        return claim_from_token(token)
    except (TokenError, KeyError, ValueError):
        return None
