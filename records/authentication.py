"""
Bearer token authentication.

Reads ``Authorization: Bearer <token>`` and resolves it to a
:class:`records.tokens.Claim` without touching the database: the role in the
token, not anything in the request body, decides what the caller may do.
"""
from __future__ import annotations

from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import InvalidToken

from .tokens import verify_token


class BearerClaimAuthentication(JWTAuthentication):
    """JWT authentication whose ``request.user`` is the token claim.

    No header (or another scheme) leaves the request anonymous so the
    view's permission answers 401.  A present but unverifiable token fails
    straight away with 401.
    """

    def authenticate(self, request):
        header = self.get_header(request)
        if header is None:
            return None

        raw_token = self.get_raw_token(header)
        if raw_token is None:
            return None

        claim = verify_token(raw_token)
        if claim is None:
            raise InvalidToken('Token is invalid or expired')
        return claim, raw_token
