"""
Login and signup.

Both endpoints are open; every other API endpoint requires a bearer token
issued by :func:`login_view`.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from records.serializers.auth import LoginSerializer, SignupSerializer
from records.services import records as record_service


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def login_view(request):
    """
    Log in with identifier, password and the role being claimed.

    The role must match the stored record.  On success returns a bearer
    token valid for 24 hours together with the display name and role.
    """
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data

    user, token = record_service.login(vd['id'], vd['password'], vd['role'])
    return Response({
        'success': True,
        'token': token,
        'name': user.name,
        'role': user.role,
    })

# ScopedRateThrottle reads throttle_scope from the wrapped view class
login_view.cls.throttle_scope = 'login'


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def signup_view(request):
    """Create a patient account.  Duplicate identifiers answer 400."""
    s = SignupSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data

    record_service.signup(vd['id'], vd['password'], vd['name'])
    return Response({'success': True, 'msg': 'account created'})
