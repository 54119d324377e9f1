import html

import bleach
from rest_framework import serializers

IDENTIFIER_MAX_LENGTH = 64


def strip_markup(value):
    """Drop HTML tags but keep the text as typed (no entity escaping)."""
    return html.unescape(bleach.clean(value, tags=set(), strip=True)).strip()


class LoginSerializer(serializers.Serializer):
    # Credentials are compared exactly as sent.  Blank or oversized values
    # simply fail to match and answer 401 like any other bad login.
    id = serializers.CharField(trim_whitespace=False, allow_blank=True)
    password = serializers.CharField(trim_whitespace=False, allow_blank=True)
    role = serializers.CharField(trim_whitespace=False, allow_blank=True)


class SignupSerializer(serializers.Serializer):
    id = serializers.CharField(max_length=IDENTIFIER_MAX_LENGTH)
    password = serializers.CharField(trim_whitespace=False)
    name = serializers.CharField(max_length=255)

    def validate_id(self, v):
        v = (v or '').strip()
        if not v:
            raise serializers.ValidationError('identifier must not be empty')
        return v

    def validate_name(self, v):
        v = strip_markup(v or '')
        if not v:
            raise serializers.ValidationError('name must not be empty')
        return v
