"""
Role based access control.

Every protected view lists exactly one of these permission classes.  The
check reads the role carried by the verified token.
"""
from rest_framework.permissions import BasePermission

from .models import Role


class RolePermission(BasePermission):
    """Allow access only to callers whose token carries ``required_role``."""
    required_role: Role

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        user = getattr(request, "user", None)
        return bool(
            user
            and getattr(user, "is_authenticated", False)
            and getattr(user, "role", None) == self.required_role
        )


class IsDoctorRole(RolePermission):
    """Allow access only to the doctor."""
    required_role = Role.DOCTOR


class IsPatientRole(RolePermission):
    """Allow access only to patients."""
    required_role = Role.PATIENT
