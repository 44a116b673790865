"""
Academics Permissions — role-based access control.

The caller's role is taken from the authenticated user and checked
explicitly before any service call:
- STUDENT / TEACHER / ADMIN: read records and enroll
- owning STUDENT, TEACHER / ADMIN: student transcript and profile update
- TEACHER / ADMIN: grade updates, drops, teacher profile changes
- ADMIN: debug statistics
"""

from rest_framework.permissions import BasePermission

from users.models import UserRole


def has_any_role(role, *allowed_roles) -> bool:
    """True if ``role`` is one of ``allowed_roles``."""
    return role is not None and role in allowed_roles


def _role_of(user):
    if not user or not user.is_authenticated:
        return None
    if user.is_superuser:
        return UserRole.ADMIN
    return getattr(user, 'role', None)


class HasRole(BasePermission):
    """Grants access when the caller holds one of ``allowed_roles``."""

    allowed_roles = ()
    message = 'You do not have the role required for this action.'

    def has_permission(self, request, view):
        return has_any_role(_role_of(request.user), *self.allowed_roles)


class IsStudentTeacherOrAdmin(HasRole):
    allowed_roles = (UserRole.STUDENT, UserRole.TEACHER, UserRole.ADMIN)


class IsTeacherOrAdmin(HasRole):
    allowed_roles = (UserRole.TEACHER, UserRole.ADMIN)
    message = 'Only teachers or administrators can perform this action.'


class IsAdmin(HasRole):
    allowed_roles = (UserRole.ADMIN,)
    message = 'Only administrators can perform this action.'


class IsStudentOwnerTeacherOrAdmin(BasePermission):
    """
    Object-level access to a Student record (transcript, profile update).
    A student may act only on their own record; teachers and admins on any.
    """

    def has_permission(self, request, view):
        return request.user and request.user.is_authenticated

    def has_object_permission(self, request, view, obj):
        if has_any_role(_role_of(request.user), UserRole.TEACHER, UserRole.ADMIN):
            return True
        return obj.user_id is not None and obj.user_id == request.user.pk
