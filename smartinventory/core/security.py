"""
Path based access rules.

Public paths and prefixes are open to everyone; anything under a protected
prefix needs an authenticated user; the rest is open.
"""
from django.conf import settings
from rest_framework.permissions import BasePermission


def is_public_path(path):
    if path in settings.SECURITY_PUBLIC_PATHS:
        return True
    return any(path.startswith(prefix) for prefix in settings.SECURITY_PUBLIC_PREFIXES)


def requires_authentication(path):
    if is_public_path(path):
        return False
    return any(path.startswith(prefix) for prefix in settings.SECURITY_PROTECTED_PREFIXES)


class PathAccessPolicy(BasePermission):
    def has_permission(self, request, view):
        if not requires_authentication(request.path):
            return True
        return bool(request.user and request.user.is_authenticated)


class HasAdminRole(BasePermission):
    """Only users holding ROLE_ADMIN"""
    message = 'Admin role required'
    required_role = 'ADMIN'

    def has_permission(self, request, view):
        user = request.user
        if not (user and user.is_authenticated):
            return False
        return user.has_role(self.required_role)
