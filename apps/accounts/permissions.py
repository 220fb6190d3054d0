"""
Role-based permission classes shared by the ledger apps.

Usage:
    def get_permissions(self):
        if self.action in ['approve', 'deny', 'verify']:
            return [IsAuthenticated(), IsNGOStaff()]
        return super().get_permissions()
"""
from rest_framework.permissions import BasePermission, SAFE_METHODS


class IsNGOStaff(BasePermission):
    """Allow access only to NGO staff accounts."""

    message = 'Only NGO staff can perform this action.'

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.is_ngo_staff)


class IsNGOStaffOrReadOnly(BasePermission):
    """Anyone authenticated may read; only NGO staff may write."""

    message = 'Only NGO staff can modify this resource.'

    def has_permission(self, request, view):
        user = request.user
        if not (user and user.is_authenticated):
            return False
        if request.method in SAFE_METHODS:
            return True
        return user.is_ngo_staff
