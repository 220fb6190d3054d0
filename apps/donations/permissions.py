"""
Permission classes for donation requests.

Donors see and submit their own requests; NGO staff see all requests and
are the only users who may review or verify them.
"""
from rest_framework.permissions import BasePermission


class IsDonorOrNGOStaff(BasePermission):
    """Object access for the request's donor or any NGO staff member."""

    message = 'You do not have access to this donation request.'

    def has_object_permission(self, request, view, obj):
        return request.user.is_ngo_staff or obj.donor_id == request.user.id
