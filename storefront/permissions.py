from rest_framework import permissions

from .authentication import get_runtime
from .exceptions import SessionResolving


class IsStoreAdmin(permissions.BasePermission):
    """
    Permission to only allow the operator signed in to the content store.
    While the session is still being resolved the request is answered with
    503 instead of 401, so clients do not send the operator to the login page
    too early.
    """
    def has_permission(self, request, view):
        if not get_runtime().store.session.is_resolved:
            raise SessionResolving()
        return bool(request.user and request.user.is_authenticated)
