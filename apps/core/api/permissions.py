from django.conf import settings
from rest_framework.permissions import BasePermission


class HasApiKey(BasePermission):
    """
    Require a valid API key when ``BRIDGE_API_KEY`` is configured.

    ``ApiKeyAuthentication`` rejects a wrong key outright; this permission
    rejects requests that carry no key at all. Both happen before the view
    touches the device session.
    """

    def has_permission(self, request, view):
        if not settings.BRIDGE_API_KEY:
            return True
        return request.auth is not None
