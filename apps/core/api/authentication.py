from __future__ import annotations

from typing import Optional

from django.conf import settings
from django.utils.crypto import constant_time_compare
from django.utils.translation import gettext_lazy as _
from rest_framework.authentication import BaseAuthentication, get_authorization_header
from rest_framework.exceptions import AuthenticationFailed
from rest_framework.request import Request

API_KEY_HEADER = "HTTP_X_API_KEY"
API_KEY_QUERY_PARAM = "api_key"


class ApiClient:
    """The caller identity attached to requests that present a valid API key."""

    is_authenticated = True
    is_anonymous = False

    def __str__(self) -> str:
        return "api-client"


class ApiKeyAuthentication(BaseAuthentication):
    """Shared-secret authentication against ``BRIDGE_API_KEY``.

    The key is accepted as ``Authorization: Bearer <key>``, as an ``X-API-Key``
    header, or as the ``api_key`` query parameter. When no key is configured
    this backend authenticates nobody and ``HasApiKey`` lets every request through.
    """

    keyword = "Bearer"

    def authenticate(self, request: Request) -> Optional[tuple[ApiClient, str]]:
        expected = settings.BRIDGE_API_KEY
        if not expected:
            return None

        provided = self.get_provided_key(request)
        if provided is None:
            return None

        if not constant_time_compare(provided, expected):
            raise AuthenticationFailed(_("Unauthorized: Invalid API key"))

        return (ApiClient(), provided)

    def authenticate_header(self, request: Request) -> str:
        return self.keyword

    def get_provided_key(self, request: Request) -> Optional[str]:
        auth = get_authorization_header(request).split()
        if auth and auth[0].lower() == self.keyword.lower().encode():
            if len(auth) != 2:
                raise AuthenticationFailed(_("Invalid Authorization header. Expected 'Bearer <key>'."))
            try:
                return auth[1].decode()
            except UnicodeError:
                raise AuthenticationFailed(_("Invalid Authorization header. Key contains invalid characters."))

        header_key = request.META.get(API_KEY_HEADER)
        if header_key:
            return header_key

        return request.query_params.get(API_KEY_QUERY_PARAM) or None
