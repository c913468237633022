"""Bearer token authentication against an external identity provider."""

import logging

from django.utils.module_loading import import_string
from rest_framework import authentication, exceptions

from sanctuary.conf import app_setting
from sanctuary.services.authorization import Identity

logger = logging.getLogger(__name__)


def get_verifier():
    verifier = app_setting("IDENTITY_VERIFIER")
    if isinstance(verifier, str):
        verifier = import_string(verifier)
    return verifier


class IdentityTokenAuthentication(authentication.BaseAuthentication):
    """``Authorization: Bearer <token>``; the verifier maps a token to a uid."""

    keyword = "Bearer"

    def authenticate(self, request):
        header = authentication.get_authorization_header(request).split()
        if not header or header[0].lower() != self.keyword.lower().encode():
            return None
        if len(header) != 2:
            raise exceptions.AuthenticationFailed("Invalid token header")

        verifier = get_verifier()
        if verifier is None:
            raise exceptions.AuthenticationFailed("Token authentication is not configured")
        token = header[1].decode(errors="replace")
        uid = verifier(token)
        if not uid:
            logger.info("Rejected identity token")
            raise exceptions.AuthenticationFailed("Invalid or expired token")
        return Identity(uid=uid), token

    def authenticate_header(self, request):
        return self.keyword
