"""Middleware to authenticate API requests via JWT Bearer token."""

import logging

from django.utils.deprecation import MiddlewareMixin
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.authentication import JWTAuthentication

logger = logging.getLogger("ebarimt")


class JWTAuthenticationMiddleware(MiddlewareMixin):
    """Set request.user from JWT when Authorization: Bearer <token> is present."""

    def process_request(self, request):
        auth_header = request.META.get("HTTP_AUTHORIZATION")
        if not auth_header or not auth_header.startswith("Bearer "):
            return
        try:
            validated = JWTAuthentication().authenticate(request)
        except AuthenticationFailed as e:
            logger.info("JWT rejected for %s: %s", request.path, e)
            return
        if validated:
            request.user = validated[0]
