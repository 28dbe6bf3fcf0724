"""Credential verification."""

from lyntfeed.auth.base import Authenticator
from lyntfeed.auth.jwt_auth import JwtAuthenticator

__all__ = ["Authenticator", "JwtAuthenticator"]
