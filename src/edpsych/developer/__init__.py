"""
Developer API Module

OAuth 2.0 provider for third-party integrations.
"""

from .oauth import OAuthError, OAuthService

__all__ = [
    "OAuthError",
    "OAuthService",
]
