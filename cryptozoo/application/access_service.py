"""Role checks shared by the privileged application services.

These checks gate the API; the record store's own access policy remains the
authoritative decision.
"""
from __future__ import annotations

from cryptozoo.domain.errors import AuthenticationError, PermissionDeniedError
from cryptozoo.domain.session import SessionContext


def require_user(session: SessionContext) -> SessionContext:
    """Raise AuthenticationError unless someone is signed in."""
    if not session.is_authenticated:
        raise AuthenticationError("Sign in required")
    return session


def require_admin(session: SessionContext) -> SessionContext:
    """Raise unless the signed-in user is an admin."""
    require_user(session)
    if not session.is_admin:
        raise PermissionDeniedError("Access denied. Admin privileges required.")
    return session
