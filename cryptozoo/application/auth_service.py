"""Service resolving auth service sessions into user profiles and roles."""
from __future__ import annotations

import logging
import re
from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError

from cryptozoo.db.models import User
from cryptozoo.db.repositories.users import UserRepository
from cryptozoo.domain.errors import AuthenticationError, ConflictError, RecordStoreError, ValidationError
from cryptozoo.domain.events import event_publisher, UserRoleChanged
from cryptozoo.domain.session import (
    ANONYMOUS, SessionContext, SignedIn, SignedOut, TokenRefreshed, reduce_session,
)
from cryptozoo.infrastructure.auth_client import AuthClient

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
DUPLICATE_EMAIL_MESSAGE = (
    "An account with this email address already exists. Please try signing in instead."
)


def validate_email(email: Optional[str]) -> str:
    """Normalize an email address or raise ValidationError."""
    email = (email or "").strip()
    if not EMAIL_PATTERN.match(email):
        raise ValidationError("A valid email address is required")
    return email


class AuthService:
    """Sign-up, sign-in and session resolution against the users table."""

    def __init__(self, client: AuthClient, users: UserRepository) -> None:
        self._client = client
        self._users = users

    def sign_up(self, email: str, password: str, first_name: str | None = None,
                last_name: str | None = None) -> User:
        """Register an account and create its profile with role "pending"."""
        email = validate_email(email)
        if not password:
            raise ValidationError("Password is required")
        if self._users.get_by_email(email):
            raise ConflictError(DUPLICATE_EMAIL_MESSAGE)

        claims = self._client.sign_up(email, password)
        try:
            user = self._users.create(
                user_id=claims["id"],
                email=claims.get("email") or email,
                first_name=(first_name or "").strip(),
                last_name=(last_name or "").strip(),
                role="pending",
            )
        except ConflictError as e:
            raise ConflictError(DUPLICATE_EMAIL_MESSAGE) from e
        logger.info(f"Created pending user {user.id}")
        return user

    def resolve_user(self, claims: Dict[str, Any]) -> User:
        """
        Load the profile for authenticated claims, promoting "pending" to "user".
        
        Raises:
            AuthenticationError: No profile exists or it could not be loaded.
                There is no fallback identity.
        """
        user_id = claims.get("id")
        if not user_id:
            raise AuthenticationError("Invalid session")
        try:
            user = self._users.get(user_id)
            if user is None:
                raise AuthenticationError("User profile not found")
            if user.role == "pending":
                self._users.set_role(user_id, "user")
                event_publisher.publish(UserRoleChanged(
                    event_id="",
                    timestamp=None,
                    aggregate_id=user_id,
                    old_role="pending",
                    new_role="user",
                    changed_by=None,
                ))
                # Re-read so callers see the stored row
                user = self._users.get(user_id)
        except (SQLAlchemyError, RecordStoreError) as e:
            logger.error(f"Could not load profile for user {user_id}: {e}")
            raise AuthenticationError("Unable to load user profile") from e
        return user

    def _signed_in(self, state: SessionContext, access_token: str, claims: Dict[str, Any],
                   refresh_token: str | None = None) -> SessionContext:
        user = self.resolve_user(claims)
        return reduce_session(state, SignedIn(access_token=access_token, user=user.to_dict(),
                                              refresh_token=refresh_token))

    def sign_in(self, email: str, password: str) -> SessionContext:
        session = self._client.sign_in(validate_email(email), password)
        return self._signed_in(ANONYMOUS, session.access_token, session.user, session.refresh_token)

    def session_from_token(self, access_token: str) -> SessionContext:
        """Resolve a bearer token into an authenticated session context."""
        claims = self._client.get_user(access_token)
        return self._signed_in(ANONYMOUS, access_token, claims)

    def refresh(self, state: SessionContext, refresh_token: str) -> SessionContext:
        session = self._client.refresh(refresh_token)
        if state.is_authenticated:
            return reduce_session(state, TokenRefreshed(session.access_token, session.refresh_token))
        return self._signed_in(state, session.access_token, session.user, session.refresh_token)

    def sign_out(self, state: SessionContext) -> SessionContext:
        if state.access_token:
            self._client.sign_out(state.access_token)
        return reduce_session(state, SignedOut())
