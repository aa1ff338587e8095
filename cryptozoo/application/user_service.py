"""Service behind the user management view."""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from typing import Any, Callable, List, Tuple

from sqlalchemy.orm import Session

from cryptozoo.application.access_service import require_admin
from cryptozoo.db.models import User
from cryptozoo.db.repositories.users import UserRepository
from cryptozoo.domain.entities import USER_ROLES
from cryptozoo.domain.errors import NotFoundError, RecordStoreError, ValidationError
from cryptozoo.domain.events import event_publisher, UserRoleChanged
from cryptozoo.domain.session import SessionContext, UserUpdated, reduce_session

logger = logging.getLogger(__name__)


def display_name(user: Any) -> str:
    """First and last name, whichever exist, else the email."""
    first = (getattr(user, "first_name", None) or "").strip()
    last = (getattr(user, "last_name", None) or "").strip()
    return " ".join(part for part in (first, last) if part) or user.email


class UserService:
    """Admin-only listing and editing of user profiles and roles."""

    def __init__(self, users: UserRepository, session_factory: Callable[[], Session],
                 list_timeout_seconds: float = 10.0) -> None:
        self._users = users
        self._session_factory = session_factory
        self._list_timeout = list_timeout_seconds

    def _list_all(self) -> List[User]:
        # Runs in the worker thread, which must not share the request's session
        db = self._session_factory()
        try:
            return UserRepository(db).list_all()
        finally:
            db.close()

    def list_users(self, session: SessionContext) -> List[User]:
        """All users newest first; gives up after the configured timeout."""
        require_admin(session)
        executor = ThreadPoolExecutor(max_workers=1)
        try:
            future = executor.submit(self._list_all)
            return future.result(timeout=self._list_timeout)
        except FutureTimeoutError as e:
            logger.error(f"Listing users exceeded {self._list_timeout}s")
            raise RecordStoreError("Request timeout") from e
        finally:
            executor.shutdown(wait=False)

    def update_user(self, session: SessionContext, user_id: str, first_name: str | None = None,
                    last_name: str | None = None, role: str | None = None) -> Tuple[User, SessionContext]:
        """
        Update a user's names and role.
        
        Returns:
            The updated user and the caller's session context, refreshed when
            admins edit their own profile
        """
        require_admin(session)
        if role is not None and role not in USER_ROLES:
            raise ValidationError(f"Role must be one of: {', '.join(USER_ROLES)}")

        existing = self._users.get(user_id)
        if not existing:
            raise NotFoundError(f"User not found: {user_id}")
        old_role = existing.role

        user = self._users.update(
            user_id,
            first_name=first_name.strip() if first_name is not None else None,
            last_name=last_name.strip() if last_name is not None else None,
            role=role,
        )
        if role is not None and role != old_role:
            logger.info(f"User {user_id} role changed from {old_role} to {role} by {session.user_id}")
            event_publisher.publish(UserRoleChanged(
                event_id="",
                timestamp=None,
                aggregate_id=user_id,
                old_role=old_role,
                new_role=role,
                changed_by=session.user_id,
            ))
        return user, reduce_session(session, UserUpdated(user.to_dict()))
