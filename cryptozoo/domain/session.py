"""Explicit session context and the single reducer that evolves it.

Sign-in, sign-out, token refresh and profile updates arrive as discrete
events; ``reduce_session`` is the only place a ``SessionContext`` changes.
Replaying an event that is already reflected in the state is a no-op.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict, Optional, Union


@dataclass(frozen=True)
class SessionContext:
    status: str = "anonymous"  # anonymous | authenticated
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    user: Optional[Dict[str, Any]] = None

    @property
    def is_authenticated(self) -> bool:
        return self.status == "authenticated" and self.user is not None

    @property
    def is_admin(self) -> bool:
        return self.is_authenticated and self.user.get("role") == "admin"

    @property
    def user_id(self) -> Optional[str]:
        return self.user["id"] if self.user else None


ANONYMOUS = SessionContext()


@dataclass(frozen=True)
class SignedIn:
    access_token: str
    user: Dict[str, Any]
    refresh_token: Optional[str] = None


@dataclass(frozen=True)
class SignedOut:
    pass


@dataclass(frozen=True)
class TokenRefreshed:
    access_token: str
    refresh_token: Optional[str] = None


@dataclass(frozen=True)
class UserUpdated:
    user: Dict[str, Any]


SessionEvent = Union[SignedIn, SignedOut, TokenRefreshed, UserUpdated]


def reduce_session(state: SessionContext, event: SessionEvent) -> SessionContext:
    """Apply one session event and return the resulting context."""
    if isinstance(event, SignedIn):
        return SessionContext(
            status="authenticated",
            access_token=event.access_token,
            refresh_token=event.refresh_token,
            user=dict(event.user),
        )
    if isinstance(event, SignedOut):
        return ANONYMOUS
    if isinstance(event, TokenRefreshed):
        if not state.is_authenticated:
            return state
        return replace(
            state,
            access_token=event.access_token,
            refresh_token=event.refresh_token or state.refresh_token,
        )
    if isinstance(event, UserUpdated):
        # Ignore updates for someone other than the signed-in user
        if not state.is_authenticated or event.user.get("id") != state.user_id:
            return state
        return replace(state, user=dict(event.user))
    raise TypeError(f"Unknown session event: {type(event).__name__}")
