"""
Account endpoints backed by the hosted auth service.
"""
from types import SimpleNamespace

from fastapi import APIRouter, Depends

from cryptozoo.application.access_service import require_user
from cryptozoo.application.auth_service import AuthService
from cryptozoo.application.user_service import display_name
from cryptozoo.dependencies import get_auth_service, get_session_context
from cryptozoo.domain.session import SessionContext
from cryptozoo.schemas.api_schemas import (
    RefreshRequest, SessionResponse, SignInRequest, SignOutResponse, SignUpRequest, SignUpResponse, User,
)

router = APIRouter(prefix="/auth")


def _session_response(session: SessionContext) -> SessionResponse:
    user = session.user
    return SessionResponse(
        access_token=session.access_token,
        refresh_token=session.refresh_token,
        user=User(**user, display_name=display_name(SimpleNamespace(**user))),
    )


@router.post("/sign-up", response_model=SignUpResponse, status_code=201)
def sign_up(payload: SignUpRequest, auth: AuthService = Depends(get_auth_service)):
    """
    Register an account. New accounts start as "pending" until their first sign-in.
    """
    user = auth.sign_up(payload.email, payload.password, payload.first_name, payload.last_name)
    return SignUpResponse(user_id=user.id, email=user.email, role=user.role)


@router.post("/sign-in", response_model=SessionResponse)
def sign_in(payload: SignInRequest, auth: AuthService = Depends(get_auth_service)):
    return _session_response(auth.sign_in(payload.email, payload.password))


@router.post("/refresh", response_model=SessionResponse)
def refresh(
    payload: RefreshRequest,
    session: SessionContext = Depends(get_session_context),
    auth: AuthService = Depends(get_auth_service),
):
    """
    Exchange a refresh token for a new access token.
    """
    return _session_response(auth.refresh(session, payload.refresh_token))


@router.post("/sign-out", response_model=SignOutResponse)
def sign_out(
    session: SessionContext = Depends(get_session_context),
    auth: AuthService = Depends(get_auth_service),
):
    auth.sign_out(session)
    return SignOutResponse()


@router.get("/me", response_model=User)
def me(session: SessionContext = Depends(get_session_context)):
    """
    Profile of the signed-in user.
    """
    user = require_user(session).user
    return User(**user, display_name=display_name(SimpleNamespace(**user)))
