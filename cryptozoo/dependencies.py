from __future__ import annotations

from typing import Callable, Iterator, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from cryptozoo.config import settings
from cryptozoo.db.database import SessionLocal, get_db
from cryptozoo.db.repositories import EdgeRepository, EditRequestRepository, UserRepository, VertexRepository
from cryptozoo.domain.session import ANONYMOUS, SessionContext
from cryptozoo.services.email_service import (
    EmailProvider, EmailService, FunctionEmailProvider, LoggingEmailProvider,
)
from cryptozoo.infrastructure.auth_client import AuthClient
from cryptozoo.application.access_service import require_admin
from cryptozoo.application.auth_service import AuthService
from cryptozoo.application.catalog_service import CatalogService
from cryptozoo.application.edit_request_service import EditRequestService
from cryptozoo.application.user_service import UserService

bearer_scheme = HTTPBearer(auto_error=False)


def get_auth_client() -> Iterator[AuthClient]:
    client = AuthClient(
        base_url=settings.SUPABASE_URL,
        api_key=settings.SUPABASE_ANON_KEY,
        timeout=settings.HTTP_TIMEOUT_SECONDS,
    )
    try:
        yield client
    finally:
        client.close()


def get_email_provider() -> Iterator[EmailProvider]:
    if not settings.EMAIL_ENABLED:
        yield LoggingEmailProvider()
        return
    provider = FunctionEmailProvider(
        base_url=settings.SUPABASE_URL,
        api_key=settings.SUPABASE_ANON_KEY,
        function_name=settings.EMAIL_FUNCTION_NAME,
        timeout=settings.HTTP_TIMEOUT_SECONDS,
    )
    try:
        yield provider
    finally:
        provider.close()


def get_email_service(provider: EmailProvider = Depends(get_email_provider)) -> EmailService:
    return EmailService(provider=provider, site_url=settings.SITE_URL)


def get_catalog_service(db: Session = Depends(get_db)) -> CatalogService:
    return CatalogService(vertices=VertexRepository(db), edges=EdgeRepository(db))


def get_edit_request_service(
    db: Session = Depends(get_db),
    email: EmailService = Depends(get_email_service),
) -> EditRequestService:
    return EditRequestService(
        edit_requests=EditRequestRepository(db),
        vertices=VertexRepository(db),
        edges=EdgeRepository(db),
        email=email,
    )


def get_auth_service(
    db: Session = Depends(get_db),
    client: AuthClient = Depends(get_auth_client),
) -> AuthService:
    return AuthService(client=client, users=UserRepository(db))


def get_session_factory() -> Callable[[], Session]:
    return SessionLocal


def get_user_service(
    db: Session = Depends(get_db),
    session_factory: Callable[[], Session] = Depends(get_session_factory),
) -> UserService:
    return UserService(
        users=UserRepository(db),
        session_factory=session_factory,
        list_timeout_seconds=settings.USER_LIST_TIMEOUT_SECONDS,
    )


def get_session_context(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    auth: AuthService = Depends(get_auth_service),
) -> SessionContext:
    """Anonymous without a bearer token; an invalid token is rejected rather than downgraded."""
    if credentials is None or not credentials.credentials:
        return ANONYMOUS
    return auth.session_from_token(credentials.credentials)


def get_admin_session(session: SessionContext = Depends(get_session_context)) -> SessionContext:
    return require_admin(session)
