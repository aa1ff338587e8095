"""Tests for sign-up, sign-in and session resolution."""
from __future__ import annotations

import pytest
from unittest.mock import Mock

from cryptozoo.application.auth_service import DUPLICATE_EMAIL_MESSAGE, AuthService, validate_email
from cryptozoo.domain.errors import AuthenticationError, ConflictError, RecordStoreError, ValidationError
from cryptozoo.domain.events import UserRoleChanged, event_publisher
from cryptozoo.domain.session import ANONYMOUS, SessionContext
from cryptozoo.infrastructure.auth_client import AuthSession


@pytest.fixture
def service(auth_client, users):
    return AuthService(auth_client, users)


class TestValidateEmail:

    def test_valid(self):
        assert validate_email("  a@b.com ") == "a@b.com"

    @pytest.mark.parametrize("value", [None, "", "a@b", "no at sign", "a b@c.com"])
    def test_invalid(self, value):
        with pytest.raises(ValidationError):
            validate_email(value)


class TestSignUp:
    """Test account registration."""

    def test_creates_pending_profile(self, service, auth_client, users):
        auth_client.sign_up.return_value = {"id": "new-1", "email": "new@zoo.test"}

        user = service.sign_up("new@zoo.test", "secret", " Nia ", None)

        auth_client.sign_up.assert_called_once_with("new@zoo.test", "secret")
        assert user.role == "pending"
        assert user.first_name == "Nia"
        assert users.get("new-1").last_name == ""

    def test_duplicate_email(self, service, auth_client, regular_user):
        with pytest.raises(ConflictError) as exc_info:
            service.sign_up("USER@zoo.test", "secret")
        assert str(exc_info.value) == DUPLICATE_EMAIL_MESSAGE
        auth_client.sign_up.assert_not_called()

    def test_missing_password(self, service):
        with pytest.raises(ValidationError):
            service.sign_up("new@zoo.test", "")

    def test_auth_service_failure_propagates(self, service, auth_client, users):
        auth_client.sign_up.side_effect = AuthenticationError("Password should be at least 6 characters")
        with pytest.raises(AuthenticationError, match="6 characters"):
            service.sign_up("new@zoo.test", "abc")
        assert users.list_all() == []


class TestResolveUser:
    """Test mapping auth claims onto profiles."""

    def test_pending_user_promoted_on_first_fetch(self, service, users):
        users.create("p-1", "pending@zoo.test")
        events = []
        event_publisher.subscribe(UserRoleChanged, events.append)

        user = service.resolve_user({"id": "p-1"})

        assert user.role == "user"
        assert users.get("p-1").role == "user"
        assert events[0].old_role == "pending"
        assert events[0].new_role == "user"

    def test_existing_roles_untouched(self, service, admin_user):
        assert service.resolve_user({"id": "admin-1"}).role == "admin"

    def test_missing_profile_has_no_fallback(self, service):
        with pytest.raises(AuthenticationError, match="not found"):
            service.resolve_user({"id": "ghost"})

    def test_missing_id(self, service):
        with pytest.raises(AuthenticationError):
            service.resolve_user({})

    def test_store_failure(self, auth_client):
        users = Mock()
        users.get.side_effect = RecordStoreError("Record store operation failed")
        with pytest.raises(AuthenticationError, match="Unable to load"):
            AuthService(auth_client, users).resolve_user({"id": "u-1"})


class TestSessions:
    """Test session transitions driven through the service."""

    def test_sign_in(self, service, auth_client, regular_user):
        auth_client.sign_in.return_value = AuthSession("tok", "ref", {"id": "user-1"})

        session = service.sign_in("user@zoo.test", "secret")

        assert session.is_authenticated
        assert session.user["email"] == "user@zoo.test"
        assert session.refresh_token == "ref"

    def test_session_from_token(self, service, auth_client, admin_user):
        auth_client.get_user.return_value = {"id": "admin-1"}
        session = service.session_from_token("tok")
        assert session.is_admin
        assert session.access_token == "tok"

    def test_refresh_keeps_user(self, service, auth_client, user_session):
        auth_client.refresh.return_value = AuthSession("tok-2", "ref-2", {"id": "user-1"})
        session = service.refresh(user_session, "ref")
        assert session.access_token == "tok-2"
        assert session.user == user_session.user

    def test_refresh_from_anonymous_signs_in(self, service, auth_client, regular_user):
        auth_client.refresh.return_value = AuthSession("tok-2", "ref-2", {"id": "user-1"})
        session = service.refresh(ANONYMOUS, "ref")
        assert session.user_id == "user-1"

    def test_sign_out(self, service, auth_client, user_session):
        assert service.sign_out(user_session) == ANONYMOUS
        auth_client.sign_out.assert_called_once_with("user-token")

    def test_sign_out_anonymous_skips_service(self, service, auth_client):
        assert service.sign_out(SessionContext()) == ANONYMOUS
        auth_client.sign_out.assert_not_called()
