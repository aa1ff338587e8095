"""
Test configuration and fixtures for cryptozoo-api tests.
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from unittest.mock import Mock

from cryptozoo.main import app
from cryptozoo.db.database import get_db
from cryptozoo.db.models import Base
from cryptozoo.db.repositories import EdgeRepository, EditRequestRepository, UserRepository, VertexRepository
from cryptozoo.dependencies import get_auth_client, get_email_provider, get_session_factory
from cryptozoo.domain.errors import AuthenticationError
from cryptozoo.domain.events import event_publisher
from cryptozoo.domain.session import SessionContext
from cryptozoo.infrastructure.auth_client import AuthClient, AuthSession
from cryptozoo.services.email_service import EmailService


@pytest.fixture
def engine():
    """In-memory SQLite record store shared across threads."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    """Session factory bound to the test store, for code that opens its own sessions."""
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    """Database session for a single test."""
    session = session_factory()
    yield session
    session.close()


@pytest.fixture(autouse=True)
def clean_event_publisher():
    """Keep subscriptions from leaking between tests."""
    event_publisher.clear_subscribers()
    yield
    event_publisher.clear_subscribers()


@pytest.fixture
def vertices(db):
    return VertexRepository(db)


@pytest.fixture
def edges(db):
    return EdgeRepository(db)


@pytest.fixture
def edit_requests(db):
    return EditRequestRepository(db)


@pytest.fixture
def users(db):
    return UserRepository(db)


@pytest.fixture
def email_provider():
    """Email provider mock recording every send."""
    return Mock()


@pytest.fixture
def email_service(email_provider):
    return EmailService(provider=email_provider, site_url="https://zoo.test")


@pytest.fixture
def auth_client():
    """Auth service client mock; tests configure the calls they need."""
    return Mock(spec=AuthClient)


@pytest.fixture
def sample_catalog(vertices, edges):
    """Three primitives and two relationships, one referring to a missing vertex."""
    owf = vertices.create({
        "id": "owf",
        "name": "One-Way Functions",
        "abbreviation": "OWF",
        "type": "primitive",
        "tags": ["minicrypt"],
        "description": "Easy to compute, hard to invert",
        "definition": "A function $f$ that is hard to invert",
        "related_vertices": ["prg", "ghost"],
    })
    prg = vertices.create({
        "id": "prg",
        "name": "Pseudorandom Generators",
        "abbreviation": "PRG",
        "type": "primitive",
        "tags": ["minicrypt"],
        "description": "Stretch a short seed",
    })
    pke = vertices.create({
        "id": "pke",
        "name": "Public-Key Encryption",
        "abbreviation": "PKE",
        "type": "scheme",
        "tags": ["cryptomania"],
        "description": "Encrypt with a public key",
    })
    hill = edges.create({
        "id": "owf-to-prg",
        "type": "construction",
        "name": "HILL",
        "description": "PRGs from any one-way function",
        "overview": "Hastad, Impagliazzo, Levin and Luby",
        "source_vertices": ["owf"],
        "target_vertices": ["prg"],
        "tags": ["classic"],
    })
    ir = edges.create({
        "id": "ir-separation",
        "type": "separation",
        "name": "Impagliazzo-Rudich",
        "description": "No black-box key agreement from one-way permutations",
        "source_vertices": ["owf", "ghost"],
        "target_vertices": ["pke"],
    })
    return {"owf": owf, "prg": prg, "pke": pke, "hill": hill, "ir": ir}


@pytest.fixture
def admin_user(users):
    return users.create(user_id="admin-1", email="admin@zoo.test", first_name="Ada",
                        last_name="Admin", role="admin")


@pytest.fixture
def regular_user(users):
    return users.create(user_id="user-1", email="user@zoo.test", first_name="Uma", role="user")


@pytest.fixture
def admin_session(admin_user):
    return SessionContext(status="authenticated", access_token="admin-token", user=admin_user.to_dict())


@pytest.fixture
def user_session(regular_user):
    return SessionContext(status="authenticated", access_token="user-token", user=regular_user.to_dict())


@pytest.fixture
def token_claims(admin_user, regular_user):
    """Claims the mocked auth service returns for each known bearer token."""
    return {
        "admin-token": {"id": admin_user.id, "email": admin_user.email},
        "user-token": {"id": regular_user.id, "email": regular_user.email},
    }


@pytest.fixture
def client(db, session_factory, auth_client, email_provider, token_claims):
    """Test client wired to the in-memory store and mocked external services."""
    def override_get_db():
        yield db

    def get_user(access_token):
        if access_token not in token_claims:
            raise AuthenticationError("Invalid JWT")
        return token_claims[access_token]

    auth_client.get_user.side_effect = get_user
    auth_client.sign_in.return_value = AuthSession(
        access_token="user-token", refresh_token="refresh-1", user=token_claims["user-token"]
    )

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_auth_client] = lambda: auth_client
    app.dependency_overrides[get_email_provider] = lambda: email_provider
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers():
    return {"Authorization": "Bearer admin-token"}


@pytest.fixture
def user_headers():
    return {"Authorization": "Bearer user-token"}
