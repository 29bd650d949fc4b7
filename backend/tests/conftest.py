"""
Pytest configuration and fixtures for BlogCMS tests.
"""

import os

# Must be set before blogcms.core.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test_secret_key_for_testing_only"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["PASSWORD_HASH_ROUNDS"] = "4"
os.environ["REGISTRATION_OPEN"] = "false"
os.environ.pop("ADMIN_EMAILS", None)

import pytest
from typing import Generator
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from blogcms.core.database import Base, get_db
from blogcms.core.errors import register_exception_handlers
from blogcms.core.rate_limit import limiter
from blogcms.core.security import issue_token
from blogcms.models.user import User
from blogcms.models.category import Category
from blogcms.models.post import Post
from blogcms.services.credentials import CredentialStore

API = "/api"
ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "secret123"


@pytest.fixture(scope="function")
def db_engine():
    """Create a test database engine."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(db_engine) -> Generator[Session, None, None]:
    """Create a test database session."""
    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, bind=db_engine
    )
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def test_app(db_session):
    """Create a FastAPI test app without lifespan events."""
    from fastapi import FastAPI
    from blogcms.main import include_routers

    test_app = FastAPI(title="BlogCMS - Test", version="1.0.0")
    test_app.state.limiter = limiter
    register_exception_handlers(test_app)
    include_routers(test_app, prefix=API)

    @test_app.get("/health")
    def health():
        return {"status": "ok"}

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    test_app.dependency_overrides[get_db] = override_get_db

    return test_app


@pytest.fixture(scope="function")
def client(test_app) -> TestClient:
    """Create a test client without entering context manager."""
    return TestClient(test_app, raise_server_exceptions=False)


@pytest.fixture(scope="function")
def admin_user(db_session) -> User:
    return CredentialStore(db_session).create_user(
        ADMIN_EMAIL, ADMIN_PASSWORD, is_admin=True
    )


@pytest.fixture(scope="function")
def regular_user(db_session) -> User:
    return CredentialStore(db_session).create_user(
        "reader@example.com", "reader-pass", is_admin=False
    )


def bearer(user: User) -> dict:
    return {"Authorization": f"Bearer {issue_token(user.id, is_admin=user.is_admin)}"}


@pytest.fixture(scope="function")
def admin_headers(admin_user) -> dict:
    """Authentication headers for an admin."""
    return bearer(admin_user)


@pytest.fixture(scope="function")
def user_headers(regular_user) -> dict:
    """Authentication headers for a non-admin account."""
    return bearer(regular_user)


@pytest.fixture(scope="function")
def test_category(db_session) -> Category:
    category = Category(
        name="Technology",
        slug="technology",
        description="Tech news and updates",
    )
    db_session.add(category)
    db_session.commit()
    db_session.refresh(category)
    return category


def make_post(db_session, author, title, status="draft", **fields) -> Post:
    post = Post(
        title=title,
        slug=fields.pop("slug", None) or title.lower().replace(" ", "-"),
        content=fields.pop("content", f"<p>{title} body</p>"),
        status=status,
        author=author.id,
        **fields,
    )
    db_session.add(post)
    db_session.commit()
    db_session.refresh(post)
    return post


@pytest.fixture(scope="function")
def published_post(db_session, admin_user, test_category) -> Post:
    return make_post(
        db_session,
        admin_user,
        "Published Story",
        status="published",
        category=test_category.id,
        image="https://example.com/cover.png",
    )


@pytest.fixture(scope="function")
def draft_post(db_session, admin_user) -> Post:
    return make_post(db_session, admin_user, "Draft Story")


@pytest.fixture(scope="function")
def open_registration(monkeypatch):
    from blogcms.core.config import settings

    monkeypatch.setattr(settings, "REGISTRATION_OPEN", True)
    return settings


@pytest.fixture(scope="function")
def post_factory(db_session, admin_user):
    """Create posts directly in the store, authored by the admin by default."""

    def factory(title, status="draft", author=None, **fields) -> Post:
        return make_post(db_session, author or admin_user, title, status=status, **fields)

    return factory
