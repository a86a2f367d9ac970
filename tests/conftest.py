"""Shared fixtures: an app with an in-memory store, users and sample quotes."""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from quotevault.config import Settings
from quotevault.core.security import create_access_token, hash_password
from quotevault.crud.activity import ActivityCRUD
from quotevault.crud.quote import QuoteCRUD
from quotevault.crud.user import UserCRUD
from quotevault.main import create_app
from quotevault.models.quote import QuoteModel
from quotevault.models.user import UserModel
from quotevault.services.local_store import LocalStore

TEST_PASSWORD = "password123"


@pytest.fixture(scope="session")
def password_hash():
    return hash_password(TEST_PASSWORD)


@pytest.fixture
def settings():
    return Settings(
        jwt_secret="test-jwt-secret",
        access_token_expire_minutes=60,
        rate_limit_max_requests=1000,
        popular_cache_ttl_seconds=60,
        data_dir="",
    )


@pytest.fixture
def store():
    return LocalStore()


@pytest.fixture
def quote_crud(store):
    return QuoteCRUD(store)


@pytest.fixture
def user_crud(store):
    return UserCRUD(store)


@pytest.fixture
def activity_crud(store):
    return ActivityCRUD(store)


@pytest.fixture
def app(settings, store):
    return create_app(settings, store)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_user(user_crud, password_hash):
    def _make_user(email, role="user", **fields):
        return user_crud.create_user(
            UserModel(email=email, password_hash=password_hash, role=role, **fields)
        )
    return _make_user


@pytest.fixture
def user(make_user):
    return make_user(
        "user@example.com",
        display_name="Test User",
        bio="Test bio",
        location="Test City",
        favorite_categories=["inspiration", "motivation"],
    )


@pytest.fixture
def admin(make_user):
    return make_user("admin@example.com", role="admin", display_name="Admin User")


@pytest.fixture
def auth_headers(settings):
    def _auth_headers(user):
        token = create_access_token(user.id, user.role, settings)
        return {"Authorization": f"Bearer {token}"}
    return _auth_headers


@pytest.fixture
def quotes(quote_crud, user):
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    samples = [
        {
            "text": "The only way to do great work is to love what you do.",
            "author": "Steve Jobs",
            "tags": ["inspiration", "work"],
            "views": 5,
        },
        {
            "text": "Life is what happens when you're busy making other plans.",
            "author": "John Lennon",
            "tags": ["life", "planning"],
            "views": 12,
        },
        {
            "text": "The future belongs to those who believe in the beauty of their dreams.",
            "author": "Eleanor Roosevelt",
            "tags": ["future", "dreams"],
            "views": 1,
            "added_by": user.id,
        },
    ]
    return [
        quote_crud.create(QuoteModel(created_at=base + timedelta(days=index), **sample))
        for index, sample in enumerate(samples)
    ]
