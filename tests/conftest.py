"""
Shared fixtures: an app wired to an in-memory store with one seeded user.
"""

import pytest
from fastapi.testclient import TestClient

from userapi.api.app import create_app
from userapi.auth.jwt import TokenCodec
from userapi.config import Settings
from userapi.core.models import User
from userapi.storage.local import InMemoryUserStore

SECRET = "s3cret"


@pytest.fixture
def settings():
    return Settings(_env_file=None, jwt_secret=SECRET, mongo_uri="")


@pytest.fixture
def alice():
    return User(id="u1", name="Alice", email="alice@example.com")


@pytest.fixture
def store(alice):
    return InMemoryUserStore([alice])


@pytest.fixture
def codec(settings):
    return TokenCodec.from_settings(settings)


@pytest.fixture
def client(settings, store):
    return TestClient(create_app(settings, store))


@pytest.fixture
def auth_headers(codec):
    return {"Authorization": f"Bearer {codec.issue()}"}
