"""
Tests for the request gates and their composition.
"""

from unittest.mock import patch

import pytest
from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

from userapi.auth.gates import AuthGate, ExistenceGate, Gate, gated
from userapi.auth.jwt import TokenCodec
from userapi.errors import ApiError, ClientFormatError
from userapi.services.users import UserService
from userapi.storage.base import UserStoreError
from userapi.storage.local import InMemoryUserStore

SECRET = "s3cret"


class RecordingGate(Gate):
    """Records that it ran, optionally rejecting."""

    def __init__(self, name, calls, reject=False):
        self.name = name
        self.calls = calls
        self.reject = reject

    async def check(self, request):
        self.calls.append(self.name)
        if self.reject:
            raise ClientFormatError(f"{self.name} said no")


class FailingStore(InMemoryUserStore):
    async def find_by_id(self, user_id):
        raise UserStoreError("connection reset by peer")


def _app(*gates):
    app = FastAPI()

    @app.exception_handler(ApiError)
    async def handler(request, exc):
        return exc.to_response()

    @app.get("/things/{user_id}", dependencies=[Depends(gated(*gates))])
    async def thing(user_id: str):
        return {"ok": True}

    return TestClient(app)


# =============================================================================
# AuthGate
# =============================================================================


class TestAuthGate:
    @pytest.fixture
    def codec(self):
        return TokenCodec(SECRET)

    @pytest.fixture
    def client(self, codec):
        return _app(AuthGate(codec))

    def test_valid_token_forwards(self, client, codec):
        response = client.get("/things/x", headers={"Authorization": f"Bearer {codec.issue()}"})
        assert response.status_code == 200
        assert response.json() == {"ok": True}

    def test_missing_header(self, client):
        response = client.get("/things/x")
        assert response.status_code == 401
        assert response.json() == {"error": "Missing Authorization header"}

    @pytest.mark.parametrize("value", ["Bearer", "Basic abc", "bearer abc", "Bearer  abc", "Bearer a b"])
    def test_invalid_format_never_reaches_codec(self, client, value):
        with patch.object(TokenCodec, "verify") as verify:
            response = client.get("/things/x", headers={"Authorization": value})

        assert response.status_code == 401
        assert response.json() == {"error": "Invalid Authorization header format"}
        verify.assert_not_called()

    def test_bad_token(self, client):
        response = client.get("/things/x", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401
        assert response.json() == {"error": "Invalid or expired token"}

    def test_wrong_secret(self, client):
        token = TokenCodec("different").issue()
        response = client.get("/things/x", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401
        assert response.json() == {"error": "Invalid or expired token"}

    def test_secret_not_configured(self):
        client = _app(AuthGate(TokenCodec("")))
        token = TokenCodec(SECRET).issue()
        response = client.get("/things/x", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 500
        assert response.json() == {"error": "JWT secret not configured"}

    def test_header_format_checked_before_secret(self):
        client = _app(AuthGate(TokenCodec("")))
        response = client.get("/things/x", headers={"Authorization": "Basic abc"})
        assert response.status_code == 401


# =============================================================================
# ExistenceGate
# =============================================================================


class TestExistenceGate:
    def test_existing_user_forwards(self, alice):
        client = _app(ExistenceGate(UserService(InMemoryUserStore([alice]))))
        assert client.get("/things/u1").status_code == 200

    def test_unknown_user(self):
        client = _app(ExistenceGate(UserService(InMemoryUserStore())))
        response = client.get("/things/nobody")
        assert response.status_code == 400
        assert response.json() == {"status": "fail", "message": "User not found!"}

    def test_store_error_is_surfaced(self):
        client = _app(ExistenceGate(UserService(FailingStore())))
        response = client.get("/things/u1")
        assert response.status_code == 500
        assert response.json() == {"status": "fail", "message": "connection reset by peer"}

    def test_empty_identifier(self):
        client = _app(ExistenceGate(UserService(InMemoryUserStore()), param="missing"))
        response = client.get("/things/u1")
        assert response.status_code == 400
        assert response.json()["message"] == "User not found!"


# =============================================================================
# Composition
# =============================================================================


class TestGated:
    def test_runs_in_order(self):
        calls = []
        client = _app(RecordingGate("first", calls), RecordingGate("second", calls))
        assert client.get("/things/x").status_code == 200
        assert calls == ["first", "second"]

    def test_first_rejection_stops_chain(self):
        calls = []
        client = _app(RecordingGate("first", calls, reject=True), RecordingGate("second", calls))
        response = client.get("/things/x")
        assert response.status_code == 400
        assert response.json()["message"] == "first said no"
        assert calls == ["first"]
