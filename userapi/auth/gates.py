"""
Gates - request filters composed per route.

A gate inspects a request and either returns (forward to the next stage)
or raises an `ApiError`, which the app renders as the terminal response.
Routes list their gates explicitly, in order:

    @router.put("/{user_id}", dependencies=[Depends(gated(exists, auth))])

Order is part of the contract. On update/delete the existence check runs
first, so an unknown user is reported as not found even to callers without
a valid token.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Awaitable, Callable

from fastapi import Request

from userapi.auth.jwt import TokenCodec, TokenError
from userapi.errors import (
    AuthenticationError,
    ClientFormatError,
    ConfigurationError,
    UpstreamError,
)
from userapi.services.users import UserService
from userapi.storage.base import UserStoreError

logger = logging.getLogger(__name__)

USER_NOT_FOUND = "User not found!"


class Gate(ABC):
    """A single request filter."""

    @abstractmethod
    async def check(self, request: Request) -> None:
        """Return to forward the request; raise `ApiError` to stop it."""
        pass


# =============================================================================
# AuthGate
# =============================================================================


class AuthGate(Gate):
    """
    Requires `Authorization: Bearer <token>` carrying a valid, unexpired token.

    Every verification failure collapses to the same 401 body; the reason
    is only logged. Claims are not attached to the request.
    """

    def __init__(self, codec: TokenCodec):
        self.codec = codec

    async def check(self, request: Request) -> None:
        auth_header = request.headers.get("Authorization")
        if not auth_header:
            raise AuthenticationError("Missing Authorization header")

        parts = auth_header.split(" ")
        if len(parts) != 2 or parts[0] != "Bearer":
            raise AuthenticationError("Invalid Authorization header format")

        if not self.codec.configured:
            logger.error("Rejecting authenticated request: JWT secret not configured")
            raise ConfigurationError("JWT secret not configured")

        try:
            self.codec.verify(parts[1])
        except TokenError as e:
            logger.info(f"Token rejected on {request.method} {request.url.path}: {e}")
            raise AuthenticationError("Invalid or expired token") from e


# =============================================================================
# ExistenceGate
# =============================================================================


class ExistenceGate(Gate):
    """Rejects requests addressed at a user that does not exist."""

    def __init__(self, service: UserService, param: str = "user_id"):
        self.service = service
        self.param = param

    async def check(self, request: Request) -> None:
        user_id = request.path_params.get(self.param, "")
        if not user_id:
            raise ClientFormatError(USER_NOT_FOUND)

        try:
            user = await self.service.get_user(user_id)
        except UserStoreError as e:
            raise UpstreamError(str(e)) from e

        if user is None:
            raise ClientFormatError(USER_NOT_FOUND)


# =============================================================================
# Composition
# =============================================================================


def gated(*gates: Gate) -> Callable[[Request], Awaitable[None]]:
    """
    Build a FastAPI dependency that runs `gates` in order.

    The first gate to raise stops the chain; later gates never run.
    """

    async def dependency(request: Request) -> None:
        for gate in gates:
            await gate.check(request)

    return dependency
