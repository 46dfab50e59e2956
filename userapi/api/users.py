# =============================================================================
# User API Routes
# =============================================================================
#
# Endpoints:
#   POST   /users           - Create user
#   GET    /users           - List users
#   GET    /users/{user_id} - Get user              (token)
#   PUT    /users/{user_id} - Update user           (user exists, then token)
#   DELETE /users/{user_id} - Delete user           (user exists, then token)
#
# =============================================================================

from __future__ import annotations

from typing import TypeVar

from fastapi import APIRouter, Depends, Request, Response
from pydantic import BaseModel, ValidationError

from userapi.auth.gates import USER_NOT_FOUND, AuthGate, ExistenceGate, gated
from userapi.auth.jwt import TokenCodec
from userapi.core.models import UserCreate, UserUpdate
from userapi.errors import ClientFormatError, UpstreamError
from userapi.services.users import UserService
from userapi.storage.base import UserStoreError

M = TypeVar("M", bound=BaseModel)


async def _parse_body(request: Request, model: type[M]) -> M:
    """Parse the JSON body into `model`, reporting failures as 400."""
    try:
        return model.model_validate_json(await request.body())
    except ValidationError as e:
        raise ClientFormatError(str(e)) from e


def create_user_router(service: UserService, codec: TokenCodec) -> APIRouter:
    """Wire the user routes with their gate chains."""
    router = APIRouter(prefix="/users", tags=["users"])

    auth = AuthGate(codec)
    exists = ExistenceGate(service)

    @router.post("", status_code=201)
    async def create_user(request: Request):
        data = await _parse_body(request, UserCreate)
        try:
            user = await service.create_user(data)
        except UserStoreError as e:
            raise UpstreamError(str(e)) from e

        return {
            "status": "success",
            "message": "User has been created successfully!",
            "data": user,
        }

    @router.get("")
    async def get_users():
        try:
            users = await service.get_users()
        except UserStoreError as e:
            raise UpstreamError(str(e)) from e

        return {"status": "success", "data": users}

    @router.get("/{user_id}", dependencies=[Depends(gated(auth))])
    async def get_user(user_id: str):
        try:
            user = await service.get_user(user_id)
        except UserStoreError as e:
            raise UpstreamError(str(e)) from e

        return {"status": "success", "data": user}

    @router.put("/{user_id}", dependencies=[Depends(gated(exists, auth))])
    async def update_user(user_id: str, request: Request):
        data = await _parse_body(request, UserUpdate)
        try:
            user = await service.update_user(user_id, data)
        except UserStoreError as e:
            raise UpstreamError(str(e)) from e

        # Deleted between the existence check and the update.
        if user is None:
            raise ClientFormatError(USER_NOT_FOUND)

        return {
            "status": "success",
            "message": "User has been updated successfully!",
            "data": user,
        }

    @router.delete("/{user_id}", status_code=204, dependencies=[Depends(gated(exists, auth))])
    async def delete_user(user_id: str):
        try:
            deleted = await service.delete_user(user_id)
        except UserStoreError as e:
            raise UpstreamError(str(e)) from e

        if not deleted:
            raise ClientFormatError(USER_NOT_FOUND)

        return Response(status_code=204)

    return router
