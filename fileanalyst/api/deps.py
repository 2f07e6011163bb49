"""Shared FastAPI dependencies."""

from typing import Annotated

from fastapi import Depends, Header

from fileanalyst.models.user import UserIdentity
from fileanalyst.services import auth_service
from fileanalyst.services.storage_service import StorageService, storage_service


async def get_current_user(
    authorization: Annotated[str | None, Header()] = None,
) -> UserIdentity:
    """Resolve the caller or raise UnauthorizedError."""
    return await auth_service.require_user(authorization)


def get_storage() -> StorageService:
    """Storage collaborator used by the routes."""
    return storage_service


CurrentUser = Annotated[UserIdentity, Depends(get_current_user)]
Storage = Annotated[StorageService, Depends(get_storage)]
