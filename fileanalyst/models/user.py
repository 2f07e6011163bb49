"""Authenticated user identity."""

from pydantic import BaseModel


class UserIdentity(BaseModel):
    """The caller resolved from an API token."""

    id: str
    email: str | None = None
