"""Token-based identity lookup.

API tokens are stored hashed in the token collection:
``{token_hash, user_id, email, revoked, createdAt}``.
"""

import logging
import secrets
from datetime import UTC, datetime
from hashlib import sha256

from fileanalyst.api.exceptions import UnauthorizedError
from fileanalyst.db.mongo import get_tokens_collection
from fileanalyst.models.user import UserIdentity

logger = logging.getLogger(__name__)


def hash_token(token: str) -> str:
    """Return the stored form of a token."""
    return sha256(token.encode("utf-8")).hexdigest()


def parse_bearer(authorization: str | None) -> str | None:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def get_current_user(token: str | None) -> UserIdentity | None:
    """Resolve a token to the user it was issued for.

    Returns:
        The user, or None for a missing, unknown, or revoked token.
    """
    if not token:
        return None

    tokens = await get_tokens_collection()
    doc = await tokens.find_one({"token_hash": hash_token(token)})
    if doc is None or doc.get("revoked", False):
        return None

    return UserIdentity(id=doc["user_id"], email=doc.get("email"))


async def require_user(authorization: str | None) -> UserIdentity:
    """Resolve the caller from an Authorization header or raise.

    Raises:
        UnauthorizedError: If no valid identity can be resolved.
    """
    token = parse_bearer(authorization)
    if token is None:
        raise UnauthorizedError("No authorization header")

    user = await get_current_user(token)
    if user is None:
        logger.warning("Rejected request with unknown or revoked token")
        raise UnauthorizedError()

    return user


async def issue_token(user_id: str, email: str | None = None) -> str:
    """Create a new API token for a user and return it in plain text.

    Only the hash is stored; the plain token cannot be recovered later.
    """
    token = secrets.token_urlsafe(32)
    tokens = await get_tokens_collection()
    await tokens.insert_one(
        {
            "token_hash": hash_token(token),
            "user_id": user_id,
            "email": email,
            "revoked": False,
            "createdAt": datetime.now(UTC),
        }
    )
    logger.info("Issued API token", extra={"user_id": user_id})
    return token


async def revoke_token(token: str) -> bool:
    """Mark a token as revoked.

    Returns:
        True if a token was revoked, False if it was unknown.
    """
    tokens = await get_tokens_collection()
    result = await tokens.update_one(
        {"token_hash": hash_token(token)},
        {"$set": {"revoked": True}},
    )
    return result.matched_count > 0
