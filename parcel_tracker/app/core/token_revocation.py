"""
Token Revocation System using Redis.

Logout revokes a single token; deactivating a customer revokes every token
issued to that customer before the deactivation. Redis outages fail open:
the request is allowed and the error is logged.
"""

import logging
from datetime import datetime, timezone
from typing import Optional
from parcel_tracker.app.core import redis_client as redis_module
from parcel_tracker.app.core.config import settings

logger = logging.getLogger("parcel_tracker.auth")

# Redis key prefixes
TOKEN_BLACKLIST_PREFIX = "blacklist:token:"
USER_TOKENS_PREFIX = "user:tokens:"


def _ttl_seconds() -> int:
    # Tokens expire on their own after this long
    return settings.access_token_expire_minutes * 60


async def revoke_token(token: str, user_id: str) -> bool:
    """
    Revoke a specific JWT token by adding it to the blacklist.

    Args:
        token: The JWT token string to revoke
        user_id: User ID who owns the token

    Returns:
        True if successfully revoked, False otherwise
    """
    try:
        await redis_module.redis_client.setex(
            f"{TOKEN_BLACKLIST_PREFIX}{token}", _ttl_seconds(), str(user_id)
        )
        return True
    except Exception:
        logger.exception("Error revoking token for user %s", user_id)
        return False


async def is_token_revoked(token: str) -> bool:
    """Check if a token has been revoked."""
    try:
        exists = await redis_module.redis_client.exists(f"{TOKEN_BLACKLIST_PREFIX}{token}")
        return exists > 0
    except Exception:
        logger.exception("Error checking token revocation")
        return False


async def revoke_all_user_tokens(user_id: str) -> bool:
    """
    Revoke every token issued to a user up to now.

    Called when a customer is deactivated so every session ends immediately.
    The revocation time is stored, so tokens issued by a later login stay
    valid while the older ones remain rejected after reactivation.
    """
    revoked_at = datetime.now(timezone.utc).timestamp()
    try:
        await redis_module.redis_client.setex(
            f"{USER_TOKENS_PREFIX}{user_id}:revoked_at", _ttl_seconds(), str(revoked_at)
        )
        return True
    except Exception:
        logger.exception("Error revoking all tokens for user %s", user_id)
        return False


async def are_user_tokens_revoked(user_id: str, issued_at: Optional[float]) -> bool:
    """Check if a token issued at ``issued_at`` predates the user's last revocation."""
    try:
        revoked_at = await redis_module.redis_client.get(f"{USER_TOKENS_PREFIX}{user_id}:revoked_at")
    except Exception:
        logger.exception("Error checking user token revocation for %s", user_id)
        return False

    if revoked_at is None:
        return False
    if issued_at is None:
        return True
    return float(issued_at) <= float(revoked_at)
