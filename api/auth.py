"""
Caller identity for the FastAPI API.

Bearer tokens are issued elsewhere; this module only resolves a token from
the configured token table to the user id it belongs to.
"""

import structlog
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from api.config import config

logger = structlog.get_logger(__name__)

# Security scheme
security = HTTPBearer()


def mask_token(token: str) -> str:
    """Shorten a token for log output."""
    return token[:10] + "..."


async def get_current_user_id(credentials: HTTPAuthorizationCredentials = Depends(security)) -> str:
    """
    Resolve the acting user from the request's bearer token.

    Args:
        credentials: HTTP authorization credentials

    Returns:
        The user id the token belongs to

    Raises:
        HTTPException: If the token is unknown
    """
    token = credentials.credentials
    user_id = config.get_token_table().get(token)

    if not user_id:
        logger.warning("Invalid bearer token attempted", token=mask_token(token))
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return user_id
