"""Plan-based access control.

Callers authenticate with a bearer JWT whose ``plan`` claim names their
subscription tier. Routes declare the tier they need with
``Depends(require_plan("BASIC"))``; a ``PREMIUM`` plan satisfies every gate.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .config import Settings
from .dependencies import get_app_settings

logger = logging.getLogger(__name__)

PREMIUM_PLAN = "PREMIUM"

_bearer = HTTPBearer(auto_error=False)


def create_access_token(claims: Dict[str, Any], settings: Settings) -> str:
    """Sign a token carrying ``claims`` (used by tooling and tests)."""
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
    settings: Settings = Depends(get_app_settings),
) -> Dict[str, Any]:
    """Decode the bearer token into the caller's claims or fail with 401."""
    if credentials is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not authenticated")
    if not settings.jwt_secret:
        logger.error("JWT_SECRET is not set; rejecting bearer token")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication is not configured")
    try:
        return jwt.decode(
            credentials.credentials,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
        )
    except jwt.ExpiredSignatureError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token expired") from e
    except jwt.InvalidTokenError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token") from e


def require_plan(required_plan: str) -> Callable[..., Dict[str, Any]]:
    """Build a dependency that admits callers on ``required_plan`` or PREMIUM."""

    def _check(user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
        plan = user.get("plan")
        if plan != required_plan and plan != PREMIUM_PLAN:
            logger.info("Access denied: plan=%s required=%s", plan, required_plan)
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Access denied: insufficient plan",
            )
        return user

    return _check
