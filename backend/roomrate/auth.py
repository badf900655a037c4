"""JWT verification for FastAPI."""
import logging
from dataclasses import dataclass

import jwt
from fastapi import Depends, Header, HTTPException

from roomrate.config import get_settings

logger = logging.getLogger(__name__)


@dataclass
class UserContext:
    """Authenticated user context extracted from an access token."""
    user_id: str
    email: str | None = None
    role: str = "guest"

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def _decode_jwt(token: str) -> dict:
    """Decode and verify an HS256 access token signed with JWT_SECRET."""
    secret = get_settings().jwt_secret
    if not secret:
        raise jwt.InvalidTokenError("JWT_SECRET not configured")
    return jwt.decode(token, secret, algorithms=["HS256"])


def _user_from_payload(payload: dict) -> UserContext:
    user_id = payload.get("sub") or payload["id"]
    return UserContext(
        user_id=str(user_id),
        email=payload.get("email"),
        role=payload.get("role", "guest"),
    )


async def get_current_user(
    authorization: str | None = Header(None),
) -> UserContext:
    """FastAPI dependency: requires a valid token. Returns UserContext.

    Raises HTTP 401 if the token is missing, invalid, or expired.
    """
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Missing authorization token")
    token = authorization.removeprefix("Bearer ")
    try:
        return _user_from_payload(_decode_jwt(token))
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired. Please sign in again.")
    except (jwt.InvalidTokenError, KeyError) as e:
        logger.warning(f"JWT verification failed: {type(e).__name__}: {e}")
        raise HTTPException(status_code=401, detail="Invalid or expired token")


async def require_admin(
    user: UserContext = Depends(get_current_user),
) -> UserContext:
    """FastAPI dependency: authenticated user with the admin role, else 403."""
    if not user.is_admin:
        raise HTTPException(status_code=403, detail="Admin access required")
    return user
