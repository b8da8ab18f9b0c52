"""Bearer token authentication for customer and admin endpoints.

Tokens are issued by the storefront's auth service; this service only
verifies them and extracts the caller's identity.
"""

from datetime import timedelta
from fastapi import HTTPException, Request, status
import jwt
import logging

from rxengine.config import settings
from rxengine.utils.timezone import utcnow

logger = logging.getLogger(__name__)


def create_access_token(user_id: str, email: str, role: str = "customer", expires_minutes: int = None) -> str:
    """Create a signed JWT for a user (used by tooling and tests)."""
    expires_minutes = expires_minutes or settings.ACCESS_TOKEN_EXPIRE_MINUTES
    payload = {
        "sub": user_id,
        "email": email,
        "role": role,
        "exp": utcnow() + timedelta(minutes=expires_minutes)
    }
    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def _token_from_request(request: Request):
    """Get token from Authorization header or access_token cookie."""
    auth_header = request.headers.get("Authorization")
    access_token_cookie = request.cookies.get("access_token")

    if auth_header and auth_header.startswith("Bearer "):
        return auth_header.replace("Bearer ", "")
    if access_token_cookie:
        return access_token_cookie
    return None


def _decode(token: str) -> dict:
    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM]
        )
    except jwt.ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired"
        )
    except jwt.InvalidTokenError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token"
        )


def get_current_user(request: Request) -> dict:
    """
    Dependency that requires an authenticated caller.

    Returns dict with user_id, user_email and role. Raises 401 otherwise.
    """
    token = _token_from_request(request)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required"
        )

    payload = _decode(token)
    if not payload.get("sub"):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token"
        )

    return {
        "user_id": str(payload["sub"]),
        "user_email": payload.get("email", "unknown@system"),
        "role": payload.get("role", "customer")
    }


def require_admin(request: Request) -> dict:
    """
    Dependency that requires the current user to have admin role.
    Raises 403 if not admin.
    """
    user = get_current_user(request)

    if user["role"] != "admin":
        logger.warning(f"Non-admin user {user['user_email']} attempted to access admin endpoint")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required"
        )

    return user
