from datetime import UTC, datetime, timedelta
from typing import List, Optional
from uuid import UUID

from jose import JWTError, jwt

from config import ApplicationConfig


def generate_jwt(user_id: UUID, tenant_id: str, roles: List[str], guard: str) -> str:
    """
    Generate tenant panel access token

    Args:
        user_id: Tenant user UUID
        tenant_id: Tenant the user belongs to
        roles: Role names held under the guard
        guard: Guard name ("tenant")

    Returns:
        JWT token string (HS256, JWT_EXPIRE_MINUTES expiry)
    """
    now = datetime.now(UTC)
    payload = {
        "user_id": str(user_id),
        "tenant_id": tenant_id,
        "roles": roles,
        "guard": guard,
        "exp": now + timedelta(minutes=ApplicationConfig.JWT_EXPIRE_MINUTES),
        "iat": now,
    }
    return jwt.encode(payload, ApplicationConfig.JWT_SECRET, algorithm="HS256")


def verify_jwt(token: str) -> Optional[dict]:
    """
    Verify and decode JWT token

    Args:
        token: JWT token string

    Returns:
        Decoded payload dict or None if invalid
    """
    try:
        payload = jwt.decode(token, ApplicationConfig.JWT_SECRET, algorithms=["HS256"])
        return payload
    except JWTError:
        return None
