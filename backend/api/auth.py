"""
Acting-user dependency.

Sign-in lives in front of this service; the gateway forwards the user's
display name and role on every request.
"""
from typing import Optional

from fastapi import Header, HTTPException, status

from backend.services.actors import Actor, Role
from backend.utils.logger import get_logger

logger = get_logger(__name__)


async def get_current_actor(
    x_user_name: Optional[str] = Header(None),
    x_user_role: Optional[str] = Header(None),
) -> Actor:
    """Build the Actor from the X-User-Name / X-User-Role headers"""
    name = (x_user_name or "").strip()
    if not name or not x_user_role:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    try:
        role = Role(x_user_role.strip().lower())
    except ValueError:
        logger.warning(f"Unknown role '{x_user_role}' supplied for user {name}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Unknown role '{x_user_role}'",
        )
    return Actor(name=name, role=role)
