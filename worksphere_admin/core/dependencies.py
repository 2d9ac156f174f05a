from __future__ import annotations

import logging

from fastapi import Depends, Header, HTTPException, status

from worksphere_admin.core.auth import extract_roles_from_token, validate_token
from worksphere_admin.core.config import settings
from worksphere_admin.models.auth import UserInfo

logger = logging.getLogger(__name__)


async def get_current_user(authorization: str | None = Header(None)) -> UserInfo:
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = authorization.split(" ", 1)[1]

    try:
        payload = await validate_token(
            token,
            settings.AZURE_AD_TENANT_ID,
            settings.AZURE_AD_CLIENT_ID,
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.error("Token validation error: %s", e)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        ) from e

    return UserInfo(
        id=payload.get("oid"),
        name=payload.get("name"),
        email=payload.get("preferred_username"),
        roles=extract_roles_from_token(payload),
    )


def _ensure_any_role(user: UserInfo, roles: tuple[str, ...]) -> UserInfo:
    if not any(user.has_role(r) for r in roles):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Insufficient permissions. Required: {', '.join(roles)}",
        )
    return user


async def require_admin(user: UserInfo = Depends(get_current_user)) -> UserInfo:
    """Write access: the configured ``ADMIN_ROLE``, read when the request arrives."""
    return _ensure_any_role(user, (settings.ADMIN_ROLE,))
