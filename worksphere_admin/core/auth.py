"""Azure AD bearer-token validation for panel operators."""

from __future__ import annotations

import logging
import time
from typing import Any

import aiohttp
from fastapi import HTTPException, status
from jose import jwk, jwt
from jose.constants import Algorithms
from jose.exceptions import ExpiredSignatureError, JWSSignatureError, JWTClaimsError, JWTError

logger = logging.getLogger(__name__)

JWKS_TTL_SECONDS = 24 * 60 * 60
JWKS_URI_TEMPLATE = "https://login.microsoftonline.com/{tenant_id}/discovery/v2.0/keys"


class JWKSCache:
    """Signing keys per tenant, refreshed after the TTL or when a ``kid`` is unknown.

    A failed refresh falls back to the stale key set when one exists.
    """

    def __init__(self, ttl_seconds: int = JWKS_TTL_SECONDS) -> None:
        self.ttl_seconds = ttl_seconds
        self._keys: dict[str, dict[str, Any]] = {}
        self._fetched_at: dict[str, float] = {}

    def clear(self) -> None:
        self._keys.clear()
        self._fetched_at.clear()

    async def _fetch(self, tenant_id: str) -> dict[str, Any]:
        uri = JWKS_URI_TEMPLATE.format(tenant_id=tenant_id)
        logger.info("Fetching JWKS from %s", uri)
        timeout = aiohttp.ClientTimeout(total=15)
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.get(uri) as response:
                response.raise_for_status()
                return await response.json()

    async def _refresh(self, tenant_id: str) -> dict[str, Any]:
        try:
            jwks = await self._fetch(tenant_id)
        except (aiohttp.ClientError, TimeoutError) as e:
            logger.error("Failed to fetch JWKS: %s", e)
            if tenant_id in self._keys:
                logger.warning("Using stale JWKS from cache for tenant %s", tenant_id)
                return self._keys[tenant_id]
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail=f"Could not fetch JWKS: {e}",
            ) from e

        self._keys[tenant_id] = jwks
        self._fetched_at[tenant_id] = time.monotonic()
        return jwks

    async def get_jwks(self, tenant_id: str) -> dict[str, Any]:
        fetched_at = self._fetched_at.get(tenant_id)
        if fetched_at is not None and time.monotonic() - fetched_at < self.ttl_seconds:
            return self._keys[tenant_id]
        return await self._refresh(tenant_id)

    async def get_signing_key(self, kid: str, tenant_id: str) -> dict[str, Any] | None:
        key = _find_key(await self.get_jwks(tenant_id), kid)
        if key is not None:
            return key

        logger.info("kid %s not in cached JWKS; refreshing for key rotation", kid)
        return _find_key(await self._refresh(tenant_id), kid)


def _find_key(jwks: dict[str, Any], kid: str) -> dict[str, Any] | None:
    for key in jwks.get("keys", []):
        if key.get("kid") == kid:
            return key
    return None


jwks_cache = JWKSCache()


async def get_signing_key(token: str, tenant_id: str) -> dict[str, Any]:
    try:
        header = jwt.get_unverified_header(token)
    except JWTError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid token header: {e}",
        ) from e

    kid = header.get("kid")
    if not kid:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has no 'kid' in header",
        )

    key = await jwks_cache.get_signing_key(kid, tenant_id)
    if key is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"No matching signing key for kid: {kid}",
        )
    return key


async def validate_token(token: str, tenant_id: str, client_id: str) -> dict[str, Any]:
    if not tenant_id or not client_id:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Missing Azure AD configuration",
        )

    signing_key = await get_signing_key(token, tenant_id)
    algorithm = signing_key.get("alg", Algorithms.RS256)
    public_key = jwk.construct(signing_key, algorithm=algorithm)

    expected_issuers = [
        f"https://login.microsoftonline.com/{tenant_id}/v2.0",
        f"https://sts.windows.net/{tenant_id}/",
    ]
    expected_audiences = [client_id, f"api://{client_id}"]

    options = {
        "verify_signature": True,
        "verify_aud": True,
        "verify_iss": True,
        "verify_exp": True,
        "require": ["exp", "iss", "aud"],
    }

    last_error: Exception | None = None

    for issuer in expected_issuers:
        for audience in expected_audiences:
            try:
                return jwt.decode(
                    token,
                    public_key,
                    algorithms=[algorithm],
                    audience=audience,
                    issuer=issuer,
                    options=options,
                )
            except ExpiredSignatureError as e:
                raise HTTPException(
                    status_code=status.HTTP_401_UNAUTHORIZED,
                    detail="Token is expired",
                ) from e
            except JWSSignatureError as e:
                raise HTTPException(
                    status_code=status.HTTP_401_UNAUTHORIZED,
                    detail="Invalid token signature",
                ) from e
            except (JWTClaimsError, JWTError) as e:
                last_error = e
                continue

    detail = "Invalid authentication credentials"
    if isinstance(last_error, JWTClaimsError) and "audience" in str(last_error).lower():
        detail = f"Invalid token audience. Expected one of: {expected_audiences}"
    elif isinstance(last_error, JWTClaimsError) and "issuer" in str(last_error).lower():
        detail = f"Invalid token issuer. Expected one of: {expected_issuers}"

    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
    )


def extract_roles_from_token(payload: dict[str, Any]) -> list[str]:
    roles = payload.get("roles", [])
    if not isinstance(roles, list):
        return []
    return [str(r) for r in roles if isinstance(r, str | int)]
