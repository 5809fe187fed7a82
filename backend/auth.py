"""
Authentication for the Rituals API: API keys, app JWTs and Clerk JWTs.
Provides FastAPI dependencies for securing endpoints.

Supports two JWT types:
- App JWTs: HS256, signed with JWT_SECRET (iss: "rituals")
- Clerk JWTs: RS256, validated via JWKS when CLERK_DOMAIN is configured

The user id is always the token's `sub` claim.
"""
import logging
from typing import Optional

import jwt
from fastapi import Header, HTTPException

from backend.settings import get_settings

logger = logging.getLogger(__name__)

APP_JWT_ALGORITHM = "HS256"
APP_JWT_ISSUER = "rituals"

_jwks_clients: dict = {}


def get_jwks_client() -> Optional[jwt.PyJWKClient]:
    """Get or create the JWKS client for Clerk JWT validation."""
    domain = get_settings().clerk_domain
    if not domain:
        return None
    if domain not in _jwks_clients:
        _jwks_clients[domain] = jwt.PyJWKClient(f"https://{domain}/.well-known/jwks.json")
    return _jwks_clients[domain]


async def get_current_user(
    authorization: Optional[str] = Header(None),
    x_api_key: Optional[str] = Header(None, alias="X-API-Key"),
) -> str:
    """
    Authenticate via API key OR bearer JWT.
    Returns user_id string.

    Usage:
        @app.get("/protected")
        async def protected_route(user_id: str = Depends(get_current_user)):
            return {"user_id": user_id}
    """
    if x_api_key:
        return validate_api_key(x_api_key)

    if authorization:
        return validate_jwt(authorization)

    raise HTTPException(
        status_code=401,
        detail="Missing authentication. Provide Authorization header or X-API-Key.",
    )


def validate_api_key(api_key: str) -> str:
    """
    Validate API key and return user_id.

    API keys must name the user they act for: "sk_test_abc123:user_12345"
    authenticates as "user_12345".
    """
    valid_keys = get_settings().api_keys_list

    if not valid_keys:
        logger.warning("No API keys configured (API_KEYS env var empty)")
        raise HTTPException(status_code=401, detail="API key authentication not configured")

    key_part, _, user_id = api_key.partition(":")

    if key_part not in valid_keys:
        raise HTTPException(status_code=401, detail="Invalid API key")
    if not user_id:
        raise HTTPException(status_code=401, detail="API key must use the key:user_id format")

    return user_id


def validate_jwt(authorization: str) -> str:
    """Validate a bearer JWT and return user_id."""
    if not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Invalid authorization header format")

    token = authorization.split(" ", 1)[1]

    # Decode without verification first to pick the validation path
    try:
        unverified = jwt.decode(token, options={"verify_signature": False})
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=401, detail="Invalid token format")

    if unverified.get("iss") == APP_JWT_ISSUER:
        return validate_app_jwt(token)

    return validate_clerk_jwt(token)


def _user_id_from(payload: dict) -> str:
    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(status_code=401, detail="Token missing user ID")
    return user_id


def validate_app_jwt(token: str) -> str:
    """Validate an HS256 app JWT and return user_id."""
    try:
        payload = jwt.decode(
            token,
            get_settings().jwt_secret,
            algorithms=[APP_JWT_ALGORITHM],
            issuer=APP_JWT_ISSUER,
            options={"verify_aud": False},
        )
        user_id = _user_id_from(payload)
        logger.debug(f"App JWT validated for user: {user_id}")
        return user_id
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired")
    except jwt.InvalidTokenError as e:
        logger.warning(f"Invalid app JWT: {e}")
        raise HTTPException(status_code=401, detail="Invalid token")


def validate_clerk_jwt(token: str) -> str:
    """Validate Clerk JWT (RS256 via JWKS) and return user_id."""
    jwks_client = get_jwks_client()

    if not jwks_client:
        raise HTTPException(status_code=401, detail="Unsupported token issuer")

    try:
        signing_key = jwks_client.get_signing_key_from_jwt(token)
        payload = jwt.decode(
            token,
            signing_key.key,
            algorithms=["RS256"],
            options={"verify_aud": False},
        )
        return _user_id_from(payload)
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired")
    except jwt.PyJWKClientError as e:
        logger.error(f"JWKS lookup failed: {e}")
        raise HTTPException(status_code=401, detail="Invalid token")
    except jwt.InvalidTokenError as e:
        logger.warning(f"Invalid Clerk JWT: {e}")
        raise HTTPException(status_code=401, detail="Invalid token")


async def get_optional_user(
    authorization: Optional[str] = Header(None),
    x_api_key: Optional[str] = Header(None, alias="X-API-Key"),
) -> Optional[str]:
    """
    Returns user_id if authenticated, None otherwise.
    Use for endpoints that work differently when authenticated.
    """
    try:
        return await get_current_user(authorization, x_api_key)
    except HTTPException:
        return None
