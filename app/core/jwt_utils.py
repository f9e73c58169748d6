"""
JWT Token Utilities

This module handles JSON Web Token (JWT) creation and verification for wallet sessions.
After a wallet proves key possession through the challenge flow, this module creates a JWT
that the client sends on subsequent requests.

Flow:
1. Wallet signature verified -> create_access_token() generates JWT
2. Client calls a protected endpoint with the JWT in the Authorization header -> verify_token() validates it
3. Protected endpoints use get_current_session() from dependencies.py to read the claims

The JWT contains:
- sub: The authenticated wallet address (lower-case)
- isAdmin: Whether the address is in the admin allow-list
- iat: Issued at timestamp
- exp: Expiration timestamp (configurable via ACCESS_TOKEN_EXPIRE_SECONDS)

Tokens are stateless: there is no server-side revocation, a session ends when the token expires.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
from fastapi import HTTPException, status

from app.core.config import settings


if not settings.ENCODE_KEY:
    raise RuntimeError("ENCODE_KEY is not configured")


def create_access_token(
    wallet_address: str,
    is_admin: bool = False,
    extra_claims: Optional[Dict[str, Any]] = None,
    expires_in: Optional[int] = None,
) -> str:
    """
    Create a JWT access token for an authenticated wallet address.

    Args:
        wallet_address: The wallet address that was verified
        is_admin: Admin flag resolved from the allow-list
        extra_claims: Optional additional claims to include in the JWT payload
        expires_in: Lifetime in seconds, defaults to ACCESS_TOKEN_EXPIRE_SECONDS

    Returns:
        A JWT token string for the Authorization: Bearer <token> header

    Raises:
        ValueError: If wallet_address is empty
    """
    if not wallet_address:
        raise ValueError("wallet_address is required")

    lifetime = settings.ACCESS_TOKEN_EXPIRE_SECONDS if expires_in is None else expires_in
    now = datetime.now(timezone.utc)
    payload: Dict[str, Any] = {
        "sub": wallet_address.lower(),
        "isAdmin": bool(is_admin),
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(seconds=lifetime)).timestamp()),
    }
    if extra_claims:
        payload.update(extra_claims)

    return jwt.encode(payload, settings.ENCODE_KEY, algorithm=settings.ENCODE_ALGORITHM)


def verify_token(token: str) -> Dict[str, Any]:
    """
    Verify and decode a JWT token.

    Checks token signature, expiration, and required payload fields.

    Raises:
        HTTPException 401: If token is missing, expired, invalid, or missing the subject
    """
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing token")

    try:
        payload = jwt.decode(token, settings.ENCODE_KEY, algorithms=[settings.ENCODE_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token expired")
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

    if "sub" not in payload:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token payload")

    return payload
