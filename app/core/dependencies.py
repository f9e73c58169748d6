"""
FastAPI Dependencies
This module provides the dependency functions injected into route handlers:
- get_registry / get_auth_service: the process-wide registry client and auth service
- get_current_session: claims of the JWT from the Authorization header
- get_current_user: the authenticated wallet address
- require_admin: rejects sessions whose address is not in the admin allow-list
Usage in endpoints:
    @router.post("/events")
    def create(wallet_address: str = Depends(get_current_user)):
        ...
Tests swap the singletons through app.dependency_overrides.
"""

from functools import lru_cache
from typing import Any, Dict, Optional

from fastapi import Depends, Header, HTTPException, status

from app.core.challenge_store import ChallengeStore
from app.core.config import settings
from app.core.jwt_utils import verify_token
from app.db.session import SessionLocal, engine
from app.services.auth_service import AuthService
from app.services.registry_client import RegistryClient
from app.services.registry_state import RegistryStateMachine, init_ledger


@lru_cache(maxsize=1)
def get_registry() -> RegistryClient:
    init_ledger(engine)
    return RegistryClient(RegistryStateMachine(SessionLocal))


@lru_cache(maxsize=1)
def get_auth_service() -> AuthService:
    return AuthService(ChallengeStore(), admin_addresses=settings.admin_addresses)


def _extract_token(authorization: Optional[str]) -> Dict[str, Any]:
    """
    Extract JWT token from Authorization header.
    Supports both "Bearer <token>" and plain token formats.
    Raises:
        HTTPException 401: If Authorization header is missing or invalid
    """
    if not authorization:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header missing",
        )

    authorization = authorization.strip()
    if authorization.lower().startswith("bearer "):
        token = authorization[7:].strip()
    else:
        token = authorization
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authorization header",
        )

    return verify_token(token)


def get_current_session(
    authorization: Optional[str] = Header(None, alias="Authorization"),
) -> Dict[str, Any]:
    return _extract_token(authorization)


def get_current_user(session: Dict[str, Any] = Depends(get_current_session)) -> str:
    """
    returning wallet address.
    """
    return session["sub"]


def require_admin(session: Dict[str, Any] = Depends(get_current_session)) -> str:
    if not session.get("isAdmin", False):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin privileges required",
        )
    return session["sub"]
