from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, status

import app.schemas.auth as schemas
from app.core.dependencies import get_auth_service, get_current_session
from app.core.errors import (
    ChallengeExpired,
    ChallengeNotFound,
    InvalidAuthRequest,
    InvalidSignature,
    SignatureMismatch,
)
from app.services.auth_service import AuthService

router = APIRouter()
group_tags = ["Auth"]


@router.post(
    "/nonce",
    tags=group_tags,
    response_model=schemas.NonceResponse,
    status_code=status.HTTP_200_OK,
)
def request_nonce(
    body: Optional[schemas.NonceRequest] = None, auth: AuthService = Depends(get_auth_service)
) -> schemas.NonceResponse:
    """Generate a single-use challenge for a wallet address.
    A new request replaces any challenge still outstanding for the address."""
    body = body or schemas.NonceRequest()
    try:
        nonce = auth.request_challenge(body.address or "")
    except InvalidAuthRequest as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return schemas.NonceResponse(nonce=nonce)


@router.post(
    "/verify",
    tags=group_tags,
    response_model=schemas.AuthResponse,
)
def verify_wallet(
    body: Optional[schemas.VerifyRequest] = None, auth: AuthService = Depends(get_auth_service)
) -> schemas.AuthResponse:
    """Verify the signed challenge and return a session token.

    - 400: missing fields, challenge not found, undecodable signature
    - 401: challenge expired, signature from another address
    """
    body = body or schemas.VerifyRequest()
    try:
        result = auth.verify(body.address or "", body.signature or "")
    except InvalidAuthRequest as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except ChallengeNotFound:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Nonce not found, request a new challenge")
    except ChallengeExpired:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Nonce expired, request a new challenge")
    except InvalidSignature:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid signature")
    except SignatureMismatch:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Signature does not match the given address"
        )

    return schemas.AuthResponse(token=result.token, address=result.address, is_admin=result.is_admin)


@router.get(
    "/me",
    tags=group_tags,
    response_model=schemas.SessionResponse,
)
def get_session(session: Dict[str, Any] = Depends(get_current_session)) -> schemas.SessionResponse:
    """Return the address and admin flag of the bearer token."""
    return schemas.SessionResponse(address=session["sub"], is_admin=session.get("isAdmin", False))
