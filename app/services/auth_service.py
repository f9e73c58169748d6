"""
Wallet challenge-response authentication.

Per attempt:
1. request_challenge(A) -> the store issues a fresh challenge text for A
2. verify(A, signature) -> the store hands the challenge back exactly once
   (ChallengeNotFound / ChallengeExpired otherwise)
3. the signer is recovered from the challenge text and the signature
   (InvalidSignature if it cannot be, SignatureMismatch if it is not A)
4. A is authenticated: is_admin comes from the static allow-list and a
   session token carrying {sub: A, isAdmin} is issued

The private key never reaches the server and no ledger call is made, so a
login costs one signature recovery plus one dict operation.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Iterable

from app.core.challenge_store import ChallengeStore
from app.core.errors import InvalidAuthRequest, SignatureMismatch
from app.core.jwt_utils import create_access_token
from app.core.wallet_auth import recover_signer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthResult:
    token: str
    address: str
    is_admin: bool


class AuthService:
    def __init__(
        self,
        store: ChallengeStore,
        admin_addresses: Iterable[str] = (),
        token_factory: Callable[..., str] = create_access_token,
    ):
        self.store = store
        self.admin_addresses = frozenset(addr.strip().lower() for addr in admin_addresses if addr.strip())
        self._token_factory = token_factory

    def is_admin(self, address: str) -> bool:
        return address.strip().lower() in self.admin_addresses

    def request_challenge(self, address: str) -> str:
        """Issue a challenge for *address*; any earlier one stops being valid."""
        address = (address or "").strip()
        if not address:
            raise InvalidAuthRequest('Field "address" is required')
        return self.store.issue(address)

    def verify(self, address: str, signature: str) -> AuthResult:
        address = (address or "").strip()
        signature = (signature or "").strip()
        if not address or not signature:
            raise InvalidAuthRequest('Fields "address" and "signature" are required')

        normalized = address.lower()
        # consumed before recovery: a challenge never survives a verification attempt
        challenge = self.store.consume(normalized)
        recovered = recover_signer(challenge, signature).lower()
        if recovered != normalized:
            logger.warning("signature mismatch for %s", normalized)
            raise SignatureMismatch("Signature does not match the given address")

        is_admin = self.is_admin(normalized)
        token = self._token_factory(normalized, is_admin=is_admin)
        logger.info("session issued for %s (admin=%s)", normalized, is_admin)
        return AuthResult(token=token, address=normalized, is_admin=is_admin)
