"""In-memory store of outstanding wallet challenges.

One challenge per lower-cased address. ``consume`` pops the entry under the
lock, so a challenge is handed out for verification at most once and a
concurrent ``issue`` for the same address invalidates the previous value.
Expired entries are dropped lazily when they are consumed.
"""

import time
from threading import Lock
from typing import Callable, Dict, Optional, Tuple

from app.core.config import settings
from app.core.errors import ChallengeExpired, ChallengeNotFound
from app.core.wallet_auth import generate_challenge

Clock = Callable[[], float]


class ChallengeStore:
    def __init__(
        self,
        ttl_seconds: Optional[int] = None,
        clock: Clock = time.time,
        challenge_factory: Callable[[], str] = generate_challenge,
    ):
        self.ttl_seconds = settings.NONCE_EXPIRY_SECONDS if ttl_seconds is None else ttl_seconds
        self._clock = clock
        self._challenge_factory = challenge_factory
        self._entries: Dict[str, Tuple[str, float]] = {}
        self._lock = Lock()

    @staticmethod
    def _key(address: str) -> str:
        return (address or "").strip().lower()

    def issue(self, address: str) -> str:
        """Create a challenge for *address*, replacing any outstanding one."""
        challenge = self._challenge_factory()
        expires_at = self._clock() + self.ttl_seconds
        with self._lock:
            self._entries[self._key(address)] = (challenge, expires_at)
        return challenge

    def consume(self, address: str) -> str:
        """Remove and return the challenge for *address*.

        Raises:
            ChallengeNotFound: no challenge outstanding for the address
            ChallengeExpired: the challenge outlived its ttl (it is removed as well)
        """
        with self._lock:
            entry = self._entries.pop(self._key(address), None)
        if entry is None:
            raise ChallengeNotFound("Challenge not found, request a new one")
        challenge, expires_at = entry
        if self._clock() > expires_at:
            raise ChallengeExpired("Challenge expired, request a new one")
        return challenge

    def purge_expired(self) -> int:
        """Drop every expired entry; returns how many were removed."""
        now = self._clock()
        with self._lock:
            expired = [k for k, (_, exp) in self._entries.items() if exp < now]
            for k in expired:
                self._entries.pop(k, None)
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, address: str) -> bool:
        with self._lock:
            return self._key(address) in self._entries
