"""Error kinds raised by the registry and the wallet authentication flow.

Each kind is its own class so callers can tell them apart; the HTTP layer
maps them to status codes and never folds them into a generic error.
"""


class InvalidAddress(ValueError):
    """Raised when a wallet address is not a 20-byte hex address."""


# registry state machine
class RegistryError(Exception):
    """Base class for invariant violations raised by the registry."""


class IdentityAlreadyExists(RegistryError):
    pass


class MatriculaAlreadyInUse(RegistryError):
    pass


class IdentityNotFound(RegistryError):
    pass


class UnknownRegistryCall(Exception):
    """Raised when a read/write names a call the registry does not expose."""


class RegistryUnavailable(Exception):
    """Raised when the ledger store cannot be reached."""


# authentication protocol
class AuthError(Exception):
    """Base class for challenge-response protocol violations."""


class InvalidAuthRequest(AuthError):
    """Missing address or signature."""


class ChallengeNotFound(AuthError):
    pass


class ChallengeExpired(AuthError):
    pass


class InvalidSignature(AuthError):
    """The signature could not be decoded or no signer could be recovered."""


class SignatureMismatch(AuthError):
    """The recovered signer is not the claimed address."""
