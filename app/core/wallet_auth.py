"""
Ethereum Wallet Authentication Utilities

This module handles the wallet-specific cryptographic operations for authentication.
Signatures follow EIP-191 (`personal_sign`), the scheme every injected wallet uses
for plain text messages.

Authentication Flow:
1. Backend generates a random challenge text -> generate_challenge()
2. Frontend signs the text with the wallet (personal_sign)
3. Frontend sends: address, signature
4. Backend recovers the signer -> recover_signer()
   - Hashes the text with the EIP-191 prefix
   - Recovers the secp256k1 public key from the signature
   - Returns the signer address

Address helpers normalize user input to the EIP-55 checksum form stored by the registry.
"""

import secrets

from eth_account import Account
from eth_account.messages import encode_defunct
from eth_utils import is_hex_address, to_checksum_address

from app.core.config import settings
from app.core.errors import InvalidAddress, InvalidSignature


NONCE_NUM_BYTES = 16  # 16 bytes = 32 hex characters
ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


def generate_nonce(num_bytes: int = NONCE_NUM_BYTES) -> str:
    """
    Generate a cryptographically secure random nonce.

    Args:
        num_bytes: Number of random bytes to generate (default: 16 = 32 hex chars)

    Returns:
        Hex-encoded random string (e.g., "a1b2c3d4...")
    """
    if num_bytes <= 0:
        num_bytes = NONCE_NUM_BYTES
    return secrets.token_hex(num_bytes)


def generate_challenge(prefix: str | None = None) -> str:
    """Build the human readable text the wallet is asked to sign."""
    if prefix is None:
        prefix = settings.NONCE_MESSAGE_PREFIX
    return f"{prefix}{generate_nonce()}"


def normalize_address(address: str) -> str:
    """Return the EIP-55 checksum form of *address*.

    Raises:
        InvalidAddress: If the value is not a 20-byte hex address
    """
    value = (address or "").strip()
    if not is_hex_address(value):
        raise InvalidAddress(f"Invalid wallet address: {address!r}")
    return to_checksum_address(value)


def recover_signer(message: str, signature: str) -> str:
    """
    Recover the address that signed *message* with EIP-191.

    Args:
        message: The exact challenge text that was issued
        signature: 65-byte signature, hex encoded (with or without 0x)

    Returns:
        Checksum address of the signer

    Raises:
        InvalidSignature: If the signature cannot be decoded or recovered
    """
    signature = (signature or "").strip()
    if not signature:
        raise InvalidSignature("Signature is empty")
    if not signature.startswith("0x"):
        signature = "0x" + signature
    try:
        return Account.recover_message(encode_defunct(text=message), signature=signature)
    except Exception as exc:
        raise InvalidSignature(f"Signature verification failed: {exc}") from exc
