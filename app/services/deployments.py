"""Registry deployment descriptors.

``deploy_registry`` prepares the ledger tables and writes the descriptor file
read by ``/api/contracts``:

{
    "network": "localhost",
    "chainId": 31337,
    "deployedAt": "2024-01-01T12:00:00+00:00",
    "IdentityRegistry": {"address": "0x5FbD...", "abi": ["registerIdentity", ...]},
    "EventStorage": {"address": "0xe7f1...", "abi": ["createEvent", ...]}
}

Contract addresses follow the CREATE rule: keccak(rlp([deployer, nonce]))[12:].
"""

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

import rlp
from eth_utils import keccak, to_canonical_address, to_checksum_address
from sqlalchemy.engine import Engine

from app.core.config import settings
from app.core.wallet_auth import normalize_address
from app.services.registry_client import EVENT_STORAGE_ABI, IDENTITY_REGISTRY_ABI
from app.services.registry_state import init_ledger

logger = logging.getLogger(__name__)


class DeploymentError(Exception):
    """Raised when a descriptor cannot be written."""


@dataclass(frozen=True)
class Deployments:
    network: str
    chain_id: int
    deployed_at: str
    identity_registry: str
    event_storage: str


_cached: Dict[Path, Deployments] = {}


def contract_address(deployer: str, nonce: int) -> str:
    """Address of the contract created by *deployer* at account *nonce*."""
    sender = to_canonical_address(normalize_address(deployer))
    return to_checksum_address(keccak(rlp.encode([sender, nonce]))[12:])


def _parse(raw: Dict[str, Any]) -> Deployments:
    return Deployments(
        network=str(raw["network"]),
        chain_id=int(raw["chainId"]),
        deployed_at=str(raw["deployedAt"]),
        identity_registry=raw["IdentityRegistry"]["address"],
        event_storage=raw["EventStorage"]["address"],
    )


def load_deployments(path: Optional[str] = None) -> Optional[Deployments]:
    """Read the descriptor file once; None while the registry is not deployed."""
    target = Path(path or settings.DEPLOYMENTS_PATH)
    if target in _cached:
        return _cached[target]
    if not target.exists():
        return None
    try:
        with open(target, "r") as file:
            deployments = _parse(json.load(file))
    except (OSError, ValueError, KeyError, TypeError):
        logger.error("failed to load deployment descriptor %s", target, exc_info=True)
        return None
    _cached[target] = deployments
    return deployments


def clear_deployments_cache() -> None:
    _cached.clear()


def deploy_registry(
    engine: Engine,
    path: Optional[str] = None,
    network: Optional[str] = None,
    chain_id: Optional[int] = None,
    deployer: Optional[str] = None,
    nonce: int = 0,
) -> Deployments:
    """Create the ledger tables and write the descriptor file."""
    target = Path(path or settings.DEPLOYMENTS_PATH)
    deployer = deployer or settings.DEPLOYER_ADDRESS
    init_ledger(engine)

    descriptor = {
        "network": network or settings.NETWORK_NAME,
        "chainId": settings.CHAIN_ID if chain_id is None else chain_id,
        "deployedAt": datetime.now(timezone.utc).isoformat(),
        "IdentityRegistry": {
            "address": contract_address(deployer, nonce),
            "abi": IDENTITY_REGISTRY_ABI,
        },
        "EventStorage": {
            "address": contract_address(deployer, nonce + 1),
            "abi": EVENT_STORAGE_ABI,
        },
    }
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, "w") as file:
            json.dump(descriptor, file, indent=2)
    except OSError as exc:
        raise DeploymentError(f"failed to write deployment descriptor {target}: {exc}") from exc

    deployments = _parse(descriptor)
    _cached[target] = deployments
    logger.info(
        "registry deployed on %s: IdentityRegistry=%s EventStorage=%s",
        deployments.network, deployments.identity_registry, deployments.event_storage,
    )
    return deployments


if __name__ == "__main__":
    from app.db.session import engine

    logging.basicConfig(level=logging.INFO)
    deploy_registry(engine)
