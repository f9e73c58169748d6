from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from app.core.dependencies import get_current_user, get_registry
from app.core.errors import IdentityAlreadyExists, IdentityNotFound, MatriculaAlreadyInUse
from app.schemas.registry import IdentityCreate, IdentityResponse, IdentityUpdate
from app.services.registry_client import RegistryClient

router = APIRouter()
group_tags = ["identities"]


@router.get(
    "",
    tags=group_tags,
    response_model=List[IdentityResponse],
    status_code=status.HTTP_200_OK,
)
def list_identities(registry: RegistryClient = Depends(get_registry)) -> List[IdentityResponse]:
    """All identities in registration order."""
    return [IdentityResponse.from_record(r) for r in registry.read("getAllIdentities")]


@router.get(
    "/matricula/{matricula}",
    tags=group_tags,
    response_model=IdentityResponse,
)
def get_identity_by_matricula(matricula: str, registry: RegistryClient = Depends(get_registry)) -> IdentityResponse:
    record, exists = registry.read("getIdentityByMatricula", matricula)
    if not exists:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Identity not found")
    return IdentityResponse.from_record(record)


@router.get(
    "/{address}",
    tags=group_tags,
    response_model=IdentityResponse,
)
def get_identity(address: str, registry: RegistryClient = Depends(get_registry)) -> IdentityResponse:
    record, exists = registry.read("getIdentity", address)
    if not exists:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Identity not found")
    return IdentityResponse.from_record(record)


@router.post(
    "",
    tags=group_tags,
    response_model=IdentityResponse,
    status_code=status.HTTP_201_CREATED,
)
def register_identity(
    body: IdentityCreate,
    wallet_address: str = Depends(get_current_user),
    registry: RegistryClient = Depends(get_registry),
) -> IdentityResponse:
    """Register the identity of the authenticated wallet.

    - 409: the wallet already has an identity, or the matricula is taken
    """
    try:
        receipt = registry.write("registerIdentity", wallet_address, body.name, body.matricula, body.curso)
    except IdentityAlreadyExists:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Identity already exists for this wallet")
    except MatriculaAlreadyInUse:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Matricula already in use")
    return IdentityResponse.from_record(receipt.value)


@router.put(
    "/me",
    tags=group_tags,
    response_model=IdentityResponse,
)
def update_identity(
    body: IdentityUpdate,
    wallet_address: str = Depends(get_current_user),
    registry: RegistryClient = Depends(get_registry),
) -> IdentityResponse:
    """Update name and curso of the authenticated wallet's identity."""
    try:
        receipt = registry.write("updateIdentity", wallet_address, body.name, body.curso)
    except IdentityNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Identity not found")
    return IdentityResponse.from_record(receipt.value)
