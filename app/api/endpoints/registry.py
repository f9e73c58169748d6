from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.core.dependencies import get_registry, require_admin
from app.schemas.registry import ContractsResponse, HealthCheck, NotificationResponse
from app.services.deployments import load_deployments
from app.services.registry_client import RegistryClient

router = APIRouter()
group_tags = ["registry"]


@router.get(
    "/health",
    tags=group_tags,
    response_model=HealthCheck,
    status_code=status.HTTP_200_OK,
)
def get_health() -> HealthCheck:
    return HealthCheck(status="oke")


@router.get(
    "/api/contracts",
    tags=group_tags,
    response_model=ContractsResponse,
)
def get_contracts() -> ContractsResponse:
    """Addresses of the deployed registry contracts (503 until deployed)."""
    deployments = load_deployments()
    if deployments is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Contracts not deployed, run the deploy step first",
        )
    return ContractsResponse.from_record(deployments)


@router.get(
    "/api/notifications",
    tags=group_tags,
    response_model=List[NotificationResponse],
)
def list_notifications(
    since: int = Query(default=0, ge=0, description="Only notifications after this sequence number"),
    admin: str = Depends(require_admin),
    registry: RegistryClient = Depends(get_registry),
) -> List[NotificationResponse]:
    """Registry notifications in emission order, admin only."""
    return [NotificationResponse.from_record(n) for n in registry.read("getNotifications", since)]
