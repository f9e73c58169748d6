from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.core.dependencies import get_current_user, get_registry
from app.schemas.registry import EventCreate, EventResponse
from app.services.registry_client import RegistryClient

router = APIRouter()
group_tags = ["events"]


@router.get(
    "",
    tags=group_tags,
    response_model=List[EventResponse],
    status_code=status.HTTP_200_OK,
)
def list_events(
    owner: Optional[str] = Query(default=None, description="Only events created by this wallet address"),
    registry: RegistryClient = Depends(get_registry),
) -> List[EventResponse]:
    """Events of one owner when `owner` is given, otherwise every event, in id order."""
    if owner:
        records = registry.read("getEventsByOwner", owner)
    else:
        records = registry.read("getAllEvents")
    return [EventResponse.from_record(r) for r in records]


@router.get(
    "/{event_id}",
    tags=group_tags,
    response_model=EventResponse,
)
def get_event(event_id: int, registry: RegistryClient = Depends(get_registry)) -> EventResponse:
    record, exists = registry.read("getEvent", event_id)
    if not exists:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Event not found")
    return EventResponse.from_record(record)


@router.post(
    "",
    tags=group_tags,
    response_model=EventResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_event(
    body: EventCreate,
    wallet_address: str = Depends(get_current_user),
    registry: RegistryClient = Depends(get_registry),
) -> EventResponse:
    """Create an event owned by the authenticated wallet.

    The registry itself accepts events from any address; this endpoint only
    accepts them from wallets with a registered identity (403 otherwise).
    """
    _, registered = registry.read("getIdentity", wallet_address)
    if not registered:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="Register an identity before creating events"
        )

    receipt = registry.write("createEvent", wallet_address, body.title, body.description, body.event_date)
    record, _ = registry.read("getEvent", receipt.value)
    return EventResponse.from_record(record)
