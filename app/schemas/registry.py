from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field

from app.models.event import MAX_LEDGER_INT
from app.schemas.my_base_model import CustomBaseModel


class IdentityResponse(CustomBaseModel):
    """Identity record
    Example:
    {
        "account": "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266",
        "name": "Alice",
        "matricula": "2023001",
        "curso": "Redes",
        "createdAt": 1700000000
    }
    """

    account: str = ""
    name: str = ""
    matricula: str = ""
    curso: str = ""
    created_at: int = Field(0, alias="createdAt")


class IdentityCreate(BaseModel):
    """Request model for identity registration"""

    name: str = Field(..., min_length=1, description="Display name")
    matricula: str = Field(..., min_length=1, description="Registration number, unique")
    curso: str = Field("", description="Program of study")


class IdentityUpdate(BaseModel):
    """Request model for identity update, matricula cannot change"""

    name: str = Field(..., min_length=1, description="Display name")
    curso: str = Field("", description="Program of study")


class EventResponse(CustomBaseModel):
    """Event record
    Example:
    {
        "id": 1,
        "owner": "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266",
        "title": "Aula 1",
        "description": "Intro",
        "eventDate": 1700000000,
        "createdAt": 1700000100
    }
    """

    id: int = 0
    owner: str = ""
    title: str = ""
    description: str = ""
    event_date: int = Field(0, alias="eventDate")
    created_at: int = Field(0, alias="createdAt")


class EventCreate(BaseModel):
    """Request model for event creation"""

    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., min_length=1, description="Event title")
    description: str = Field("", description="Event description")
    event_date: int = Field(0, ge=0, le=MAX_LEDGER_INT, alias="eventDate", description="Unix seconds, 0 when unset")


class NotificationResponse(CustomBaseModel):
    """Notification emitted by a registry write"""

    seq: int = 0
    command_seq: int = Field(0, alias="commandSeq")
    name: str = ""
    payload: Dict[str, Any] = Field(default_factory=dict)


class ContractsResponse(CustomBaseModel):
    """Deployment descriptor of the registry contracts"""

    network: str = ""
    chain_id: int = Field(0, alias="chainId")
    deployed_at: str = Field("", alias="deployedAt")
    identity_registry: str = Field("", alias="identityRegistry")
    event_storage: str = Field("", alias="eventStorage")


class HealthCheck(CustomBaseModel):
    status: str = "oke"
