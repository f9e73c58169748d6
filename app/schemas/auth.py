from typing import Optional

from pydantic import BaseModel, Field

from app.schemas.my_base_model import CustomBaseModel


class NonceRequest(BaseModel):
    """Request model for nonce generation - input validation

    address is optional at the model level so a missing value is reported
    as a 400 by the endpoint instead of a 422.
    """

    address: Optional[str] = Field(None, description="Wallet address")


class NonceResponse(CustomBaseModel):
    """Response model for nonce generation - output"""

    nonce: str = ""


class VerifyRequest(BaseModel):
    """Request model for wallet verification - input validation"""

    address: Optional[str] = Field(None, description="Wallet address")
    signature: Optional[str] = Field(None, description="personal_sign signature of the nonce")


class AuthResponse(CustomBaseModel):
    """Response model for authentication - output"""

    token: str = ""
    address: str = ""
    is_admin: bool = Field(False, alias="isAdmin")


class SessionResponse(CustomBaseModel):
    """Claims of the current session"""

    address: str = ""
    is_admin: bool = Field(False, alias="isAdmin")
