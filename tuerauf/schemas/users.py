"""Request/response schemas for user registration and administration endpoints."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class RegisterRequest(BaseModel):
    """Registration sent by the app installation. Lengths are checked by the service."""

    username: str = Field(..., max_length=255, description="Chosen username (at least 2 characters)")
    pin: str = Field(..., max_length=255, description="4-character PIN")
    installation_id: str = Field(
        ...,
        max_length=255,
        description="Stable identifier of the app installation (at least 10 characters)",
    )


class UserRead(BaseModel):
    """User as returned by the API (pin is never included)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    serial_id: int
    active: bool
    new_user: bool


class RegisterResponse(BaseModel):
    """Outcome of a successful registration."""

    status: Literal["created", "updated"] = Field(..., description="Whether the user was created or updated")
    user: UserRead


class ActivationResponse(BaseModel):
    """Users activated by a bulk activation run."""

    activated: list[UserRead] = Field(default_factory=list)


class UserCountResponse(BaseModel):
    count: int = Field(..., ge=0, description="Number of registered users")
