"""Schemas for the pin hand-off to the door controller."""

from pydantic import BaseModel, Field


class PinListResponse(BaseModel):
    """Undelivered pins of active users; index = serial id, null = nothing to send."""

    pins: list[str | None]


class ClearPinsRequest(BaseModel):
    """Serial ids whose pins were delivered and can be deleted locally."""

    serial_ids: list[int] = Field(..., description="Serial ids of delivered pins")


class ClearPinsResponse(BaseModel):
    cleared: int = Field(..., ge=0, description="Number of users whose pin was cleared")
