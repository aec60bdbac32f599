"""Pydantic request/response schemas."""

from tuerauf.schemas.health import HealthResponse
from tuerauf.schemas.pins import ClearPinsRequest, ClearPinsResponse, PinListResponse
from tuerauf.schemas.users import (
    ActivationResponse,
    RegisterRequest,
    RegisterResponse,
    UserCountResponse,
    UserRead,
)

__all__ = [
    "ActivationResponse",
    "ClearPinsRequest",
    "ClearPinsResponse",
    "HealthResponse",
    "PinListResponse",
    "RegisterRequest",
    "RegisterResponse",
    "UserCountResponse",
    "UserRead",
]
