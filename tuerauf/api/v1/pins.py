"""Pin table endpoints used by the door controller bridge."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from tuerauf.api.v1.deps import get_user_service
from tuerauf.schemas.pins import ClearPinsRequest, ClearPinsResponse, PinListResponse
from tuerauf.services.errors import RecordNotFoundError
from tuerauf.services.users import UserService

router = APIRouter()


@router.get("", response_model=PinListResponse)
def list_active_pins(
    users: Annotated[UserService, Depends(get_user_service)],
) -> PinListResponse:
    """Undelivered pins of active users, indexed by serial id."""
    return PinListResponse(pins=users.list_active_pins())


@router.post("/clear", response_model=ClearPinsResponse)
def clear_pins(
    body: ClearPinsRequest,
    users: Annotated[UserService, Depends(get_user_service)],
) -> ClearPinsResponse:
    """
    Delete pins that were delivered to the door controller.

    Fails with 422 and clears nothing if any serial id has no user: the local
    table and the controller's table disagree.
    """
    try:
        cleared = users.clear_pins(body.serial_ids)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=e.message) from e
    return ClearPinsResponse(cleared=cleared)
