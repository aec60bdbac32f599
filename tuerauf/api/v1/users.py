"""User endpoints: registration from the app, access check, bulk activation."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status

from tuerauf.api.v1.deps import get_registration_service, get_user_service
from tuerauf.schemas.users import (
    ActivationResponse,
    RegisterRequest,
    RegisterResponse,
    UserCountResponse,
    UserRead,
)
from tuerauf.services.errors import (
    CapacityExhaustedError,
    RegistrationConflictError,
    ValidationFailedError,
)
from tuerauf.services.registration import Rejected, RegistrationService
from tuerauf.services.users import UserService

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/register", response_model=RegisterResponse)
def register_user(
    body: RegisterRequest,
    response: Response,
    registration: Annotated[RegistrationService, Depends(get_registration_service)],
) -> RegisterResponse:
    """
    Register an app installation, or update the user it registered before.

    Returns 201 when a user was created and 200 when the installation's user was
    updated. A username owned by another installation is rejected with 409.
    """
    try:
        result = registration.register_or_update(body.username, body.pin, body.installation_id)
    except ValidationFailedError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=e.message) from e
    except CapacityExhaustedError as e:
        logger.error("Registration refused: %s", e.message)
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=e.message) from e
    except RegistrationConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message) from e

    if isinstance(result, Rejected):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=result.error.message)

    if result.status == "created":
        response.status_code = status.HTTP_201_CREATED
    return RegisterResponse(status=result.status, user=UserRead.model_validate(result.user))


@router.get("/active/{installation_id}", response_model=UserRead)
def get_active_user(
    installation_id: str,
    users: Annotated[UserService, Depends(get_user_service)],
) -> UserRead:
    """Return the installation's user if it is active (used before opening the door)."""
    user = users.get_active_user(installation_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No active user for this installation.")
    return UserRead.model_validate(user)


@router.post("/activate", response_model=ActivationResponse)
def activate_all_new(
    users: Annotated[UserService, Depends(get_user_service)],
) -> ActivationResponse:
    """Activate every new user that is not active yet."""
    activated = users.activate_all_pending_new()
    return ActivationResponse(activated=[UserRead.model_validate(u) for u in activated])


@router.get("/count", response_model=UserCountResponse)
def count_users(
    users: Annotated[UserService, Depends(get_user_service)],
) -> UserCountResponse:
    return UserCountResponse(count=users.count_users())
