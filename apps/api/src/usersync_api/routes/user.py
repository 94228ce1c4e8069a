"""User lookup routes."""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from usersync.models.user import User
from usersync.services import UserStore
from usersync_api.models.responses import ErrorResponse
from usersync_api.services import get_user_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/user", tags=["users"])


@router.get(
    "/{clerk_user_id}",
    response_model=User | None,
    responses={500: {"model": ErrorResponse}},
)
def get_user(clerk_user_id: str, store: UserStore = Depends(get_user_store)) -> User | None | JSONResponse:
    """Look up a user by Clerk user id.

    Returns the record, or ``null`` when there is none.
    """
    try:
        return store.get_user(clerk_user_id)
    except Exception as e:
        logger.error("Failed to look up user %s: %s", clerk_user_id, e, exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error!"},
        )
