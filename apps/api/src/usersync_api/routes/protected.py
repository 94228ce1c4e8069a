"""Routes that require a verified Clerk session."""

from fastapi import APIRouter, Depends
from usersync.models.auth import AuthContext
from usersync_api.auth import require_auth
from usersync_api.models.responses import ErrorResponse, ProtectedDataResponse

router = APIRouter(tags=["protected"])


@router.get(
    "/protected",
    response_model=ProtectedDataResponse,
    responses={401: {"model": ErrorResponse}},
)
async def protected_data(auth: AuthContext = Depends(require_auth)) -> ProtectedDataResponse:
    return ProtectedDataResponse(message="This is protected data", user=auth)
