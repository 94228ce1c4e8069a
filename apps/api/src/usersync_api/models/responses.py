"""Response models for the user sync API."""

from typing import ClassVar

from pydantic import BaseModel
from usersync.models.auth import AuthContext


class ErrorResponse(BaseModel):
    """Error body returned by every endpoint on failure."""

    error: str


class WebhookResponse(BaseModel):
    """Acknowledgement of a processed webhook."""

    success: bool = True


class ProtectedDataResponse(BaseModel):
    """Payload of the protected endpoint."""

    message: str
    user: AuthContext

    class Config:
        """Pydantic config."""

        json_schema_extra: ClassVar[dict] = {
            "example": {
                "message": "This is protected data",
                "user": {"userId": "user_2abc123", "sessionId": "sess_2abc123", "claims": {}},
            }
        }
