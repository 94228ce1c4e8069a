"""Verified caller context produced by session verification."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class AuthContext(BaseModel):
    """Identity of a caller whose Clerk session token has been verified."""

    user_id: str = Field(..., alias="userId", description="Clerk user id (the ``sub`` claim)")
    session_id: str | None = Field(None, alias="sessionId", description="Clerk session id (the ``sid`` claim)")
    org_id: str | None = Field(None, alias="orgId", description="Active organization id, if any")
    org_role: str | None = Field(None, alias="orgRole", description="Role in the active organization, if any")
    claims: dict[str, Any] = Field(default_factory=dict, description="All verified token claims")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_claims(cls, claims: dict[str, Any]) -> "AuthContext":
        """Build a context from verified JWT claims.

        Handles both the v1 (``org_id``/``org_role``) and v2 (``o.id``/``o.rol``)
        session token layouts.
        """
        org = claims.get("o") or {}
        return cls(
            user_id=claims["sub"],
            session_id=claims.get("sid"),
            org_id=claims.get("org_id") or org.get("id"),
            org_role=claims.get("org_role") or org.get("rol"),
            claims=claims,
        )
