"""Authentication-related Pydantic schemas."""

from pydantic import BaseModel

from adoption_api.db.enums import Role


class TokenPayload(BaseModel):
    """Decoded session token claims."""
    sub: str  # user_id
    role: str
    court: str | None = None
    org: str | None = None


class ActorContext(BaseModel):
    """
    Who is making the request.

    Produced by the session layer and consumed by every case operation.
    court_assignment scopes case officers; organisation_id is carried for
    agency and local authority staff.
    """
    user_id: str
    role: Role  # Validated enum
    court_assignment: str | None = None
    organisation_id: str | None = None
