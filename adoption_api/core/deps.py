"""FastAPI dependencies for authentication and database access."""

from typing import Generator

import jwt
from fastapi import HTTPException, Request
from pydantic import ValidationError
from sqlalchemy.orm import Session

from adoption_api.core.security import decode_session_token
from adoption_api.db.enums import Role
from adoption_api.db.session import SessionLocal
from adoption_api.schemas.auth import ActorContext, TokenPayload


# Cookie and header names
COOKIE_NAME = "adoption_session"
CSRF_HEADER = "X-Requested-With"
CSRF_HEADER_VALUE = "XMLHttpRequest"


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency.

    Yields a database session and ensures it's closed after the request.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_actor(request: Request) -> ActorContext:
    """
    Build the actor context from the session cookie.

    Validates:
    - Session cookie exists
    - JWT is valid and not expired
    - Role is one of the known roles

    Raises:
        HTTPException 401: Authentication failed
    """
    token = request.cookies.get(COOKIE_NAME)
    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated")

    try:
        payload = TokenPayload.model_validate(decode_session_token(token))
    except (jwt.InvalidTokenError, ValidationError):
        raise HTTPException(status_code=401, detail="Invalid session")

    if not Role.has_value(payload.role):
        raise HTTPException(status_code=401, detail="Invalid session")

    return ActorContext(
        user_id=payload.sub,
        role=Role(payload.role),
        court_assignment=payload.court,
        organisation_id=payload.org,
    )


def require_csrf_header(request: Request) -> None:
    """
    Verify CSRF header on mutations.

    Apply to state-changing endpoints (POST, PATCH, DELETE).

    Raises:
        HTTPException 403: Missing or invalid CSRF header
    """
    if request.headers.get(CSRF_HEADER) != CSRF_HEADER_VALUE:
        raise HTTPException(
            status_code=403,
            detail=f"Missing CSRF header. Include '{CSRF_HEADER}: {CSRF_HEADER_VALUE}'"
        )
