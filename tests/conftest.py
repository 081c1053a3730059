"""
Test configuration and fixtures.

Provides:
- File-backed SQLite database, tables created and dropped per test, so
  separate sessions and threads hit the real CAS and counter statements
- Actor contexts for every role
- Session token minting and HTTPX AsyncClient with cookie and CSRF header
"""
import os
import tempfile
from typing import AsyncGenerator, Callable, Generator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.orm import Session

_DB_DIR = tempfile.mkdtemp(prefix="adoption-api-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_DB_DIR, 'test.db')}"
os.environ["ENV"] = "test"

from adoption_api.core.deps import COOKIE_NAME, CSRF_HEADER, CSRF_HEADER_VALUE, get_db  # noqa: E402
from adoption_api.core.security import create_session_token  # noqa: E402
from adoption_api.db.base import Base  # noqa: E402
from adoption_api.db.enums import AdoptionType, AssignmentType, Role  # noqa: E402
from adoption_api.db.models import Case  # noqa: E402
from adoption_api.db.session import SessionLocal, engine  # noqa: E402
from adoption_api.main import app  # noqa: E402
from adoption_api.schemas.auth import ActorContext  # noqa: E402
from adoption_api.schemas.case import CaseCreate  # noqa: E402
from adoption_api.services import case_service  # noqa: E402

COURT = "Birmingham Family Court"
OTHER_COURT = "Leeds Family Court"


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture(autouse=True)
def _schema() -> Generator[None, None, None]:
    Base.metadata.create_all(engine)
    yield
    Base.metadata.drop_all(engine)


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Session on the test database. App code commits for real."""
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def session_factory() -> Callable[[], Session]:
    """New independent sessions, e.g. one per thread."""
    return SessionLocal


# =============================================================================
# Actor Fixtures
# =============================================================================

@pytest.fixture
def officer() -> ActorContext:
    return ActorContext(
        user_id="officer-1",
        role=Role.HMCTS_CASE_OFFICER,
        court_assignment=COURT,
        organisation_id="hmcts",
    )


@pytest.fixture
def other_officer() -> ActorContext:
    return ActorContext(
        user_id="officer-2",
        role=Role.HMCTS_CASE_OFFICER,
        court_assignment=OTHER_COURT,
        organisation_id="hmcts",
    )


@pytest.fixture
def judge() -> ActorContext:
    return ActorContext(user_id="judge-1", role=Role.JUDGE_LEGAL_ADVISER)


@pytest.fixture
def adopter() -> ActorContext:
    return ActorContext(user_id="adopter-1", role=Role.ADOPTER)


@pytest.fixture
def social_worker() -> ActorContext:
    return ActorContext(
        user_id="sw-1", role=Role.LA_SOCIAL_WORKER, organisation_id="birmingham-la"
    )


@pytest.fixture
def cafcass() -> ActorContext:
    return ActorContext(user_id="cafcass-1", role=Role.CAFCASS_OFFICER)


@pytest.fixture
def vaa_worker() -> ActorContext:
    return ActorContext(user_id="vaa-1", role=Role.VAA_WORKER, organisation_id="vaa")


# =============================================================================
# Case Fixtures
# =============================================================================

def make_case(
    db: Session,
    actor: ActorContext,
    court: str = COURT,
    case_type: AdoptionType = AdoptionType.AGENCY_ADOPTION,
) -> Case:
    result = case_service.create_case(
        db,
        CaseCreate(
            case_type=case_type.value,
            assigned_court=court,
            internal_notes="Placement history reviewed",
            staff_comments="Chase LA report",
            external_reference="LA-2026-0042",
        ),
        actor,
    )
    assert result.ok, result.message
    return result.value


@pytest.fixture
def new_case(db: Session) -> Callable[..., Case]:
    """Factory: new_case(actor, court=COURT, case_type=AGENCY_ADOPTION)."""
    def _new(actor: ActorContext, court: str = COURT, case_type: AdoptionType = AdoptionType.AGENCY_ADOPTION) -> Case:
        return make_case(db, actor, court, case_type)
    return _new


@pytest.fixture
def case(db: Session, officer: ActorContext) -> Case:
    """Case at COURT with judge-1 (JUDICIAL) and adopter-1 (APPLICANT) assigned."""
    created = make_case(db, officer)
    for user_id, assignment_type in (
        ("judge-1", AssignmentType.JUDICIAL),
        ("adopter-1", AssignmentType.APPLICANT),
    ):
        assert case_service.create_assignment(
            db, created.id, user_id, assignment_type, officer
        ).ok
    db.refresh(created)
    return created


# =============================================================================
# Client Fixtures
# =============================================================================

def token_for(actor: ActorContext) -> str:
    return create_session_token(
        user_id=actor.user_id,
        role=actor.role.value,
        court_assignment=actor.court_assignment,
        organisation_id=actor.organisation_id,
    )


@pytest.fixture(scope="function")
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Unauthenticated AsyncClient; each request gets its own session."""
    def override_get_db():
        session = SessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
def as_actor(client: AsyncClient) -> Callable[[ActorContext], AsyncClient]:
    """Switch the client to an actor's session cookie and add the CSRF header."""
    def _as(actor: ActorContext) -> AsyncClient:
        client.cookies.set(COOKIE_NAME, token_for(actor))
        client.headers[CSRF_HEADER] = CSRF_HEADER_VALUE
        return client
    return _as
