"""Case number generation: {court_code}/{year}/{sequence}.

The sequence comes from a per-(court_code, year) counter row incremented with
a single INSERT ... ON CONFLICT DO UPDATE ... RETURNING statement. The row
lock taken by that statement is the only serialization point, so concurrent
creations for the same court and year each get a distinct value. A creation
that rolls back after drawing a value leaves a gap; values are never reused.
"""

from datetime import datetime

from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session

from adoption_api.core.config import settings
from adoption_api.db.models import CourtSequenceCounter, utc_now

# Width of court_sequence_counters.court_code
MAX_COURT_CODE_LENGTH = 20

_UPSERT_BY_DIALECT = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


def derive_court_code(court_name: str) -> str:
    """Initials of each word, upper-cased ("Birmingham Family Court" -> "BFC")."""
    return "".join(word[0] for word in court_name.split()).upper()


def next_sequence(db: Session, court_code: str, year: int) -> int:
    """
    Atomically increment and return the counter for (court_code, year).

    Initializes the counter at 1 on first use. Runs inside the caller's
    transaction; the counter row stays locked until that transaction ends.
    """
    dialect = db.get_bind().dialect.name
    upsert = _UPSERT_BY_DIALECT.get(dialect)
    if upsert is None:
        raise RuntimeError(f"Atomic counter upsert not supported for dialect '{dialect}'")

    now = utc_now()
    stmt = upsert(CourtSequenceCounter).values(
        court_code=court_code,
        year=year,
        current_value=1,
        updated_at=now,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=[CourtSequenceCounter.court_code, CourtSequenceCounter.year],
        set_={
            "current_value": CourtSequenceCounter.current_value + 1,
            "updated_at": now,
        },
    ).returning(CourtSequenceCounter.current_value)

    result = db.execute(stmt).scalar_one_or_none()
    if result is None:
        raise RuntimeError("Failed to generate case sequence")
    return result


def format_case_number(court_code: str, year: int, sequence: int) -> str:
    return f"{court_code}/{year}/{sequence:0{settings.CASE_NUMBER_PAD_WIDTH}d}"


def generate_case_number(db: Session, court_name: str, now: datetime | None = None) -> str:
    """Draw the next case number for a court in the year of `now`."""
    court_code = derive_court_code(court_name)
    if not court_code:
        raise ValueError("Court name must contain at least one word")
    year = (now or utc_now()).year
    return format_case_number(court_code, year, next_sequence(db, court_code, year))
