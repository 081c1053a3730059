"""Audit trail service - append-only history of case mutations.

Rules:
- append() is called inside the transaction of the mutation it describes,
  after the mutation statement, so both commit or neither does
- rejected or failed mutations never produce entries
- there is no update or delete function; corrections are new entries
- never put secrets or free-text personal data in changes beyond what the
  mutation itself recorded (e.g. the status reason)
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from adoption_api.db.enums import AuditAction
from adoption_api.db.models import AuditLogEntry, utc_now


def append(
    db: Session,
    case_id: UUID,
    action: AuditAction,
    actor: str,
    changes: dict[str, Any] | None = None,
    *,
    timestamp: datetime | None = None,
) -> AuditLogEntry:
    """
    Append an audit entry for a case.

    Flushes so the entry gets its id; the caller owns the commit.

    Args:
        db: Database session (inside the mutation's transaction)
        case_id: Case the action was applied to
        action: What happened
        actor: user_id of the actor
        changes: Optional before/after details
        timestamp: Defaults to now (UTC)
    """
    entry = AuditLogEntry(
        case_id=case_id,
        action=action.value,
        actor=actor,
        timestamp=timestamp or utc_now(),
        changes=changes,
    )
    db.add(entry)
    db.flush()
    return entry


def query_by_case(db: Session, case_id: UUID) -> list[AuditLogEntry]:
    """Entries for a case, newest first (ties: latest insert first)."""
    return list(
        db.scalars(
            select(AuditLogEntry)
            .where(AuditLogEntry.case_id == case_id)
            .order_by(AuditLogEntry.timestamp.desc(), AuditLogEntry.id.desc())
        )
    )


def count_by_case(db: Session, case_id: UUID, action: AuditAction | None = None) -> int:
    """Number of entries for a case, optionally for a single action."""
    stmt = select(func.count(AuditLogEntry.id)).where(AuditLogEntry.case_id == case_id)
    if action is not None:
        stmt = stmt.where(AuditLogEntry.action == action.value)
    return db.scalar(stmt) or 0
