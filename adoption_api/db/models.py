"""SQLAlchemy ORM models for adoption cases, assignments, audit trail and counters."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    BigInteger,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from adoption_api.db.base import Base
from adoption_api.db.enums import DEFAULT_CASE_STATUS, AssignmentType


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# Cases
# =============================================================================

class Case(Base):
    """
    Adoption case aggregate.

    Concurrency:
    - version starts at 1 and is incremented exactly once per committed write
    - every write is a conditional UPDATE ... WHERE version = <read version>

    Soft delete only: deleted_at set means the case is excluded from reads
    and from further mutation. Rows are never physically removed.
    """

    __tablename__ = "cases"
    __table_args__ = (
        UniqueConstraint("case_number", name="uq_case_number"),
        Index("idx_cases_court_created", "assigned_court", "created_at"),
        Index("idx_cases_status", "status"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    case_number: Mapped[str] = mapped_column(String(40), nullable=False)
    case_type: Mapped[str] = mapped_column(String(50), nullable=False)  # AdoptionType

    # Lifecycle
    status: Mapped[str] = mapped_column(
        String(40), nullable=False, default=DEFAULT_CASE_STATUS.value
    )  # CaseStatus
    status_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    # Scope
    assigned_court: Mapped[str] = mapped_column(String(200), nullable=False)
    organisation_id: Mapped[str | None] = mapped_column(String(100), nullable=True)

    # Staff-only content (stripped from the adopter view)
    internal_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    staff_comments: Mapped[str | None] = mapped_column(Text, nullable=True)
    external_reference: Mapped[str | None] = mapped_column(
        String(100), nullable=True
    )  # Linked local authority / Cafcass case reference

    created_by: Mapped[str] = mapped_column(String(100), nullable=False)
    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=utc_now)
    deleted_at: Mapped[datetime | None] = mapped_column(nullable=True)

    assignments: Mapped[list["CaseAssignment"]] = relationship(
        back_populates="case",
        order_by="CaseAssignment.created_at",
        passive_deletes=True,
    )

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    @property
    def applicant_ids(self) -> list[str]:
        """Users holding an APPLICANT assignment, in assignment order."""
        return [
            a.user_id
            for a in self.assignments
            if a.assignment_type == AssignmentType.APPLICANT.value
        ]

    @property
    def assigned_judge(self) -> str | None:
        """Most recently assigned judicial user, if any."""
        judicial = [
            a.user_id
            for a in self.assignments
            if a.assignment_type == AssignmentType.JUDICIAL.value
        ]
        return judicial[-1] if judicial else None


class CaseAssignment(Base):
    """
    Links a user to a case with a role-specific assignment type.

    Created or removed, never updated. Resolves per-user visibility for
    judicial and applicant roles.
    """

    __tablename__ = "case_assignments"
    __table_args__ = (
        UniqueConstraint(
            "case_id", "user_id", "assignment_type", name="uq_case_assignment"
        ),
        Index("idx_case_assignments_user_type", "user_id", "assignment_type"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    case_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("cases.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[str] = mapped_column(String(100), nullable=False)
    assignment_type: Mapped[str] = mapped_column(String(30), nullable=False)  # AssignmentType
    created_by: Mapped[str] = mapped_column(String(100), nullable=False)
    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utc_now)

    case: Mapped[Case] = relationship(back_populates="assignments")


# =============================================================================
# Audit Trail
# =============================================================================

class AuditLogEntry(Base):
    """
    Append-only history of actions against a case.

    - Written in the same transaction as the mutation it describes
    - No update or delete path exists; corrections are new entries
    - Ordered by timestamp, ties broken by insertion order (id)
    - case_id is a back-reference, not a foreign key: entries outlive the case
    """

    __tablename__ = "audit_log_entries"
    __table_args__ = (
        Index("idx_audit_case_timestamp", "case_id", "timestamp"),
    )

    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True
    )
    case_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    action: Mapped[str] = mapped_column(String(30), nullable=False)  # AuditAction
    actor: Mapped[str] = mapped_column(String(100), nullable=False)
    timestamp: Mapped[datetime] = mapped_column(nullable=False, default=utc_now)
    changes: Mapped[dict | None] = mapped_column(JSON, nullable=True)


# =============================================================================
# Counters
# =============================================================================

class CourtSequenceCounter(Base):
    """
    Per-court, per-year case number sequence.

    Created on first use and incremented with a single atomic upsert
    (see case_number_service.next_sequence). Never decremented or deleted.
    """

    __tablename__ = "court_sequence_counters"

    court_code: Mapped[str] = mapped_column(String(20), primary_key=True)
    year: Mapped[int] = mapped_column(Integer, primary_key=True)
    current_value: Mapped[int] = mapped_column(Integer, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=utc_now)
