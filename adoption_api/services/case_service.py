"""Case service - create, read, list, soft delete, assignments and audit reads.

Every operation returns a ServiceResult; recoverable outcomes are codes,
storage faults propagate after the session is rolled back.

Existence is only revealed to roles that could see the case anyway:
for scoped roles (case officer, judge, adopter) a missing case and a case
outside their scope are both FORBIDDEN.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from adoption_api.core.case_access import (
    case_scope_clause,
    check_case_access,
    filter_visible,
    has_unrestricted_read,
    to_case_read,
)
from adoption_api.core.permissions import can_assign, can_create_case, can_delete_case, can_view_audit
from adoption_api.core.structured_logging import build_log_context
from adoption_api.db.enums import (
    DEFAULT_CASE_STATUS,
    AdoptionType,
    AssignmentType,
    AuditAction,
    CaseSortField,
    CaseStatus,
    SortOrder,
)
from adoption_api.db.models import AuditLogEntry, Case, CaseAssignment, utc_now
from adoption_api.schemas.auth import ActorContext
from adoption_api.schemas.case import (
    CaseCreate,
    CaseListResponse,
    CaseRead,
    CaseRedactedRead,
)
from adoption_api.services import audit_service, case_number_service
from adoption_api.services.results import CaseErrorCode, ServiceResult
from adoption_api.utils.pagination import PaginationParams, page_count

logger = logging.getLogger(__name__)


@dataclass
class CaseListFilters:
    """Optional list filters, applied after role scoping."""
    status: CaseStatus | None = None
    case_type: AdoptionType | None = None
    created_from: datetime | None = None
    created_to: datetime | None = None
    sort_by: CaseSortField = CaseSortField.CREATED_AT
    sort_order: SortOrder = SortOrder.DESC


_SORT_COLUMNS = {
    CaseSortField.CREATED_AT: Case.created_at,
    CaseSortField.CASE_NUMBER: Case.case_number,
    CaseSortField.STATUS: Case.status,
}


# =============================================================================
# Storage helpers
# =============================================================================

def get_case_record(db: Session, case_id: UUID) -> Case | None:
    """Load a live (not soft-deleted) case with its assignments."""
    return db.scalars(
        select(Case)
        .where(Case.id == case_id, Case.deleted_at.is_(None))
        .options(selectinload(Case.assignments))
    ).first()


def current_version(db: Session, case_id: UUID) -> int | None:
    """Read the stored version directly, bypassing the identity map."""
    return db.scalar(select(Case.version).where(Case.id == case_id))


def apply_versioned_update(
    db: Session,
    case_id: UUID,
    read_version: int,
    values: dict[str, Any],
) -> bool:
    """
    Compare-and-swap write on a case row.

    Applies `values`, bumps version by one and stamps updated_at, but only
    if the row is still live and still at `read_version`. Returns False when
    another writer got there first. Does not commit.
    """
    values = {"updated_at": utc_now(), **values, "version": Case.version + 1}
    stmt = (
        update(Case)
        .where(
            Case.id == case_id,
            Case.version == read_version,
            Case.deleted_at.is_(None),
        )
        .values(values)
        .execution_options(synchronize_session=False)
    )
    return db.execute(stmt).rowcount == 1


def _load_visible_case(db: Session, case_id: UUID, actor: ActorContext) -> ServiceResult[Case]:
    case = get_case_record(db, case_id)
    if case is None:
        if has_unrestricted_read(actor.role):
            return ServiceResult.failure(CaseErrorCode.NOT_FOUND, "Case not found")
        return ServiceResult.failure(CaseErrorCode.FORBIDDEN, "Access denied")
    if not check_case_access(case, actor):
        return ServiceResult.failure(CaseErrorCode.FORBIDDEN, "Access denied")
    return ServiceResult.success(case)


def _load_case_for_mutation(db: Session, case_id: UUID, actor: ActorContext) -> ServiceResult[Case]:
    """Callers have already passed the role gate, so absence is NOT_FOUND."""
    case = get_case_record(db, case_id)
    if case is None:
        return ServiceResult.failure(CaseErrorCode.NOT_FOUND, "Case not found")
    if not check_case_access(case, actor):
        return ServiceResult.failure(CaseErrorCode.FORBIDDEN, "Access denied")
    return ServiceResult.success(case)


def _log_context(actor: ActorContext, case_id: UUID | None = None, court_code: str | None = None) -> dict:
    return build_log_context(
        user_id=actor.user_id,
        role=actor.role.value,
        case_id=str(case_id) if case_id else None,
        court_code=court_code,
    )


# =============================================================================
# Cases
# =============================================================================

def create_case(db: Session, data: CaseCreate, actor: ActorContext) -> ServiceResult[Case]:
    """
    Create a case at status APPLICATION, version 1, with a fresh case number.

    The counter increment, the case insert and the CREATE audit entry share
    one transaction.
    """
    if not can_create_case(actor.role):
        return ServiceResult.failure(
            CaseErrorCode.FORBIDDEN, "Only HMCTS case officers can create cases"
        )

    if not AdoptionType.has_value(data.case_type):
        return ServiceResult.failure(CaseErrorCode.VALIDATION, "Invalid case type")
    court_name = data.assigned_court.strip()
    court_code = case_number_service.derive_court_code(court_name)
    if not court_code:
        return ServiceResult.failure(CaseErrorCode.VALIDATION, "Assigned court is required")
    if len(court_code) > case_number_service.MAX_COURT_CODE_LENGTH:
        return ServiceResult.failure(
            CaseErrorCode.VALIDATION,
            f"Assigned court name has more than {case_number_service.MAX_COURT_CODE_LENGTH} words",
        )

    now = utc_now()
    try:
        case_number = case_number_service.generate_case_number(db, court_name, now)
        case = Case(
            case_number=case_number,
            case_type=data.case_type,
            status=DEFAULT_CASE_STATUS.value,
            version=1,
            assigned_court=court_name,
            organisation_id=actor.organisation_id,
            internal_notes=data.internal_notes,
            staff_comments=data.staff_comments,
            external_reference=data.external_reference,
            created_by=actor.user_id,
            created_at=now,
            updated_at=now,
        )
        db.add(case)
        db.flush()
        audit_service.append(
            db,
            case.id,
            AuditAction.CREATE,
            actor.user_id,
            {
                "case_type": case.case_type,
                "assigned_court": case.assigned_court,
                "case_number": case.case_number,
            },
            timestamp=now,
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    db.refresh(case)
    logger.info(
        "Case %s created", case.case_number,
        extra=_log_context(actor, case.id, court_code),
    )
    return ServiceResult.success(case)


def get_case(
    db: Session, case_id: UUID, actor: ActorContext
) -> ServiceResult[CaseRead | CaseRedactedRead | None]:
    """
    Fetch one case as the actor may see it.

    A missing case is a successful None for roles with unrestricted read;
    scoped roles get FORBIDDEN for both missing and out-of-scope cases.
    """
    case = get_case_record(db, case_id)
    if case is None:
        if has_unrestricted_read(actor.role):
            return ServiceResult.success(None)
        return ServiceResult.failure(CaseErrorCode.FORBIDDEN, "Access denied")
    if not check_case_access(case, actor):
        return ServiceResult.failure(CaseErrorCode.FORBIDDEN, "Access denied")
    return ServiceResult.success(to_case_read(case, actor))


def list_cases(
    db: Session,
    actor: ActorContext,
    filters: CaseListFilters | None = None,
    pagination: PaginationParams | None = None,
) -> CaseListResponse:
    """List cases within the actor's scope, filtered, sorted and paginated."""
    filters = filters or CaseListFilters()
    pagination = pagination or PaginationParams()

    stmt = select(Case).where(Case.deleted_at.is_(None), case_scope_clause(actor))
    if filters.status:
        stmt = stmt.where(Case.status == filters.status.value)
    if filters.case_type:
        stmt = stmt.where(Case.case_type == filters.case_type.value)
    if filters.created_from:
        stmt = stmt.where(Case.created_at >= filters.created_from)
    if filters.created_to:
        stmt = stmt.where(Case.created_at <= filters.created_to)

    total = db.scalar(select(func.count()).select_from(stmt.subquery())) or 0

    column = _SORT_COLUMNS[filters.sort_by]
    order = column.asc() if filters.sort_order == SortOrder.ASC else column.desc()
    cases = db.scalars(
        stmt.order_by(order, Case.id)
        .offset(pagination.offset)
        .limit(pagination.per_page)
        .options(selectinload(Case.assignments))
    ).all()

    return CaseListResponse(
        items=[to_case_read(case, actor) for case in filter_visible(cases, actor)],
        total=total,
        page=pagination.page,
        per_page=pagination.per_page,
        pages=page_count(total, pagination.per_page),
    )


def delete_case(db: Session, case_id: UUID, actor: ActorContext) -> ServiceResult[bool]:
    """
    Soft delete a case (case officers only).

    Sets deleted_at and consumes a version. A case deleted concurrently by
    another request is reported as NOT_FOUND.
    """
    if not can_delete_case(actor.role):
        return ServiceResult.failure(
            CaseErrorCode.FORBIDDEN, "Only HMCTS case officers can delete cases"
        )

    loaded = _load_case_for_mutation(db, case_id, actor)
    if not loaded.ok:
        return ServiceResult.failure(loaded.code, loaded.message)
    case = loaded.value

    now = utc_now()
    try:
        result = db.execute(
            update(Case)
            .where(Case.id == case_id, Case.deleted_at.is_(None))
            .values(deleted_at=now, updated_at=now, version=Case.version + 1)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            db.rollback()
            return ServiceResult.failure(CaseErrorCode.NOT_FOUND, "Case not found")
        audit_service.append(
            db,
            case_id,
            AuditAction.DELETE,
            actor.user_id,
            {"case_number": case.case_number, "status": case.status},
            timestamp=now,
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    logger.info("Case %s soft-deleted", case_id, extra=_log_context(actor, case_id))
    return ServiceResult.success(True)


# =============================================================================
# Assignments
# =============================================================================

def _find_assignment(
    db: Session, case_id: UUID, user_id: str, assignment_type: AssignmentType
) -> CaseAssignment | None:
    return db.scalars(
        select(CaseAssignment).where(
            CaseAssignment.case_id == case_id,
            CaseAssignment.user_id == user_id,
            CaseAssignment.assignment_type == assignment_type.value,
        )
    ).first()


def create_assignment(
    db: Session,
    case_id: UUID,
    user_id: str,
    assignment_type: AssignmentType,
    actor: ActorContext,
) -> ServiceResult[CaseAssignment]:
    """
    Link a user to a case.

    Idempotent: an existing (case, user, type) link is returned as-is and
    no audit entry is written. The case row and its version are untouched.
    """
    if not can_assign(actor.role):
        return ServiceResult.failure(
            CaseErrorCode.FORBIDDEN, "Only HMCTS case officers can assign users"
        )

    loaded = _load_case_for_mutation(db, case_id, actor)
    if not loaded.ok:
        return ServiceResult.failure(loaded.code, loaded.message)

    existing = _find_assignment(db, case_id, user_id, assignment_type)
    if existing:
        return ServiceResult.success(existing)

    now = utc_now()
    assignment = CaseAssignment(
        case_id=case_id,
        user_id=user_id,
        assignment_type=assignment_type.value,
        created_by=actor.user_id,
        created_at=now,
    )
    try:
        db.add(assignment)
        db.flush()
    except IntegrityError:
        # Same link created concurrently
        db.rollback()
        existing = _find_assignment(db, case_id, user_id, assignment_type)
        if existing:
            return ServiceResult.success(existing)
        raise

    try:
        audit_service.append(
            db,
            case_id,
            AuditAction.ASSIGNMENT_CREATE,
            actor.user_id,
            {"user_id": user_id, "assignment_type": assignment_type.value},
            timestamp=now,
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    db.refresh(assignment)
    logger.info(
        "Assigned %s to case %s as %s", user_id, case_id, assignment_type.value,
        extra=_log_context(actor, case_id),
    )
    return ServiceResult.success(assignment)


def list_assignments(
    db: Session, case_id: UUID, actor: ActorContext
) -> ServiceResult[list[CaseAssignment]]:
    """Assignments of a case the actor may open, oldest first."""
    loaded = _load_visible_case(db, case_id, actor)
    if not loaded.ok:
        return ServiceResult.failure(loaded.code, loaded.message)
    return ServiceResult.success(list(loaded.value.assignments))


def revoke_assignment(
    db: Session, case_id: UUID, assignment_id: UUID, actor: ActorContext
) -> ServiceResult[bool]:
    """Remove a user's link to a case (case officers only)."""
    if not can_assign(actor.role):
        return ServiceResult.failure(
            CaseErrorCode.FORBIDDEN, "Only HMCTS case officers can revoke assignments"
        )

    loaded = _load_case_for_mutation(db, case_id, actor)
    if not loaded.ok:
        return ServiceResult.failure(loaded.code, loaded.message)

    assignment = db.get(CaseAssignment, assignment_id)
    if assignment is None or assignment.case_id != case_id:
        return ServiceResult.failure(CaseErrorCode.NOT_FOUND, "Assignment not found")

    changes = {"user_id": assignment.user_id, "assignment_type": assignment.assignment_type}
    try:
        db.delete(assignment)
        db.flush()
        audit_service.append(
            db, case_id, AuditAction.ASSIGNMENT_REVOKE, actor.user_id, changes
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    logger.info(
        "Revoked assignment %s on case %s", assignment_id, case_id,
        extra=_log_context(actor, case_id),
    )
    return ServiceResult.success(True)


# =============================================================================
# Audit
# =============================================================================

def get_audit_log(
    db: Session, case_id: UUID, actor: ActorContext
) -> ServiceResult[list[AuditLogEntry]]:
    """
    Audit trail for a case, newest first.

    Order of checks: role gate (before any lookup), then the case lookup.
    Both audit roles are scoped, so a missing case and a case outside
    their scope are both FORBIDDEN.
    """
    if not can_view_audit(actor.role):
        return ServiceResult.failure(CaseErrorCode.FORBIDDEN, "Access denied")

    loaded = _load_visible_case(db, case_id, actor)
    if not loaded.ok:
        return ServiceResult.failure(loaded.code, loaded.message)
    return ServiceResult.success(audit_service.query_by_case(db, case_id))
