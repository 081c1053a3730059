"""Case lifecycle routes.

Thin adapter: decodes the actor, calls the service, maps result codes to
HTTP errors. No business rules live here.
"""

from datetime import datetime
from typing import NoReturn
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from adoption_api.core.case_access import to_case_read
from adoption_api.core.deps import get_current_actor, get_db, require_csrf_header
from adoption_api.db.enums import AdoptionType, CaseSortField, CaseStatus, SortOrder
from adoption_api.schemas.auth import ActorContext
from adoption_api.schemas.case import (
    AssignmentCreate,
    AssignmentListResponse,
    AssignmentRead,
    AuditLogEntryRead,
    AuditLogResponse,
    CaseCreate,
    CaseListResponse,
    CaseRead,
    CaseRedactedRead,
    CaseStatusChange,
    CaseStatusChangeResponse,
)
from adoption_api.services import case_service, case_status_service
from adoption_api.services.results import CaseErrorCode, ServiceResult
from adoption_api.utils.pagination import PaginationParams, get_pagination

router = APIRouter()

_HTTP_STATUS = {
    CaseErrorCode.VALIDATION: 422,
    CaseErrorCode.FORBIDDEN: 403,
    CaseErrorCode.NOT_FOUND: 404,
    CaseErrorCode.CONFLICT: 409,
    CaseErrorCode.TERMINAL_STATUS: 400,
    CaseErrorCode.INVALID_TRANSITION: 400,
    CaseErrorCode.REASON_REQUIRED: 400,
}


def _raise_for(result: ServiceResult) -> NoReturn:
    detail = {"error": result.message, "code": result.code.value}
    if result.code == CaseErrorCode.CONFLICT:
        detail["current_version"] = result.current_version
    raise HTTPException(status_code=_HTTP_STATUS[result.code], detail=detail)


# =============================================================================
# Cases
# =============================================================================

@router.post(
    "",
    status_code=201,
    response_model=CaseRead,
    dependencies=[Depends(require_csrf_header)],
)
def create_case(
    data: CaseCreate,
    actor: ActorContext = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """Create a case (HMCTS case officers only)."""
    result = case_service.create_case(db, data, actor)
    if not result.ok:
        _raise_for(result)
    return to_case_read(result.value, actor)


@router.get("", response_model=None)
def list_cases(
    status: CaseStatus | None = Query(None),
    case_type: AdoptionType | None = Query(None),
    created_from: datetime | None = Query(None),
    created_to: datetime | None = Query(None),
    sort_by: CaseSortField = Query(CaseSortField.CREATED_AT),
    sort_order: SortOrder = Query(SortOrder.DESC),
    pagination: PaginationParams = Depends(get_pagination),
    actor: ActorContext = Depends(get_current_actor),
    db: Session = Depends(get_db),
) -> CaseListResponse:
    """List cases visible to the current actor."""
    filters = case_service.CaseListFilters(
        status=status,
        case_type=case_type,
        created_from=created_from,
        created_to=created_to,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return case_service.list_cases(db, actor, filters, pagination)


@router.get("/{case_id}", response_model=None)
def get_case(
    case_id: UUID,
    actor: ActorContext = Depends(get_current_actor),
    db: Session = Depends(get_db),
) -> CaseRead | CaseRedactedRead:
    """Get a case, redacted for adopters."""
    result = case_service.get_case(db, case_id, actor)
    if not result.ok:
        _raise_for(result)
    if result.value is None:
        raise HTTPException(status_code=404, detail={"error": "Case not found", "code": CaseErrorCode.NOT_FOUND.value})
    return result.value


@router.patch(
    "/{case_id}/status",
    response_model=CaseStatusChangeResponse,
    dependencies=[Depends(require_csrf_header)],
)
def change_status(
    case_id: UUID,
    data: CaseStatusChange,
    actor: ActorContext = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """Move a case to a new status (optimistic concurrency via expected_version)."""
    result = case_status_service.update_status(
        db,
        case_id,
        data.status,
        actor,
        reason=data.reason,
        expected_version=data.expected_version,
    )
    if not result.ok:
        _raise_for(result)
    case_read = to_case_read(result.value.case, actor)
    return CaseStatusChangeResponse(
        **case_read.model_dump(exclude={"redacted"}),
        previous_status=result.value.previous_status,
    )


@router.delete(
    "/{case_id}",
    status_code=204,
    dependencies=[Depends(require_csrf_header)],
)
def delete_case(
    case_id: UUID,
    actor: ActorContext = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """Soft delete a case (HMCTS case officers only)."""
    result = case_service.delete_case(db, case_id, actor)
    if not result.ok:
        _raise_for(result)
    return None


# =============================================================================
# Assignments
# =============================================================================

@router.post(
    "/{case_id}/assignments",
    status_code=201,
    response_model=AssignmentRead,
    dependencies=[Depends(require_csrf_header)],
)
def create_assignment(
    case_id: UUID,
    data: AssignmentCreate,
    actor: ActorContext = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """Link a user to a case."""
    result = case_service.create_assignment(
        db, case_id, data.user_id, data.assignment_type, actor
    )
    if not result.ok:
        _raise_for(result)
    return result.value


@router.get("/{case_id}/assignments", response_model=AssignmentListResponse)
def list_assignments(
    case_id: UUID,
    actor: ActorContext = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    result = case_service.list_assignments(db, case_id, actor)
    if not result.ok:
        _raise_for(result)
    return AssignmentListResponse(
        assignments=[AssignmentRead.model_validate(a) for a in result.value]
    )


@router.delete(
    "/{case_id}/assignments/{assignment_id}",
    status_code=204,
    dependencies=[Depends(require_csrf_header)],
)
def revoke_assignment(
    case_id: UUID,
    assignment_id: UUID,
    actor: ActorContext = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """Remove a user's link to a case."""
    result = case_service.revoke_assignment(db, case_id, assignment_id, actor)
    if not result.ok:
        _raise_for(result)
    return None


# =============================================================================
# Audit
# =============================================================================

@router.get("/{case_id}/audit", response_model=AuditLogResponse)
def get_audit_log(
    case_id: UUID,
    actor: ActorContext = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """Audit trail for a case, newest first (case officers and judges)."""
    result = case_service.get_audit_log(db, case_id, actor)
    if not result.ok:
        _raise_for(result)
    return AuditLogResponse(
        entries=[AuditLogEntryRead.model_validate(e) for e in result.value]
    )
