"""Pydantic schemas for adoption cases."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field

from adoption_api.db.enums import AssignmentType, CaseStatus


class CasePermissions(BaseModel):
    """What the current actor may do with a case."""

    can_edit: bool
    can_update_status: bool
    can_delete: bool
    can_view_audit: bool


class CaseCreate(BaseModel):
    """Request schema for creating a case.

    case_type is checked against AdoptionType by the service so that an
    unknown type is reported as a VALIDATION outcome.
    """

    case_type: str = Field(..., max_length=50)
    assigned_court: str = Field(..., max_length=200)

    # Staff-only (never shown to adopters)
    internal_notes: str | None = None
    staff_comments: str | None = None
    external_reference: str | None = Field(None, max_length=100)


class CaseStatusChange(BaseModel):
    """Request to move a case to a new status."""

    status: CaseStatus
    reason: str | None = Field(None, max_length=500)
    expected_version: int | None = Field(None, ge=1)


class CaseBaseRead(BaseModel):
    """Fields every role with access to a case may see."""

    id: UUID
    case_number: str
    case_type: str
    status: CaseStatus
    status_reason: str | None = None
    assigned_court: str
    organisation_id: str | None = None
    assigned_judge: str | None = None
    applicant_ids: list[str] = []
    created_by: str
    created_at: datetime
    updated_at: datetime
    version: int
    permissions: CasePermissions | None = None

    model_config = {"from_attributes": True}


class CaseRead(CaseBaseRead):
    """Full case record for professional roles."""

    internal_notes: str | None = None
    staff_comments: str | None = None
    external_reference: str | None = None
    redacted: bool = False


class CaseRedactedRead(CaseBaseRead):
    """Adopter view: staff-only fields are not part of the model."""

    redacted: bool = True


class CaseStatusChangeResponse(CaseRead):
    """Updated case plus the status it left."""

    previous_status: CaseStatus


class CaseListResponse(BaseModel):
    """Paginated case list response."""

    items: list[CaseRead | CaseRedactedRead]
    total: int
    page: int
    per_page: int
    pages: int


class AssignmentCreate(BaseModel):
    """Request to link a user to a case."""

    user_id: str = Field(..., min_length=1, max_length=100)
    assignment_type: AssignmentType


class AssignmentRead(BaseModel):
    """Case assignment response."""

    id: UUID
    case_id: UUID
    user_id: str
    assignment_type: AssignmentType
    created_by: str
    created_at: datetime

    model_config = {"from_attributes": True}


class AssignmentListResponse(BaseModel):
    assignments: list[AssignmentRead]


class AuditLogEntryRead(BaseModel):
    """Audit trail entry for API response."""

    id: int
    case_id: UUID
    action: str
    actor: str
    timestamp: datetime
    changes: dict[str, Any] | None

    model_config = {"from_attributes": True}


class AuditLogResponse(BaseModel):
    """Audit trail for one case, newest first."""

    entries: list[AuditLogEntryRead]
