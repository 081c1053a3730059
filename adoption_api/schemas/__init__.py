"""Pydantic schemas for API request/response models."""

from adoption_api.schemas.auth import ActorContext, TokenPayload
from adoption_api.schemas.case import (
    AssignmentCreate,
    AssignmentListResponse,
    AssignmentRead,
    AuditLogEntryRead,
    AuditLogResponse,
    CaseBaseRead,
    CaseCreate,
    CaseListResponse,
    CasePermissions,
    CaseRead,
    CaseRedactedRead,
    CaseStatusChange,
    CaseStatusChangeResponse,
)

__all__ = [
    "ActorContext",
    "AssignmentCreate",
    "AssignmentListResponse",
    "AssignmentRead",
    "AuditLogEntryRead",
    "AuditLogResponse",
    "CaseBaseRead",
    "CaseCreate",
    "CaseListResponse",
    "CasePermissions",
    "CaseRead",
    "CaseRedactedRead",
    "CaseStatusChange",
    "CaseStatusChangeResponse",
    "TokenPayload",
]
