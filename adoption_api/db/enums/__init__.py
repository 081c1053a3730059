"""Enum definitions for application constants."""

from adoption_api.db.enums.audit import AuditAction
from adoption_api.db.enums.auth import Role
from adoption_api.db.enums.cases import (
    AdoptionType,
    AssignmentType,
    CaseSortField,
    CaseStatus,
    SortOrder,
)
from adoption_api.db.enums.permissions import (
    ROLES_CAN_ASSIGN,
    ROLES_CAN_CREATE_CASE,
    ROLES_CAN_DELETE_CASE,
    ROLES_CAN_EDIT_CASE,
    ROLES_CAN_VIEW_AUDIT,
    ROLES_REDACTED_VIEW,
)

DEFAULT_CASE_STATUS = CaseStatus.APPLICATION

__all__ = [
    "AdoptionType",
    "AssignmentType",
    "AuditAction",
    "CaseSortField",
    "CaseStatus",
    "DEFAULT_CASE_STATUS",
    "ROLES_CAN_ASSIGN",
    "ROLES_CAN_CREATE_CASE",
    "ROLES_CAN_DELETE_CASE",
    "ROLES_CAN_EDIT_CASE",
    "ROLES_CAN_VIEW_AUDIT",
    "ROLES_REDACTED_VIEW",
    "Role",
    "SortOrder",
]
