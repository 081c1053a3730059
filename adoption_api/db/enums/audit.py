"""Audit trail enums."""

from enum import Enum


class AuditAction(str, Enum):
    """
    Actions recorded against a case.

    UPDATE is reserved for field edits made outside the status lifecycle.
    """

    CREATE = "CREATE"
    STATUS_CHANGE = "STATUS_CHANGE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    ASSIGNMENT_CREATE = "ASSIGNMENT_CREATE"
    ASSIGNMENT_REVOKE = "ASSIGNMENT_REVOKE"
