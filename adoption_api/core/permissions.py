"""Role-based authorization gate for case operations.

Status authority is a closed lookup table keyed by Role. A role missing from
the table is a programming error (KeyError), never a silent allow or deny.

Precedence for status changes:
- judicial-only targets (ORDER_GRANTED, APPLICATION_REFUSED): judicial role only
- every other target: judicial role or case officer
- all other roles: no status authority at all
"""

from enum import Enum

from adoption_api.db.enums import (
    ROLES_CAN_ASSIGN,
    ROLES_CAN_CREATE_CASE,
    ROLES_CAN_DELETE_CASE,
    ROLES_CAN_EDIT_CASE,
    ROLES_CAN_VIEW_AUDIT,
    CaseStatus,
    Role,
)
from adoption_api.schemas.case import CasePermissions


class StatusAuthority(str, Enum):
    """How much of the status lifecycle a role may drive."""
    NONE = "none"
    NON_JUDICIAL = "non_judicial"
    FULL = "full"


JUDICIAL_ONLY_STATUSES: frozenset[CaseStatus] = frozenset(
    {CaseStatus.ORDER_GRANTED, CaseStatus.APPLICATION_REFUSED}
)

ROLE_STATUS_AUTHORITY: dict[Role, StatusAuthority] = {
    Role.JUDGE_LEGAL_ADVISER: StatusAuthority.FULL,
    Role.HMCTS_CASE_OFFICER: StatusAuthority.NON_JUDICIAL,
    Role.CAFCASS_OFFICER: StatusAuthority.NONE,
    Role.LA_SOCIAL_WORKER: StatusAuthority.NONE,
    Role.VAA_WORKER: StatusAuthority.NONE,
    Role.ADOPTER: StatusAuthority.NONE,
}


def can_perform(role: Role | str, target_status: CaseStatus | str) -> bool:
    """Check whether role may move a case into target_status."""
    authority = ROLE_STATUS_AUTHORITY[Role(role)]
    if authority is StatusAuthority.FULL:
        return True
    if authority is StatusAuthority.NON_JUDICIAL:
        return CaseStatus(target_status) not in JUDICIAL_ONLY_STATUSES
    return False


def can_change_status(role: Role | str) -> bool:
    """True if the role may drive at least some status transitions."""
    return ROLE_STATUS_AUTHORITY[Role(role)] is not StatusAuthority.NONE


def can_create_case(role: Role | str) -> bool:
    return Role(role) in ROLES_CAN_CREATE_CASE


def can_delete_case(role: Role | str) -> bool:
    return Role(role) in ROLES_CAN_DELETE_CASE


def can_assign(role: Role | str) -> bool:
    return Role(role) in ROLES_CAN_ASSIGN


def can_view_audit(role: Role | str) -> bool:
    return Role(role) in ROLES_CAN_VIEW_AUDIT


def get_case_permissions(role: Role | str) -> CasePermissions:
    """Build the per-case permission summary for a role."""
    role = Role(role)
    return CasePermissions(
        can_edit=role in ROLES_CAN_EDIT_CASE,
        can_update_status=can_change_status(role),
        can_delete=can_delete_case(role),
        can_view_audit=can_view_audit(role),
    )
