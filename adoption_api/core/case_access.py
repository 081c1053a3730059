"""Case visibility - which cases a role may list or open, and what it sees.

Scope by role (closed table, one entry per Role):
- HMCTS_CASE_OFFICER: cases at their assigned court
- JUDGE_LEGAL_ADVISER: cases where they hold a JUDICIAL assignment
- ADOPTER: cases where they hold an APPLICANT assignment
- LA_SOCIAL_WORKER / VAA_WORKER / CAFCASS_OFFICER: all cases (coarse-grained)

The same rules exist twice: as SQL clauses for list queries and as Python
predicates for detail access by id.

Redaction: adopters get CaseRedactedRead (no internal notes, staff comments
or external reference, redacted=True). Every other role gets CaseRead.
"""

from typing import Callable, Iterable

from sqlalchemy import ColumnElement, and_, false, true

from adoption_api.core.permissions import get_case_permissions
from adoption_api.db.enums import ROLES_REDACTED_VIEW, AssignmentType, Role
from adoption_api.db.models import Case, CaseAssignment
from adoption_api.schemas.auth import ActorContext
from adoption_api.schemas.case import CaseRead, CaseRedactedRead

ScopeClause = Callable[[ActorContext], ColumnElement[bool]]
ScopeCheck = Callable[[Case, ActorContext], bool]


# =============================================================================
# List scope (SQL)
# =============================================================================

def _court_clause(actor: ActorContext) -> ColumnElement[bool]:
    if not actor.court_assignment:
        return false()
    return Case.assigned_court == actor.court_assignment


def _assignment_clause(assignment_type: AssignmentType) -> ScopeClause:
    def clause(actor: ActorContext) -> ColumnElement[bool]:
        return Case.assignments.any(
            and_(
                CaseAssignment.user_id == actor.user_id,
                CaseAssignment.assignment_type == assignment_type.value,
            )
        )
    return clause


def _unrestricted_clause(actor: ActorContext) -> ColumnElement[bool]:
    return true()


LIST_SCOPES: dict[Role, ScopeClause] = {
    Role.HMCTS_CASE_OFFICER: _court_clause,
    Role.JUDGE_LEGAL_ADVISER: _assignment_clause(AssignmentType.JUDICIAL),
    Role.ADOPTER: _assignment_clause(AssignmentType.APPLICANT),
    Role.LA_SOCIAL_WORKER: _unrestricted_clause,
    Role.VAA_WORKER: _unrestricted_clause,
    Role.CAFCASS_OFFICER: _unrestricted_clause,
}


def case_scope_clause(actor: ActorContext) -> ColumnElement[bool]:
    """WHERE clause restricting a Case query to what the actor may list."""
    return LIST_SCOPES[actor.role](actor)


# =============================================================================
# Detail access (Python)
# =============================================================================

def _court_check(case: Case, actor: ActorContext) -> bool:
    return bool(actor.court_assignment) and case.assigned_court == actor.court_assignment


def _assignment_check(assignment_type: AssignmentType) -> ScopeCheck:
    def check(case: Case, actor: ActorContext) -> bool:
        return any(
            a.user_id == actor.user_id and a.assignment_type == assignment_type.value
            for a in case.assignments
        )
    return check


def _unrestricted_check(case: Case, actor: ActorContext) -> bool:
    return True


DETAIL_SCOPES: dict[Role, ScopeCheck] = {
    Role.HMCTS_CASE_OFFICER: _court_check,
    Role.JUDGE_LEGAL_ADVISER: _assignment_check(AssignmentType.JUDICIAL),
    Role.ADOPTER: _assignment_check(AssignmentType.APPLICANT),
    Role.LA_SOCIAL_WORKER: _unrestricted_check,
    Role.VAA_WORKER: _unrestricted_check,
    Role.CAFCASS_OFFICER: _unrestricted_check,
}

# Roles whose detail scope is every case; for them a missing case reveals nothing
UNRESTRICTED_READ_ROLES = frozenset(
    role for role, check in DETAIL_SCOPES.items() if check is _unrestricted_check
)


def check_case_access(case: Case, actor: ActorContext) -> bool:
    """
    Check if the actor may open this case.

    Soft-deleted cases are never accessible.
    """
    if case.is_deleted:
        return False
    return DETAIL_SCOPES[actor.role](case, actor)


def has_unrestricted_read(role: Role) -> bool:
    return role in UNRESTRICTED_READ_ROLES


def filter_visible(cases: Iterable[Case], actor: ActorContext) -> list[Case]:
    """Drop any case the actor may not open."""
    return [case for case in cases if check_case_access(case, actor)]


# =============================================================================
# Redaction
# =============================================================================

def to_case_read(case: Case, actor: ActorContext) -> CaseRead | CaseRedactedRead:
    """
    Build the representation of a case for this actor.

    The stored record is never modified.
    """
    permissions = get_case_permissions(actor.role)
    fields = dict(
        id=case.id,
        case_number=case.case_number,
        case_type=case.case_type,
        status=case.status,
        status_reason=case.status_reason,
        assigned_court=case.assigned_court,
        organisation_id=case.organisation_id,
        assigned_judge=case.assigned_judge,
        applicant_ids=case.applicant_ids,
        created_by=case.created_by,
        created_at=case.created_at,
        updated_at=case.updated_at,
        version=case.version,
        permissions=permissions,
    )
    if actor.role in ROLES_REDACTED_VIEW:
        return CaseRedactedRead(**fields)
    return CaseRead(
        **fields,
        internal_notes=case.internal_notes,
        staff_comments=case.staff_comments,
        external_reference=case.external_reference,
    )
