"""Case status changes under optimistic concurrency.

update_status runs one request as a single unit:
1. load the live case (NOT_FOUND)
2. expected_version pre-flight (CONFLICT with current_version)
3. terminal status (TERMINAL_STATUS)
4. transition table, unknown targets included (INVALID_TRANSITION)
5. role authority and case scope (FORBIDDEN)
6. reason for ON_HOLD / APPLICATION_WITHDRAWN (REASON_REQUIRED)
7. conditional UPDATE ... WHERE version = <read version> (CONFLICT on miss)
8. STATUS_CHANGE audit entry in the same transaction, then commit

Checks 2-6 never write. A CAS miss in 7 means another writer won the race;
it is reported, not retried. Retry policy belongs to the caller.
"""

import logging
from dataclasses import dataclass
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from adoption_api.core.case_access import check_case_access
from adoption_api.core.permissions import can_perform
from adoption_api.core.status_rules import is_terminal, is_valid_transition, requires_reason
from adoption_api.core.structured_logging import build_log_context
from adoption_api.db.enums import AuditAction, CaseStatus
from adoption_api.db.models import Case, utc_now
from adoption_api.schemas.auth import ActorContext
from adoption_api.services import audit_service
from adoption_api.services.case_service import (
    apply_versioned_update,
    current_version,
    get_case_record,
)
from adoption_api.services.results import CaseErrorCode, ServiceResult

logger = logging.getLogger(__name__)


@dataclass
class StatusChange:
    """Updated case and the status it moved out of."""
    case: Case
    previous_status: CaseStatus


def _rejected(
    code: CaseErrorCode,
    message: str,
    actor: ActorContext,
    case_id: UUID,
    *,
    current_version: int | None = None,
) -> ServiceResult[StatusChange]:
    logger.info(
        "Status change rejected: %s", code.value,
        extra=build_log_context(user_id=actor.user_id, role=actor.role.value, case_id=str(case_id)),
    )
    return ServiceResult.failure(code, message, current_version=current_version)


def update_status(
    db: Session,
    case_id: UUID,
    new_status: CaseStatus | str,
    actor: ActorContext,
    reason: str | None = None,
    expected_version: int | None = None,
) -> ServiceResult[StatusChange]:
    """
    Move a case to new_status.

    Args:
        db: Database session
        case_id: Case to change
        new_status: Requested status
        actor: Who is asking
        reason: Required (non-blank) for ON_HOLD and APPLICATION_WITHDRAWN
        expected_version: Version the caller last observed, if any

    Returns:
        ServiceResult with the refreshed case and previous status, or a
        failure code. CONFLICT carries current_version.
    """
    case = get_case_record(db, case_id)
    if case is None:
        return _rejected(CaseErrorCode.NOT_FOUND, "Case not found", actor, case_id)

    read_version = case.version
    if expected_version is not None and expected_version != read_version:
        return _rejected(
            CaseErrorCode.CONFLICT,
            "Case has been modified by another user",
            actor,
            case_id,
            current_version=read_version,
        )

    previous_status = CaseStatus(case.status)
    if is_terminal(previous_status):
        return _rejected(
            CaseErrorCode.TERMINAL_STATUS,
            f"Case is in terminal status {previous_status.value}",
            actor,
            case_id,
        )

    target = CaseStatus(new_status) if CaseStatus.has_value(new_status) else None
    if target is None or not is_valid_transition(previous_status, target):
        return _rejected(
            CaseErrorCode.INVALID_TRANSITION,
            f"Cannot transition from {previous_status.value} to {target.value if target else new_status}",
            actor,
            case_id,
        )
    new_status = target

    if not can_perform(actor.role, new_status) or not check_case_access(case, actor):
        return _rejected(
            CaseErrorCode.FORBIDDEN,
            f"Role {actor.role.value} cannot set status {new_status.value}",
            actor,
            case_id,
        )

    reason = reason.strip() if reason else None
    if requires_reason(new_status) and not reason:
        return _rejected(
            CaseErrorCode.REASON_REQUIRED,
            f"A reason is required for {new_status.value}",
            actor,
            case_id,
        )

    now = utc_now()
    try:
        applied = apply_versioned_update(
            db,
            case_id,
            read_version,
            {"status": new_status.value, "status_reason": reason, "updated_at": now},
        )
        if not applied:
            db.rollback()
            latest = current_version(db, case_id)
            logger.warning(
                "Version conflict on case %s: read %s, stored %s",
                case_id, read_version, latest,
                extra=build_log_context(
                    user_id=actor.user_id, role=actor.role.value, case_id=str(case_id)
                ),
            )
            if latest is None:
                return ServiceResult.failure(CaseErrorCode.NOT_FOUND, "Case not found")
            return ServiceResult.failure(
                CaseErrorCode.CONFLICT,
                "Case has been modified by another user",
                current_version=latest,
            )

        audit_service.append(
            db,
            case_id,
            AuditAction.STATUS_CHANGE,
            actor.user_id,
            {
                "before": previous_status.value,
                "after": new_status.value,
                "reason": reason,
                "version": read_version + 1,
            },
            timestamp=now,
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    db.refresh(case)
    logger.info(
        "Case %s status %s -> %s", case_id, previous_status.value, new_status.value,
        extra=build_log_context(user_id=actor.user_id, role=actor.role.value, case_id=str(case_id)),
    )
    return ServiceResult.success(StatusChange(case=case, previous_status=previous_status))
