"""Case status transition rules.

Pure lookups over the fixed status enumeration. Nothing here touches storage,
so every verdict is deterministic for the same inputs.
"""

from adoption_api.db.enums import CaseStatus

S = CaseStatus

STATUS_TRANSITIONS: dict[CaseStatus, frozenset[CaseStatus]] = {
    S.APPLICATION: frozenset({S.DIRECTIONS, S.ON_HOLD, S.APPLICATION_WITHDRAWN}),
    S.DIRECTIONS: frozenset(
        {S.CONSENT_AND_REPORTING, S.ON_HOLD, S.ADJOURNED, S.APPLICATION_WITHDRAWN}
    ),
    S.CONSENT_AND_REPORTING: frozenset(
        {S.FINAL_HEARING, S.ON_HOLD, S.ADJOURNED, S.APPLICATION_WITHDRAWN}
    ),
    S.FINAL_HEARING: frozenset(
        {S.ORDER_GRANTED, S.APPLICATION_REFUSED, S.ADJOURNED, S.APPLICATION_WITHDRAWN}
    ),
    S.ON_HOLD: frozenset(
        {
            S.APPLICATION,
            S.DIRECTIONS,
            S.CONSENT_AND_REPORTING,
            S.FINAL_HEARING,
            S.APPLICATION_WITHDRAWN,
        }
    ),
    S.ADJOURNED: frozenset(
        {S.DIRECTIONS, S.CONSENT_AND_REPORTING, S.FINAL_HEARING, S.APPLICATION_WITHDRAWN}
    ),
    S.ORDER_GRANTED: frozenset(),
    S.APPLICATION_REFUSED: frozenset(),
    S.APPLICATION_WITHDRAWN: frozenset(),
}

# Transitions into these statuses must carry a non-empty reason
REASON_REQUIRED_STATUSES: frozenset[CaseStatus] = frozenset(
    {S.ON_HOLD, S.APPLICATION_WITHDRAWN}
)

TERMINAL_STATUSES: frozenset[CaseStatus] = frozenset(
    status for status, allowed in STATUS_TRANSITIONS.items() if not allowed
)


def is_valid_transition(from_status: CaseStatus | str, to_status: CaseStatus | str) -> bool:
    """True iff to_status is in the allow-list for from_status."""
    return CaseStatus(to_status) in STATUS_TRANSITIONS[CaseStatus(from_status)]


def is_terminal(status: CaseStatus | str) -> bool:
    """True iff the status has no outgoing transitions."""
    return not STATUS_TRANSITIONS[CaseStatus(status)]


def requires_reason(status: CaseStatus | str) -> bool:
    return CaseStatus(status) in REASON_REQUIRED_STATUSES


def allowed_transitions(status: CaseStatus | str) -> list[CaseStatus]:
    """Allowed targets from status, in enum declaration order."""
    allowed = STATUS_TRANSITIONS[CaseStatus(status)]
    return [s for s in CaseStatus if s in allowed]
