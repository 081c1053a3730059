"""Authentication and role enums."""

from enum import Enum


class Role(str, Enum):
    """
    Actor roles issued by the session layer.

    - HMCTS_CASE_OFFICER: Court case officer (creates, progresses, deletes cases)
    - JUDGE_LEGAL_ADVISER: Judicial role (only role that may grant or refuse)
    - CAFCASS_OFFICER: Children's guardian / reporting officer
    - LA_SOCIAL_WORKER: Local authority social worker
    - VAA_WORKER: Voluntary adoption agency worker
    - ADOPTER: Applicant; sees a redacted view of their own cases
    """
    HMCTS_CASE_OFFICER = "HMCTS_CASE_OFFICER"
    JUDGE_LEGAL_ADVISER = "JUDGE_LEGAL_ADVISER"
    CAFCASS_OFFICER = "CAFCASS_OFFICER"
    LA_SOCIAL_WORKER = "LA_SOCIAL_WORKER"
    VAA_WORKER = "VAA_WORKER"
    ADOPTER = "ADOPTER"

    @classmethod
    def has_value(cls, value: str) -> bool:
        """Check if value is a valid role."""
        return value in cls._value2member_map_
