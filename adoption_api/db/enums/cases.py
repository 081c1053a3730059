"""Case lifecycle enums."""

from enum import Enum


class CaseStatus(str, Enum):
    """
    Adoption case status.

    Active:
        APPLICATION → DIRECTIONS → CONSENT_AND_REPORTING → FINAL_HEARING
    Paused:
        ON_HOLD, ADJOURNED
    Terminal (no outgoing transitions):
        ORDER_GRANTED, APPLICATION_REFUSED, APPLICATION_WITHDRAWN
    """
    APPLICATION = "APPLICATION"
    DIRECTIONS = "DIRECTIONS"
    CONSENT_AND_REPORTING = "CONSENT_AND_REPORTING"
    FINAL_HEARING = "FINAL_HEARING"
    ON_HOLD = "ON_HOLD"
    ADJOURNED = "ADJOURNED"
    ORDER_GRANTED = "ORDER_GRANTED"
    APPLICATION_REFUSED = "APPLICATION_REFUSED"
    APPLICATION_WITHDRAWN = "APPLICATION_WITHDRAWN"

    @classmethod
    def has_value(cls, value: str) -> bool:
        return value in cls._value2member_map_


class AdoptionType(str, Enum):
    """Kind of adoption application."""
    AGENCY_ADOPTION = "AGENCY_ADOPTION"
    STEP_PARENT_ADOPTION = "STEP_PARENT_ADOPTION"
    INTERCOUNTRY_ADOPTION = "INTERCOUNTRY_ADOPTION"
    NON_AGENCY_ADOPTION = "NON_AGENCY_ADOPTION"
    FOSTER_TO_ADOPT = "FOSTER_TO_ADOPT"
    ADOPTION_FOLLOWING_PLACEMENT_ORDER = "ADOPTION_FOLLOWING_PLACEMENT_ORDER"

    @classmethod
    def has_value(cls, value: str) -> bool:
        return value in cls._value2member_map_


class AssignmentType(str, Enum):
    """How a user is linked to a case."""
    JUDICIAL = "JUDICIAL"
    SOCIAL_WORKER = "SOCIAL_WORKER"
    CAFCASS = "CAFCASS"
    APPLICANT = "APPLICANT"


class CaseSortField(str, Enum):
    """Sortable columns for case lists."""
    CREATED_AT = "created_at"
    CASE_NUMBER = "case_number"
    STATUS = "status"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"
