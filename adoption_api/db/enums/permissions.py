"""Role permission helper sets."""

from adoption_api.db.enums.auth import Role

# Roles that can open a new case
ROLES_CAN_CREATE_CASE = {Role.HMCTS_CASE_OFFICER}

# Roles that can edit case fields outside the status lifecycle
ROLES_CAN_EDIT_CASE = {Role.HMCTS_CASE_OFFICER}

# Roles that can soft-delete cases
ROLES_CAN_DELETE_CASE = {Role.HMCTS_CASE_OFFICER}

# Roles that can link and unlink users to cases
ROLES_CAN_ASSIGN = {Role.HMCTS_CASE_OFFICER}

# Roles that can read a case's audit trail
ROLES_CAN_VIEW_AUDIT = {Role.HMCTS_CASE_OFFICER, Role.JUDGE_LEGAL_ADVISER}

# Roles that receive the adopter-facing (redacted) case representation
ROLES_REDACTED_VIEW = {Role.ADOPTER}
