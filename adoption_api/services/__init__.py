"""Service layer modules."""

from adoption_api.services.results import CaseErrorCode, ServiceResult

__all__ = ["CaseErrorCode", "ServiceResult"]
