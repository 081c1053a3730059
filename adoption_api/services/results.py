"""Typed outcomes for case operations.

Every recoverable failure is returned, never raised, so callers branch on
`result.code`. Storage faults are not part of this taxonomy and propagate.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class CaseErrorCode(str, Enum):
    """Recoverable failure kinds for case operations."""

    VALIDATION = "VALIDATION"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    TERMINAL_STATUS = "TERMINAL_STATUS"
    INVALID_TRANSITION = "INVALID_TRANSITION"
    REASON_REQUIRED = "REASON_REQUIRED"
    CONFLICT = "CONFLICT"


@dataclass(frozen=True)
class ServiceResult(Generic[T]):
    """Success value or a failure code with a human-readable message.

    current_version is only set for CONFLICT, so the caller can re-fetch
    and decide whether to retry.
    """

    value: T | None = None
    code: CaseErrorCode | None = None
    message: str | None = None
    current_version: int | None = None

    @property
    def ok(self) -> bool:
        return self.code is None

    @classmethod
    def success(cls, value: T) -> "ServiceResult[T]":
        return cls(value=value)

    @classmethod
    def failure(
        cls,
        code: CaseErrorCode,
        message: str,
        *,
        current_version: int | None = None,
    ) -> "ServiceResult[T]":
        return cls(code=code, message=message, current_version=current_version)
