"""Structured logging helpers (PII-safe).

Only identifiers go into log context. Names, notes and status reasons never do.
"""

from typing import Any


def build_log_context(
    *,
    user_id: str | None = None,
    role: str | None = None,
    case_id: str | None = None,
    court_code: str | None = None,
) -> dict[str, Any]:
    """Return a PII-safe log context dict."""
    context: dict[str, Any] = {}
    if user_id:
        context["user_id"] = user_id
    if role:
        context["role"] = role
    if case_id:
        context["case_id"] = case_id
    if court_code:
        context["court_code"] = court_code
    return context
