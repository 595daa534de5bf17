"""Structured logging helpers (PII-safe)."""

from typing import Any


def build_log_context(
    *,
    user_id: int | None = None,
    course_id: int | None = None,
    signature_id: int | None = None,
    draft_id: int | None = None,
) -> dict[str, Any]:
    """Return a PII-safe log context dict (ids only, never titles or bodies)."""
    context: dict[str, Any] = {}
    if user_id:
        context["user_id"] = user_id
    if course_id:
        context["course_id"] = course_id
    if signature_id:
        context["signature_id"] = signature_id
    if draft_id:
        context["draft_id"] = draft_id
    return context
