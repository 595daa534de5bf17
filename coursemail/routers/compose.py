"""Compose router - compose-form sessions and submission validation."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from coursemail.core.deps import (
    get_course_or_404,
    get_current_user,
    get_db,
    require_csrf_header,
)
from coursemail.db.models import Course, User
from coursemail.schemas.compose import (
    ComposeSessionView,
    ComposeSubmission,
    ComposeValidationResult,
)
from coursemail.services import (
    compose_session_service,
    message_service,
    permission_service,
)

router = APIRouter(prefix="/courses/{course_id}/compose", tags=["Compose"])


def _require_can_send(db: Session, user: User, course: Course) -> None:
    if not permission_service.user_can_send(db, user, course.id):
        raise HTTPException(status_code=403, detail="Not allowed to send messages in this course")


@router.get("", response_model=ComposeSessionView)
def get_compose_session(
    draft_id: int | None = None,
    course: Course = Depends(get_course_or_404),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Describe the compose form for the current user.

    Pass ``draft_id`` to resume one of the user's drafts in this course.
    """
    _require_can_send(db, user, course)

    draft = None
    if draft_id is not None:
        draft = message_service.find_user_draft(db, draft_id, user.id, course.id)
        if not draft:
            raise HTTPException(status_code=404, detail="Draft not found")

    return compose_session_service.assemble_session(db, user, course, draft)


@router.post(
    "/validate",
    response_model=ComposeValidationResult,
    dependencies=[Depends(require_csrf_header)],
)
def validate_compose_submission(
    data: ComposeSubmission,
    course: Course = Depends(get_course_or_404),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Check a compose submission. Field problems are reported, never raised."""
    _require_can_send(db, user, course)
    errors = compose_session_service.validate_submission(data)
    return ComposeValidationResult(valid=not errors, errors=errors)
