"""Course config router - per-course messaging overrides."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from coursemail.core.deps import (
    get_course_or_404,
    get_current_user,
    get_db,
    require_course_capability,
    require_csrf_header,
)
from coursemail.db.models import Course, User
from coursemail.schemas.config import CourseConfigUpdate, CourseMessagingConfig
from coursemail.services import messaging_config_service, permission_service

router = APIRouter(prefix="/courses/{course_id}/config", tags=["Course Config"])


@router.get("", response_model=CourseMessagingConfig)
def get_course_config(
    course: Course = Depends(get_course_or_404),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Effective messaging configuration (block defaults plus course overrides)."""
    if not permission_service.user_can_send(db, user, course.id):
        raise HTTPException(status_code=403, detail="Not allowed to view this course's configuration")
    return messaging_config_service.resolve_course_config(db, course.id)


@router.put(
    "",
    response_model=CourseMessagingConfig,
    dependencies=[Depends(require_csrf_header)],
)
def update_course_config(
    data: CourseConfigUpdate,
    course: Course = Depends(get_course_or_404),
    user: User = Depends(require_course_capability("canconfig")),
    db: Session = Depends(get_db),
):
    """Set course-level overrides. Omitted fields keep their current value."""
    try:
        return messaging_config_service.set_course_overrides(
            db, course.id, data.model_dump(exclude_none=True)
        )
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))


@router.delete(
    "",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_csrf_header)],
)
def reset_course_config(
    course: Course = Depends(get_course_or_404),
    user: User = Depends(require_course_capability("canconfig")),
    db: Session = Depends(get_db),
):
    """Drop every course override so block defaults apply again."""
    messaging_config_service.reset_course_config(db, course.id)
    return None
