"""API routers."""

from coursemail.routers.compose import router as compose_router
from coursemail.routers.course_config import router as course_config_router
from coursemail.routers.signatures import router as signatures_router
