from taskhub.api.auth import router as auth_router
from taskhub.api.health import router as health_router
from taskhub.api.notifications import router as notifications_router
from taskhub.api.projects import router as projects_router
from taskhub.api.tasks import router as tasks_router
from taskhub.api.users import router as users_router

__all__ = [
    "auth_router",
    "health_router",
    "notifications_router",
    "projects_router",
    "tasks_router",
    "users_router",
]
