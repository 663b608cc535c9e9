from taskhub.dependencies.auth import (
    AuthenticatedUser,
    get_current_user,
    get_settings,
    require_admin,
)
from taskhub.dependencies.projects import get_owned_project, get_project_with_authorization

__all__ = [
    "AuthenticatedUser",
    "get_current_user",
    "get_settings",
    "require_admin",
    "get_project_with_authorization",
    "get_owned_project",
]
