"""Role-based access control (RBAC) permissions and dependencies."""

from collections.abc import Awaitable, Callable
from typing import Annotated

from fastapi import Depends

from charity_cms.dependencies.dependencies import get_current_user
from charity_cms.errors import ForbiddenError
from charity_cms.schemas.auth import CurrentUser, Role


def require_role(roles: list[Role]) -> Callable[..., Awaitable[CurrentUser]]:
    """
    Create a dependency that requires specific roles.

    Args:
        roles: List of allowed roles

    Returns:
        Callable: Dependency function

    Example:
        @router.get("/admin-only")
        async def admin_route(user: Annotated[CurrentUser, Depends(require_role(["admin"]))]):
            ...
    """

    async def role_checker(
        user: Annotated[CurrentUser, Depends(get_current_user)],
    ) -> CurrentUser:
        if user.role not in roles:
            raise ForbiddenError(
                f"Insufficient permissions. Required role: {', '.join(roles)}",
            )
        return user

    return role_checker


require_admin = require_role(["admin"])

# Type aliases for common dependencies
AdminUserDep = Annotated[CurrentUser, Depends(require_admin)]
