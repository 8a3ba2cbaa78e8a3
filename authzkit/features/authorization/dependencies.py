"""
FastAPI route protection backed by an Authzkit instance.

The host application supplies its own authentication as a dependency that
returns the current principal id (or None when unauthenticated).
"""
from typing import Any, Callable, Optional, Sequence, Union

from fastapi import Depends, HTTPException, status

from authzkit.engine import Authzkit
from authzkit.stores.base import PrincipalId
from authzkit.utils import get_logger


log = get_logger(__name__)


def authorize(
    authzkit: Authzkit,
    requirements: Union[str, Sequence[str]],
    principal_dependency: Callable[..., Any],
):
    """
    FastAPI dependency requiring ANY of the given roles or permissions.

    Each requirement is checked as a role first, then as a permission.

    Usage:
        async def current_user_id(request: Request) -> Optional[str]:
            return request.headers.get("X-User-Id")

        @router.post("/articles")
        async def create_article(
            user_id: str = Depends(authorize(authzkit, ["editor", "edit_articles"], current_user_id))
        ):
            pass

    Args:
        authzkit: Instance to check against
        requirements: A role/permission name, or several of which one suffices
        principal_dependency: Dependency returning the current principal id

    Returns:
        Dependency function that returns the principal id when access is allowed

    Raises:
        HTTPException: 401 if there is no principal, 403 if no requirement is met
    """
    required = [requirements] if isinstance(requirements, str) else list(requirements)

    async def authorization_dependency(
        principal_id: Optional[PrincipalId] = Depends(principal_dependency),
    ) -> PrincipalId:
        if principal_id is None:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Authentication required.",
            )

        if not await authzkit.has_any(principal_id, required):
            log.debug(f"User {principal_id} denied, requires one of {required}")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Forbidden: Insufficient permissions.",
            )

        return principal_id

    return authorization_dependency
