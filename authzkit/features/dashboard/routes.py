"""
Dashboard API routes.

Admin endpoints for permissions, roles and user grants, protected by HTTP
Basic auth. Mount the router under any prefix:

    app.include_router(create_dashboard_router(authzkit, secret="s3cret"), prefix="/authzkit")

Without a secret (argument or AUTHZKIT_DASHBOARD_SECRET) every request
answers 500 so a misconfigured dashboard is never open.
"""
import secrets
from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from authzkit.core import config
from authzkit.core.errors import AlreadyExists, AuthzkitError, NotFound
from authzkit.engine import Authzkit
from authzkit.features.dashboard.schemas import (
    AccessCheckResponse,
    AssignPermissionToUser,
    AssignRoleToUser,
    PermissionCreate,
    RoleCreate,
    RolePermissionAdd,
)
from authzkit.features.permissions.schemas import Permission
from authzkit.features.roles.schemas import Role
from authzkit.utils import get_logger


log = get_logger(__name__)

REALM_HEADER = {"WWW-Authenticate": 'Basic realm="Authzkit Dashboard"'}

security = HTTPBasic(auto_error=False)


def _http_error(exc: AuthzkitError) -> HTTPException:
    if isinstance(exc, AlreadyExists):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    if isinstance(exc, NotFound):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


def _matches(given: str, expected: str) -> bool:
    return secrets.compare_digest(given.encode("utf-8"), expected.encode("utf-8"))


def create_dashboard_router(
    authzkit: Authzkit,
    username: Optional[str] = None,
    secret: Optional[str] = None,
) -> APIRouter:
    """
    Build the dashboard API router for one Authzkit instance.

    Args:
        authzkit: Instance every route operates on
        username: Basic auth user, defaults to AUTHZKIT_DASHBOARD_USERNAME or "admin"
        secret: Basic auth password, defaults to AUTHZKIT_DASHBOARD_SECRET

    Returns:
        APIRouter with all routes under /api
    """
    env_username, env_secret = config.dashboard_credentials()
    username = username or env_username
    secret = secret or env_secret
    if not secret:
        log.warning("Authzkit dashboard has no secret configured; all requests will be rejected")

    async def require_dashboard_user(
        credentials: Annotated[Optional[HTTPBasicCredentials], Depends(security)],
    ) -> str:
        if not secret:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Dashboard configuration error: No secret provided.",
            )
        if credentials is None or not (
            _matches(credentials.username, username) & _matches(credentials.password, secret)
        ):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Authentication required.",
                headers=REALM_HEADER,
            )
        return credentials.username

    router = APIRouter(prefix="/api", dependencies=[Depends(require_dashboard_user)])

    # ============================================================================
    # Permission Routes
    # ============================================================================

    @router.get("/permissions", response_model=List[Permission])
    async def list_permissions():
        return await authzkit.get_permissions()

    @router.post("/permissions", response_model=Permission, status_code=status.HTTP_201_CREATED)
    async def create_permission(permission: PermissionCreate):
        try:
            return await authzkit.define_permission(permission.name, permission.guard_name)
        except AuthzkitError as exc:
            raise _http_error(exc) from exc

    @router.delete("/permissions/{name}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_permission(name: str):
        await authzkit.delete_permission(name)

    # ============================================================================
    # Role Routes
    # ============================================================================

    @router.get("/roles", response_model=List[Role])
    async def list_roles():
        return await authzkit.get_roles()

    @router.post("/roles", response_model=Role, status_code=status.HTTP_201_CREATED)
    async def create_role(role: RoleCreate):
        try:
            return await authzkit.define_role(role.name, role.permissions, role.guard_name)
        except AuthzkitError as exc:
            raise _http_error(exc) from exc

    @router.delete("/roles/{name}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_role(name: str):
        await authzkit.delete_role(name)

    @router.post("/roles/{name}/permissions", response_model=Role)
    async def add_permission_to_role(name: str, body: RolePermissionAdd):
        try:
            return await authzkit.add_permission_to_role(name, body.permission_name)
        except AuthzkitError as exc:
            raise _http_error(exc) from exc

    @router.delete("/roles/{name}/permissions/{permission}", response_model=Role)
    async def remove_permission_from_role(name: str, permission: str):
        try:
            return await authzkit.remove_permission_from_role(name, permission)
        except AuthzkitError as exc:
            raise _http_error(exc) from exc

    # ============================================================================
    # User Grant Routes
    # ============================================================================

    @router.get("/users/{user_id}/roles", response_model=List[str])
    async def get_user_roles(user_id: str):
        return sorted(await authzkit.get_user_roles(user_id))

    @router.post("/users/{user_id}/roles", response_model=List[str], status_code=status.HTTP_201_CREATED)
    async def assign_role(user_id: str, body: AssignRoleToUser):
        try:
            await authzkit.assign_role(user_id, body.role_name)
        except AuthzkitError as exc:
            raise _http_error(exc) from exc
        return sorted(await authzkit.get_user_roles(user_id))

    @router.delete("/users/{user_id}/roles/{role_name}", status_code=status.HTTP_204_NO_CONTENT)
    async def revoke_role(user_id: str, role_name: str):
        await authzkit.revoke_role(user_id, role_name)

    @router.get("/users/{user_id}/permissions", response_model=List[str])
    async def get_user_permissions(user_id: str):
        return sorted(await authzkit.get_user_permissions(user_id))

    @router.post(
        "/users/{user_id}/permissions", response_model=List[str], status_code=status.HTTP_201_CREATED
    )
    async def assign_permission(user_id: str, body: AssignPermissionToUser):
        try:
            await authzkit.assign_permission(user_id, body.permission_name)
        except AuthzkitError as exc:
            raise _http_error(exc) from exc
        return sorted(await authzkit.get_user_permissions(user_id))

    @router.delete(
        "/users/{user_id}/permissions/{permission_name}", status_code=status.HTTP_204_NO_CONTENT
    )
    async def revoke_permission(user_id: str, permission_name: str):
        await authzkit.revoke_permission(user_id, permission_name)

    @router.get("/users/{user_id}/check/{name}", response_model=AccessCheckResponse)
    async def check_access(user_id: str, name: str):
        """Check a name as a role and as a permission for the user."""
        has_role = await authzkit.has_role(user_id, name)
        has_permission = await authzkit.has_permission(user_id, name)
        return AccessCheckResponse(
            user_id=user_id,
            name=name,
            has_role=has_role,
            has_permission=has_permission,
            allowed=has_role or has_permission,
        )

    return router
