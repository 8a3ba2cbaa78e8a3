"""
Grant manager: role and permission assignments per principal.

Principals are opaque ids and need no registration. Assignments reference
registered roles and permissions; revocations never fail.
"""
from typing import Set

from authzkit.core.errors import PermissionNotFound, RoleNotFound
from authzkit.features.permissions.registry import PermissionRegistry
from authzkit.features.roles.registry import RoleRegistry
from authzkit.stores.base import AuthzStore, PrincipalId
from authzkit.utils import get_logger


log = get_logger(__name__)


class GrantManager:
    def __init__(self, store: AuthzStore, permissions: PermissionRegistry, roles: RoleRegistry):
        self.store = store
        self.permissions = permissions
        self.roles = roles

    async def assign_role(self, principal_id: PrincipalId, role_name: str) -> None:
        """
        Grant a role to a principal. Granting it twice is a silent no-op.

        Raises:
            RoleNotFound: If the role is not registered
        """
        if not await self.roles.has_role(role_name):
            raise RoleNotFound(role_name)
        await self.store.add_user_role(principal_id, role_name)
        log.info(f"Assigned role {role_name} to user {principal_id}")

    async def assign_permission(self, principal_id: PrincipalId, permission_name: str) -> None:
        """
        Grant a permission directly to a principal. Granting it twice is a silent no-op.

        Raises:
            PermissionNotFound: If the permission is not registered
        """
        if not await self.permissions.has_permission(permission_name):
            raise PermissionNotFound(permission_name)
        await self.store.add_user_permission(principal_id, permission_name)
        log.info(f"Assigned permission {permission_name} to user {principal_id}")

    async def revoke_role(self, principal_id: PrincipalId, role_name: str) -> None:
        await self.store.remove_user_role(principal_id, role_name)
        log.info(f"Revoked role {role_name} from user {principal_id}")

    async def revoke_permission(self, principal_id: PrincipalId, permission_name: str) -> None:
        await self.store.remove_user_permission(principal_id, permission_name)
        log.info(f"Revoked permission {permission_name} from user {principal_id}")

    async def get_user_roles(self, principal_id: PrincipalId) -> Set[str]:
        return await self.store.get_user_roles(principal_id)

    async def get_user_permissions(self, principal_id: PrincipalId) -> Set[str]:
        """Direct permission grants only; role-derived permissions are not included."""
        return await self.store.get_user_permissions(principal_id)

    async def has_user_role(self, principal_id: PrincipalId, role_name: str) -> bool:
        return await self.store.has_user_role(principal_id, role_name)

    async def has_user_permission(self, principal_id: PrincipalId, permission_name: str) -> bool:
        return await self.store.has_user_permission(principal_id, permission_name)
