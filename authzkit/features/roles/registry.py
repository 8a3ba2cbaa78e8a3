"""
Role registry.

Roles hold an ordered snapshot of permission names taken when the role is
defined. Every referenced permission must exist at that moment.
"""
from typing import Iterable, List, Optional

from authzkit.core.errors import AlreadyExists, PermissionNotFound, RoleNotFound
from authzkit.features.permissions.registry import PermissionRegistry
from authzkit.features.roles.schemas import Role
from authzkit.stores.base import AuthzStore
from authzkit.utils import get_logger


log = get_logger(__name__)


class RoleRegistry:
    def __init__(self, store: AuthzStore, permissions: PermissionRegistry):
        self.store = store
        self.permissions = permissions

    async def define_role(
        self,
        name: str,
        permissions: Iterable[str] = (),
        guard_name: Optional[str] = None,
    ) -> Role:
        """
        Register a new role bundling existing permissions.

        Permission names are validated in order and the first missing one is
        reported. Nothing is written unless every name validates.

        Validation and insert are separate store calls. A permission deleted
        between them leaves the new role referencing a missing permission;
        resolution simply never matches it.

        Args:
            name: Unique role name
            permissions: Permission names, stored in the given order
            guard_name: Optional guard namespace

        Returns:
            The stored Role

        Raises:
            AlreadyExists: If a role with this name is registered
            PermissionNotFound: If a listed permission is not registered
        """
        if await self.store.has_role(name):
            raise AlreadyExists("role", name)

        permission_names = list(permissions)
        for permission_name in permission_names:
            if not await self.permissions.has_permission(permission_name):
                log.debug(f"Role {name} references unknown permission {permission_name}")
                raise PermissionNotFound(permission_name, role_name=name)

        role = Role(name=name, guard_name=guard_name, permissions=permission_names)
        await self.store.set_role(role)
        log.info(f"Defined role {name} with permissions {permission_names}")
        return role

    async def get_roles(self) -> List[Role]:
        return await self.store.get_roles()

    async def get_role(self, name: str) -> Optional[Role]:
        return await self.store.get_role(name)

    async def has_role(self, name: str) -> bool:
        return await self.store.has_role(name)

    async def delete_role(self, name: str) -> None:
        """Remove a role together with every user assignment of it."""
        await self.store.delete_role(name)
        log.info(f"Deleted role {name}")

    async def add_permission_to_role(self, role_name: str, permission_name: str) -> Role:
        """
        Append a permission name to a role's list. Already present is a no-op.

        The name is not checked against the permission registry. Resolution
        compares names only, so an unregistered name still grants through the role.

        Raises:
            RoleNotFound: If the role is not registered
        """
        role = await self.store.add_role_permission(role_name, permission_name)
        if role is None:
            raise RoleNotFound(role_name)
        log.info(f"Added permission {permission_name} to role {role_name}")
        return role

    async def remove_permission_from_role(self, role_name: str, permission_name: str) -> Role:
        """
        Drop a permission from a role's list. Absent is a no-op.

        Raises:
            RoleNotFound: If the role is not registered
        """
        role = await self.store.remove_role_permission(role_name, permission_name)
        if role is None:
            raise RoleNotFound(role_name)
        log.info(f"Removed permission {permission_name} from role {role_name}")
        return role
