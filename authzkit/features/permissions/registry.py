"""
Permission registry.

Owns creation, listing, existence checks and deletion of permissions.
Deleting a permission never cascades: role snapshots and direct grants that
name it are left in place.
"""
from typing import List, Optional

from authzkit.core.errors import AlreadyExists
from authzkit.features.permissions.schemas import Permission
from authzkit.stores.base import AuthzStore
from authzkit.utils import get_logger


log = get_logger(__name__)


class PermissionRegistry:
    def __init__(self, store: AuthzStore):
        self.store = store

    async def define_permission(self, name: str, guard_name: Optional[str] = None) -> Permission:
        """
        Register a new permission.

        Args:
            name: Unique permission name
            guard_name: Optional guard namespace

        Returns:
            The stored Permission

        Raises:
            AlreadyExists: If a permission with this name is registered
        """
        if await self.store.has_permission(name):
            raise AlreadyExists("permission", name)

        permission = Permission(name=name, guard_name=guard_name)
        await self.store.set_permission(permission)
        log.info(f"Defined permission {name}")
        return permission

    async def get_permissions(self) -> List[Permission]:
        return await self.store.get_permissions()

    async def get_permission(self, name: str) -> Optional[Permission]:
        return await self.store.get_permission(name)

    async def has_permission(self, name: str) -> bool:
        return await self.store.has_permission(name)

    async def delete_permission(self, name: str) -> None:
        """Remove a permission. Deleting an unknown name is a no-op."""
        await self.store.delete_permission(name)
        log.info(f"Deleted permission {name}")
