"""
Authzkit facade.

Single entry point for host code. Wires the permission and role registries,
the grant manager and the resolution engine onto one injected store.

Usage:
    authzkit = Authzkit(MemoryAuthzStore())

    await authzkit.define_permission("edit_articles")
    await authzkit.define_role("editor", ["edit_articles"])
    await authzkit.assign_role("user-1", "editor")
    await authzkit.has_permission("user-1", "edit_articles")  # True

    # Or build the store from configuration
    async with await Authzkit.from_config(config) as authzkit:
        ...
"""
from typing import Any, Iterable, List, Optional, Set

from sqlalchemy.ext.asyncio import AsyncEngine

from authzkit.core.config import AuthzConfig, load_config_from_env
from authzkit.features.grants.manager import GrantManager
from authzkit.features.permissions.registry import PermissionRegistry
from authzkit.features.permissions.schemas import Permission
from authzkit.features.resolution.resolver import ResolutionEngine
from authzkit.features.roles.registry import RoleRegistry
from authzkit.features.roles.schemas import Role
from authzkit.stores.base import AuthzStore, PrincipalId
from authzkit.stores.factory import create_store
from authzkit.utils import get_logger


log = get_logger(__name__)


class Authzkit:
    def __init__(self, store: AuthzStore):
        self.store = store
        self.permissions = PermissionRegistry(store)
        self.roles = RoleRegistry(store, self.permissions)
        self.grants = GrantManager(store, self.permissions, self.roles)
        self.resolver = ResolutionEngine(self.grants, self.roles)

    @classmethod
    async def from_config(
        cls,
        config: Optional[AuthzConfig] = None,
        *,
        engine: Optional[AsyncEngine] = None,
        client: Optional[Any] = None,
        init_schema: bool = True,
    ) -> "Authzkit":
        """
        Create, connect and return an Authzkit for the configured backend.

        Args:
            config: Backend settings. Falls back to AUTHZKIT_* environment
                variables, then to the in-memory store.
            engine: Existing AsyncEngine to share (relational only)
            client: Existing motor client to share (document only)
            init_schema: Create missing tables or indexes after connecting

        Raises:
            ConfigurationError: If connection parameters are missing or invalid
        """
        if config is None:
            config = load_config_from_env() or AuthzConfig()

        store = create_store(config, engine=engine, client=client)
        await store.connect()
        if init_schema:
            await store.init_schema()
        log.info(f"Authzkit initialized with {config.connection.type} store")
        return cls(store)

    async def close(self) -> None:
        await self.store.close()

    async def __aenter__(self) -> "Authzkit":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    # ============================================================================
    # Permissions
    # ============================================================================

    async def define_permission(self, name: str, guard_name: Optional[str] = None) -> Permission:
        return await self.permissions.define_permission(name, guard_name)

    async def get_permissions(self) -> List[Permission]:
        return await self.permissions.get_permissions()

    async def get_permission(self, name: str) -> Optional[Permission]:
        return await self.permissions.get_permission(name)

    async def delete_permission(self, name: str) -> None:
        await self.permissions.delete_permission(name)

    # ============================================================================
    # Roles
    # ============================================================================

    async def define_role(
        self,
        name: str,
        permissions: Iterable[str] = (),
        guard_name: Optional[str] = None,
    ) -> Role:
        return await self.roles.define_role(name, permissions, guard_name)

    async def get_roles(self) -> List[Role]:
        return await self.roles.get_roles()

    async def get_role(self, name: str) -> Optional[Role]:
        return await self.roles.get_role(name)

    async def delete_role(self, name: str) -> None:
        await self.roles.delete_role(name)

    async def add_permission_to_role(self, role_name: str, permission_name: str) -> Role:
        return await self.roles.add_permission_to_role(role_name, permission_name)

    async def remove_permission_from_role(self, role_name: str, permission_name: str) -> Role:
        return await self.roles.remove_permission_from_role(role_name, permission_name)

    # ============================================================================
    # Grants
    # ============================================================================

    async def assign_role(self, principal_id: PrincipalId, role_name: str) -> None:
        await self.grants.assign_role(principal_id, role_name)

    async def assign_permission(self, principal_id: PrincipalId, permission_name: str) -> None:
        await self.grants.assign_permission(principal_id, permission_name)

    async def revoke_role(self, principal_id: PrincipalId, role_name: str) -> None:
        await self.grants.revoke_role(principal_id, role_name)

    async def revoke_permission(self, principal_id: PrincipalId, permission_name: str) -> None:
        await self.grants.revoke_permission(principal_id, permission_name)

    async def get_user_roles(self, principal_id: PrincipalId) -> Set[str]:
        return await self.grants.get_user_roles(principal_id)

    async def get_user_permissions(self, principal_id: PrincipalId) -> Set[str]:
        return await self.grants.get_user_permissions(principal_id)

    # ============================================================================
    # Checks
    # ============================================================================

    async def has_role(self, principal_id: PrincipalId, role_name: str) -> bool:
        return await self.resolver.has_role(principal_id, role_name)

    async def has_permission(self, principal_id: PrincipalId, permission_name: str) -> bool:
        return await self.resolver.has_permission(principal_id, permission_name)

    async def role_has_permission(self, role_name: str, permission_name: str) -> bool:
        return await self.resolver.role_has_permission(role_name, permission_name)

    async def has_any(self, principal_id: PrincipalId, requirements: Iterable[str]) -> bool:
        return await self.resolver.has_any(principal_id, requirements)

    async def reset(self) -> None:
        """Delete every permission, role and grant."""
        await self.store.reset()
        log.info("Authorization data reset")
