"""
Resolution engine.

Answers role and permission checks from the current grants. Role definitions
are read live on every check, so changes to a role's permission list apply
to every holder immediately. Nothing here writes to the store.
"""
from typing import Iterable

from authzkit.features.grants.manager import GrantManager
from authzkit.features.roles.registry import RoleRegistry
from authzkit.stores.base import PrincipalId
from authzkit.utils import get_logger


log = get_logger(__name__)


class ResolutionEngine:
    def __init__(self, grants: GrantManager, roles: RoleRegistry):
        self.grants = grants
        self.roles = roles

    async def has_role(self, principal_id: PrincipalId, role_name: str) -> bool:
        return await self.grants.has_user_role(principal_id, role_name)

    async def has_permission(self, principal_id: PrincipalId, permission_name: str) -> bool:
        """
        Check a permission through direct grants, then through held roles.

        A direct grant short-circuits. Otherwise each held role is loaded and
        the first one whose permission list contains the name wins. Roles that
        no longer exist are skipped.
        """
        if await self.grants.has_user_permission(principal_id, permission_name):
            log.debug(f"User {principal_id} granted {permission_name} directly")
            return True

        for role_name in await self.grants.get_user_roles(principal_id):
            role = await self.roles.get_role(role_name)
            if role is None:
                continue
            if permission_name in role.permissions:
                log.debug(f"User {principal_id} granted {permission_name} via role {role_name}")
                return True

        log.debug(f"User {principal_id} denied {permission_name}")
        return False

    async def role_has_permission(self, role_name: str, permission_name: str) -> bool:
        """False for an unknown role rather than an error."""
        role = await self.roles.get_role(role_name)
        return role is not None and permission_name in role.permissions

    async def has_any(self, principal_id: PrincipalId, requirements: Iterable[str]) -> bool:
        """
        True if any requirement is a role the principal holds or a permission
        it resolves to. Each requirement is checked as a role first.
        """
        for requirement in requirements:
            if await self.has_role(principal_id, requirement):
                return True
            if await self.has_permission(principal_id, requirement):
                return True
        return False
