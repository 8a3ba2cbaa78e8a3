"""In-memory authorization store implementation.

Concrete implementation using Python dicts and sets.
No external dependencies - useful for testing and development.
"""

from typing import Dict, List, Optional, Set

from authzkit.features.permissions.schemas import Permission
from authzkit.features.roles.schemas import Role
from authzkit.stores.base import AuthzStore, PrincipalId, principal_key


class MemoryAuthzStore(AuthzStore):
    """In-memory dict storage.

    Records are kept for the lifetime of the process and lost on restart.
    Uniqueness is structural: permissions and roles are keyed by name and
    grants are sets, so duplicate inserts are naturally no-ops.

    Returned records are copies, so callers cannot mutate stored state.

    Usage:
        ```python
        store = MemoryAuthzStore()
        authzkit = Authzkit(store)
        ```
    """

    def __init__(self):
        self._permissions: Dict[str, Permission] = {}
        self._roles: Dict[str, Role] = {}
        self._user_roles: Dict[str, Set[str]] = {}
        self._user_permissions: Dict[str, Set[str]] = {}

    async def get_permission(self, name: str) -> Optional[Permission]:
        permission = self._permissions.get(name)
        return permission.model_copy() if permission else None

    async def get_permissions(self) -> List[Permission]:
        return [p.model_copy() for p in self._permissions.values()]

    async def set_permission(self, permission: Permission) -> None:
        self._permissions[permission.name] = permission.model_copy()

    async def has_permission(self, name: str) -> bool:
        return name in self._permissions

    async def delete_permission(self, name: str) -> None:
        self._permissions.pop(name, None)

    async def get_role(self, name: str) -> Optional[Role]:
        role = self._roles.get(name)
        return role.model_copy(deep=True) if role else None

    async def get_roles(self) -> List[Role]:
        return [r.model_copy(deep=True) for r in self._roles.values()]

    async def set_role(self, role: Role) -> None:
        self._roles[role.name] = role.model_copy(deep=True)

    async def has_role(self, name: str) -> bool:
        return name in self._roles

    async def delete_role(self, name: str) -> None:
        self._roles.pop(name, None)

        # Cascade: drop the role from every principal that holds it
        for key in list(self._user_roles):
            self._discard(self._user_roles, key, name)

    async def get_user_roles(self, principal_id: PrincipalId) -> Set[str]:
        return set(self._user_roles.get(principal_key(principal_id), ()))

    async def add_user_role(self, principal_id: PrincipalId, role_name: str) -> None:
        self._user_roles.setdefault(principal_key(principal_id), set()).add(role_name)

    async def remove_user_role(self, principal_id: PrincipalId, role_name: str) -> None:
        self._discard(self._user_roles, principal_key(principal_id), role_name)

    async def has_user_role(self, principal_id: PrincipalId, role_name: str) -> bool:
        return role_name in self._user_roles.get(principal_key(principal_id), ())

    async def get_user_permissions(self, principal_id: PrincipalId) -> Set[str]:
        return set(self._user_permissions.get(principal_key(principal_id), ()))

    async def add_user_permission(self, principal_id: PrincipalId, permission_name: str) -> None:
        self._user_permissions.setdefault(principal_key(principal_id), set()).add(permission_name)

    async def remove_user_permission(self, principal_id: PrincipalId, permission_name: str) -> None:
        self._discard(self._user_permissions, principal_key(principal_id), permission_name)

    async def has_user_permission(self, principal_id: PrincipalId, permission_name: str) -> bool:
        return permission_name in self._user_permissions.get(principal_key(principal_id), ())

    async def reset(self) -> None:
        self._permissions.clear()
        self._roles.clear()
        self._user_roles.clear()
        self._user_permissions.clear()

    @staticmethod
    def _discard(grants: Dict[str, Set[str]], key: str, name: str) -> None:
        names = grants.get(key)
        if names is None:
            return
        names.discard(name)
        # Empty sets are dropped so principals without grants leave no trace
        if not names:
            del grants[key]
