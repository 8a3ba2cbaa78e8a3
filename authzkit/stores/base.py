"""Authorization store abstract interface.

This module defines the AuthzStore interface that every storage
implementation must follow (memory, document, relational).
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Set, Union

from authzkit.features.permissions.schemas import Permission
from authzkit.features.roles.schemas import Role

PrincipalId = Union[str, int]


def principal_key(principal_id: PrincipalId) -> str:
    """Normalize a principal id so ``1`` and ``"1"`` address the same grants."""
    return str(principal_id)


class AuthzStore(ABC):
    """Abstract interface for permission, role and grant persistence.

    All backends must implement this interface and behave identically:

    - Reads observe every write previously made through the same instance.
    - Inserting a key that already exists (permission name, role name, or
      either grant pair) is absorbed as success, never surfaced as an error.
    - ``delete_role`` removes the UserRole grants that reference the role
      within the same call.
    - Deleting a permission leaves role snapshots and UserPermission grants alone.

    Implementations:
        - MemoryAuthzStore: dicts and sets, process lifetime
        - DocumentAuthzStore: MongoDB collections with unique indexes (motor)
        - RelationalAuthzStore: SQLAlchemy tables with composite keys
    """

    async def connect(self) -> None:
        """Prepare the backend (connect, create indexes). No-op by default."""

    async def close(self) -> None:
        """Release backend resources. No-op by default."""

    async def init_schema(self) -> None:
        """Create backend structures (tables, indexes) if missing. No-op by default."""

    # -- Permissions -----------------------------------------------------

    @abstractmethod
    async def get_permission(self, name: str) -> Optional[Permission]:
        pass

    @abstractmethod
    async def get_permissions(self) -> List[Permission]:
        """Return every permission, in storage-defined order."""
        pass

    @abstractmethod
    async def set_permission(self, permission: Permission) -> None:
        """Insert the permission, or overwrite the record with the same name."""
        pass

    @abstractmethod
    async def has_permission(self, name: str) -> bool:
        pass

    @abstractmethod
    async def delete_permission(self, name: str) -> None:
        """Remove the permission if present."""
        pass

    # -- Roles -----------------------------------------------------------

    @abstractmethod
    async def get_role(self, name: str) -> Optional[Role]:
        pass

    @abstractmethod
    async def get_roles(self) -> List[Role]:
        pass

    @abstractmethod
    async def set_role(self, role: Role) -> None:
        """Insert the role, or overwrite the record with the same name."""
        pass

    @abstractmethod
    async def has_role(self, name: str) -> bool:
        pass

    @abstractmethod
    async def delete_role(self, name: str) -> None:
        """Remove the role and every UserRole grant referencing it."""
        pass

    async def add_role_permission(self, role_name: str, permission_name: str) -> Optional[Role]:
        """Append a permission name to a role's list unless already present.

        Returns:
            The updated role, or None if the role does not exist

        Backends with an atomic array update should override this
        read-modify-write default.
        """
        role = await self.get_role(role_name)
        if role is None:
            return None
        if permission_name not in role.permissions:
            role.permissions.append(permission_name)
            await self.set_role(role)
        return role

    async def remove_role_permission(self, role_name: str, permission_name: str) -> Optional[Role]:
        """Drop a permission name from a role's list if present.

        Returns:
            The updated role, or None if the role does not exist
        """
        role = await self.get_role(role_name)
        if role is None:
            return None
        if permission_name in role.permissions:
            role.permissions = [p for p in role.permissions if p != permission_name]
            await self.set_role(role)
        return role

    # -- User roles ------------------------------------------------------

    @abstractmethod
    async def get_user_roles(self, principal_id: PrincipalId) -> Set[str]:
        """Return the role names granted to the principal (empty set if none)."""
        pass

    @abstractmethod
    async def add_user_role(self, principal_id: PrincipalId, role_name: str) -> None:
        pass

    @abstractmethod
    async def remove_user_role(self, principal_id: PrincipalId, role_name: str) -> None:
        pass

    @abstractmethod
    async def has_user_role(self, principal_id: PrincipalId, role_name: str) -> bool:
        pass

    # -- User permissions ------------------------------------------------

    @abstractmethod
    async def get_user_permissions(self, principal_id: PrincipalId) -> Set[str]:
        pass

    @abstractmethod
    async def add_user_permission(self, principal_id: PrincipalId, permission_name: str) -> None:
        pass

    @abstractmethod
    async def remove_user_permission(self, principal_id: PrincipalId, permission_name: str) -> None:
        pass

    @abstractmethod
    async def has_user_permission(self, principal_id: PrincipalId, permission_name: str) -> bool:
        pass

    # -- Reset -----------------------------------------------------------

    @abstractmethod
    async def reset(self) -> None:
        """Delete all permissions, roles and grants."""
        pass
