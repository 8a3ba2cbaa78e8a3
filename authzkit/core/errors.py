"""
Exception taxonomy for the authorization core.

Registry and grant validation errors are raised to the immediate caller.
Stores only absorb duplicate-key conflicts; every other backend error
propagates unchanged.
"""
from typing import Optional


class AuthzkitError(Exception):
    """Base class for all authzkit errors."""


class AlreadyExists(AuthzkitError):
    """A permission or role with this name is already registered."""

    def __init__(self, entity: str, name: str):
        self.entity = entity
        self.name = name
        super().__init__(f"{entity.capitalize()} '{name}' already exists.")


class NotFound(AuthzkitError):
    """A referenced permission or role does not exist."""


class PermissionNotFound(NotFound):
    def __init__(self, permission_name: str, role_name: Optional[str] = None):
        self.permission_name = permission_name
        self.role_name = role_name
        if role_name is None:
            message = f"Permission '{permission_name}' not found."
        else:
            message = f"Permission '{permission_name}' not found when defining role '{role_name}'."
        super().__init__(message)


class RoleNotFound(NotFound):
    def __init__(self, role_name: str):
        self.role_name = role_name
        super().__init__(f"Role '{role_name}' not found.")


class ConfigurationError(AuthzkitError):
    """Connection parameters are missing or invalid."""


class StoreUnavailable(AuthzkitError):
    """A store was used before its connection was established."""
