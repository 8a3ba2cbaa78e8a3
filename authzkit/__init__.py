"""
authzkit: role-based access control with pluggable storage.
"""
from authzkit.core.config import AuthzConfig, ConnectionConfig, ModelNames, load_config_from_env
from authzkit.core.errors import (
    AlreadyExists,
    AuthzkitError,
    ConfigurationError,
    NotFound,
    PermissionNotFound,
    RoleNotFound,
    StoreUnavailable,
)
from authzkit.engine import Authzkit
from authzkit.features.permissions.schemas import Permission
from authzkit.features.roles.schemas import Role
from authzkit.stores import (
    AuthzStore,
    DocumentAuthzStore,
    MemoryAuthzStore,
    RelationalAuthzStore,
    create_store,
)

__version__ = "1.0.0"

__all__ = [
    "AlreadyExists",
    "AuthzConfig",
    "AuthzStore",
    "Authzkit",
    "AuthzkitError",
    "ConfigurationError",
    "ConnectionConfig",
    "DocumentAuthzStore",
    "MemoryAuthzStore",
    "ModelNames",
    "NotFound",
    "Permission",
    "PermissionNotFound",
    "RelationalAuthzStore",
    "Role",
    "RoleNotFound",
    "StoreUnavailable",
    "create_store",
    "load_config_from_env",
]
