"""Storage backends for permissions, roles and grants."""
from authzkit.stores.base import AuthzStore, PrincipalId
from authzkit.stores.document import DocumentAuthzStore
from authzkit.stores.factory import create_store
from authzkit.stores.memory import MemoryAuthzStore
from authzkit.stores.relational import RelationalAuthzStore

__all__ = [
    "AuthzStore",
    "DocumentAuthzStore",
    "MemoryAuthzStore",
    "PrincipalId",
    "RelationalAuthzStore",
    "create_store",
]
