"""MongoDB authorization store implementation (motor).

One collection per entity kind. Unique indexes on the natural keys enforce
invariants at the database level:

    permissions       {name}                    unique
    roles             {name}                    unique
    user_roles        {userId, roleName}        unique
    user_permissions  {userId, permissionName}  unique

Writes are upserts, so a repeated insert is an atomic no-op. Two concurrent
upserts of the same new key can still race on the unique index; the loser's
DuplicateKeyError is caught and treated as success.
"""

from typing import Any, Dict, List, Optional, Set

from pymongo import ASCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError

from authzkit.core.database.document import DocumentConnection
from authzkit.features.permissions.schemas import Permission
from authzkit.features.roles.schemas import Role
from authzkit.stores.base import AuthzStore, PrincipalId, principal_key
from authzkit.utils import get_logger


log = get_logger(__name__)

NO_ID = {"_id": 0}


def _to_permission(doc: Dict[str, Any]) -> Permission:
    return Permission(name=doc["name"], guard_name=doc.get("guard_name"))


def _to_role(doc: Dict[str, Any]) -> Role:
    return Role(
        name=doc["name"],
        guard_name=doc.get("guard_name"),
        permissions=list(doc.get("permissions") or []),
    )


class DocumentAuthzStore(AuthzStore):
    """MongoDB-backed store.

    Usage:
        ```python
        connection = DocumentConnection(config)
        store = DocumentAuthzStore(connection)
        await store.connect()  # connects and ensures unique indexes
        ```
    """

    def __init__(self, connection: DocumentConnection):
        self.connection = connection

    @property
    def _permissions(self):
        return self.connection.collection("permissions")

    @property
    def _roles(self):
        return self.connection.collection("roles")

    @property
    def _user_roles(self):
        return self.connection.collection("user_roles")

    @property
    def _user_permissions(self):
        return self.connection.collection("user_permissions")

    async def connect(self) -> None:
        await self.connection.connect()
        await self.ensure_indexes()

    async def close(self) -> None:
        await self.connection.disconnect()

    async def init_schema(self) -> None:
        await self.ensure_indexes()

    async def ensure_indexes(self) -> None:
        await self._permissions.create_index([("name", ASCENDING)], unique=True)
        await self._roles.create_index([("name", ASCENDING)], unique=True)
        await self._user_roles.create_index(
            [("userId", ASCENDING), ("roleName", ASCENDING)], unique=True
        )
        await self._user_permissions.create_index(
            [("userId", ASCENDING), ("permissionName", ASCENDING)], unique=True
        )
        log.debug("Unique indexes ensured on authorization collections")

    async def _upsert(self, collection, key: Dict[str, Any], update: Dict[str, Any]) -> None:
        try:
            await collection.update_one(key, update, upsert=True)
        except DuplicateKeyError:
            # Lost a concurrent upsert race on the unique index; the record exists
            log.debug("Duplicate key on %s for %s ignored", collection.name, key)

    # -- Permissions -----------------------------------------------------

    async def get_permission(self, name: str) -> Optional[Permission]:
        doc = await self._permissions.find_one({"name": name}, NO_ID)
        return _to_permission(doc) if doc else None

    async def get_permissions(self) -> List[Permission]:
        docs = await self._permissions.find({}, NO_ID).to_list(length=None)
        return [_to_permission(doc) for doc in docs]

    async def set_permission(self, permission: Permission) -> None:
        await self._upsert(
            self._permissions,
            {"name": permission.name},
            {"$set": {"name": permission.name, "guard_name": permission.guard_name}},
        )

    async def has_permission(self, name: str) -> bool:
        return await self._permissions.count_documents({"name": name}) > 0

    async def delete_permission(self, name: str) -> None:
        await self._permissions.delete_one({"name": name})

    # -- Roles -----------------------------------------------------------

    async def get_role(self, name: str) -> Optional[Role]:
        doc = await self._roles.find_one({"name": name}, NO_ID)
        return _to_role(doc) if doc else None

    async def get_roles(self) -> List[Role]:
        docs = await self._roles.find({}, NO_ID).to_list(length=None)
        return [_to_role(doc) for doc in docs]

    async def set_role(self, role: Role) -> None:
        await self._upsert(
            self._roles,
            {"name": role.name},
            {"$set": {"name": role.name, "guard_name": role.guard_name, "permissions": list(role.permissions)}},
        )

    async def has_role(self, name: str) -> bool:
        return await self._roles.count_documents({"name": name}) > 0

    async def delete_role(self, name: str) -> None:
        await self._roles.delete_one({"name": name})
        # Remove all assignments for this role
        await self._user_roles.delete_many({"roleName": name})

    async def add_role_permission(self, role_name: str, permission_name: str) -> Optional[Role]:
        doc = await self._roles.find_one_and_update(
            {"name": role_name},
            {"$addToSet": {"permissions": permission_name}},
            projection=NO_ID,
            return_document=ReturnDocument.AFTER,
        )
        return _to_role(doc) if doc else None

    async def remove_role_permission(self, role_name: str, permission_name: str) -> Optional[Role]:
        doc = await self._roles.find_one_and_update(
            {"name": role_name},
            {"$pull": {"permissions": permission_name}},
            projection=NO_ID,
            return_document=ReturnDocument.AFTER,
        )
        return _to_role(doc) if doc else None

    # -- User roles ------------------------------------------------------

    async def get_user_roles(self, principal_id: PrincipalId) -> Set[str]:
        docs = await self._user_roles.find({"userId": principal_key(principal_id)}, NO_ID).to_list(length=None)
        return {doc["roleName"] for doc in docs}

    async def add_user_role(self, principal_id: PrincipalId, role_name: str) -> None:
        key = {"userId": principal_key(principal_id), "roleName": role_name}
        await self._upsert(self._user_roles, key, {"$setOnInsert": key})

    async def remove_user_role(self, principal_id: PrincipalId, role_name: str) -> None:
        await self._user_roles.delete_one({"userId": principal_key(principal_id), "roleName": role_name})

    async def has_user_role(self, principal_id: PrincipalId, role_name: str) -> bool:
        query = {"userId": principal_key(principal_id), "roleName": role_name}
        return await self._user_roles.count_documents(query) > 0

    # -- User permissions ------------------------------------------------

    async def get_user_permissions(self, principal_id: PrincipalId) -> Set[str]:
        docs = await self._user_permissions.find(
            {"userId": principal_key(principal_id)}, NO_ID
        ).to_list(length=None)
        return {doc["permissionName"] for doc in docs}

    async def add_user_permission(self, principal_id: PrincipalId, permission_name: str) -> None:
        key = {"userId": principal_key(principal_id), "permissionName": permission_name}
        await self._upsert(self._user_permissions, key, {"$setOnInsert": key})

    async def remove_user_permission(self, principal_id: PrincipalId, permission_name: str) -> None:
        await self._user_permissions.delete_one(
            {"userId": principal_key(principal_id), "permissionName": permission_name}
        )

    async def has_user_permission(self, principal_id: PrincipalId, permission_name: str) -> bool:
        query = {"userId": principal_key(principal_id), "permissionName": permission_name}
        return await self._user_permissions.count_documents(query) > 0

    # -- Reset -----------------------------------------------------------

    async def reset(self) -> None:
        for collection in (self._permissions, self._roles, self._user_roles, self._user_permissions):
            await collection.delete_many({})
        log.info("Document store reset")
