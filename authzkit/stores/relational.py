"""Relational authorization store implementation (SQLAlchemy async).

Tables (names overridable through AuthzConfig.models):

    permissions(name PK, guard_name)
    roles(name PK, guard_name, permissions JSON)
    user_roles(user_id, role_name -> roles.name ON DELETE CASCADE) PK(user_id, role_name)
    user_permissions(user_id, permission_name) PK(user_id, permission_name)

Inserts on SQLite and PostgreSQL use ``INSERT ... ON CONFLICT``, so duplicate
grants never raise. Other dialects insert and catch IntegrityError; the error
is swallowed only when the conflicting row is actually present.
"""

from typing import Any, Callable, Dict, List, Optional, Set

from sqlalchemy import Table, and_, delete, insert, select, update
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError

from authzkit.core.database.engine import RelationalConnection
from authzkit.features.permissions.schemas import Permission
from authzkit.features.roles.schemas import Role
from authzkit.stores.base import AuthzStore, PrincipalId, principal_key
from authzkit.utils import get_logger


log = get_logger(__name__)

# Dialects with a native INSERT ... ON CONFLICT construct
CONFLICT_INSERTS: Dict[str, Callable] = {
    "sqlite": sqlite_insert,
    "postgresql": postgresql_insert,
}


def _row_to_role(row) -> Role:
    return Role(name=row.name, guard_name=row.guard_name, permissions=list(row.permissions or []))


class RelationalAuthzStore(AuthzStore):
    """SQL-backed store.

    Usage:
        ```python
        connection = RelationalConnection(config)
        store = RelationalAuthzStore(connection)
        await store.connect()
        await store.init_schema()
        ```
    """

    def __init__(self, connection: RelationalConnection):
        self.connection = connection
        self.tables = connection.tables

    async def connect(self) -> None:
        await self.connection.connect()

    async def close(self) -> None:
        await self.connection.disconnect()

    async def init_schema(self) -> None:
        await self.connection.init_schema()

    # -- Helpers ---------------------------------------------------------

    def _conflict_insert(self) -> Optional[Callable]:
        return CONFLICT_INSERTS.get(self.connection.dialect_name)

    async def _exists(self, table: Table, **criteria: Any) -> bool:
        stmt = select(*table.primary_key.columns).where(
            and_(*(table.c[column] == value for column, value in criteria.items()))
        ).limit(1)
        async with self.connection.session() as session:
            result = await session.execute(stmt)
            return result.first() is not None

    async def _upsert_by_name(self, table: Table, values: Dict[str, Any]) -> None:
        conflict_insert = self._conflict_insert()
        changes = {key: value for key, value in values.items() if key != "name"}

        async with self.connection.session() as session:
            async with session.begin():
                if conflict_insert is not None:
                    stmt = conflict_insert(table).values(**values)
                    stmt = stmt.on_conflict_do_update(
                        index_elements=[table.c.name],
                        set_={key: stmt.excluded[key] for key in changes},
                    )
                    await session.execute(stmt)
                    return

                result = await session.execute(
                    update(table).where(table.c.name == values["name"]).values(**changes)
                )
                if result.rowcount == 0:
                    await session.execute(insert(table).values(**values))

    async def _insert_grant(self, table: Table, values: Dict[str, Any]) -> None:
        conflict_insert = self._conflict_insert()
        try:
            async with self.connection.session() as session:
                async with session.begin():
                    if conflict_insert is not None:
                        await session.execute(conflict_insert(table).values(**values).on_conflict_do_nothing())
                    else:
                        await session.execute(insert(table).values(**values))
        except IntegrityError:
            # Only a duplicate pair is absorbed; foreign key failures propagate
            if not await self._exists(table, **values):
                raise
            log.debug("Grant %s already present in %s", values, table.name)

    # -- Permissions -----------------------------------------------------

    async def get_permission(self, name: str) -> Optional[Permission]:
        table = self.tables.permissions
        async with self.connection.session() as session:
            result = await session.execute(
                select(table.c.name, table.c.guard_name).where(table.c.name == name)
            )
            row = result.first()
        return Permission(name=row.name, guard_name=row.guard_name) if row else None

    async def get_permissions(self) -> List[Permission]:
        table = self.tables.permissions
        async with self.connection.session() as session:
            result = await session.execute(select(table.c.name, table.c.guard_name))
            rows = result.all()
        return [Permission(name=row.name, guard_name=row.guard_name) for row in rows]

    async def set_permission(self, permission: Permission) -> None:
        await self._upsert_by_name(
            self.tables.permissions,
            {"name": permission.name, "guard_name": permission.guard_name},
        )

    async def has_permission(self, name: str) -> bool:
        return await self._exists(self.tables.permissions, name=name)

    async def delete_permission(self, name: str) -> None:
        table = self.tables.permissions
        async with self.connection.session() as session:
            async with session.begin():
                await session.execute(delete(table).where(table.c.name == name))

    # -- Roles -----------------------------------------------------------

    async def get_role(self, name: str) -> Optional[Role]:
        table = self.tables.roles
        async with self.connection.session() as session:
            result = await session.execute(select(table).where(table.c.name == name))
            row = result.first()
        return _row_to_role(row) if row else None

    async def get_roles(self) -> List[Role]:
        async with self.connection.session() as session:
            result = await session.execute(select(self.tables.roles))
            rows = result.all()
        return [_row_to_role(row) for row in rows]

    async def set_role(self, role: Role) -> None:
        await self._upsert_by_name(
            self.tables.roles,
            {"name": role.name, "guard_name": role.guard_name, "permissions": list(role.permissions)},
        )

    async def has_role(self, name: str) -> bool:
        return await self._exists(self.tables.roles, name=name)

    async def delete_role(self, name: str) -> None:
        # user_roles rows go with it through ON DELETE CASCADE
        table = self.tables.roles
        async with self.connection.session() as session:
            async with session.begin():
                await session.execute(delete(table).where(table.c.name == name))

    async def _update_role_permissions(
        self, role_name: str, change: Callable[[List[str]], List[str]]
    ) -> Optional[Role]:
        table = self.tables.roles
        async with self.connection.session() as session:
            async with session.begin():
                result = await session.execute(
                    select(table).where(table.c.name == role_name).with_for_update()
                )
                row = result.first()
                if row is None:
                    return None
                role = _row_to_role(row)
                permissions = change(list(role.permissions))
                if permissions != role.permissions:
                    await session.execute(
                        update(table).where(table.c.name == role_name).values(permissions=permissions)
                    )
                    role.permissions = permissions
        return role

    async def add_role_permission(self, role_name: str, permission_name: str) -> Optional[Role]:
        return await self._update_role_permissions(
            role_name,
            lambda names: names if permission_name in names else names + [permission_name],
        )

    async def remove_role_permission(self, role_name: str, permission_name: str) -> Optional[Role]:
        return await self._update_role_permissions(
            role_name,
            lambda names: [name for name in names if name != permission_name],
        )

    # -- User roles ------------------------------------------------------

    async def get_user_roles(self, principal_id: PrincipalId) -> Set[str]:
        table = self.tables.user_roles
        async with self.connection.session() as session:
            result = await session.execute(
                select(table.c.role_name).where(table.c.user_id == principal_key(principal_id))
            )
            return set(result.scalars().all())

    async def add_user_role(self, principal_id: PrincipalId, role_name: str) -> None:
        await self._insert_grant(
            self.tables.user_roles,
            {"user_id": principal_key(principal_id), "role_name": role_name},
        )

    async def remove_user_role(self, principal_id: PrincipalId, role_name: str) -> None:
        table = self.tables.user_roles
        async with self.connection.session() as session:
            async with session.begin():
                await session.execute(
                    delete(table).where(
                        and_(table.c.user_id == principal_key(principal_id), table.c.role_name == role_name)
                    )
                )

    async def has_user_role(self, principal_id: PrincipalId, role_name: str) -> bool:
        return await self._exists(
            self.tables.user_roles, user_id=principal_key(principal_id), role_name=role_name
        )

    # -- User permissions ------------------------------------------------

    async def get_user_permissions(self, principal_id: PrincipalId) -> Set[str]:
        table = self.tables.user_permissions
        async with self.connection.session() as session:
            result = await session.execute(
                select(table.c.permission_name).where(table.c.user_id == principal_key(principal_id))
            )
            return set(result.scalars().all())

    async def add_user_permission(self, principal_id: PrincipalId, permission_name: str) -> None:
        await self._insert_grant(
            self.tables.user_permissions,
            {"user_id": principal_key(principal_id), "permission_name": permission_name},
        )

    async def remove_user_permission(self, principal_id: PrincipalId, permission_name: str) -> None:
        table = self.tables.user_permissions
        async with self.connection.session() as session:
            async with session.begin():
                await session.execute(
                    delete(table).where(
                        and_(
                            table.c.user_id == principal_key(principal_id),
                            table.c.permission_name == permission_name,
                        )
                    )
                )

    async def has_user_permission(self, principal_id: PrincipalId, permission_name: str) -> bool:
        return await self._exists(
            self.tables.user_permissions,
            user_id=principal_key(principal_id),
            permission_name=permission_name,
        )

    # -- Reset -----------------------------------------------------------

    async def reset(self) -> None:
        if not await self.connection.has_schema():
            log.info("Authorization tables missing, initializing schema before reset")
            await self.connection.init_schema()
        await self.connection.truncate_tables()
