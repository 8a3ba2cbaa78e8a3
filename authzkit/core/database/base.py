"""
Relational schema for permissions, roles and grants.

Tables are built per connection so table names can be overridden through
``AuthzConfig.models``. Each call returns tables bound to a fresh MetaData.

Usage:
    from authzkit.core.database.base import build_tables

    tables = build_tables(ModelNames(roles="custom_roles"))
    tables.roles.name  # "custom_roles"
"""
from typing import NamedTuple

from sqlalchemy import JSON, Column, ForeignKey, MetaData, String, Table

from authzkit.core.config import ModelNames

NAME_LENGTH = 255


class AuthzTables(NamedTuple):
    metadata: MetaData
    permissions: Table
    roles: Table
    user_roles: Table
    user_permissions: Table


def build_tables(models: ModelNames) -> AuthzTables:
    metadata = MetaData()

    permissions = Table(
        models.permissions,
        metadata,
        Column("name", String(NAME_LENGTH), primary_key=True),
        Column("guard_name", String(NAME_LENGTH), nullable=True),
    )

    # Permission names are an ordered JSON array snapshot, not a join table
    roles = Table(
        models.roles,
        metadata,
        Column("name", String(NAME_LENGTH), primary_key=True),
        Column("guard_name", String(NAME_LENGTH), nullable=True),
        Column("permissions", JSON, nullable=False, default=list),
    )

    # Deleting a role removes its grants through the foreign key cascade
    user_roles = Table(
        models.user_roles,
        metadata,
        Column("user_id", String(NAME_LENGTH), primary_key=True),
        Column(
            "role_name",
            String(NAME_LENGTH),
            ForeignKey(roles.c.name, ondelete="CASCADE"),
            primary_key=True,
        ),
    )

    # No foreign key: deleting a permission keeps existing direct grants
    user_permissions = Table(
        models.user_permissions,
        metadata,
        Column("user_id", String(NAME_LENGTH), primary_key=True),
        Column("permission_name", String(NAME_LENGTH), primary_key=True),
    )

    return AuthzTables(
        metadata=metadata,
        permissions=permissions,
        roles=roles,
        user_roles=user_roles,
        user_permissions=user_permissions,
    )
