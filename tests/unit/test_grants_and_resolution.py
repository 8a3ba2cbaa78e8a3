"""Unit tests for the grant manager and resolution engine (memory store)."""

import pytest
import pytest_asyncio

from authzkit.core.errors import PermissionNotFound, RoleNotFound
from authzkit.engine import Authzkit
from authzkit.stores.memory import MemoryAuthzStore


@pytest_asyncio.fixture
async def authzkit():
    authzkit = Authzkit(MemoryAuthzStore())
    for name in ("create_post", "edit_post", "delete_post"):
        await authzkit.define_permission(name)
    await authzkit.define_role("editor", ["create_post", "edit_post"])
    return authzkit


@pytest.mark.asyncio
class TestGrantManager:
    async def test_assign_unknown_role(self, authzkit):
        with pytest.raises(RoleNotFound):
            await authzkit.assign_role("u1", "missing")

        assert await authzkit.get_user_roles("u1") == set()

    async def test_assign_unknown_permission(self, authzkit):
        with pytest.raises(PermissionNotFound):
            await authzkit.assign_permission("u1", "missing")

        assert await authzkit.get_user_permissions("u1") == set()

    async def test_revoke_without_grant_is_noop(self, authzkit):
        await authzkit.revoke_role("u1", "editor")
        await authzkit.revoke_permission("u1", "edit_post")
        await authzkit.revoke_role("u1", "missing")

    async def test_unregistered_principal_has_no_grants(self, authzkit):
        assert await authzkit.get_user_roles("nobody") == set()
        assert await authzkit.get_user_permissions("nobody") == set()

    async def test_integer_and_string_ids_match(self, authzkit):
        await authzkit.assign_role(42, "editor")

        assert await authzkit.has_role("42", "editor") is True
        assert await authzkit.get_user_roles(42) == {"editor"}

    async def test_user_permissions_are_direct_only(self, authzkit):
        await authzkit.assign_role("u1", "editor")

        assert await authzkit.get_user_permissions("u1") == set()


@pytest.mark.asyncio
class TestResolutionEngine:
    async def test_permission_through_role(self, authzkit):
        await authzkit.assign_role("u1", "editor")

        assert await authzkit.has_permission("u1", "edit_post") is True
        assert await authzkit.has_permission("u1", "delete_post") is False

    async def test_direct_permission(self, authzkit):
        await authzkit.assign_permission("u1", "delete_post")

        assert await authzkit.has_permission("u1", "delete_post") is True

    async def test_role_changes_apply_immediately(self, authzkit):
        await authzkit.assign_role("u1", "editor")

        await authzkit.add_permission_to_role("editor", "delete_post")
        assert await authzkit.has_permission("u1", "delete_post") is True

        await authzkit.remove_permission_from_role("editor", "delete_post")
        assert await authzkit.has_permission("u1", "delete_post") is False

    async def test_dangling_role_grant_is_skipped(self, authzkit):
        """A grant whose role record is gone resolves to nothing."""
        await authzkit.assign_role("u1", "editor")
        authzkit.store._roles.pop("editor")

        assert await authzkit.has_permission("u1", "edit_post") is False

    async def test_role_has_permission(self, authzkit):
        assert await authzkit.role_has_permission("editor", "create_post") is True
        assert await authzkit.role_has_permission("editor", "delete_post") is False
        assert await authzkit.role_has_permission("nonexistent", "create_post") is False

    async def test_has_any_matches_role_or_permission(self, authzkit):
        await authzkit.assign_role("u1", "editor")
        await authzkit.assign_permission("u2", "delete_post")

        assert await authzkit.has_any("u1", ["admin", "editor"]) is True
        assert await authzkit.has_any("u1", ["admin", "edit_post"]) is True
        assert await authzkit.has_any("u2", ["editor", "delete_post"]) is True
        assert await authzkit.has_any("u2", ["editor", "edit_post"]) is False
        assert await authzkit.has_any("u1", []) is False
