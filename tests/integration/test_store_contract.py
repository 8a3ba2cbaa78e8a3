"""Store contract tests, run against memory, relational and document backends."""

import pytest

from authzkit.features.permissions.schemas import Permission
from authzkit.features.roles.schemas import Role


@pytest.mark.asyncio
class TestPermissionStorage:
    async def test_set_get_has(self, store):
        await store.set_permission(Permission(name="edit_post", guard_name="web"))

        assert await store.has_permission("edit_post") is True
        assert await store.get_permission("edit_post") == Permission(name="edit_post", guard_name="web")
        assert await store.has_permission("missing") is False
        assert await store.get_permission("missing") is None

    async def test_set_overwrites(self, store):
        await store.set_permission(Permission(name="edit_post"))
        await store.set_permission(Permission(name="edit_post", guard_name="api"))

        permissions = await store.get_permissions()
        assert permissions == [Permission(name="edit_post", guard_name="api")]

    async def test_get_all(self, store):
        for name in ("create_post", "edit_post", "delete_post"):
            await store.set_permission(Permission(name=name))

        names = {p.name for p in await store.get_permissions()}
        assert names == {"create_post", "edit_post", "delete_post"}

    async def test_delete(self, store):
        await store.set_permission(Permission(name="edit_post"))

        await store.delete_permission("edit_post")
        await store.delete_permission("edit_post")

        assert await store.has_permission("edit_post") is False

    async def test_delete_does_not_cascade(self, store):
        await store.set_permission(Permission(name="edit_post"))
        await store.set_role(Role(name="editor", permissions=["edit_post"]))
        await store.add_user_permission("u1", "edit_post")

        await store.delete_permission("edit_post")

        assert (await store.get_role("editor")).permissions == ["edit_post"]
        assert await store.has_user_permission("u1", "edit_post") is True


@pytest.mark.asyncio
class TestRoleStorage:
    async def test_set_get_keeps_order(self, store):
        await store.set_role(Role(name="editor", guard_name="web", permissions=["b", "a", "c"]))

        role = await store.get_role("editor")
        assert role == Role(name="editor", guard_name="web", permissions=["b", "a", "c"])
        assert await store.has_role("editor") is True
        assert await store.get_role("missing") is None

    async def test_set_overwrites(self, store):
        await store.set_role(Role(name="editor", permissions=["a"]))
        await store.set_role(Role(name="editor", permissions=["b"]))

        roles = await store.get_roles()
        assert len(roles) == 1
        assert roles[0].permissions == ["b"]

    async def test_add_and_remove_role_permission(self, store):
        await store.set_role(Role(name="editor", permissions=["a"]))

        added = await store.add_role_permission("editor", "b")
        duplicate = await store.add_role_permission("editor", "b")
        removed = await store.remove_role_permission("editor", "a")

        assert added.permissions == ["a", "b"]
        assert duplicate.permissions == ["a", "b"]
        assert removed.permissions == ["b"]
        assert (await store.get_role("editor")).permissions == ["b"]

    async def test_role_permission_on_missing_role(self, store):
        assert await store.add_role_permission("missing", "a") is None
        assert await store.remove_role_permission("missing", "a") is None

    async def test_delete_role_cascades_grants(self, store):
        await store.set_role(Role(name="editor"))
        await store.set_role(Role(name="viewer"))
        await store.add_user_role("u1", "editor")
        await store.add_user_role("u2", "editor")
        await store.add_user_role("u2", "viewer")

        await store.delete_role("editor")

        assert await store.has_role("editor") is False
        assert await store.get_user_roles("u1") == set()
        assert await store.get_user_roles("u2") == {"viewer"}


@pytest.mark.asyncio
class TestGrantStorage:
    async def test_user_roles(self, store):
        await store.set_role(Role(name="editor"))
        await store.set_role(Role(name="viewer"))

        await store.add_user_role("u1", "editor")
        await store.add_user_role("u1", "viewer")

        assert await store.get_user_roles("u1") == {"editor", "viewer"}
        assert await store.has_user_role("u1", "editor") is True
        assert await store.has_user_role("u2", "editor") is False

    async def test_duplicate_user_role_is_absorbed(self, store):
        await store.set_role(Role(name="editor"))

        await store.add_user_role("u1", "editor")
        await store.add_user_role("u1", "editor")

        assert await store.get_user_roles("u1") == {"editor"}

        await store.remove_user_role("u1", "editor")
        assert await store.has_user_role("u1", "editor") is False

    async def test_user_permissions(self, store):
        await store.add_user_permission("u1", "edit_post")
        await store.add_user_permission("u1", "edit_post")

        assert await store.get_user_permissions("u1") == {"edit_post"}

        await store.remove_user_permission("u1", "edit_post")
        await store.remove_user_permission("u1", "edit_post")

        assert await store.get_user_permissions("u1") == set()
        assert await store.has_user_permission("u1", "edit_post") is False

    async def test_principal_ids_are_normalized(self, store):
        await store.set_role(Role(name="editor"))

        await store.add_user_role(7, "editor")
        await store.add_user_permission("7", "edit_post")

        assert await store.has_user_role("7", "editor") is True
        assert await store.has_user_permission(7, "edit_post") is True


@pytest.mark.asyncio
class TestReset:
    async def test_reset_clears_everything(self, store):
        await store.set_permission(Permission(name="edit_post"))
        await store.set_role(Role(name="editor", permissions=["edit_post"]))
        await store.add_user_role("u1", "editor")
        await store.add_user_permission("u1", "edit_post")

        await store.reset()

        assert await store.get_permissions() == []
        assert await store.get_roles() == []
        assert await store.get_user_roles("u1") == set()
        assert await store.get_user_permissions("u1") == set()
