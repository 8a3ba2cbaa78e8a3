"""Unit tests for the error taxonomy."""

from authzkit.core.errors import (
    AlreadyExists,
    AuthzkitError,
    ConfigurationError,
    NotFound,
    PermissionNotFound,
    RoleNotFound,
    StoreUnavailable,
)


def test_already_exists_message():
    error = AlreadyExists("permission", "edit_post")

    assert str(error) == "Permission 'edit_post' already exists."
    assert error.entity == "permission"
    assert error.name == "edit_post"


def test_permission_not_found_messages():
    assert str(PermissionNotFound("edit_post")) == "Permission 'edit_post' not found."

    error = PermissionNotFound("edit_post", role_name="editor")
    assert str(error) == "Permission 'edit_post' not found when defining role 'editor'."
    assert error.permission_name == "edit_post"
    assert error.role_name == "editor"


def test_role_not_found_message():
    error = RoleNotFound("editor")

    assert str(error) == "Role 'editor' not found."
    assert error.role_name == "editor"


def test_hierarchy():
    assert issubclass(PermissionNotFound, NotFound)
    assert issubclass(RoleNotFound, NotFound)
    for error_class in (AlreadyExists, NotFound, ConfigurationError, StoreUnavailable):
        assert issubclass(error_class, AuthzkitError)
