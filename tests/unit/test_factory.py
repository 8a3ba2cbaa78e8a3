"""Unit tests for create_store and Authzkit.from_config."""

import pytest
from mongomock_motor import AsyncMongoMockClient

from authzkit.core.config import AuthzConfig, ConnectionConfig
from authzkit.core.errors import ConfigurationError
from authzkit.engine import Authzkit
from authzkit.stores.document import DocumentAuthzStore
from authzkit.stores.factory import create_store
from authzkit.stores.memory import MemoryAuthzStore
from authzkit.stores.relational import RelationalAuthzStore


class TestCreateStore:
    def test_default_is_memory(self):
        assert isinstance(create_store(), MemoryAuthzStore)

    def test_document(self):
        config = AuthzConfig(connection=ConnectionConfig(type="document", database="authz"))

        store = create_store(config)

        assert isinstance(store, DocumentAuthzStore)
        assert store.connection.is_connected is False

    def test_relational(self):
        config = AuthzConfig(connection=ConnectionConfig(type="relational", uri="sqlite:///./authz.db"))

        store = create_store(config)

        assert isinstance(store, RelationalAuthzStore)
        assert store.connection.is_connected is False

    def test_unknown_type(self):
        config = AuthzConfig(connection=ConnectionConfig.model_construct(type="redis"))

        with pytest.raises(ConfigurationError):
            create_store(config)


@pytest.mark.asyncio
class TestFromConfig:
    async def test_falls_back_to_memory(self, monkeypatch):
        monkeypatch.delenv("AUTHZKIT_CONNECTION_TYPE", raising=False)
        monkeypatch.delenv("AUTHZKIT_CONNECTION_URI", raising=False)

        async with await Authzkit.from_config() as authzkit:
            assert isinstance(authzkit.store, MemoryAuthzStore)

    async def test_reads_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("AUTHZKIT_CONNECTION_URI", f"sqlite:///{tmp_path / 'env.db'}")
        monkeypatch.delenv("AUTHZKIT_CONNECTION_TYPE", raising=False)

        async with await Authzkit.from_config() as authzkit:
            assert isinstance(authzkit.store, RelationalAuthzStore)
            await authzkit.define_permission("edit_post")
            assert await authzkit.get_permission("edit_post") is not None

        assert authzkit.store.connection.is_connected is False

    async def test_shared_document_client(self):
        config = AuthzConfig(connection=ConnectionConfig(type="document", database="authz"))

        authzkit = await Authzkit.from_config(config, client=AsyncMongoMockClient())
        await authzkit.define_role("editor")

        assert [role.name for role in await authzkit.get_roles()] == ["editor"]
        await authzkit.close()

    async def test_document_without_database(self):
        config = AuthzConfig(connection=ConnectionConfig(type="document", uri="mongodb://localhost"))

        with pytest.raises(ConfigurationError, match="Database name"):
            await Authzkit.from_config(config)
