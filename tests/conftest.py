"""Shared fixtures for authzkit tests.

Every contract test runs against all three backends:

- memory: MemoryAuthzStore
- relational: SQLite file in tmp_path via aiosqlite
- document: mongomock-motor client (in-memory MongoDB emulation)
"""

from pathlib import Path
from typing import Optional

import pytest_asyncio
from mongomock_motor import AsyncMongoMockClient

from authzkit.core.config import AuthzConfig, ConnectionConfig, ModelNames
from authzkit.engine import Authzkit
from authzkit.stores.base import AuthzStore
from authzkit.stores.factory import create_store

BACKENDS = ["memory", "relational", "document"]


def sqlite_uri(tmp_path: Path, filename: str = "authz.db") -> str:
    return f"sqlite+aiosqlite:///{tmp_path / filename}"


def make_config(kind: str, tmp_path: Path, models: Optional[ModelNames] = None) -> AuthzConfig:
    if kind == "relational":
        connection = ConnectionConfig(type="relational", uri=sqlite_uri(tmp_path))
    elif kind == "document":
        connection = ConnectionConfig(type="document", database="authzkit_test")
    else:
        connection = ConnectionConfig(type="memory")
    return AuthzConfig(connection=connection, models=models or ModelNames())


async def open_store(kind: str, tmp_path: Path, models: Optional[ModelNames] = None) -> AuthzStore:
    """Create, connect and initialize a store for one backend."""
    client = AsyncMongoMockClient() if kind == "document" else None
    store = create_store(make_config(kind, tmp_path, models), client=client)
    await store.connect()
    await store.init_schema()
    return store


@pytest_asyncio.fixture(params=BACKENDS)
async def store(request, tmp_path):
    """Connected store, parametrized over every backend."""
    store = await open_store(request.param, tmp_path)
    yield store
    await store.close()


@pytest_asyncio.fixture
async def authzkit(store):
    """Authzkit facade over the parametrized store."""
    return Authzkit(store)
