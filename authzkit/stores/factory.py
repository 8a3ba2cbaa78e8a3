"""Store factory for dependency injection.

This module provides a factory function that creates the appropriate
AuthzStore instance based on configuration. Call sites never branch on
backend identity; they receive an AuthzStore and use the shared contract.
"""

from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncEngine

from authzkit.core.config import AuthzConfig
from authzkit.core.database.document import DocumentConnection
from authzkit.core.database.engine import RelationalConnection
from authzkit.core.errors import ConfigurationError
from authzkit.stores.base import AuthzStore
from authzkit.stores.document import DocumentAuthzStore
from authzkit.stores.memory import MemoryAuthzStore
from authzkit.stores.relational import RelationalAuthzStore
from authzkit.utils import get_logger


log = get_logger(__name__)


def create_store(
    config: Optional[AuthzConfig] = None,
    *,
    engine: Optional[AsyncEngine] = None,
    client: Optional[Any] = None,
) -> AuthzStore:
    """Create an unconnected store for the configured backend.

    Args:
        config: Backend settings. Defaults to the in-memory store.
        engine: Existing AsyncEngine to share (relational only).
        client: Existing motor client to share (document only).

    Returns:
        AuthzStore; call ``await store.connect()`` before use.

    Raises:
        ConfigurationError: If the store type is not recognized.

    Example:
        >>> config = AuthzConfig(connection={"type": "relational", "uri": "sqlite:///./authz.db"})
        >>> store = create_store(config)
        >>> await store.connect()
    """
    config = config or AuthzConfig()
    store_type = config.connection.type

    if store_type == "memory":
        store: AuthzStore = MemoryAuthzStore()
    elif store_type == "document":
        store = DocumentAuthzStore(DocumentConnection(config, client=client))
    elif store_type == "relational":
        store = RelationalAuthzStore(RelationalConnection(config, engine=engine))
    else:
        log.warning("Unknown store type %r", store_type)
        raise ConfigurationError(f"Unsupported connection type: {store_type}")

    log.debug("Created %s store", store_type)
    return store
