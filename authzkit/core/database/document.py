"""
Document-store connection for MongoDB (motor).

The client is owned by the host process. Pass an existing client (for example
a mongomock-motor client in tests) or let connect() create one from
``connection.uri``. The database name is always required.
"""
from typing import Any, Optional

from motor.motor_asyncio import AsyncIOMotorClient

from authzkit.core.config import AuthzConfig, ModelNames
from authzkit.core.errors import ConfigurationError, StoreUnavailable
from authzkit.utils import get_logger


log = get_logger(__name__)


class DocumentConnection:
    """
    Usage:
        connection = DocumentConnection(config)
        await connection.connect()
        store = DocumentAuthzStore(connection)
    """

    def __init__(self, config: AuthzConfig, client: Optional[Any] = None):
        self.config = config
        self._client = client
        self._owns_client = client is None
        self._db = None

    @property
    def models(self) -> ModelNames:
        return self.config.models

    async def connect(self) -> None:
        database = self.config.connection.database
        if not database:
            log.warning("Document connection configured without a database name")
            raise ConfigurationError("Database name not provided in configuration.")

        if self._client is not None:
            if self._db is None:
                self._db = self._client[database]
            log.info("MongoDB client already provided/connected.")
            return

        uri = self.config.connection.uri
        if not uri:
            log.warning("Document connection configured without a uri")
            raise ConfigurationError("MongoDB URI not provided in configuration.")

        client = AsyncIOMotorClient(uri)
        try:
            await client.admin.command("ping")
        except Exception:
            log.error("Failed to connect to MongoDB")
            client.close()
            raise
        self._client = client
        self._owns_client = True
        self._db = client[database]
        log.info("Connected to MongoDB successfully.")

    async def disconnect(self) -> None:
        if self._client is None:
            return
        if self._owns_client:
            self._client.close()
            self._client = None
            log.info("Disconnected from MongoDB.")
        self._db = None

    @property
    def is_connected(self) -> bool:
        return self._db is not None

    @property
    def db(self):
        if self._db is None:
            raise StoreUnavailable("Database not connected. Call connect() first.")
        return self._db

    def collection(self, model: str):
        """Return the collection for a model key, honoring name overrides."""
        return self.db[getattr(self.models, model)]
