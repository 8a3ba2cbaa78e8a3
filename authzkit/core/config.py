import os
from typing import Dict, Literal, Optional, Tuple

from dotenv import load_dotenv
from pydantic import BaseModel, Field

# Load environment variables from .env file
load_dotenv()

# Allow requests from this origin (example host app)
ALLOW_ORIGIN: Optional[str] = os.environ.get("ALLOW_ORIGIN")

# If true, enable docs and openapi.json endpoints (example host app)
ENABLE_DOCS: bool = os.environ.get("ENABLE_DOCS") == "1"


StoreType = Literal["memory", "document", "relational"]

# Environment spellings of the store types
STORE_TYPE_ALIASES: Dict[str, str] = {
    "memory": "memory",
    "document": "document",
    "mongodb": "document",
    "mongo": "document",
    "relational": "relational",
    "postgres": "relational",
    "postgresql": "relational",
    "sqlite": "relational",
}


class ConnectionConfig(BaseModel):
    """
    Backend connection settings.

    Examples:
    - {"type": "memory"}
    - {"type": "document", "uri": "mongodb://localhost:27017", "database": "authz"}
    - {"type": "relational", "uri": "sqlite+aiosqlite:///./authz.db"}
    - {"type": "relational", "host": "db", "port": 5432, "user": "app", "password": "...", "database": "authz"}
    """
    type: StoreType = "memory"
    uri: Optional[str] = None
    database: Optional[str] = None

    # Relational only, used when uri is not set
    host: Optional[str] = None
    port: Optional[int] = None
    user: Optional[str] = None
    password: Optional[str] = None


class ModelNames(BaseModel):
    """
    Table/collection name overrides. Unset names fall back to the field name.

    `users` is accepted so existing AUTHZKIT_MODEL_USERS settings still load,
    but no store reads it: principals are opaque ids and no users table is kept.
    """
    users: str = "users"
    roles: str = "roles"
    permissions: str = "permissions"
    user_roles: str = "user_roles"
    user_permissions: str = "user_permissions"


class AuthzConfig(BaseModel):
    connection: ConnectionConfig = Field(default_factory=ConnectionConfig)
    models: ModelNames = Field(default_factory=ModelNames)


def dashboard_credentials() -> Tuple[str, Optional[str]]:
    """Basic auth (username, secret) for the dashboard, read from the environment at call time."""
    return (
        os.environ.get("AUTHZKIT_DASHBOARD_USERNAME", "admin"),
        os.environ.get("AUTHZKIT_DASHBOARD_SECRET") or None,
    )


def _guess_store_type(uri: str) -> Optional[str]:
    if uri.startswith("mongodb"):
        return "document"
    if uri.startswith(("postgres", "sqlite")):
        return "relational"
    return None


def load_config_from_env(environ: Optional[Dict[str, str]] = None) -> Optional[AuthzConfig]:
    """
    Build an AuthzConfig from AUTHZKIT_* environment variables.

    Returns None when neither AUTHZKIT_CONNECTION_TYPE nor AUTHZKIT_CONNECTION_URI
    is set, or when the type cannot be determined from the URI.

    Recognized variables:
        AUTHZKIT_CONNECTION_TYPE   memory | document | relational (or mongodb, postgres)
        AUTHZKIT_CONNECTION_URI
        AUTHZKIT_DB_NAME
        AUTHZKIT_DB_HOST, AUTHZKIT_DB_PORT, AUTHZKIT_DB_USER, AUTHZKIT_DB_PASSWORD
        AUTHZKIT_MODEL_USERS, AUTHZKIT_MODEL_ROLES, AUTHZKIT_MODEL_PERMISSIONS,
        AUTHZKIT_MODEL_USER_ROLES, AUTHZKIT_MODEL_USER_PERMISSIONS
    """
    env = os.environ if environ is None else environ

    raw_type = env.get("AUTHZKIT_CONNECTION_TYPE")
    uri = env.get("AUTHZKIT_CONNECTION_URI") or None

    if not raw_type and not uri:
        return None

    if raw_type:
        store_type = STORE_TYPE_ALIASES.get(raw_type.lower())
    else:
        store_type = _guess_store_type(uri)
    if store_type is None:
        return None

    port = env.get("AUTHZKIT_DB_PORT")
    connection = ConnectionConfig(
        type=store_type,
        uri=uri,
        database=env.get("AUTHZKIT_DB_NAME") or None,
        host=env.get("AUTHZKIT_DB_HOST") or None,
        port=int(port) if port else None,
        user=env.get("AUTHZKIT_DB_USER") or None,
        password=env.get("AUTHZKIT_DB_PASSWORD") or None,
    )

    models = {}
    for key in ModelNames.model_fields:
        value = env.get(f"AUTHZKIT_MODEL_{key.upper()}")
        if value:
            models[key] = value

    return AuthzConfig(connection=connection, models=ModelNames(**models))
