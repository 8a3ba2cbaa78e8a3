"""Route guard and example host app tests."""

from typing import Optional

import pytest
from fastapi import Depends, FastAPI, Header
from fastapi.testclient import TestClient

from authzkit.engine import Authzkit
from authzkit.features.authorization.dependencies import authorize
from authzkit.main import create_app
from authzkit.stores.memory import MemoryAuthzStore
from scripts.seed_permissions import DEFAULT_PERMISSIONS, DEFAULT_ROLES, seed_permissions, seed_roles


async def current_user(x_user_id: Optional[str] = Header(None)) -> Optional[str]:
    return x_user_id


@pytest.fixture
def authzkit():
    return Authzkit(MemoryAuthzStore())


class TestAuthorize:
    @pytest.fixture
    def client(self, authzkit):
        app = FastAPI()

        @app.get("/single")
        async def single(user_id: str = Depends(authorize(authzkit, "editor", current_user))):
            return {"user_id": user_id}

        @app.get("/any")
        async def any_of(user_id: str = Depends(authorize(authzkit, ["admin", "delete_post"], current_user))):
            return {"user_id": user_id}

        with TestClient(app) as client:
            yield client

    def grant(self, client, authzkit):
        async def setup():
            await authzkit.define_permission("delete_post")
            await authzkit.define_role("editor")
            await authzkit.assign_role("u1", "editor")
            await authzkit.assign_permission("u2", "delete_post")

        client.portal.call(setup)

    def test_no_principal(self, client):
        assert client.get("/single").status_code == 401

    def test_forbidden(self, client, authzkit):
        self.grant(client, authzkit)

        assert client.get("/single", headers={"X-User-Id": "u2"}).status_code == 403
        assert client.get("/any", headers={"X-User-Id": "u1"}).status_code == 403

    def test_allowed_by_role(self, client, authzkit):
        self.grant(client, authzkit)

        response = client.get("/single", headers={"X-User-Id": "u1"})

        assert response.status_code == 200
        assert response.json() == {"user_id": "u1"}

    def test_allowed_by_permission(self, client, authzkit):
        self.grant(client, authzkit)

        assert client.get("/any", headers={"X-User-Id": "u2"}).status_code == 200


class TestExampleApp:
    def test_health_and_guarded_route(self, authzkit):
        app = create_app(authzkit, dashboard_secret="s3cret")

        with TestClient(app) as client:
            assert client.get("/health").json() == {"status": "healthy"}
            assert client.get("/articles/edit").status_code == 401
            assert client.get("/articles/edit", headers={"X-User-Id": "u1"}).status_code == 403

            client.post("/authzkit/api/permissions", json={"name": "edit_articles"}, auth=("admin", "s3cret"))
            client.post(
                "/authzkit/api/users/u1/permissions",
                json={"permissionName": "edit_articles"},
                auth=("admin", "s3cret"),
            )

            response = client.get("/articles/edit", headers={"X-User-Id": "u1"})
            assert response.status_code == 200
            assert response.json()["user_id"] == "u1"

    def test_validation_errors_are_400(self, authzkit):
        app = create_app(authzkit, dashboard_secret="s3cret")

        with TestClient(app) as client:
            response = client.post("/authzkit/api/permissions", json={}, auth=("admin", "s3cret"))

        assert response.status_code == 400
        assert "name" in response.json()

    def test_builds_store_from_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("AUTHZKIT_CONNECTION_TYPE", "relational")
        monkeypatch.setenv("AUTHZKIT_CONNECTION_URI", f"sqlite:///{tmp_path / 'app.db'}")

        app = create_app(dashboard_secret="s3cret")

        with TestClient(app) as client:
            response = client.post("/authzkit/api/permissions", json={"name": "edit_articles"}, auth=("admin", "s3cret"))
            assert response.status_code == 201
        assert app.state.authzkit.store.connection.is_connected is False


@pytest.mark.asyncio
class TestSeed:
    async def test_seed_is_idempotent(self, authzkit):
        assert await seed_permissions(authzkit) == len(DEFAULT_PERMISSIONS)
        assert await seed_roles(authzkit) == len(DEFAULT_ROLES)

        assert await seed_permissions(authzkit) == 0
        assert await seed_roles(authzkit) == 0

        assert await authzkit.role_has_permission("editor", "publish_articles") is True
        assert await authzkit.role_has_permission("viewer", "edit_articles") is False
