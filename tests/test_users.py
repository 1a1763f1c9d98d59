"""
User endpoint tests for Task Blaster API
"""
from httpx import AsyncClient


class TestUserProfile:
    """Test user profile functionality"""

    async def test_get_current_user_profile(self, client: AsyncClient, auth_headers):
        response = await client.get("/users/me", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["email"] == "alice@taskblaster.dev"
        assert data["fullName"] == "Alice Johnson"
        assert "id" in data
        assert "createdAt" in data
        assert "accessToken" not in data

    async def test_get_profile_without_auth(self, client: AsyncClient):
        response = await client.get("/users/me")
        assert response.status_code == 401


class TestUserManagement:

    async def test_list_users_ordered_by_name(self, client: AsyncClient, auth_headers):
        response = await client.get("/users", headers=auth_headers)

        assert response.status_code == 200
        names = [user["fullName"] for user in response.json()]
        assert names == sorted(names)
        assert len(names) == 4

    async def test_search_users(self, client: AsyncClient, auth_headers):
        response = await client.get("/users", params={"search": "BOB"}, headers=auth_headers)
        assert [user["email"] for user in response.json()] == ["bob@taskblaster.dev"]

    async def test_get_user_by_id(self, client: AsyncClient, auth_headers):
        response = await client.get("/users/2", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["fullName"] == "Bob Smith"

    async def test_get_unknown_user(self, client: AsyncClient, auth_headers):
        response = await client.get("/users/999", headers=auth_headers)
        assert response.status_code == 404

    async def test_created_user_can_authenticate(self, client: AsyncClient, auth_headers):
        response = await client.post(
            "/users",
            json={"fullName": "Erin Brown", "email": "erin@taskblaster.dev"},
            headers=auth_headers
        )

        assert response.status_code == 201
        token = response.json()["accessToken"]
        assert token

        me = await client.get("/users/me", headers={"TB_TOKEN": token})
        assert me.status_code == 200
        assert me.json()["email"] == "erin@taskblaster.dev"

    async def test_create_with_explicit_token(self, client: AsyncClient, auth_headers):
        response = await client.post(
            "/users",
            json={"fullName": "Frank", "email": "frank@taskblaster.dev", "accessToken": "frank-static-token"},
            headers=auth_headers
        )
        assert response.json()["accessToken"] == "frank-static-token"

    async def test_duplicate_email(self, client: AsyncClient, auth_headers):
        response = await client.post(
            "/users",
            json={"fullName": "Alice Again", "email": "ALICE@taskblaster.dev"},
            headers=auth_headers
        )
        assert response.status_code == 409
        assert "already exists" in response.json()["error"]

    async def test_invalid_email(self, client: AsyncClient, auth_headers):
        response = await client.post("/users", json={"fullName": "X", "email": "not-an-email"}, headers=auth_headers)
        assert response.status_code == 400

    async def test_update_user(self, client: AsyncClient, auth_headers):
        response = await client.put("/users/4", json={"fullName": "Daniel Wilson"}, headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["fullName"] == "Daniel Wilson"
        assert response.json()["email"] == "dan@taskblaster.dev"

    async def test_deleted_user_token_stops_working(self, client: AsyncClient, auth_headers):
        response = await client.delete("/users/4", headers=auth_headers)
        assert response.status_code == 200

        me = await client.get("/users/me", headers={"TB_TOKEN": "6ba7b812-9dad-11d1-80b4-00c04fd430c8"})
        assert me.status_code == 401

    async def test_project_leader_cannot_be_deleted(self, client: AsyncClient, auth_headers):
        response = await client.delete("/users/2", headers=auth_headers)
        assert response.status_code == 409

    async def test_deleting_assignee_unassigns_tasks(self, client: AsyncClient, auth_headers, webred, create_task):
        task = await create_task(webred["id"], assigneeId=4)
        assert task["assigneeName"] == "Dan Wilson"

        await client.delete("/users/4", headers=auth_headers)

        response = await client.get(f"/tasks/{task['id']}", headers=auth_headers)
        assert response.json()["assigneeId"] is None


class TestHealthCheck:
    """Test health check functionality"""

    async def test_health_check(self, client: AsyncClient):
        response = await client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["checks"]["database"] == "connected"
        assert data["checks"]["token_cache"]["token_count"] == 4
        assert "trace_id" in data

    async def test_root_endpoint(self, client: AsyncClient):
        response = await client.get("/")

        assert response.status_code == 200
        data = response.json()
        assert "Task Blaster API" in data["message"]
        assert "version" in data

    async def test_trace_id_header(self, client: AsyncClient):
        response = await client.get("/")
        assert response.headers.get("x-trace-id")
