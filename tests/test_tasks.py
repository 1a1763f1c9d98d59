"""
Task endpoint tests
"""
from httpx import AsyncClient


class TestTaskCreation:

    async def test_create_task(self, webred, create_task):
        task = await create_task(
            webred["id"],
            title="Build login form",
            priority="HIGH",
            storyPoints=3,
            assigneeId=2,
            tagNames=["frontend", "ui-polish"]
        )

        assert task["taskId"] == "WEBRED-1"
        assert task["projectCode"] == "WEBRED"
        assert task["priority"] == "HIGH"
        assert task["storyPoints"] == 3
        assert task["assigneeName"] == "Bob Smith"
        assert [tag["tag"] for tag in task["tags"]] == ["frontend", "ui-polish"]
        assert task["isBlocked"] is False
        assert task["imageCount"] == 0

    async def test_defaults(self, webred, create_task):
        task = await create_task(webred["id"])
        assert task["priority"] == "MEDIUM"
        assert task["assigneeId"] is None
        assert task["tags"] == []

    async def test_identifiers_advance_the_project_sequence(self, client: AsyncClient, auth_headers, webred,
                                                            create_task):
        first = await create_task(webred["id"])
        await client.delete(f"/tasks/{first['id']}", headers=auth_headers)

        second = await create_task(webred["id"])
        assert second["taskId"] == "WEBRED-2"

        project = await client.get("/projects/WEBRED", headers=auth_headers)
        assert project.json()["nextTaskSequence"] == 3

    async def test_unknown_project(self, client: AsyncClient, auth_headers):
        response = await client.post("/tasks", json={"projectId": 999, "title": "Orphan"}, headers=auth_headers)
        assert response.status_code == 404

    async def test_status_outside_workflow(self, client: AsyncClient, auth_headers, webred):
        response = await client.post(
            "/tasks", json={"projectId": webred["id"], "title": "x", "status": "TESTING"}, headers=auth_headers
        )
        assert response.status_code == 400

    async def test_unknown_assignee(self, client: AsyncClient, auth_headers, webred):
        response = await client.post(
            "/tasks", json={"projectId": webred["id"], "title": "x", "assigneeId": 999}, headers=auth_headers
        )
        assert response.status_code == 400

    async def test_title_required(self, client: AsyncClient, auth_headers, webred):
        response = await client.post("/tasks", json={"projectId": webred["id"]}, headers=auth_headers)
        assert response.status_code == 400

    async def test_story_points_range(self, client: AsyncClient, auth_headers, webred):
        response = await client.post(
            "/tasks", json={"projectId": webred["id"], "title": "x", "storyPoints": 40}, headers=auth_headers
        )
        assert response.status_code == 400


class TestTaskQueries:

    async def test_filters(self, client: AsyncClient, auth_headers, webred, create_task):
        login = await create_task(webred["id"], title="Login page", assigneeId=3)
        await create_task(webred["id"], title="Footer links", status="DONE")

        by_assignee = await client.get("/tasks", params={"assigneeId": 3}, headers=auth_headers)
        assert [task["id"] for task in by_assignee.json()] == [login["id"]]

        by_search = await client.get("/tasks", params={"search": "LOGIN"}, headers=auth_headers)
        assert [task["id"] for task in by_search.json()] == [login["id"]]

        by_status = await client.get(
            "/tasks", params={"projectId": webred["id"], "status": "DONE"}, headers=auth_headers
        )
        assert [task["title"] for task in by_status.json()] == ["Footer links"]

    async def test_unknown_task(self, client: AsyncClient, auth_headers):
        response = await client.get("/tasks/99999", headers=auth_headers)
        assert response.status_code == 404


class TestTaskUpdates:

    async def test_update_details(self, client: AsyncClient, auth_headers, webred, create_task):
        task = await create_task(webred["id"])

        response = await client.put(
            f"/tasks/{task['id']}",
            json={"title": "Renamed", "isBlocked": True, "blockedReason": "Waiting on design"},
            headers=auth_headers
        )

        assert response.status_code == 200
        data = response.json()
        assert data["title"] == "Renamed"
        assert data["isBlocked"] is True
        assert data["blockedReason"] == "Waiting on design"
        assert data["position"] == task["position"]

    async def test_status_change_appends(self, client: AsyncClient, auth_headers, webred, create_task):
        await create_task(webred["id"], status="DONE")
        task = await create_task(webred["id"])

        response = await client.put(f"/tasks/{task['id']}", json={"status": "DONE"}, headers=auth_headers)
        assert response.json()["position"] == 20

    async def test_status_with_explicit_position(self, client: AsyncClient, auth_headers, webred, create_task):
        task = await create_task(webred["id"])

        response = await client.put(
            f"/tasks/{task['id']}", json={"status": "IN_REVIEW", "position": 55}, headers=auth_headers
        )
        assert response.json()["status"] == "IN_REVIEW"
        assert response.json()["position"] == 55

    async def test_status_outside_workflow(self, client: AsyncClient, auth_headers, webred, create_task):
        task = await create_task(webred["id"])
        response = await client.put(f"/tasks/{task['id']}", json={"status": "TESTING"}, headers=auth_headers)
        assert response.status_code == 400

    async def test_unassign(self, client: AsyncClient, auth_headers, webred, create_task):
        task = await create_task(webred["id"], assigneeId=2)
        response = await client.put(f"/tasks/{task['id']}", json={"assigneeId": None}, headers=auth_headers)
        assert response.json()["assigneeId"] is None

    async def test_delete(self, client: AsyncClient, auth_headers, webred, create_task):
        task = await create_task(webred["id"])

        response = await client.delete(f"/tasks/{task['id']}", headers=auth_headers)
        assert response.status_code == 200
        assert (await client.get(f"/tasks/{task['id']}", headers=auth_headers)).status_code == 404


class TestProjectScopedTaskRoutes:
    """PUT and DELETE /projects/{code}/tasks/{taskKey}"""

    async def test_update_by_identifier(self, client: AsyncClient, auth_headers, webred, create_task):
        task = await create_task(webred["id"])

        response = await client.put(
            f"/projects/WEBRED/tasks/{task['taskId']}", json={"priority": "CRITICAL"}, headers=auth_headers
        )
        assert response.status_code == 200
        assert response.json()["priority"] == "CRITICAL"

    async def test_update_wrong_project(self, client: AsyncClient, auth_headers, webred, create_task):
        task = await create_task(webred["id"])

        response = await client.put(
            f"/projects/APIMOD/tasks/{task['taskId']}", json={"priority": "LOW"}, headers=auth_headers
        )
        assert response.status_code == 403

    async def test_delete_by_identifier(self, client: AsyncClient, auth_headers, webred, create_task):
        task = await create_task(webred["id"])

        response = await client.delete(f"/projects/WEBRED/tasks/{task['taskId']}", headers=auth_headers)
        assert response.status_code == 200
        assert (await client.get(f"/tasks/{task['id']}", headers=auth_headers)).status_code == 404

    async def test_delete_wrong_project(self, client: AsyncClient, auth_headers, webred, create_task):
        task = await create_task(webred["id"])

        response = await client.delete(f"/projects/MOBDEV/tasks/{task['taskId']}", headers=auth_headers)
        assert response.status_code == 403

    async def test_unknown_project(self, client: AsyncClient, auth_headers):
        response = await client.delete("/projects/NOPE/tasks/NOPE-1", headers=auth_headers)
        assert response.status_code == 404
