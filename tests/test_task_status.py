"""
Task status change tests: PATCH /tasks/{id}/status and the project-scoped variant
"""
from httpx import AsyncClient


class TestStatusChangeAuth:

    async def test_requires_token(self, client: AsyncClient, webred, create_task):
        task = await create_task(webred["id"])
        response = await client.patch(f"/tasks/{task['id']}/status", json={"status": "IN_PROGRESS"})
        assert response.status_code == 401

    async def test_rejects_unknown_token(self, client: AsyncClient, webred, create_task):
        task = await create_task(webred["id"])
        response = await client.patch(
            f"/tasks/{task['id']}/status", json={"status": "IN_PROGRESS"}, headers={"TB_TOKEN": "bogus"}
        )
        assert response.status_code == 401

    async def test_any_user_may_move_tasks(self, client: AsyncClient, other_user_headers, webred, create_task):
        task = await create_task(webred["id"])
        response = await client.patch(
            f"/tasks/{task['id']}/status", json={"status": "IN_PROGRESS"}, headers=other_user_headers
        )
        assert response.status_code == 200


class TestStatusChangeValidation:

    async def test_unknown_task(self, client: AsyncClient, auth_headers):
        response = await client.patch("/tasks/99999/status", json={"status": "DONE"}, headers=auth_headers)
        assert response.status_code == 404
        assert response.json()["error"] == "Task not found"

    async def test_status_outside_workflow(self, client: AsyncClient, auth_headers, webred, create_task):
        task = await create_task(webred["id"])
        response = await client.patch(f"/tasks/{task['id']}/status", json={"status": "TESTING"}, headers=auth_headers)
        assert response.status_code == 400

    async def test_malformed_status(self, client: AsyncClient, auth_headers, webred, create_task):
        task = await create_task(webred["id"])
        response = await client.patch(f"/tasks/{task['id']}/status", json={"status": "done"}, headers=auth_headers)
        assert response.status_code == 400

    async def test_status_required(self, client: AsyncClient, auth_headers, webred, create_task):
        task = await create_task(webred["id"])
        response = await client.patch(f"/tasks/{task['id']}/status", json={}, headers=auth_headers)
        assert response.status_code == 400
        assert response.json()["error"] == "Validation error"


class TestStatusChangePositions:
    """A status change appends the task to the destination column"""

    async def test_empty_destination_column(self, client: AsyncClient, auth_headers, webred, create_task):
        task = await create_task(webred["id"])

        response = await client.patch(f"/tasks/{task['id']}/status", json={"status": "DONE"}, headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "DONE"
        assert data["position"] == 10

    async def test_non_empty_destination_column(self, client: AsyncClient, auth_headers, webred, create_task):
        for title in ("one", "two"):
            await create_task(webred["id"], title=title, status="IN_PROGRESS")
        task = await create_task(webred["id"], title="mover")

        response = await client.patch(
            f"/tasks/{task['id']}/status", json={"status": "IN_PROGRESS"}, headers=auth_headers
        )
        assert response.json()["position"] == 30

    async def test_append_rounds_up_to_next_step(
            self, client: AsyncClient, auth_headers, webred, create_task, set_positions
    ):
        done = await create_task(webred["id"], status="DONE")
        await set_positions("WEBRED", "DONE", {done["id"]: 15})
        task = await create_task(webred["id"])

        response = await client.patch(f"/tasks/{task['id']}/status", json={"status": "DONE"}, headers=auth_headers)
        assert response.json()["position"] == 20

    async def test_source_column_is_not_compacted(self, client: AsyncClient, auth_headers, webred, create_task):
        first = await create_task(webred["id"], title="first")
        second = await create_task(webred["id"], title="second")
        third = await create_task(webred["id"], title="third")

        await client.patch(f"/tasks/{second['id']}/status", json={"status": "DONE"}, headers=auth_headers)

        column = await client.get("/projects/WEBRED/kanban/tasks/column/TO_DO", headers=auth_headers)
        assert column.json() == [
            {"id": first["id"], "position": 10},
            {"id": third["id"], "position": 30},
        ]

    async def test_repeated_moves(self, client: AsyncClient, auth_headers, webred, create_task):
        task = await create_task(webred["id"])

        positions = []
        for status in ("IN_PROGRESS", "IN_REVIEW", "DONE", "TO_DO"):
            response = await client.patch(f"/tasks/{task['id']}/status", json={"status": status}, headers=auth_headers)
            assert response.status_code == 200
            positions.append(response.json()["position"])

        assert positions == [10, 10, 10, 10]

    async def test_same_status_keeps_position(self, client: AsyncClient, auth_headers, webred, create_task):
        task = await create_task(webred["id"])
        response = await client.patch(f"/tasks/{task['id']}/status", json={"status": "TO_DO"}, headers=auth_headers)
        assert response.json()["position"] == task["position"]


class TestStatusChangeIntegrity:

    async def test_other_fields_preserved(self, client: AsyncClient, auth_headers, webred, create_task):
        task = await create_task(
            webred["id"],
            title="Keep me",
            priority="HIGH",
            storyPoints=5,
            prompt="Write the thing",
            tagNames=["frontend"]
        )

        response = await client.patch(f"/tasks/{task['id']}/status", json={"status": "IN_PROGRESS"}, headers=auth_headers)

        data = response.json()
        assert data["title"] == "Keep me"
        assert data["priority"] == "HIGH"
        assert data["storyPoints"] == 5
        assert data["prompt"] == "Write the thing"
        assert data["taskId"] == task["taskId"]
        assert [tag["tag"] for tag in data["tags"]] == ["frontend"]

    async def test_updated_at_moves_forward(self, client: AsyncClient, auth_headers, webred, create_task):
        task = await create_task(webred["id"])
        response = await client.patch(f"/tasks/{task['id']}/status", json={"status": "DONE"}, headers=auth_headers)
        assert response.json()["updatedAt"] >= task["updatedAt"]

    async def test_returns_complete_task(self, client: AsyncClient, auth_headers, webred, create_task):
        task = await create_task(webred["id"])
        response = await client.patch(f"/tasks/{task['id']}/status", json={"status": "DONE"}, headers=auth_headers)

        data = response.json()
        for field in ("id", "taskId", "projectId", "projectCode", "title", "status", "position",
                      "priority", "isBlocked", "createdAt", "updatedAt", "tags", "imageCount"):
            assert field in data
        assert data["projectCode"] == "WEBRED"


class TestProjectScopedStatusChange:
    """PATCH /projects/{code}/tasks/{taskKey}/status"""

    async def test_moves_task_by_identifier(self, client: AsyncClient, auth_headers, webred, create_task):
        task = await create_task(webred["id"])

        response = await client.patch(
            f"/projects/WEBRED/tasks/{task['taskId']}/status", json={"status": "IN_REVIEW"}, headers=auth_headers
        )
        assert response.status_code == 200
        assert response.json()["status"] == "IN_REVIEW"

    async def test_task_from_another_project(self, client: AsyncClient, auth_headers, webred, create_task):
        task = await create_task(webred["id"])

        response = await client.patch(
            f"/projects/MOBDEV/tasks/{task['taskId']}/status", json={"status": "DONE"}, headers=auth_headers
        )
        assert response.status_code == 403
        assert response.json()["error"] == "Task does not belong to this project"

    async def test_unknown_task_identifier(self, client: AsyncClient, auth_headers):
        response = await client.patch(
            "/projects/WEBRED/tasks/WEBRED-999/status", json={"status": "DONE"}, headers=auth_headers
        )
        assert response.status_code == 404
