"""
Project status workflow endpoint tests
"""
from httpx import AsyncClient

ALL_STATUSES = [
    "TO_DO", "IN_PROGRESS", "IN_REVIEW", "DONE",
    "TESTING", "AWAITING_APPROVAL", "READY_FOR_DEPLOY", "ICEBOX",
]


class TestGetStatusWorkflow:
    """GET /projects/{code}/statuses"""

    async def test_requires_token(self, client: AsyncClient):
        response = await client.get("/projects/WEBRED/statuses")
        assert response.status_code == 401
        assert response.json()["error"] == "Unauthorized"

    async def test_rejects_unknown_token(self, client: AsyncClient):
        response = await client.get("/projects/WEBRED/statuses", headers={"TB_TOKEN": "not-a-token"})
        assert response.status_code == 401

    async def test_returns_seeded_workflow(self, client: AsyncClient, auth_headers):
        response = await client.get("/projects/WEBRED/statuses", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"statusWorkflow": ["TO_DO", "IN_PROGRESS", "IN_REVIEW", "DONE"]}

    async def test_unknown_project(self, client: AsyncClient, auth_headers):
        response = await client.get("/projects/NOPE/statuses", headers=auth_headers)
        assert response.status_code == 404
        assert response.json()["error"] == "Project not found"


class TestUpdateStatusWorkflow:
    """PUT /projects/{code}/statuses"""

    async def test_requires_token(self, client: AsyncClient):
        response = await client.put("/projects/WEBRED/statuses", json={"statusWorkflow": ["TO_DO"]})
        assert response.status_code == 401

    async def test_only_leader_may_update(self, client: AsyncClient, other_user_headers):
        response = await client.put(
            "/projects/WEBRED/statuses",
            json={"statusWorkflow": ["TO_DO", "DONE"]},
            headers=other_user_headers
        )
        assert response.status_code == 403
        assert response.json()["error"] == "Only project leaders can update status workflow"

    async def test_shrink_to_three_statuses(self, client: AsyncClient, auth_headers):
        workflow = ["TO_DO", "IN_PROGRESS", "DONE"]
        response = await client.put("/projects/WEBRED/statuses", json={"statusWorkflow": workflow}, headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["statusWorkflow"] == workflow

    async def test_all_catalog_statuses(self, client: AsyncClient, auth_headers):
        response = await client.put(
            "/projects/WEBRED/statuses", json={"statusWorkflow": ALL_STATUSES}, headers=auth_headers
        )
        assert response.status_code == 200
        assert response.json()["statusWorkflow"] == ALL_STATUSES

    async def test_reorder(self, client: AsyncClient, auth_headers):
        workflow = ["DONE", "IN_REVIEW", "IN_PROGRESS", "TO_DO"]
        response = await client.put("/projects/WEBRED/statuses", json={"statusWorkflow": workflow}, headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["statusWorkflow"] == workflow

    async def test_duplicates_stored_as_submitted(self, client: AsyncClient, auth_headers):
        workflow = ["TO_DO", "IN_PROGRESS", "TO_DO", "IN_REVIEW", "DONE"]
        response = await client.put("/projects/WEBRED/statuses", json={"statusWorkflow": workflow}, headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["statusWorkflow"] == workflow

        stored = await client.get("/projects/WEBRED/statuses", headers=auth_headers)
        assert stored.json()["statusWorkflow"] == workflow

    async def test_single_status_workflow(self, client: AsyncClient, auth_headers):
        response = await client.put("/projects/WEBRED/statuses", json={"statusWorkflow": ["TO_DO"]}, headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["statusWorkflow"] == ["TO_DO"]

    async def test_identical_resubmission_is_accepted(self, client: AsyncClient, auth_headers, webred, create_task):
        await create_task(webred["id"], status="IN_REVIEW")
        workflow = ["TO_DO", "IN_PROGRESS", "IN_REVIEW", "DONE"]

        for _ in range(2):
            response = await client.put(
                "/projects/WEBRED/statuses", json={"statusWorkflow": workflow}, headers=auth_headers
            )
            assert response.status_code == 200
            assert response.json()["statusWorkflow"] == workflow

    async def test_empty_list_rejected(self, client: AsyncClient, auth_headers):
        response = await client.put("/projects/WEBRED/statuses", json={"statusWorkflow": []}, headers=auth_headers)
        assert response.status_code == 400

    async def test_missing_field_rejected(self, client: AsyncClient, auth_headers):
        response = await client.put("/projects/WEBRED/statuses", json={}, headers=auth_headers)
        assert response.status_code == 400
        assert response.json()["error"] == "Validation error"

    async def test_invalid_code_reported(self, client: AsyncClient, auth_headers):
        response = await client.put(
            "/projects/WEBRED/statuses",
            json={"statusWorkflow": ["TO_DO", "INVALID_STATUS"]},
            headers=auth_headers
        )
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Invalid status codes"
        assert body["invalidStatuses"] == ["INVALID_STATUS"]

    async def test_every_invalid_code_reported(self, client: AsyncClient, auth_headers):
        response = await client.put(
            "/projects/WEBRED/statuses",
            json={"statusWorkflow": ["TO_DO", "INVALID_STATUS", "ANOTHER_INVALID"]},
            headers=auth_headers
        )
        assert response.status_code == 400
        assert response.json()["invalidStatuses"] == ["INVALID_STATUS", "ANOTHER_INVALID"]

    async def test_unknown_project(self, client: AsyncClient, auth_headers):
        response = await client.put("/projects/NOPE/statuses", json={"statusWorkflow": ["TO_DO"]}, headers=auth_headers)
        assert response.status_code == 404


class TestStatusesInUse:
    """Statuses still holding tasks cannot be dropped"""

    async def test_cannot_remove_status_with_tasks(self, client: AsyncClient, auth_headers, webred, create_task):
        await create_task(webred["id"], title="Under review", status="IN_REVIEW")

        response = await client.put(
            "/projects/WEBRED/statuses",
            json={"statusWorkflow": ["TO_DO", "IN_PROGRESS", "DONE"]},
            headers=auth_headers
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Cannot remove status 'IN_REVIEW' because tasks exist with this status"

        unchanged = await client.get("/projects/WEBRED/statuses", headers=auth_headers)
        assert unchanged.json()["statusWorkflow"] == ["TO_DO", "IN_PROGRESS", "IN_REVIEW", "DONE"]

    async def test_first_offender_in_current_order_is_reported(
            self, client: AsyncClient, auth_headers, webred, create_task
    ):
        await create_task(webred["id"], status="DONE")
        await create_task(webred["id"], status="IN_PROGRESS")

        response = await client.put("/projects/WEBRED/statuses", json={"statusWorkflow": ["TO_DO"]}, headers=auth_headers)

        assert response.status_code == 400
        assert "'IN_PROGRESS'" in response.json()["error"]

    async def test_can_remove_unused_status(self, client: AsyncClient, auth_headers, webred, create_task):
        await create_task(webred["id"], status="TO_DO")

        response = await client.put(
            "/projects/WEBRED/statuses",
            json={"statusWorkflow": ["TO_DO", "IN_PROGRESS", "DONE"]},
            headers=auth_headers
        )
        assert response.status_code == 200
        assert "IN_REVIEW" not in response.json()["statusWorkflow"]

    async def test_adding_statuses_ignores_tasks(self, client: AsyncClient, auth_headers, webred, create_task):
        await create_task(webred["id"], status="IN_REVIEW")

        workflow = ["TO_DO", "IN_PROGRESS", "IN_REVIEW", "TESTING", "DONE"]
        response = await client.put("/projects/WEBRED/statuses", json={"statusWorkflow": workflow}, headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["statusWorkflow"] == workflow


class TestWorkflowPersistence:

    async def test_changes_are_visible_in_project_details(self, client: AsyncClient, auth_headers):
        workflow = ["TO_DO", "TESTING", "DONE"]
        await client.put("/projects/WEBRED/statuses", json={"statusWorkflow": workflow}, headers=auth_headers)

        response = await client.get("/projects/WEBRED", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["statusWorkflow"] == workflow

    async def test_new_status_can_hold_tasks(self, client: AsyncClient, auth_headers, webred, create_task):
        rejected = await client.post(
            "/tasks",
            json={"projectId": webred["id"], "title": "Too early", "status": "TESTING"},
            headers=auth_headers
        )
        assert rejected.status_code == 400

        workflow = ["TO_DO", "IN_PROGRESS", "IN_REVIEW", "TESTING", "DONE"]
        await client.put("/projects/WEBRED/statuses", json={"statusWorkflow": workflow}, headers=auth_headers)

        task = await create_task(webred["id"], title="Regression suite", status="TESTING")
        assert task["status"] == "TESTING"
        assert task["position"] == 10

        response = await client.put(
            "/projects/WEBRED/statuses",
            json={"statusWorkflow": ["TO_DO", "IN_PROGRESS", "IN_REVIEW", "DONE"]},
            headers=auth_headers
        )
        assert response.status_code == 400
        assert "'TESTING'" in response.json()["error"]
