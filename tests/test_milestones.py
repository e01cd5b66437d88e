"""
Milestone controller tests: completion toggle, reorder and ownership.
"""

import uuid

import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from app.controllers.milestone_controller import MilestoneController
from app.controllers.project_controller import ProjectController
from app.core.invalidation import CLIENT_DASHBOARD, PROJECTS_LIST, project_detail
from app.models.milestone import Milestone


@pytest.fixture
def controller(test_db_session, bus):
    return MilestoneController(test_db_session, bus)


@pytest.fixture
async def project(test_db_session, bus, admin_user, client_user):
    result = await ProjectController(test_db_session, bus).create_project(admin_user, {
        "title": "Website redesign",
        "description": "Full redesign of the marketing site",
        "status": "IN_PROGRESS",
        "client_id": str(client_user.id),
    })
    return result.data


async def add_milestones(controller, admin_user, project_id, *titles):
    created = []
    for position, title in enumerate(titles):
        result = await controller.create_milestone(admin_user, {
            "title": title,
            "order": position,
            "project_id": str(project_id),
        })
        assert result.success, result.error
        created.append(result.data)
    return created


@pytest.mark.asyncio
async def test_create_and_list_in_order(controller, admin_user, project, published):
    await controller.create_milestone(admin_user, {"title": "Launch", "order": 2, "project_id": str(project.id)})
    await controller.create_milestone(admin_user, {"title": "Wireframes", "order": 0, "project_id": str(project.id)})
    await controller.create_milestone(admin_user, {"title": "Design", "order": 1, "project_id": str(project.id)})

    result = await controller.list_milestones(admin_user, project.id)

    assert result.success
    assert [m.title for m in result.data.items] == ["Wireframes", "Design", "Launch"]
    assert all(not m.is_completed for m in result.data.items)
    assert project_detail(project.id) in published
    assert PROJECTS_LIST in published


@pytest.mark.asyncio
async def test_create_for_missing_project(controller, admin_user):
    result = await controller.create_milestone(admin_user, {"title": "Orphan", "project_id": str(uuid.uuid4())})
    assert result.status_code == 404
    assert result.error == "Project not found"


@pytest.mark.asyncio
async def test_toggle_is_an_involution(controller, admin_user, project, published):
    (milestone,) = await add_milestones(controller, admin_user, project.id, "Wireframes")

    completed = await controller.toggle_milestone_complete(admin_user, milestone.id, project.id)
    assert completed.success
    assert completed.data.is_completed
    assert completed.data.completed_at is not None

    reopened = await controller.toggle_milestone_complete(admin_user, milestone.id, project.id)
    assert reopened.success
    assert not reopened.data.is_completed
    assert reopened.data.completed_at is None
    assert CLIENT_DASHBOARD in published


@pytest.mark.asyncio
async def test_toggle_missing_milestone(controller, admin_user):
    result = await controller.toggle_milestone_complete(admin_user, uuid.uuid4())
    assert result.status_code == 404
    assert result.error == "Milestone not found"


@pytest.mark.asyncio
async def test_client_cannot_toggle(controller, admin_user, client_user, project):
    (milestone,) = await add_milestones(controller, admin_user, project.id, "Wireframes")
    result = await controller.toggle_milestone_complete(client_user, milestone.id)
    assert result.status_code == 403


@pytest.mark.asyncio
async def test_update_keeps_completion(controller, admin_user, project):
    (milestone,) = await add_milestones(controller, admin_user, project.id, "Wireframes")
    await controller.toggle_milestone_complete(admin_user, milestone.id)

    result = await controller.update_milestone(admin_user, milestone.id, {
        "title": "Wireframes v2",
        "description": "",
        "order": 3,
        "project_id": str(project.id),
    })

    assert result.success
    assert result.data.title == "Wireframes v2"
    assert result.data.description is None
    assert result.data.order == 3
    assert result.data.is_completed


@pytest.mark.asyncio
async def test_reorder(controller, admin_user, project):
    a, b, c = await add_milestones(controller, admin_user, project.id, "Alpha", "Bravo", "Charlie")

    result = await controller.reorder_milestones(
        admin_user, project.id, {"milestone_ids": [str(c.id), str(a.id), str(b.id)]}
    )
    assert result.success

    listed = await controller.list_milestones(admin_user, project.id)
    assert [(m.title, m.order) for m in listed.data.items] == [("Charlie", 0), ("Alpha", 1), ("Bravo", 2)]


@pytest.mark.asyncio
async def test_reorder_rejects_duplicates(controller, admin_user, project):
    a, b = await add_milestones(controller, admin_user, project.id, "Alpha", "Bravo")

    result = await controller.reorder_milestones(
        admin_user, project.id, {"milestone_ids": [str(b.id), str(b.id)]}
    )
    assert result.status_code == 400
    assert result.errors[0].field == "milestone_ids"

    listed = await controller.list_milestones(admin_user, project.id)
    assert [m.title for m in listed.data.items] == ["Alpha", "Bravo"]


@pytest.mark.asyncio
async def test_reorder_rejects_foreign_ids(test_db_session, bus, controller, admin_user, client_user, project):
    (a,) = await add_milestones(controller, admin_user, project.id, "Alpha")
    other_project = (await ProjectController(test_db_session, bus).create_project(admin_user, {
        "title": "Other project",
        "description": "Belongs to the same client",
        "status": "PENDING",
        "client_id": str(client_user.id),
    })).data
    (foreign,) = await add_milestones(controller, admin_user, other_project.id, "Foreign")

    result = await controller.reorder_milestones(
        admin_user, project.id, {"milestone_ids": [str(foreign.id), str(a.id)]}
    )

    assert result.status_code == 400
    assert result.errors[0].message == "1 milestone(s) do not belong to this project"
    listed = await controller.list_milestones(admin_user, other_project.id)
    assert listed.data.items[0].order == 0


@pytest.mark.asyncio
async def test_reorder_requires_admin(controller, admin_user, client_user, project):
    a, b = await add_milestones(controller, admin_user, project.id, "Alpha", "Bravo")
    result = await controller.reorder_milestones(
        client_user, project.id, {"milestone_ids": [str(b.id), str(a.id)]}
    )
    assert result.status_code == 403


@pytest.mark.asyncio
async def test_reorder_failure_rolls_back_every_position(
    test_session_maker, controller, admin_user, project, monkeypatch
):
    a, b, c = await add_milestones(controller, admin_user, project.id, "Alpha", "Bravo", "Charlie")
    repo = controller.milestone_service.milestone_repo
    real_set_orders = repo.set_orders

    async def fail_after_first(ids):
        await real_set_orders(ids[:1])
        raise OperationalError("UPDATE milestones", {}, Exception("database is locked"))

    monkeypatch.setattr(repo, "set_orders", fail_after_first)

    result = await controller.reorder_milestones(
        admin_user, project.id, {"milestone_ids": [str(c.id), str(a.id), str(b.id)]}
    )

    assert not result.success
    assert result.status_code == 500
    assert result.error == "Failed to reorder milestones"

    async with test_session_maker() as fresh:
        rows = await fresh.execute(
            select(Milestone.title, Milestone.order)
            .where(Milestone.project_id == project.id)
            .order_by(Milestone.order)
        )
        assert [tuple(row) for row in rows.all()] == [("Alpha", 0), ("Bravo", 1), ("Charlie", 2)]


@pytest.mark.asyncio
async def test_owner_reads_milestones(controller, admin_user, client_user, other_client, project):
    (milestone,) = await add_milestones(controller, admin_user, project.id, "Wireframes")

    assert (await controller.list_milestones(client_user, project.id)).data.total == 1
    assert (await controller.get_milestone(client_user, milestone.id)).success
    assert (await controller.list_milestones(other_client, project.id)).status_code == 403
    assert (await controller.get_milestone(other_client, milestone.id)).status_code == 403


@pytest.mark.asyncio
async def test_delete_milestone(controller, admin_user, project):
    (milestone,) = await add_milestones(controller, admin_user, project.id, "Wireframes")

    assert (await controller.delete_milestone(admin_user, milestone.id, project.id)).success
    assert (await controller.get_milestone(admin_user, milestone.id)).status_code == 404
    assert (await controller.delete_milestone(admin_user, milestone.id)).status_code == 404
