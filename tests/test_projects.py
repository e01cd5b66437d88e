"""
Project controller tests: CRUD, detail view, ownership and cascade delete.
"""

import uuid
from decimal import Decimal

import pytest
from sqlalchemy import func, select

from app.controllers.invoice_controller import InvoiceController
from app.controllers.milestone_controller import MilestoneController
from app.controllers.project_controller import ProjectController
from app.core.invalidation import ADMIN_DASHBOARD, PROJECTS_LIST, project_detail
from app.models.deliverable import Deliverable
from app.models.milestone import Milestone
from app.models.project import ProjectStatus


def project_payload(client_id, **overrides):
    payload = {
        "title": "MVP Build",
        "description": "Build and launch MVP for client X",
        "status": "PENDING",
        "client_id": str(client_id),
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def controller(test_db_session, bus):
    return ProjectController(test_db_session, bus)


@pytest.mark.asyncio
async def test_create_project(controller, admin_user, client_user, published):
    result = await controller.create_project(admin_user, project_payload(client_user.id))

    assert result.success
    assert result.status_code == 201
    project = result.data
    assert project.id is not None
    assert project.status == ProjectStatus.PENDING
    assert project.budget is None
    assert project.client.email == "client@example.com"
    assert project.milestone_count == 0
    assert ADMIN_DASHBOARD in published
    assert PROJECTS_LIST in published


@pytest.mark.asyncio
async def test_create_project_validation_failure(controller, admin_user, client_user, published):
    result = await controller.create_project(admin_user, project_payload(client_user.id, title="AB"))

    assert not result.success
    assert result.status_code == 400
    assert result.error == "Validation error"
    assert [(e.field, e.message) for e in result.errors] == [
        ("title", "Title must be at least 3 characters"),
    ]
    assert published == []


@pytest.mark.asyncio
async def test_create_project_for_unknown_client(controller, admin_user):
    result = await controller.create_project(admin_user, project_payload(uuid.uuid4()))
    assert result.status_code == 400
    assert result.errors[0].field == "client_id"


@pytest.mark.asyncio
async def test_client_cannot_create_project(controller, client_user):
    result = await controller.create_project(client_user, project_payload(client_user.id))
    assert not result.success
    assert result.status_code == 403
    assert result.error == "Forbidden"


@pytest.mark.asyncio
async def test_anonymous_caller_is_rejected(controller, client_user):
    result = await controller.create_project(None, project_payload(client_user.id))
    assert result.status_code == 401
    assert result.error == "Unauthorized"


@pytest.mark.asyncio
async def test_update_replaces_fields(controller, admin_user, client_user, published):
    created = (await controller.create_project(admin_user, project_payload(client_user.id))).data
    published.clear()

    result = await controller.update_project(
        admin_user,
        created.id,
        project_payload(client_user.id, title="MVP Build v2", status="IN_PROGRESS", budget="5000"),
    )

    assert result.success
    assert result.data.title == "MVP Build v2"
    assert result.data.status == ProjectStatus.IN_PROGRESS
    assert result.data.budget == Decimal("5000")
    assert project_detail(created.id) in published


@pytest.mark.asyncio
async def test_update_missing_project(controller, admin_user, client_user):
    result = await controller.update_project(admin_user, uuid.uuid4(), project_payload(client_user.id))
    assert result.status_code == 404
    assert result.error == "Project not found"


@pytest.mark.asyncio
async def test_get_project_detail(test_db_session, bus, controller, admin_user, client_user):
    created = (await controller.create_project(admin_user, project_payload(client_user.id))).data
    milestones = MilestoneController(test_db_session, bus)
    first = (await milestones.create_milestone(
        admin_user, {"title": "Wireframes", "order": 0, "project_id": str(created.id)}
    )).data
    await milestones.create_milestone(admin_user, {"title": "Launch", "order": 1, "project_id": str(created.id)})
    await milestones.toggle_milestone_complete(admin_user, first.id, created.id)

    result = await controller.get_project(client_user, created.id)

    assert result.success
    detail = result.data
    assert [m.title for m in detail.milestones] == ["Wireframes", "Launch"]
    assert detail.progress.completed == 1
    assert detail.progress.total == 2
    assert detail.progress.percent == 50
    assert detail.client.id == client_user.id


@pytest.mark.asyncio
async def test_other_client_cannot_read_project(controller, admin_user, client_user, other_client):
    created = (await controller.create_project(admin_user, project_payload(client_user.id))).data

    result = await controller.get_project(other_client, created.id)
    assert result.status_code == 403


@pytest.mark.asyncio
async def test_get_missing_project(controller, admin_user):
    result = await controller.get_project(admin_user, uuid.uuid4())
    assert result.status_code == 404


@pytest.mark.asyncio
async def test_get_project_with_malformed_id(controller, admin_user):
    result = await controller.get_project(admin_user, "not-a-uuid")
    assert result.status_code == 400
    assert result.errors[0].message == "Invalid project id"


@pytest.mark.asyncio
async def test_list_projects(controller, admin_user, client_user, other_client):
    await controller.create_project(admin_user, project_payload(client_user.id, title="First"))
    await controller.create_project(admin_user, project_payload(other_client.id, title="Second"))
    await controller.create_project(
        admin_user, project_payload(client_user.id, title="Third", status="IN_PROGRESS")
    )

    everything = await controller.list_projects(admin_user)
    assert everything.data.total == 3
    assert [p.title for p in everything.data.items] == ["Third", "Second", "First"]

    in_progress = await controller.list_projects(admin_user, status=ProjectStatus.IN_PROGRESS)
    assert [p.title for p in in_progress.data.items] == ["Third"]

    mine = await controller.list_client_projects(client_user, client_user.id)
    assert {p.title for p in mine.data.items} == {"First", "Third"}

    assert (await controller.list_projects(client_user)).status_code == 403
    assert (await controller.list_client_projects(client_user, other_client.id)).status_code == 403


@pytest.mark.asyncio
async def test_delete_project_cascades_to_children(test_db_session, bus, controller, admin_user, client_user):
    created = (await controller.create_project(admin_user, project_payload(client_user.id))).data
    milestones = MilestoneController(test_db_session, bus)
    milestone = (await milestones.create_milestone(
        admin_user, {"title": "Wireframes", "order": 0, "project_id": str(created.id)}
    )).data

    listed = await milestones.list_milestones(admin_user, created.id)
    assert listed.data.total == 1
    assert listed.data.items[0].order == 0

    test_db_session.add(Deliverable(title="Sketches", project_id=created.id))
    await test_db_session.commit()

    deleted = await controller.delete_project(admin_user, created.id)
    assert deleted.success

    after = await milestones.list_milestones(admin_user, created.id)
    assert after.data.total == 0
    assert (await milestones.get_milestone(admin_user, milestone.id)).status_code == 404

    for model in (Milestone, Deliverable):
        count = await test_db_session.execute(select(func.count(model.id)))
        assert count.scalar_one() == 0


@pytest.mark.asyncio
async def test_delete_project_detaches_invoices(test_db_session, bus, controller, admin_user, client_user):
    created = (await controller.create_project(admin_user, project_payload(client_user.id))).data
    invoices = InvoiceController(test_db_session, bus)
    invoice = (await invoices.create_invoice(admin_user, {
        "invoice_number": "INV-1",
        "amount": "1000",
        "client_id": str(client_user.id),
        "project_id": str(created.id),
    })).data
    assert invoice.project.title == "MVP Build"

    await controller.delete_project(admin_user, created.id)

    fetched = await invoices.get_invoice(admin_user, invoice.id)
    assert fetched.success
    assert fetched.data.project_id is None
    assert fetched.data.project is None


@pytest.mark.asyncio
async def test_delete_missing_project(controller, admin_user):
    result = await controller.delete_project(admin_user, uuid.uuid4())
    assert result.status_code == 404


@pytest.mark.asyncio
async def test_delete_project_retires_its_detail_topic(controller, bus, published, admin_user, client_user):
    created = (await controller.create_project(admin_user, project_payload(client_user.id))).data
    await controller.update_project(admin_user, created.id, project_payload(client_user.id, title="MVP Build v2"))
    assert bus.version(project_detail(created.id)) == 1

    await controller.delete_project(admin_user, created.id)

    assert published.count(project_detail(created.id)) == 2
    assert project_detail(created.id) not in bus.versions()
    assert bus.version(project_detail(created.id)) == 0
