"""
Dashboard service tests.
"""

from datetime import date
from decimal import Decimal

import pytest

from app.core.exceptions import ForbiddenError
from app.models.deliverable import Deliverable
from app.models.invoice import Invoice, InvoiceStatus
from app.models.milestone import Milestone
from app.models.project import Project, ProjectStatus
from app.services.dashboard_service import DashboardService


@pytest.fixture
async def seeded(test_db_session, client_user, other_client):
    active = Project(
        title="App build",
        description="Native app for bookings",
        status=ProjectStatus.IN_PROGRESS,
        client_id=client_user.id,
    )
    pending = Project(
        title="Audit",
        description="Accessibility audit",
        status=ProjectStatus.PENDING,
        client_id=client_user.id,
    )
    elsewhere = Project(
        title="Other work",
        description="Someone else's project",
        status=ProjectStatus.IN_PROGRESS,
        client_id=other_client.id,
    )
    test_db_session.add_all([active, pending, elsewhere])
    await test_db_session.flush()

    test_db_session.add_all([
        Milestone(title="Design", order=0, project_id=active.id, due_date=date(2026, 5, 1)),
        Milestone(title="Build", order=1, project_id=active.id, due_date=date(2026, 6, 1)),
        Milestone(title="Scope", order=0, project_id=pending.id, due_date=date(2026, 7, 1)),
        Deliverable(title="Prototype", project_id=active.id),
        Invoice(invoice_number="INV-1", amount=Decimal("500.00"), status=InvoiceStatus.PAID, client_id=client_user.id),
        Invoice(invoice_number="INV-2", amount=Decimal("300.00"), status=InvoiceStatus.SENT, client_id=client_user.id),
        Invoice(invoice_number="INV-3", amount=Decimal("200.00"), status=InvoiceStatus.OVERDUE, client_id=other_client.id),
        Invoice(invoice_number="INV-4", amount=Decimal("100.00"), status=InvoiceStatus.CANCELLED, client_id=client_user.id),
    ])
    await test_db_session.commit()
    return {"active": active.id, "pending": pending.id}


@pytest.mark.asyncio
async def test_admin_dashboard(test_db_session, admin_user, seeded):
    dashboard = await DashboardService(test_db_session).get_admin_dashboard(admin_user)

    assert dashboard.total_clients == 2
    assert dashboard.total_projects == 3
    assert dashboard.active_projects == 2
    assert dashboard.projects_by_status["PENDING"] == 1
    assert dashboard.projects_by_status["COMPLETED"] == 0
    assert dashboard.total_invoiced == Decimal("1100.00")
    assert dashboard.total_paid == Decimal("500.00")
    assert dashboard.total_outstanding == Decimal("500.00")


@pytest.mark.asyncio
async def test_admin_dashboard_requires_admin(test_db_session, client_user):
    with pytest.raises(ForbiddenError):
        await DashboardService(test_db_session).get_admin_dashboard(client_user)


@pytest.mark.asyncio
async def test_client_dashboard(test_db_session, client_user, seeded):
    dashboard = await DashboardService(test_db_session).get_client_dashboard(client_user)

    assert dashboard.active_projects == 1
    assert dashboard.outstanding_amount == Decimal("300.00")
    assert dashboard.deliverable_count == 1
    assert dashboard.next_milestone.title == "Design"
    progress = {p.title: p for p in dashboard.projects}
    assert progress["App build"].total_milestones == 2
    assert progress["App build"].percent == 0
    assert progress["Audit"].status == "PENDING"


@pytest.mark.asyncio
async def test_client_cannot_view_another_dashboard(test_db_session, client_user, other_client, seeded):
    with pytest.raises(ForbiddenError):
        await DashboardService(test_db_session).get_client_dashboard(client_user, other_client.id)


@pytest.mark.asyncio
async def test_admin_views_client_dashboard(test_db_session, admin_user, other_client, seeded):
    dashboard = await DashboardService(test_db_session).get_client_dashboard(admin_user, other_client.id)
    assert dashboard.active_projects == 1
    assert dashboard.outstanding_amount == Decimal("200.00")
    assert dashboard.next_milestone is None
