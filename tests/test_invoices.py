"""
Invoice controller tests: numbering, mark-as-paid and ownership.
"""

import uuid
from decimal import Decimal

import pytest

from app.controllers.invoice_controller import InvoiceController
from app.core.invalidation import ADMIN_DASHBOARD, INVOICES_LIST
from app.models.invoice import InvoiceStatus


@pytest.fixture
def controller(test_db_session, bus):
    return InvoiceController(test_db_session, bus)


def invoice_payload(client_id, **overrides):
    payload = {
        "invoice_number": "INV-1",
        "amount": "1000",
        "status": "DRAFT",
        "client_id": str(client_id),
    }
    payload.update(overrides)
    return payload


@pytest.mark.asyncio
async def test_create_invoice(controller, admin_user, client_user, published):
    result = await controller.create_invoice(admin_user, invoice_payload(client_user.id))

    assert result.success
    assert result.status_code == 201
    invoice = result.data
    assert invoice.invoice_number == "INV-1"
    assert invoice.amount == Decimal("1000")
    assert invoice.status == InvoiceStatus.DRAFT
    assert invoice.paid_at is None
    assert invoice.client.email == "client@example.com"
    assert invoice.project is None
    assert ADMIN_DASHBOARD in published
    assert INVOICES_LIST in published


@pytest.mark.asyncio
async def test_blank_invoice_number_is_generated(controller, admin_user, client_user):
    result = await controller.create_invoice(admin_user, invoice_payload(client_user.id, invoice_number=""))

    assert result.success
    prefix, _, millis = result.data.invoice_number.partition("-")
    assert prefix == "INV"
    assert millis.isdigit()


@pytest.mark.asyncio
async def test_invoice_for_unknown_project(controller, admin_user, client_user):
    result = await controller.create_invoice(
        admin_user, invoice_payload(client_user.id, project_id=str(uuid.uuid4()))
    )
    assert result.status_code == 400
    assert [e.field for e in result.errors] == ["project_id"]


@pytest.mark.asyncio
async def test_mark_as_paid(controller, admin_user, client_user):
    created = (await controller.create_invoice(admin_user, invoice_payload(client_user.id))).data

    paid = await controller.mark_invoice_as_paid(admin_user, created.id)
    assert paid.success

    fetched = (await controller.get_invoice(admin_user, created.id)).data
    assert fetched.status == InvoiceStatus.PAID
    assert fetched.paid_at is not None
    assert fetched.amount == Decimal("1000")


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [s.value for s in InvoiceStatus])
async def test_mark_as_paid_from_any_status(controller, admin_user, client_user, status):
    created = (await controller.create_invoice(admin_user, invoice_payload(client_user.id, status=status))).data

    paid = await controller.mark_invoice_as_paid(admin_user, created.id)

    assert paid.success
    assert paid.data.status == InvoiceStatus.PAID
    assert paid.data.paid_at is not None


@pytest.mark.asyncio
async def test_paying_twice_advances_timestamp(controller, admin_user, client_user):
    created = (await controller.create_invoice(admin_user, invoice_payload(client_user.id))).data

    first = (await controller.mark_invoice_as_paid(admin_user, created.id)).data
    second = (await controller.mark_invoice_as_paid(admin_user, created.id)).data

    assert second.status == InvoiceStatus.PAID
    assert second.paid_at >= first.paid_at


@pytest.mark.asyncio
async def test_mark_missing_invoice_as_paid(controller, admin_user):
    result = await controller.mark_invoice_as_paid(admin_user, uuid.uuid4())
    assert result.status_code == 404
    assert result.error == "Invoice not found"


@pytest.mark.asyncio
async def test_update_keeps_number_when_blank(controller, admin_user, client_user):
    created = (await controller.create_invoice(admin_user, invoice_payload(client_user.id))).data

    result = await controller.update_invoice(
        admin_user, created.id, invoice_payload(client_user.id, invoice_number="", amount="1250.75", status="SENT")
    )

    assert result.success
    assert result.data.invoice_number == "INV-1"
    assert result.data.amount == Decimal("1250.75")
    assert result.data.status == InvoiceStatus.SENT


@pytest.mark.asyncio
async def test_invoice_lists_and_ownership(controller, admin_user, client_user, other_client):
    mine = (await controller.create_invoice(admin_user, invoice_payload(client_user.id))).data
    await controller.create_invoice(admin_user, invoice_payload(other_client.id, invoice_number="INV-2"))

    everything = await controller.list_invoices(admin_user)
    assert everything.data.total == 2

    sent_only = await controller.list_invoices(admin_user, status=InvoiceStatus.SENT)
    assert sent_only.data.total == 0

    own = await controller.list_client_invoices(client_user, client_user.id)
    assert [i.id for i in own.data.items] == [mine.id]

    assert (await controller.list_invoices(client_user)).status_code == 403
    assert (await controller.list_client_invoices(client_user, other_client.id)).status_code == 403
    assert (await controller.get_invoice(other_client, mine.id)).status_code == 403
    assert (await controller.mark_invoice_as_paid(client_user, mine.id)).status_code == 403


@pytest.mark.asyncio
async def test_delete_invoice(controller, admin_user, client_user):
    created = (await controller.create_invoice(admin_user, invoice_payload(client_user.id))).data

    assert (await controller.delete_invoice(admin_user, created.id)).success
    assert (await controller.get_invoice(admin_user, created.id)).status_code == 404
