"""
Summary figures derived from already-fetched records.
Pure functions; nothing here touches the database.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable, Optional, Sequence, Tuple

from app.models.invoice import InvoiceStatus
from app.models.project import ProjectStatus
from app.models.user import UserRole

UNSETTLED_EXCLUDED = (InvoiceStatus.PAID, InvoiceStatus.CANCELLED)


def _status(value: Any) -> str:
    return value.value if hasattr(value, "value") else str(value)


def sum_invoice_amounts(invoices: Iterable[Any], statuses: Optional[Iterable[Any]] = None) -> Decimal:
    """
    Total of ``amount`` over invoices, optionally restricted to some statuses.

    Args:
        invoices: Invoice models or response schemas
        statuses: Statuses to include; all when None
    """
    wanted = {_status(s) for s in statuses} if statuses is not None else None
    total = Decimal("0")
    for invoice in invoices:
        if wanted is not None and _status(invoice.status) not in wanted:
            continue
        total += Decimal(str(invoice.amount))
    return total


def outstanding_invoice_amount(invoices: Iterable[Any]) -> Decimal:
    """Amount still expected: everything neither PAID nor CANCELLED."""
    open_statuses = [s for s in InvoiceStatus if s not in UNSETTLED_EXCLUDED]
    return sum_invoice_amounts(invoices, open_statuses)


def progress_percent(completed: int, total: int) -> int:
    """Completion percentage rounded half-up to an integer; 0 when total is 0."""
    if total <= 0:
        return 0
    ratio = Decimal(completed) * 100 / Decimal(total)
    return int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def milestone_progress(milestones: Sequence[Any]) -> Tuple[int, int, int]:
    """Return ``(completed, total, percent)`` for a list of milestones."""
    total = len(milestones)
    completed = sum(1 for m in milestones if m.completed_at is not None)
    return completed, total, progress_percent(completed, total)


def count_projects_by_status(projects: Iterable[Any]) -> Dict[str, int]:
    """Project counts keyed by status, with every status present."""
    counts = {status.value: 0 for status in ProjectStatus}
    for project in projects:
        counts[_status(project.status)] = counts.get(_status(project.status), 0) + 1
    return counts


def count_users_by_role(users: Iterable[Any]) -> Dict[str, int]:
    counts = {role.value: 0 for role in UserRole}
    for user in users:
        counts[_status(user.role)] = counts.get(_status(user.role), 0) + 1
    return counts


def next_milestone(milestones: Iterable[Any]) -> Optional[Any]:
    """Incomplete milestone with the earliest due date, or None."""
    pending = [m for m in milestones if m.completed_at is None and m.due_date is not None]
    if not pending:
        return None
    return min(pending, key=lambda m: (m.due_date, m.order))
