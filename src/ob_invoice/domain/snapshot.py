"""Order → Invoice copy and the DRAFT → ISSUED step."""
from datetime import datetime

from src.ob_common.enums import InvoiceStatus, OrderStatus
from src.ob_common.errors import InvoiceNotDraftError, OrderNotInvoiceableError
from src.ob_common.money import round2
from src.ob_invoice.domain.models import Invoice, InvoiceItem
from src.ob_order.domain.models import Order


def invoice_from_order(
    order: Order,
    invoice_id: str,
    invoice_number: str,
    notes: str = "",
    due_date: datetime | None = None,
) -> Invoice:
    """Copy the order's current totals and lines into a new DRAFT invoice.

    Raises OrderNotInvoiceableError for a cancelled order.
    """
    if order.status == OrderStatus.CANCELLED:
        raise OrderNotInvoiceableError(order.id, order.status)

    items = [
        InvoiceItem(
            variant_id=i.variant_id,
            sku=i.sku,
            quantity=i.quantity,
            unit_price=i.unit_price,
            subtotal=round2(i.subtotal),
            discount=round2(i.applied_discount + i.applied_order_discount),
            tax_amount=i.tax_amount,
            line_total=i.line_total,
            notes=i.notes,
        )
        for i in order.items
    ]
    return Invoice(
        id=invoice_id,
        invoice_number=invoice_number,
        org_id=order.org_id,
        order_id=order.id,
        order_number=order.order_number,
        customer_id=order.customer_id,
        status=InvoiceStatus.DRAFT.value,
        notes=notes,
        due_date=due_date,
        items=items,
        subtotal=order.subtotal,
        discount_total=order.discount_total,
        tax_total=order.tax_total,
        total=order.total,
    )


def issue(invoice: Invoice, now: datetime) -> None:
    if not invoice.is_draft:
        raise InvoiceNotDraftError(invoice.id, invoice.status)
    invoice.status = InvoiceStatus.ISSUED.value
    invoice.issued_at = now
