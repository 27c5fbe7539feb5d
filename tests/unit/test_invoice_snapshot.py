"""Unit tests for the order → invoice copy and invoice issuing."""
from datetime import UTC, datetime
from decimal import Decimal

import pytest

from src.ob_common.errors import InvoiceNotDraftError, OrderNotInvoiceableError
from src.ob_invoice.domain.models import Invoice
from src.ob_invoice.domain.snapshot import invoice_from_order, issue
from src.ob_order.domain.models import DiscountSpec, Order, OrderItem
from src.ob_order.domain.totals import compute

D = Decimal


def _priced_order(status: str = "APPROVED") -> Order:
    """100 x1 at 10% tax + 50 x2 at 5% tax, 10% item discount on the first, 20 off the order."""
    order = Order(
        id="order-1",
        order_number="ORD-1",
        org_id="org-1",
        customer_id="cust-1",
        status=status,
        discount=DiscountSpec(kind="FIXED", amount=D("20")),
        items=[
            OrderItem(
                id="item-1",
                variant_id="v100",
                product_id="p-v100",
                sku="SKU-100",
                quantity=1,
                unit_price=D("100.00"),
                tax_rate=D("0.10"),
                discount=DiscountSpec(kind="PERCENTAGE", amount=D("10")),
                notes="gift wrap",
            ),
            OrderItem(
                id="item-2",
                variant_id="v50",
                product_id="p-v50",
                sku="SKU-50",
                quantity=2,
                unit_price=D("50.00"),
                tax_rate=D("0.05"),
            ),
        ],
    )
    compute(order)
    return order


class TestInvoiceFromOrder:
    def test_copies_totals(self) -> None:
        order = _priced_order()

        invoice = invoice_from_order(order, "inv-1", "INV-1", notes="net 30")

        assert invoice.id == "inv-1"
        assert invoice.invoice_number == "INV-1"
        assert invoice.status == "DRAFT"
        assert invoice.issued_at is None
        assert invoice.org_id == "org-1"
        assert invoice.order_id == "order-1"
        assert invoice.order_number == "ORD-1"
        assert invoice.customer_id == "cust-1"
        assert invoice.notes == "net 30"
        assert invoice.subtotal == order.subtotal == D("200.00")
        assert invoice.discount_total == order.discount_total
        assert invoice.tax_total == order.tax_total
        assert invoice.total == order.total

    def test_copies_lines(self) -> None:
        order = _priced_order()

        invoice = invoice_from_order(order, "inv-1", "INV-1")

        assert [i.sku for i in invoice.items] == ["SKU-100", "SKU-50"]
        first, second = invoice.items
        assert first.variant_id == "v100"
        assert first.quantity == 1
        assert first.unit_price == D("100.00")
        assert first.subtotal == D("100.00")
        assert first.notes == "gift wrap"
        assert second.subtotal == D("100.00")
        # Item discount plus the allocated share of the order discount
        src = order.items[0]
        assert first.discount == src.applied_discount + src.applied_order_discount
        assert sum(i.discount for i in invoice.items) == invoice.discount_total
        assert sum(i.line_total for i in invoice.items) == invoice.total
        assert all(i.id is None for i in invoice.items)

    def test_later_order_changes_do_not_reach_invoice(self) -> None:
        order = _priced_order()
        invoice = invoice_from_order(order, "inv-1", "INV-1")
        total = invoice.total

        order.items[1].quantity = 10
        order.discount = DiscountSpec()
        compute(order)

        assert order.total != total
        assert invoice.total == total
        assert invoice.items[1].quantity == 2

    def test_pending_order_invoiceable(self) -> None:
        invoice = invoice_from_order(_priced_order("PENDING"), "inv-1", "INV-1")
        assert invoice.status == "DRAFT"

    def test_cancelled_order_rejected(self) -> None:
        with pytest.raises(OrderNotInvoiceableError) as exc_info:
            invoice_from_order(_priced_order("CANCELLED"), "inv-1", "INV-1")
        assert exc_info.value.code == 5009
        assert exc_info.value.http_status == 409


class TestIssue:
    def test_draft_becomes_issued(self) -> None:
        invoice = Invoice("inv-1", "INV-1", "org-1", "order-1", "ORD-1", "cust-1")
        now = datetime(2026, 3, 1, tzinfo=UTC)

        issue(invoice, now)

        assert invoice.status == "ISSUED"
        assert invoice.issued_at == now
        assert not invoice.is_draft

    def test_issued_cannot_be_issued_again(self) -> None:
        first = datetime(2026, 3, 1, tzinfo=UTC)
        invoice = Invoice(
            "inv-1", "INV-1", "org-1", "order-1", "ORD-1", "cust-1",
            status="ISSUED", issued_at=first,
        )

        with pytest.raises(InvoiceNotDraftError) as exc_info:
            issue(invoice, datetime(2026, 4, 1, tzinfo=UTC))

        assert exc_info.value.code == 5008
        assert exc_info.value.status == "ISSUED"
        assert invoice.issued_at == first
