# src/ob_invoice/application/schemas.py
"""Pydantic schemas for ob_invoice. Amounts are copied from the order, never accepted."""
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from src.ob_common.money import money_display
from src.ob_invoice.domain.models import Invoice, InvoiceItem


class CreateInvoiceRequest(BaseModel):
    order_id: str = Field(..., min_length=1)
    notes: str = Field("", max_length=1000)
    due_date: datetime | None = None


class InvoiceItemResponse(BaseModel):
    id: str | None
    variant_id: str
    sku: str
    quantity: int
    unit_price: Decimal
    subtotal: Decimal
    discount: Decimal
    tax_amount: Decimal
    line_total: Decimal
    notes: str

    @classmethod
    def from_domain(cls, item: InvoiceItem) -> "InvoiceItemResponse":
        return cls(
            id=item.id,
            variant_id=item.variant_id,
            sku=item.sku,
            quantity=item.quantity,
            unit_price=item.unit_price,
            subtotal=item.subtotal,
            discount=item.discount,
            tax_amount=item.tax_amount,
            line_total=item.line_total,
            notes=item.notes,
        )


class InvoiceResponse(BaseModel):
    id: str
    invoice_number: str
    org_id: str
    order_id: str
    order_number: str
    customer_id: str
    status: str
    notes: str
    due_date: datetime | None
    issued_at: datetime | None
    items: list[InvoiceItemResponse]
    subtotal: Decimal
    discount_total: Decimal
    tax_total: Decimal
    total: Decimal
    total_display: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_domain(cls, invoice: Invoice) -> "InvoiceResponse":
        return cls(
            id=invoice.id,
            invoice_number=invoice.invoice_number,
            org_id=invoice.org_id,
            order_id=invoice.order_id,
            order_number=invoice.order_number,
            customer_id=invoice.customer_id,
            status=invoice.status,
            notes=invoice.notes,
            due_date=invoice.due_date,
            issued_at=invoice.issued_at,
            items=[InvoiceItemResponse.from_domain(i) for i in invoice.items],
            subtotal=invoice.subtotal,
            discount_total=invoice.discount_total,
            tax_total=invoice.tax_total,
            total=invoice.total,
            total_display=money_display(invoice.total),
            created_at=invoice.created_at,
            updated_at=invoice.updated_at,
        )


class InvoiceListResponse(BaseModel):
    items: list[InvoiceResponse]
    next_cursor: str | None
    has_more: bool
